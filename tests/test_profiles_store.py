"""Tests for the profile store and in-list skill edits."""

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from skillbarter.models.skill import SkillCategory, SkillKind, SkillLevel, SkillProgress
from skillbarter.models.user import User
from skillbarter.schemas.profile import Profile
from skillbarter.schemas.skill import Skill, SkillIn
from skillbarter.services import profiles


@pytest.mark.asyncio
async def test_fetch_profile_maps_user_row(db, make_user):
    user = await make_user("ana@example.com", name="Ana", offers=["Spanish"], wants=["Guitar"])

    profile = await profiles.fetch_profile(db, user.id)

    assert profile.id == user.id
    assert profile.name == "Ana"
    assert profile.profile_completed is True
    assert [s.name for s in profile.skills_offered] == ["Spanish"]
    assert [s.name for s in profile.skills_wanted] == ["Guitar"]


@pytest.mark.asyncio
async def test_fetch_profile_missing_returns_none(db):
    assert await profiles.fetch_profile(db, 999) is None


@pytest.mark.asyncio
async def test_fetch_roster_returns_every_record(db, make_user):
    await make_user("a@example.com", name="A")
    await make_user("b@example.com", completed=False)

    roster = await profiles.fetch_roster(db)

    assert [p.profile_completed for p in roster] == [True, False]


@pytest.mark.asyncio
async def test_corrupt_skill_json_reads_as_empty(db, make_user):
    user = await make_user("c@example.com", name="C")
    user.skills_offered_json = "not json"
    user.skills_wanted_json = None
    await db.commit()

    profile = await profiles.fetch_profile(db, user.id)

    assert profile.skills_offered == []
    assert profile.skills_wanted == []


@pytest.mark.asyncio
async def test_invalid_skill_entries_are_skipped(db, make_user):
    user = await make_user("e@example.com", name="E")
    user.skills_offered_json = (
        '[{"name": "Guitar", "category": "music"},'
        ' {"category": "Music"},'
        ' "Chess",'
        ' {"id": "d1", "name": "Drums", "category": "Music"}]'
    )
    await make_user("f@example.com", name="F", offers=["Go"])
    await db.commit()

    profile = await profiles.fetch_profile(db, user.id)
    roster = await profiles.fetch_roster(db)

    assert [s.name for s in profile.skills_offered] == ["Drums"]
    assert [p.name for p in roster] == ["E", "F"]


@pytest.mark.asyncio
async def test_skill_entries_without_id_keep_their_id_across_reads(db, make_user):
    user = await make_user("g@example.com", name="G")
    user.skills_wanted_json = '[{"name": "Guitar"}, {"name": "Chess"}]'
    await db.commit()

    first = await profiles.fetch_profile(db, user.id)
    second = await profiles.fetch_profile(db, user.id)

    first_ids = [s.id for s in first.skills_wanted]
    assert first_ids == [s.id for s in second.skills_wanted]
    assert first_ids == [profiles.positional_skill_id(0), profiles.positional_skill_id(1)]


@pytest.mark.asyncio
async def test_unreadable_profile_is_a_store_error(db, make_user, monkeypatch):
    user = await make_user("h@example.com", name="H")

    def broken(row):
        return Profile.model_validate({"name": row.name})

    monkeypatch.setattr(profiles, "to_profile", broken)

    with pytest.raises(profiles.ProfileStoreError):
        await profiles.fetch_profile(db, user.id)
    assert await profiles.fetch_roster(db) == []


@pytest.mark.asyncio
async def test_replace_skills_overwrites_one_list(db, make_user):
    user = await make_user("d@example.com", name="D", offers=["Chess"], wants=["Go"])
    new_list = [Skill(name="Poker", category=SkillCategory.OTHER)]

    await profiles.replace_skills(db, user.id, SkillKind.OFFER, new_list)
    await db.commit()

    profile = await profiles.fetch_profile(db, user.id)
    assert [s.name for s in profile.skills_offered] == ["Poker"]
    assert [s.name for s in profile.skills_wanted] == ["Go"]


@pytest.mark.asyncio
async def test_replace_skills_unknown_account(db):
    with pytest.raises(profiles.ProfileNotFound):
        await profiles.replace_skills(db, 12345, SkillKind.WANT, [])


@pytest.mark.asyncio
async def test_complete_profile(db, make_user):
    user = await make_user("e@example.com", completed=False)

    await profiles.complete_profile(
        db,
        user.id,
        name="Eve",
        age=22,
        location="Pune",
        offered=Skill(name="Baking", category=SkillCategory.COOKING),
        wanted=Skill(name="French", category=SkillCategory.LANGUAGE),
    )
    await db.commit()

    row = (await db.execute(select(User).where(User.id == user.id))).scalar_one()
    assert row.profile_completed is True
    assert (row.name, row.age, row.location) == ("Eve", 22, "Pune")
    assert row.skills_offered[0]["category"] == "Cooking"
    assert row.skills_wanted[0]["name"] == "French"


# ── in-list edits ──

def test_add_skill_assigns_fresh_id():
    existing = [Skill(name="Chess")]

    updated = profiles.add_skill(existing, SkillIn(name="  Go  "))

    assert [s.name for s in updated] == ["Chess", "Go"]
    assert updated[1].id and updated[1].id != existing[0].id
    assert existing == [existing[0]]


def test_update_skill_keeps_id_and_position():
    a, b = Skill(name="Chess"), Skill(name="Go")

    updated = profiles.update_skill(
        [a, b], b.id, SkillIn(name="Baduk", level=SkillLevel.EXPERT, progress=SkillProgress.MASTERED)
    )

    assert [s.name for s in updated] == ["Chess", "Baduk"]
    assert updated[1].id == b.id
    assert updated[1].level is SkillLevel.EXPERT


def test_update_or_remove_unknown_id_is_a_no_op():
    skills = [Skill(name="Chess")]

    assert profiles.update_skill(skills, "nope", SkillIn(name="X")) == skills
    assert profiles.remove_skill(skills, "nope") == skills


def test_remove_skill():
    a, b = Skill(name="Chess"), Skill(name="Go")

    assert profiles.remove_skill([a, b], a.id) == [b]


def test_skill_defaults_depend_on_kind():
    offer = SkillIn.defaults_for(SkillKind.OFFER, name="Chess")
    want = SkillIn.defaults_for(SkillKind.WANT, name="Chess")

    assert (offer.level, offer.progress) == (SkillLevel.INTERMEDIATE, SkillProgress.MASTERED)
    assert (want.level, want.progress) == (SkillLevel.BEGINNER, SkillProgress.NOT_STARTED)


def test_blank_skill_name_is_rejected():
    with pytest.raises(ValidationError):
        SkillIn(name="   ")
