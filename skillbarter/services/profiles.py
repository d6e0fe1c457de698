"""
Profile store — reads and writes of profile records.

Routes and the match board go through these functions rather than querying
``User`` rows directly, so storage failures surface as one error type.
"""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.models.skill import SkillKind
from skillbarter.models.user import User
from skillbarter.schemas.profile import Profile
from skillbarter.schemas.skill import Skill, SkillIn

logger = logging.getLogger(__name__)


class ProfileStoreError(Exception):
    """A profile read or write could not be completed."""


class ProfileNotFound(ProfileStoreError):
    pass


# ═══════════════════════════════════════════════════════════════
#  Reads
# ═══════════════════════════════════════════════════════════════

def positional_skill_id(position: int) -> str:
    """Stable id for a stored entry that was saved without one."""
    return f"pos-{position}"


def _read_skills(account_id: int, entries: List[Any]) -> List[Skill]:
    """
    Validate stored skill entries one by one.

    Entries without an id are addressed by their position, so the id stays
    the same across reads until the list is next saved. Entries that do not
    validate are logged and left out.
    """
    skills = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning(
                "Skipping non-object skill entry %s of account %s", position, account_id
            )
            continue
        if not entry.get("id"):
            entry = {**entry, "id": positional_skill_id(position)}
        try:
            skills.append(Skill.model_validate(entry))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid skill entry %s of account %s: %s", position, account_id, e
            )
    return skills


def to_profile(user: User) -> Profile:
    return Profile(
        id=user.id,
        name=user.name,
        age=user.age,
        location=user.location,
        skills_offered=_read_skills(user.id, user.skills_offered),
        skills_wanted=_read_skills(user.id, user.skills_wanted),
        profile_completed=user.profile_completed,
    )


async def fetch_profile(db: AsyncSession, account_id: int) -> Optional[Profile]:
    """Fetch one profile by account identifier, or None when absent."""
    try:
        result = await db.execute(select(User).where(User.id == account_id))
        user = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error("Failed to load profile %s: %s", account_id, e)
        raise ProfileStoreError("Failed to load user profile") from e
    if not user:
        return None
    try:
        return to_profile(user)
    except ValidationError as e:
        logger.error("Stored profile %s is malformed: %s", account_id, e)
        raise ProfileStoreError("Failed to load user profile") from e


async def fetch_roster(db: AsyncSession) -> List[Profile]:
    """Fetch every profile record. Filtering is the caller's job."""
    try:
        result = await db.execute(select(User).order_by(User.id))
        users = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error("Failed to load profile roster: %s", e)
        raise ProfileStoreError("Failed to load matches") from e

    roster = []
    for user in users:
        try:
            roster.append(to_profile(user))
        except ValidationError as e:
            logger.warning("Skipping malformed profile %s: %s", user.id, e)
    return roster


# ═══════════════════════════════════════════════════════════════
#  Writes
# ═══════════════════════════════════════════════════════════════

async def _load_user(db: AsyncSession, account_id: int) -> User:
    result = await db.execute(select(User).where(User.id == account_id))
    user = result.scalar_one_or_none()
    if not user:
        raise ProfileNotFound(f"No profile for account {account_id}")
    return user


async def replace_skills(
    db: AsyncSession, account_id: int, kind: SkillKind, skills: List[Skill]
) -> None:
    """Replace the whole offered or wanted list of one account."""
    payload = [skill.model_dump(mode="json") for skill in skills]
    try:
        user = await _load_user(db, account_id)
        if kind is SkillKind.OFFER:
            user.skills_offered = payload
        else:
            user.skills_wanted = payload
        await db.flush()
    except SQLAlchemyError as e:
        logger.error("Failed to save %s skills for %s: %s", kind.value, account_id, e)
        raise ProfileStoreError("Failed to save skills") from e


async def complete_profile(
    db: AsyncSession,
    account_id: int,
    *,
    name: str,
    age: int,
    location: str,
    offered: Skill,
    wanted: Skill,
) -> None:
    """Populate the descriptive fields and first skills, and mark complete."""
    try:
        user = await _load_user(db, account_id)
        user.name = name
        user.age = age
        user.location = location
        user.skills_offered = [offered.model_dump(mode="json")]
        user.skills_wanted = [wanted.model_dump(mode="json")]
        user.profile_completed = True
        await db.flush()
    except SQLAlchemyError as e:
        logger.error("Failed to complete profile %s: %s", account_id, e)
        raise ProfileStoreError("Failed to update profile") from e


# ═══════════════════════════════════════════════════════════════
#  In-list edits (pure)
# ═══════════════════════════════════════════════════════════════

def skills_of(profile: Profile, kind: SkillKind) -> List[Skill]:
    return list(profile.skills_offered if kind is SkillKind.OFFER else profile.skills_wanted)


def add_skill(skills: List[Skill], data: SkillIn) -> List[Skill]:
    """Append a new skill with a fresh id."""
    return [*skills, Skill.from_input(data)]


def update_skill(skills: List[Skill], skill_id: str, data: SkillIn) -> List[Skill]:
    """Replace the skill with ``skill_id``, keeping its id and position."""
    return [
        Skill.from_input(data, skill_id=skill.id) if skill.id == skill_id else skill
        for skill in skills
    ]


def remove_skill(skills: List[Skill], skill_id: str) -> List[Skill]:
    return [skill for skill in skills if skill.id != skill_id]
