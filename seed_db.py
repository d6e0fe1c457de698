import asyncio

from skillbarter.database import Base, async_session, engine
from skillbarter.models.skill import SkillCategory, SkillKind, SkillLevel
from skillbarter.models.user import User
from skillbarter.schemas.skill import Skill, SkillIn


def _skill(kind, name, category, level=None):
    fields = {"name": name, "category": category}
    if level:
        fields["level"] = level
    return Skill.from_input(SkillIn.defaults_for(kind, **fields)).model_dump(mode="json")


def _user(email, name, age, location, offers, wants):
    user = User(
        email=email,
        oauth_provider="seed",
        name=name,
        age=age,
        location=location,
        profile_completed=True,
    )
    user.skills_offered = [_skill(SkillKind.OFFER, *s) for s in offers]
    user.skills_wanted = [_skill(SkillKind.WANT, *s) for s in wants]
    return user


async def async_main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        session.add_all([
            _user(
                "vijaya@example.com", "Vijaya", 21, "Chennai",
                offers=[("JavaScript", SkillCategory.TECHNOLOGY, SkillLevel.EXPERT)],
                wants=[("Spanish", SkillCategory.LANGUAGE)],
            ),
            _user(
                "ana@example.com", "Ana Lopez", 27, "Madrid",
                offers=[("Spanish", SkillCategory.LANGUAGE, SkillLevel.EXPERT), ("Cooking", SkillCategory.COOKING)],
                wants=[("javascript", SkillCategory.TECHNOLOGY)],
            ),
            _user(
                "ben@example.com", "Ben Carter", 34, "Leeds",
                offers=[("Spanish", SkillCategory.LANGUAGE)],
                wants=[("French", SkillCategory.LANGUAGE)],
            ),
            _user(
                "rithanya@example.com", "Rithanya", 22, "Coimbatore",
                offers=[("Guitar", SkillCategory.MUSIC), ("Cryptography", SkillCategory.SCIENCE)],
                wants=[("JavaScript", SkillCategory.TECHNOLOGY), ("DBMS", SkillCategory.TECHNOLOGY)],
            ),
        ])
        await session.commit()
    await engine.dispose()
    print("Database seeded with sample skill-exchange profiles.")


if __name__ == "__main__":
    asyncio.run(async_main())
