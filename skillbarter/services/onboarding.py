"""Onboarding — turning the first-run form into a completed profile."""

from dataclasses import dataclass
from typing import Mapping

from pydantic import ValidationError

from skillbarter.config import settings
from skillbarter.models.skill import SkillCategory, SkillKind, SkillLevel, SkillProgress
from skillbarter.schemas.skill import Skill, SkillIn

REQUIRED_FIELDS = ("name", "age", "location", "offered_name", "wanted_name")


class OnboardingError(ValueError):
    """The onboarding form cannot be accepted; the message is user-facing."""


@dataclass
class OnboardingData:
    name: str
    age: int
    location: str
    offered: Skill
    wanted: Skill


def _enum_or_default(enum_cls, raw: str, default):
    try:
        return enum_cls(raw)
    except ValueError:
        return default


def parse_onboarding_form(form: Mapping[str, str]) -> OnboardingData:
    """
    Validate the onboarding form.

    Raises ``OnboardingError`` when a required field is blank or the age
    is outside the accepted range.
    """
    values = {key: str(form.get(key, "") or "").strip() for key in form.keys()}

    if any(not values.get(key) for key in REQUIRED_FIELDS):
        raise OnboardingError("Please fill in all required fields")

    try:
        age = int(values["age"])
    except ValueError:
        age = None
    if age is None or not settings.MIN_AGE <= age <= settings.MAX_AGE:
        raise OnboardingError(
            f"Please enter a valid age ({settings.MIN_AGE}-{settings.MAX_AGE})"
        )

    try:
        offered = SkillIn.defaults_for(
            SkillKind.OFFER,
            name=values["offered_name"],
            category=_enum_or_default(SkillCategory, values.get("offered_category", ""), SkillCategory.TECHNOLOGY),
            level=_enum_or_default(SkillLevel, values.get("offered_level", ""), SkillLevel.INTERMEDIATE),
            progress=SkillProgress.MASTERED,
        )
        wanted = SkillIn.defaults_for(
            SkillKind.WANT,
            name=values["wanted_name"],
            category=_enum_or_default(SkillCategory, values.get("wanted_category", ""), SkillCategory.TECHNOLOGY),
            level=_enum_or_default(SkillLevel, values.get("wanted_level", ""), SkillLevel.BEGINNER),
            progress=SkillProgress.NOT_STARTED,
        )
    except ValidationError as e:
        raise OnboardingError("Please fill in all required fields") from e

    return OnboardingData(
        name=values["name"],
        age=age,
        location=values["location"],
        offered=Skill.from_input(offered),
        wanted=Skill.from_input(wanted),
    )
