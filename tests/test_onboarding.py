"""Tests for onboarding form validation."""

import pytest

from skillbarter.models.skill import SkillCategory, SkillLevel, SkillProgress
from skillbarter.services.onboarding import OnboardingError, parse_onboarding_form


def _form(**overrides):
    form = {
        "name": "Ana",
        "age": "24",
        "location": "Madrid",
        "offered_name": "Spanish",
        "offered_category": "Language",
        "offered_level": "Expert",
        "wanted_name": "JavaScript",
        "wanted_category": "Technology",
        "wanted_level": "Beginner",
    }
    form.update(overrides)
    return form


def test_valid_form_builds_first_skills():
    data = parse_onboarding_form(_form())

    assert (data.name, data.age, data.location) == ("Ana", 24, "Madrid")
    assert data.offered.name == "Spanish"
    assert data.offered.category is SkillCategory.LANGUAGE
    assert data.offered.level is SkillLevel.EXPERT
    assert data.offered.progress is SkillProgress.MASTERED
    assert data.wanted.progress is SkillProgress.NOT_STARTED
    assert data.offered.id != data.wanted.id


@pytest.mark.parametrize("field", ["name", "age", "location", "offered_name", "wanted_name"])
def test_missing_required_field(field):
    with pytest.raises(OnboardingError, match="Please fill in all required fields"):
        parse_onboarding_form(_form(**{field: "  "}))


@pytest.mark.parametrize("age", ["12", "121", "abc", "-5"])
def test_age_out_of_range(age):
    with pytest.raises(OnboardingError, match=r"valid age \(13-120\)"):
        parse_onboarding_form(_form(age=age))


@pytest.mark.parametrize("age", ["13", "120"])
def test_age_bounds_are_inclusive(age):
    assert parse_onboarding_form(_form(age=age)).age == int(age)


def test_unknown_category_falls_back_to_default():
    data = parse_onboarding_form(_form(offered_category="Juggling", wanted_level=""))

    assert data.offered.category is SkillCategory.TECHNOLOGY
    assert data.wanted.level is SkillLevel.BEGINNER
