"""Skill enumerations — the fixed vocabularies a skill entry draws from."""

import enum


class SkillCategory(str, enum.Enum):
    TECHNOLOGY = "Technology"
    MUSIC = "Music"
    LANGUAGE = "Language"
    ART = "Art"
    COOKING = "Cooking"
    FITNESS = "Fitness"
    BUSINESS = "Business"
    SCIENCE = "Science"
    MATHEMATICS = "Mathematics"
    OTHER = "Other"


class SkillLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    EXPERT = "Expert"


class SkillProgress(str, enum.Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    MASTERED = "Mastered"


class SkillKind(str, enum.Enum):
    """Which of a profile's two skill lists an entry lives in."""

    OFFER = "offer"
    WANT = "want"
