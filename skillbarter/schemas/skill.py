"""Skill Pydantic schemas — entries of a profile's offered / wanted lists."""

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from skillbarter.models.skill import SkillCategory, SkillKind, SkillLevel, SkillProgress


def new_skill_id() -> str:
    """Opaque identifier for addressing a skill inside its list."""
    return uuid4().hex


class SkillIn(BaseModel):
    """Fields submitted on the add / edit skill form."""
    name: str
    category: SkillCategory = SkillCategory.OTHER
    level: SkillLevel = SkillLevel.BEGINNER
    progress: SkillProgress = SkillProgress.NOT_STARTED

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Skill name is required")
        return value

    @classmethod
    def defaults_for(cls, kind: SkillKind, **fields) -> "SkillIn":
        """Build a form payload with the level/progress defaults for ``kind``."""
        if kind is SkillKind.OFFER:
            fields.setdefault("level", SkillLevel.INTERMEDIATE)
            fields.setdefault("progress", SkillProgress.MASTERED)
        else:
            fields.setdefault("level", SkillLevel.BEGINNER)
            fields.setdefault("progress", SkillProgress.NOT_STARTED)
        return cls(**fields)


class Skill(BaseModel):
    """A named capability stored inside a profile."""
    id: str = Field(default_factory=new_skill_id)
    name: str
    category: SkillCategory = SkillCategory.OTHER
    level: SkillLevel = SkillLevel.BEGINNER
    progress: SkillProgress = SkillProgress.NOT_STARTED

    @classmethod
    def from_input(cls, data: SkillIn, skill_id: Optional[str] = None) -> "Skill":
        return cls(id=skill_id or new_skill_id(), **data.model_dump())
