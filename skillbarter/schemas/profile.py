"""Profile Pydantic schemas — the snapshot the matcher and API work with."""

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from skillbarter.schemas.skill import Skill


class Profile(BaseModel):
    """
    One user's skill-exchange record.

    Accepts records keyed the way a hosted document store keeps them
    (``skillsOffered``, ``profileCompleted``) as well as snake_case.
    Absent skill lists are read as empty.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int = Field(validation_alias=AliasChoices("id", "uid"))
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    skills_offered: List[Skill] = Field(
        default_factory=list,
        validation_alias=AliasChoices("skills_offered", "skillsOffered"),
    )
    skills_wanted: List[Skill] = Field(
        default_factory=list,
        validation_alias=AliasChoices("skills_wanted", "skillsWanted"),
    )
    profile_completed: bool = Field(
        default=False,
        validation_alias=AliasChoices("profile_completed", "profileCompleted"),
    )

    @field_validator("skills_offered", "skills_wanted", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("profile_completed", mode="before")
    @classmethod
    def _none_is_incomplete(cls, value: Any) -> Any:
        return False if value is None else value


class ProfileOut(Profile):
    """Public profile representation returned by the API."""
    email: Optional[str] = None
    avatar_url: Optional[str] = None
