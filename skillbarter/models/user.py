"""User model — account identity plus the skill-exchange profile."""

import json
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from skillbarter.database import Base


def _load_json_list(raw: Optional[str]) -> List[dict]:
    try:
        value = json.loads(raw or "[]")
    except (json.JSONDecodeError, TypeError):
        return []
    return value if isinstance(value, list) else []


class User(Base):
    __tablename__ = "users"

    # ── Identity ──
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )

    # ── OAuth ──
    oauth_provider: Mapped[Optional[str]] = mapped_column(String(20))
    oauth_id: Mapped[Optional[str]] = mapped_column(String(255))
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500))

    # ── Profile ──
    name: Mapped[Optional[str]] = mapped_column(String(200))
    age: Mapped[Optional[int]] = mapped_column(Integer)
    location: Mapped[Optional[str]] = mapped_column(String(200))
    profile_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── JSON lists (stored as Text for SQLite compat) ──
    skills_offered_json: Mapped[Optional[str]] = mapped_column(Text, default="[]")
    skills_wanted_json: Mapped[Optional[str]] = mapped_column(Text, default="[]")

    # ── Timestamps ──
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # ── JSON helpers ──
    @property
    def skills_offered(self) -> List[dict]:
        return _load_json_list(self.skills_offered_json)

    @skills_offered.setter
    def skills_offered(self, skills: List[dict]) -> None:
        self.skills_offered_json = json.dumps(skills)

    @property
    def skills_wanted(self) -> List[dict]:
        return _load_json_list(self.skills_wanted_json)

    @skills_wanted.setter
    def skills_wanted(self, skills: List[dict]) -> None:
        self.skills_wanted_json = json.dumps(skills)
