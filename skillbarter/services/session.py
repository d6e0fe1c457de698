"""
Per-request authentication context.

Routes receive an ``AuthSession`` through dependency injection instead of
reading a global "current user". App-wide state that outlives a request
(the match board) lives on ``app.state`` and is set up / torn down by the
application lifespan.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from skillbarter.models.user import User
from skillbarter.schemas.profile import Profile
from skillbarter.services.match_board import MatchBoard


@dataclass(frozen=True)
class AuthSession:
    """The signed-in account and its profile snapshot, if any."""

    user: Optional[User] = None
    profile: Optional[Profile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def account_id(self) -> Optional[int]:
        return self.user.id if self.user else None

    @property
    def needs_onboarding(self) -> bool:
        return self.profile is not None and not self.profile.profile_completed


def get_match_board(request: Request) -> MatchBoard:
    """Dependency: the application's match board."""
    return request.app.state.match_board
