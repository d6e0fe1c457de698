"""Users router – JSON profile and match endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.database import get_db
from skillbarter.routers.auth import get_auth_session
from skillbarter.routers.dashboard import refresh_matches
from skillbarter.schemas.profile import Profile, ProfileOut
from skillbarter.services import profiles
from skillbarter.services.match_board import MatchBoard
from skillbarter.services.matching import filter_matches
from skillbarter.services.session import AuthSession, get_match_board

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileOut)
async def read_me(session: AuthSession = Depends(get_auth_session)):
    """Return the authenticated user's profile."""
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return ProfileOut(
        **session.profile.model_dump(),
        email=session.user.email,
        avatar_url=session.user.avatar_url,
    )


@router.get("/me/matches", response_model=List[Profile])
async def read_my_matches(
    q: str = "",
    category: str = "",
    session: AuthSession = Depends(get_auth_session),
    board: MatchBoard = Depends(get_match_board),
    db: AsyncSession = Depends(get_db),
):
    """Return the authenticated user's two-way matches, optionally narrowed."""
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    # A failed refresh still answers with the last published matches
    refresh = await refresh_matches(board, db, session.account_id)
    return filter_matches(refresh.matches, query=q, category=category)


@router.get("/{user_id}", response_model=Profile)
async def read_user(user_id: int, db: AsyncSession = Depends(get_db)):
    """Get a public user profile by ID."""
    try:
        profile = await profiles.fetch_profile(db, user_id)
    except profiles.ProfileStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile
