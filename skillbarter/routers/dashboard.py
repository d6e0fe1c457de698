"""
Dashboard router — manage own skills and browse two-way matches.

Endpoints:
    GET  /dashboard                                  → skills + matches (q, category filters)
    POST /dashboard/skills/{kind}/add                → add an offered / wanted skill
    POST /dashboard/skills/{kind}/{skill_id}/edit    → edit a skill in place
    POST /dashboard/skills/{kind}/{skill_id}/delete  → remove a skill
"""

import logging
from typing import List, Optional
from urllib.parse import quote_plus

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.database import get_db
from skillbarter.models.skill import SkillKind
from skillbarter.routers.auth import get_auth_session
from skillbarter.schemas.skill import Skill, SkillIn
from skillbarter.services import profiles
from skillbarter.services.match_board import MatchBoard, MatchRefresh
from skillbarter.services.matching import filter_matches, shared_skills
from skillbarter.services.session import AuthSession, get_match_board
from skillbarter.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _redirect(success: str = "", error: str = "") -> RedirectResponse:
    if error:
        url = f"/dashboard?error={quote_plus(error)}"
    else:
        url = f"/dashboard?success={quote_plus(success)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _gate(session: AuthSession) -> Optional[RedirectResponse]:
    """Send anonymous users to login and incomplete profiles to onboarding."""
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    if session.needs_onboarding:
        return RedirectResponse(url="/onboarding", status_code=status.HTTP_303_SEE_OTHER)
    return None


async def refresh_matches(board: MatchBoard, db: AsyncSession, account_id: int) -> MatchRefresh:
    """Recompute matches for ``account_id`` from the store."""
    return await board.refresh(
        account_id,
        load_me=lambda: profiles.fetch_profile(db, account_id),
        load_roster=lambda: profiles.fetch_roster(db),
    )


def _skill_form_error(e: ValidationError) -> str:
    """User-facing message for a rejected skill form."""
    if any(err["loc"] and err["loc"][0] == "name" for err in e.errors()):
        return "Skill name is required"
    return "Invalid skill"


def _has_skill(skills: List[Skill], skill_id: str) -> bool:
    return any(skill.id == skill_id for skill in skills)


async def _skill_form(request: Request, kind: SkillKind) -> SkillIn:
    form = await request.form()
    fields = {
        key: form.get(key)
        for key in ("name", "category", "level", "progress")
        if form.get(key)
    }
    fields.setdefault("name", "")
    return SkillIn.defaults_for(kind, **fields)


# ═══════════════════════════════════════════════════════════════
#  GET /dashboard
# ═══════════════════════════════════════════════════════════════

@router.get("", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    q: str = "",
    category: str = "",
    session: AuthSession = Depends(get_auth_session),
    board: MatchBoard = Depends(get_match_board),
    db: AsyncSession = Depends(get_db),
):
    redirect = _gate(session)
    if redirect:
        return redirect

    me = session.profile
    refresh = await refresh_matches(board, db, me.id)
    filtered = filter_matches(refresh.matches, query=q, category=category)

    errors = [refresh.error] if refresh.error else []
    if request.query_params.get("error"):
        errors.append(request.query_params["error"])

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "current_user": session.user,
            "profile": me,
            "matches": [
                {"profile": match, "shared": shared_skills(me, match)}
                for match in filtered
            ],
            "total_matches": len(refresh.matches),
            "q": q,
            "category": category,
            "errors": errors,
            "success": request.query_params.get("success", ""),
        },
    )


# ═══════════════════════════════════════════════════════════════
#  Skill add / edit / delete
# ═══════════════════════════════════════════════════════════════

@router.post("/skills/{kind}/add")
async def add_skill(
    kind: SkillKind,
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    board: MatchBoard = Depends(get_match_board),
    db: AsyncSession = Depends(get_db),
):
    redirect = _gate(session)
    if redirect:
        return redirect

    try:
        data = await _skill_form(request, kind)
    except ValidationError as e:
        return _redirect(error=_skill_form_error(e))

    skills = profiles.add_skill(profiles.skills_of(session.profile, kind), data)
    try:
        await profiles.replace_skills(db, session.account_id, kind, skills)
    except profiles.ProfileStoreError:
        return _redirect(error="Failed to add skill")

    await refresh_matches(board, db, session.account_id)
    if kind is SkillKind.OFFER:
        return _redirect(success=f"You can now offer {data.name}!")
    return _redirect(success=f"{data.name} added to your learning list!")


@router.post("/skills/{kind}/{skill_id}/edit")
async def edit_skill(
    kind: SkillKind,
    skill_id: str,
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    board: MatchBoard = Depends(get_match_board),
    db: AsyncSession = Depends(get_db),
):
    redirect = _gate(session)
    if redirect:
        return redirect

    try:
        data = await _skill_form(request, kind)
    except ValidationError as e:
        return _redirect(error=_skill_form_error(e))

    current = profiles.skills_of(session.profile, kind)
    if not _has_skill(current, skill_id):
        return _redirect(error="Skill not found")

    skills = profiles.update_skill(current, skill_id, data)
    try:
        await profiles.replace_skills(db, session.account_id, kind, skills)
    except profiles.ProfileStoreError:
        return _redirect(error="Failed to update skill")

    await refresh_matches(board, db, session.account_id)
    return _redirect(success=f"{data.name} has been updated!")


@router.post("/skills/{kind}/{skill_id}/delete")
async def delete_skill(
    kind: SkillKind,
    skill_id: str,
    session: AuthSession = Depends(get_auth_session),
    board: MatchBoard = Depends(get_match_board),
    db: AsyncSession = Depends(get_db),
):
    redirect = _gate(session)
    if redirect:
        return redirect

    current = profiles.skills_of(session.profile, kind)
    if not _has_skill(current, skill_id):
        return _redirect(error="Skill not found")

    skills = profiles.remove_skill(current, skill_id)
    try:
        await profiles.replace_skills(db, session.account_id, kind, skills)
    except profiles.ProfileStoreError:
        return _redirect(error="Failed to remove skill")

    await refresh_matches(board, db, session.account_id)
    return _redirect(success="The skill has been removed from your profile")
