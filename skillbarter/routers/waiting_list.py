"""
Waiting-list router — tutor offers addressed to me and skill suggestions.

Endpoints:
    GET  /waiting-list                          → offers + popular skill suggestions
    POST /waiting-list/offers                   → send an offer to another user
    POST /waiting-list/offers/{offer_id}/accept → accept an offer (learner only)
    POST /waiting-list/offers/{offer_id}/reject → reject an offer (learner only)
    POST /waiting-list/suggestions/add          → add a suggested skill to my wanted list
"""

import logging
from urllib.parse import quote_plus

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.config import settings
from skillbarter.database import get_db
from skillbarter.models.skill import SkillCategory, SkillKind
from skillbarter.models.tutor_offer import OfferStatus, TutorOffer
from skillbarter.models.user import User
from skillbarter.routers.auth import get_auth_session
from skillbarter.schemas.skill import SkillIn
from skillbarter.services import profiles
from skillbarter.services.matching import popular_skills
from skillbarter.services.notifications import send_offer_accepted_email, send_offer_received_email
from skillbarter.services.session import AuthSession
from skillbarter.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/waiting-list", tags=["waiting-list"])


def _redirect(url: str = "/waiting-list", success: str = "", error: str = "") -> RedirectResponse:
    if error:
        url = f"{url}?error={quote_plus(error)}"
    elif success:
        url = f"{url}?success={quote_plus(success)}"
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


async def _load_own_offer(db: AsyncSession, offer_id: int, session: AuthSession) -> TutorOffer:
    result = await db.execute(select(TutorOffer).where(TutorOffer.id == offer_id))
    offer = result.scalar_one_or_none()
    if not offer:
        raise HTTPException(status_code=404, detail="Offer not found")
    if offer.learner_id != session.account_id:
        raise HTTPException(status_code=403, detail="Not allowed")
    return offer


@router.get("", response_class=HTMLResponse)
async def waiting_list(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    errors = [request.query_params["error"]] if request.query_params.get("error") else []

    res = await db.execute(
        select(TutorOffer)
        .where(
            TutorOffer.learner_id == session.account_id,
            TutorOffer.status != OfferStatus.REJECTED,
        )
        .order_by(TutorOffer.created_at.desc())
    )
    offers = res.scalars().all()

    suggestions = []
    try:
        roster = await profiles.fetch_roster(db)
        suggestions = popular_skills(
            roster, exclude_id=session.account_id, limit=settings.SUGGESTED_SKILLS_LIMIT
        )
    except profiles.ProfileStoreError:
        errors.append("Failed to load skill suggestions")

    return templates.TemplateResponse(
        request,
        "waiting_list.html",
        {
            "current_user": session.user,
            "offers": offers,
            "suggestions": suggestions,
            "errors": errors,
            "success": request.query_params.get("success", ""),
        },
    )


@router.post("/offers")
async def send_offer(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    form = await request.form()
    skill = str(form.get("skill_offered", "")).strip()
    message = str(form.get("message", "")).strip() or None
    try:
        learner_id = int(form.get("learner_id") or 0)
        price = float(form.get("price") or 0)
    except ValueError:
        return _redirect("/dashboard", error="Invalid offer")

    if not skill or not learner_id or learner_id == session.account_id or price < 0:
        return _redirect("/dashboard", error="Invalid offer")

    learner = (await db.execute(select(User).where(User.id == learner_id))).scalar_one_or_none()
    if not learner:
        raise HTTPException(status_code=404, detail="User not found")

    tutor_name = session.user.name or session.user.email
    db.add(
        TutorOffer(
            learner_id=learner.id,
            tutor_id=session.account_id,
            tutor_name=tutor_name,
            skill_offered=skill,
            price=price,
            message=message,
        )
    )
    await db.flush()

    await send_offer_received_email(
        learner.email, learner.name or learner.email, tutor_name, skill, message
    )
    return _redirect("/dashboard", success=f"Offer sent to {learner.name or 'user'}")


@router.post("/offers/{offer_id}/accept")
async def accept_offer(
    offer_id: int,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    offer = await _load_own_offer(db, offer_id, session)
    offer.status = OfferStatus.ACCEPTED
    await db.flush()

    tutor = (await db.execute(select(User).where(User.id == offer.tutor_id))).scalar_one_or_none()
    if tutor:
        await send_offer_accepted_email(
            tutor.email, offer.tutor_name, session.user.name or session.user.email, offer.skill_offered
        )
    return _redirect(success="The tutor has been notified of your acceptance")


@router.post("/offers/{offer_id}/reject")
async def reject_offer(
    offer_id: int,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    offer = await _load_own_offer(db, offer_id, session)
    offer.status = OfferStatus.REJECTED
    await db.flush()
    return _redirect(success="The offer has been rejected")


@router.post("/suggestions/add")
async def add_suggested_skill(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    form = await request.form()
    name = str(form.get("skill", "")).strip()
    if not name:
        return _redirect(error="Failed to add suggested skill")

    data = SkillIn.defaults_for(SkillKind.WANT, name=name, category=SkillCategory.OTHER)
    skills = profiles.add_skill(profiles.skills_of(session.profile, SkillKind.WANT), data)
    try:
        await profiles.replace_skills(db, session.account_id, SkillKind.WANT, skills)
    except profiles.ProfileStoreError:
        return _redirect(error="Failed to add suggested skill")

    return _redirect("/dashboard", success=f"{name} has been added to your learning list!")
