"""
Onboarding router — the one-time step that completes a new profile.

Endpoints:
    GET  /onboarding  → onboarding form
    POST /onboarding  → validate and complete the profile
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.database import get_db
from skillbarter.routers.auth import get_auth_session
from skillbarter.services.onboarding import OnboardingError, parse_onboarding_form
from skillbarter.services.profiles import ProfileStoreError, complete_profile
from skillbarter.services.session import AuthSession
from skillbarter.templating import templates

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("", response_class=HTMLResponse)
async def onboarding_page(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    if not session.needs_onboarding:
        return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)

    return templates.TemplateResponse(
        request,
        "onboarding.html",
        {"current_user": session.user, "form": {"name": session.user.name or ""}, "errors": []},
    )


@router.post("", response_class=HTMLResponse)
async def submit_onboarding(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)
    if not session.needs_onboarding:
        return RedirectResponse(url="/dashboard", status_code=status.HTTP_303_SEE_OTHER)

    form = await request.form()
    try:
        data = parse_onboarding_form(form)
        await complete_profile(
            db,
            session.account_id,
            name=data.name,
            age=data.age,
            location=data.location,
            offered=data.offered,
            wanted=data.wanted,
        )
    except (OnboardingError, ProfileStoreError) as e:
        return templates.TemplateResponse(
            request,
            "onboarding.html",
            {"current_user": session.user, "form": dict(form), "errors": [str(e)]},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    return RedirectResponse(
        url="/dashboard?success=Profile+completed", status_code=status.HTTP_303_SEE_OTHER
    )
