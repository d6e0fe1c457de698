"""
Availability router — time slots a user is open for skill exchanges.

Endpoints:
    GET  /availability                    → own schedule + add form
    POST /availability/add                → add a slot
    POST /availability/{slot_id}/delete   → remove an own slot
"""

from datetime import date
from typing import Optional
from urllib.parse import quote_plus

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillbarter.database import get_db
from skillbarter.models.availability import AvailabilitySlot
from skillbarter.routers.auth import get_auth_session
from skillbarter.services.availability import END_OPTIONS, START_OPTIONS, SlotError, validate_slot
from skillbarter.services.session import AuthSession
from skillbarter.templating import templates

router = APIRouter(prefix="/availability", tags=["availability"])


def _parse_date(raw: str) -> Optional[date]:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        return None


@router.get("", response_class=HTMLResponse)
async def availability_page(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    result = await db.execute(
        select(AvailabilitySlot)
        .where(AvailabilitySlot.user_id == session.account_id)
        .order_by(AvailabilitySlot.date, AvailabilitySlot.start_time)
    )
    slots = result.scalars().all()

    errors = [request.query_params["error"]] if request.query_params.get("error") else []
    return templates.TemplateResponse(
        request,
        "availability.html",
        {
            "current_user": session.user,
            "slots": slots,
            "start_options": START_OPTIONS,
            "end_options": END_OPTIONS,
            "today": date.today().isoformat(),
            "errors": errors,
            "success": request.query_params.get("success", ""),
        },
    )


@router.post("/add")
async def add_slot(
    request: Request,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    form = await request.form()
    slot_date = _parse_date(str(form.get("date", "")).strip())
    start_time = str(form.get("start_time", "09:00")).strip()
    end_time = str(form.get("end_time", "10:00")).strip()

    try:
        validate_slot(slot_date, start_time, end_time)
    except SlotError as e:
        return RedirectResponse(
            url=f"/availability?error={quote_plus(str(e))}",
            status_code=status.HTTP_303_SEE_OTHER,
        )

    db.add(
        AvailabilitySlot(
            user_id=session.account_id,
            date=slot_date,
            start_time=start_time,
            end_time=end_time,
            recurring=form.get("recurring") in ("on", "true", "1"),
        )
    )
    await db.flush()

    return RedirectResponse(
        url="/availability?success=Availability+added", status_code=status.HTTP_303_SEE_OTHER
    )


@router.post("/{slot_id}/delete")
async def delete_slot(
    slot_id: int,
    session: AuthSession = Depends(get_auth_session),
    db: AsyncSession = Depends(get_db),
):
    if not session.is_authenticated:
        return RedirectResponse(url="/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    result = await db.execute(select(AvailabilitySlot).where(AvailabilitySlot.id == slot_id))
    slot = result.scalar_one_or_none()

    if not slot or slot.user_id != session.account_id:
        raise HTTPException(status_code=403, detail="Not allowed")

    await db.delete(slot)
    await db.flush()

    return RedirectResponse(
        url="/availability?success=Time+slot+removed", status_code=status.HTTP_303_SEE_OTHER
    )
