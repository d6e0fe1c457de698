"""
SkillBarter — FastAPI application entry-point.

Run with:
    uvicorn skillbarter.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from skillbarter import models  # noqa: F401  (registers tables on Base.metadata)
from skillbarter.config import settings
from skillbarter.database import Base, engine, get_db
from skillbarter.models.availability import AvailabilitySlot
from skillbarter.models.user import User
from skillbarter.routers import auth, availability, dashboard, onboarding, users, waiting_list
from skillbarter.routers.auth import get_current_user, landing_for, set_auth_cookie
from skillbarter.services.match_board import MatchBoard
from skillbarter.templating import templates

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


# ── Lifespan: create tables and the match board on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.match_board = MatchBoard()
    logger.info("%s started", settings.APP_NAME)
    yield
    app.state.match_board.clear()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Skill-exchange marketplace — teach what you know, learn what you want.",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.match_board = MatchBoard()

# ── Session middleware (required for OAuth state) ──
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY, https_only=not settings.DEBUG)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

# ── Static files ──
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# ── Register routers ──
app.include_router(auth.router)
app.include_router(onboarding.router)
app.include_router(dashboard.router)
app.include_router(availability.router)
app.include_router(waiting_list.router)
app.include_router(users.router)


if settings.ENVIRONMENT != "production":

    @app.get("/mock-login/{user_id}")
    async def mock_login(user_id: int, db: AsyncSession = Depends(get_db)):
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        url = landing_for(user) if user else "/"
        resp = RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)
        return set_auth_cookie(resp, user_id)


# ── Landing page ──
@app.get("/")
async def homepage(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    users_count = (await db.execute(select(func.count(User.id)))).scalar() or 0
    completed_count = (
        await db.execute(select(func.count(User.id)).where(User.profile_completed.is_(True)))
    ).scalar() or 0
    slots_count = (await db.execute(select(func.count(AvailabilitySlot.id)))).scalar() or 0

    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "current_user": current_user,
            "stats": {
                "users": users_count,
                "profiles": completed_count,
                "slots": slots_count,
            },
            "success": request.query_params.get("success", ""),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("skillbarter.main:app", reload=settings.DEBUG)
