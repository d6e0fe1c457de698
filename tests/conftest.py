"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from skillbarter.database import Base, get_db
from skillbarter.main import app
from skillbarter.models.skill import SkillCategory
from skillbarter.models.user import User
from skillbarter.routers.auth import COOKIE_KEY, create_access_token
from skillbarter.schemas.profile import Profile
from skillbarter.schemas.skill import Skill
from skillbarter.services.match_board import MatchBoard


def skill(name, category=SkillCategory.OTHER):
    return Skill(name=name, category=category)


@pytest.fixture
def make_profile():
    """Factory for in-memory profiles: ``make_profile(1, offers=[...], wants=[...])``."""

    def _make(account_id, offers=(), wants=(), completed=True, name=None):
        return Profile(
            id=account_id,
            name=name or f"User {account_id}",
            skills_offered=[s if isinstance(s, Skill) else skill(s) for s in offers],
            skills_wanted=[s if isinstance(s, Skill) else skill(s) for s in wants],
            profile_completed=completed,
        )

    return _make


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A throwaway SQLite database with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db):
    """Persist a user row; skills are given as names or Skill objects."""

    async def _make(email, name=None, offers=(), wants=(), completed=True, **fields):
        fields.setdefault("age", 30 if completed else None)
        fields.setdefault("location", "Chennai" if completed else None)
        user = User(email=email, name=name, profile_completed=completed, **fields)
        user.skills_offered = [
            (s if isinstance(s, Skill) else skill(s)).model_dump(mode="json") for s in offers
        ]
        user.skills_wanted = [
            (s if isinstance(s, Skill) else skill(s)).model_dump(mode="json") for s in wants
        ]
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, wired to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.match_board = MatchBoard()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Sign the test client in as ``user``."""

    def _login(user):
        client.cookies.set(COOKIE_KEY, create_access_token({"sub": str(user.id)}))

    return _login
