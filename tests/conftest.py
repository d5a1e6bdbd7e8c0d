"""Shared test fixtures for the menu backend tests."""

import json
import os

# the app module builds its engine at import time; keep it off any real server
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.backend.app import app
from src.backend.config import settings
from src.backend.models.menu import Menu
from src.backend.utils import menu_cache
from src.backend.utils.database import Base, get_db
from src.backend.utils.position_locks import reset_position_locks
from src.backend.utils.security import create_access_token


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """A session for arranging and inspecting rows directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh cache and lock registries for every test."""
    menu_cache.invalidate_all_menu_cache()
    reset_position_locks()
    yield
    menu_cache.invalidate_all_menu_cache()
    reset_position_locks()


@pytest.fixture
async def client(session_factory):
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin", "role": "admin_pusat"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_disabled(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_ENABLED", False)


@pytest.fixture
def add_menu(db):
    """Insert one row directly and return it (with its id)."""

    async def _add(label, position="header", parent_id=None, order=0, is_fixed=False,
                   is_active=True, roles=None):
        row = Menu(
            label=label,
            slug=label.lower(),
            to=f"/{label.lower()}",
            icon="",
            parent_id=parent_id,
            position=position,
            order=order,
            is_active=is_active,
            is_fixed=is_fixed,
            roles=json.dumps(roles or []),
        )
        db.add(row)
        await db.commit()
        return row

    return _add
