"""
Shared fixtures.

Each test gets its own SQLite database file (aiosqlite). A file rather than
:memory: so that concurrent fetches each get their own connection, the way
they do against Postgres.
"""

import datetime
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from main import app
from mealstats.core.security import create_access_token
from mealstats.db.session import get_session_factory
from mealstats.dependencies import get_today_provider
from mealstats.models import Base

# A Wednesday; its week runs 2024-05-13 .. 2024-05-19
TODAY = datetime.date(2024, 5, 15)


@pytest.fixture
def today() -> datetime.date:
    return TODAY


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stats.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
def seed(session_factory):
    async def _seed(*objects) -> None:
        async with session_factory() as session:
            session.add_all(objects)
            await session.commit()

    return _seed


@pytest.fixture
def auth_headers():
    def _headers(role: str, provider_id: str | None = None, company_id: str | None = None) -> dict:
        token = create_access_token(
            subject="user-1", role=role, provider_id=provider_id, company_id=company_id
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def client(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_today_provider] = lambda: (lambda: TODAY)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
