"""
db/session.py
-------------
Async SQLAlchemy engine and session factory.

Design decisions:
  - AsyncEngine with asyncpg driver for non-blocking I/O.
  - Connection pool sized for dashboard fan-out: a single stats request may
    run several independent queries at once (one per company for rollups),
    each on its own session / connection.
  - pool_pre_ping=True: validates connections before checkout to handle
    stale connections after DB restarts or idle timeouts.
  - expire_on_commit=False: avoids lazy-load errors in async context.

The stats engine never writes, so it depends on the session *factory*
(get_session_factory) rather than a request-scoped session: concurrent
queries cannot share one AsyncSession.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from mealstats.core.config import settings


def _engine_options(url: str) -> dict:
    # SQLite drivers use their own pool classes and reject sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # Recycle connections every hour
    }


# ── Engine ────────────────────────────────────────────────────────────────────
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,          # Log SQL in development
    **_engine_options(settings.DATABASE_URL),
)

# ── Session Factory ───────────────────────────────────────────────────────────
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    FastAPI dependency returning the session factory.

    Usage:
        @router.get("/example")
        async def handler(factory=Depends(get_session_factory)):
            async with factory() as session:
                ...
    """
    return AsyncSessionLocal
