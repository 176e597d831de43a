# meeting_governance/db/session.py
import os
from collections.abc import AsyncGenerator

from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from meeting_governance.core.config import get_settings
from meeting_governance.db.base import Base

# Import ORM models so that Base.metadata is aware of them
from meeting_governance.models import action as _action  # noqa: E402,F401
from meeting_governance.models import agenda as _agenda  # noqa: E402,F401
from meeting_governance.models import executive_session as _executive_session  # noqa: E402,F401
from meeting_governance.models import governing_body as _governing_body  # noqa: E402,F401
from meeting_governance.models import meeting as _meeting  # noqa: E402,F401
from meeting_governance.models import minutes as _minutes  # noqa: E402,F401
from meeting_governance.models import participation as _participation  # noqa: E402,F401

settings = get_settings()

# Detect if we're running under pytest
IS_TEST = "PYTEST_CURRENT_TEST" in os.environ or settings.APP_ENV == "test"

# ---------------------------------------------------------------------------
# Main application engine + session
# ---------------------------------------------------------------------------
engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    future=True,
    # TestClient and pytest-asyncio run on different event loops, so never
    # reuse a pooled connection across them in tests.
    poolclass=NullPool if IS_TEST else None,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async SQLAlchemy session.

    The session is automatically closed when the request is completed;
    anything not committed by a service is rolled back.
    """
    async with AsyncSessionLocal() as session:
        yield session


# ---------------------------------------------------------------------------
# PRODUCTION / DEV: DB init for app startup
# ---------------------------------------------------------------------------
async def init_db_for_startup() -> None:
    """
    Initialize DB schema for application startup.

    Safe to call from FastAPI startup in non-test environments.
    Typically you'd eventually replace this with Alembic migrations.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---------------------------------------------------------------------------
# TESTS ONLY: reset schema using a SYNC engine
# ---------------------------------------------------------------------------

def _build_sync_db_url(async_url: str) -> str:
    """
    Convert an async driver URL to its synchronous counterpart:

    - 'postgresql+asyncpg://...' -> 'postgresql://...'
    - 'sqlite+aiosqlite:///...'  -> 'sqlite:///...'
    """
    for async_driver in ("+asyncpg", "+aiosqlite"):
        if async_driver in async_url:
            return async_url.replace(async_driver, "")
    return async_url


def reset_schema_sync() -> None:
    """
    Run drop_all + create_all using a synchronous SQLAlchemy engine.

    This completely bypasses async drivers and event-loop issues, so it can
    be called from plain (non-async) pytest fixtures.
    """
    sync_url = _build_sync_db_url(settings.DB_URL)
    sync_engine = create_sync_engine(sync_url, future=True)

    with sync_engine.begin() as conn:
        Base.metadata.drop_all(bind=conn)
        Base.metadata.create_all(bind=conn)

    sync_engine.dispose()
