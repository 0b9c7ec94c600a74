import os
from typing import AsyncGenerator

import pytest_asyncio
from dotenv import load_dotenv
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Try loading .env.test for test-specific settings (e.g. TEST_DATABASE_URL)
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)

# Settings require DATABASE_URL at import time. Tests bind their own engine,
# so the module-level engine in libs.db.config is never connected.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./commerce-test.db")
os.environ.setdefault("ENVIRONMENT", "local")

from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402

# Import all models so metadata includes every table
from services.credits_service import models as _credits_models  # noqa: E402,F401
from services.store_service import models as _store_models  # noqa: E402,F401

# Clear cached settings to reload with new env vars
get_settings.cache_clear()


def _test_database_url(tmp_path) -> str:
    """TEST_DATABASE_URL (e.g. a throwaway Postgres) or a per-test SQLite file."""
    url = os.environ.get("TEST_DATABASE_URL")
    if url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return f"sqlite+aiosqlite:///{tmp_path / 'commerce.db'}"


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """
    A fresh schema per test. Tests commit for real (the concurrency tests
    need several independent sessions), so isolation comes from dropping
    everything afterwards rather than from a wrapping transaction.
    """
    url = _test_database_url(tmp_path)
    is_sqlite = url.startswith("sqlite")
    engine = create_async_engine(
        url,
        future=True,
        connect_args={"timeout": 30} if is_sqlite else {},
    )

    if is_sqlite:

        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session bound to the per-test engine."""
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
