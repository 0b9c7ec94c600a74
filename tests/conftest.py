"""HTTP clients and auth helpers shared by the integration tests.

Engine and session fixtures live in the root ``conftest.py``.
"""

from contextlib import contextmanager
from typing import AsyncGenerator, Optional

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db

DEFAULT_USER_ID = "test-user"


def make_user(
    user_id: str = DEFAULT_USER_ID,
    *,
    role: str = "authenticated",
    email: Optional[str] = "test@example.com",
) -> AuthUser:
    return AuthUser(user_id=user_id, email=email, role=role)


def make_admin_user(user_id: str = "admin-user") -> AuthUser:
    return make_user(user_id, role="service_role", email="admin@example.com")


@contextmanager
def override_auth(app, user: Optional[AuthUser]):
    """Act as ``user`` for the duration of the block (``None``: anonymous)."""
    previous = app.dependency_overrides.get(get_current_user)
    if user is None:
        app.dependency_overrides.pop(get_current_user, None)
    else:
        app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield
    finally:
        if previous is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = previous


def _db_override(session_factory):
    # One session per request, like get_async_db, so concurrent requests
    # really run in separate transactions.
    async def _get_test_db():
        async with session_factory() as session:
            yield session

    return _get_test_db


async def _make_client(app, session_factory) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_async_db] = _db_override(session_factory)
    app.dependency_overrides[get_current_user] = lambda: make_user()

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def credits_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    from services.credits_service.app.main import app

    async for ac in _make_client(app, session_factory):
        yield ac


@pytest_asyncio.fixture
async def store_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    from services.store_service.app.main import app

    async for ac in _make_client(app, session_factory):
        yield ac
