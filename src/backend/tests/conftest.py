"""
Pytest fixtures for the Proposals backend tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("AUTH_STRATEGY", "signed_token")


@pytest.fixture
async def app() -> Any:
    """FastAPI application with the default (signed_token) configuration."""
    from main import app as fastapi_app

    return fastapi_app


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Async test client for the default application."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


AppClientFactory = Callable[..., Awaitable[tuple[Any, AsyncClient]]]


@pytest.fixture
async def make_app_client(tmp_path: Path) -> AsyncGenerator[AppClientFactory, None]:
    """
    Build an application backed by a fresh SQLite file.

    Keyword arguments override Settings fields, e.g.
    ``await make_app_client(AUTH_STRATEGY="stored_token")``.
    """
    from core.config import Settings
    from main import create_application

    async with AsyncExitStack() as stack:
        counter = 0

        async def _make(**overrides: Any) -> tuple[Any, AsyncClient]:
            nonlocal counter
            counter += 1
            db_path = tmp_path / f"test-{counter}.db"
            settings = Settings(DATABASE_URL=f"sqlite+aiosqlite:///{db_path}", **overrides)
            application = create_application(settings)
            await application.state.database.create_all()
            stack.push_async_callback(application.state.database.dispose)

            ac = AsyncClient(transport=ASGITransport(app=application), base_url="http://test")
            await stack.enter_async_context(ac)
            return application, ac

        yield _make


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_user_data() -> dict[str, Any]:
    """Sample user data for testing."""
    return {
        "email": "voter@example.com",
        "password": "correct-horse-battery",
    }
