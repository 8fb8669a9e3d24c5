"""Route test fixtures - in-memory database, swappable permissions, token helpers.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_settings and get_permission_checker are overridden per test
    - db_manager points at the test engine so readiness checks see it

Design Decisions:
    - StaticPool: one shared connection keeps the in-memory database alive
      across the sessions opened by a single test
    - FakePermissionChecker denies by default; tests grant action keys explicitly
    - Settings default to scope mode any so tests opt into own/none explicitly
"""

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import marketing_api.infrastructure.database as db_module
import marketing_api.models  # noqa: F401
from marketing_api.api.dependencies import get_permission_checker
from marketing_api.config import Settings, get_settings
from marketing_api.core.domain_types import AuthUser, ScopeMode
from marketing_api.core.permission_protocols import PermissionResult
from marketing_api.db.base import Base
from marketing_api.infrastructure.database import DatabaseSessionManager, get_db
from marketing_api.main import app


class FakePermissionChecker:
    """Grants only the action keys listed in `granted`."""

    def __init__(self):
        self.granted: set[str] = set()
        self.calls: list[tuple[str | None, str]] = []

    async def check(self, user: AuthUser | None, action_key: str) -> PermissionResult:
        self.calls.append((user.sub if user else None, action_key))
        if user is None:
            return PermissionResult(False, action_key, "unauthenticated")
        return PermissionResult(action_key in self.granted, action_key)


def _unsigned_token(claims: dict) -> str:
    return jwt.encode(claims, None, algorithm="none")


@pytest.fixture
def make_token():
    """Builds unsigned JWTs from a claims dict."""
    return _unsigned_token


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool, echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def permissions():
    return FakePermissionChecker()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        enable_project_linking=False,
        require_project_linking=False,
        default_scope_mode=ScopeMode.ANY,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, permissions, settings):
    """FastAPI test client with DB, settings and permissions overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_permission_checker] = lambda: permissions

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
