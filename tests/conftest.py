"""
Shared test fixtures for the Hospital Management API test suite.

Every test gets a fresh in-memory SQLite database (aiosqlite) and an
httpx AsyncClient wired to the app with ``get_db`` overridden.
"""

import os
import sys
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret"
os.environ["CORS_ORIGINS"] = '["*"]'

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hms.api.v1.deps import get_db
from hms.core.config import get_settings
from hms.core.roles import Role
from hms.core.security import IdentityClaim, TokenCodec, hash_password
from hms.db.base import Base
from hms.main import app
from hms.models.user import User

API = "/api/v1"
PASSWORD = "s3cret-pass"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def codec() -> TokenCodec:
    return TokenCodec(get_settings())


# ── User helpers ────────────────────────────────────────────────────
@pytest.fixture
def make_user(session_factory):
    """Insert a user directly and return it."""

    async def _make(
        email: str,
        role: Role = Role.PATIENT,
        password: str = PASSWORD,
        is_active: bool = True,
        is_deleted: bool = False,
    ) -> User:
        async with session_factory() as session:
            user = User(
                email=email,
                full_name=email.split("@")[0].title(),
                mobile_number="9876543210",
                hashed_password=hash_password(password),
                role=role,
                is_active=is_active,
                is_deleted=is_deleted,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _make


@pytest.fixture
def auth_headers(make_user, codec):
    """Create a user with *role* and return Bearer headers for it."""

    async def _headers(role: Role, email: str | None = None) -> dict[str, str]:
        user = await make_user(email or f"{role.value}@test.com", role=role)
        token = codec.issue_access_token(
            IdentityClaim(user_id=user.id, role=user.role, email=user.email)
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
