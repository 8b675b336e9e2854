"""
Test configuration and fixtures for Realty CRM
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./realty_crm_test.db")

import pytest
from typing import AsyncGenerator, Dict
from uuid import UUID, uuid4
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from realty_crm.main import app
from realty_crm.core.database import Base, engine_options, get_db
from realty_crm.core.security import token_for_user
from realty_crm.models import User, UserRole, Activity


@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite database per test."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(url, echo=False, **engine_options(url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the database dependency pointed at the test database."""
    async def get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Insert a user directly, bypassing registration."""
    async def _make_user(name: str, role: UserRole = UserRole.USER) -> User:
        user = User(
            id=uuid4(),
            name=name,
            email=f"{name.lower().replace(' ', '.')}@acme-realty.com",
            password_hash="not-a-real-hash",
            role=role.value,
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Bearer credential for a user."""
    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_for_user(user)}"}

    return _headers


@pytest.fixture
async def agent(make_user) -> User:
    return await make_user("Asha Agent")


@pytest.fixture
async def other_agent(make_user) -> User:
    return await make_user("Oscar Other")


@pytest.fixture
async def admin(make_user) -> User:
    return await make_user("Ada Admin", role=UserRole.ADMIN)


@pytest.fixture
def fetch(session_factory):
    """Read a record back through a session of its own."""
    async def _fetch(model, record_id):
        async with session_factory() as session:
            result = await session.execute(select(model).where(model.id == UUID(str(record_id))))
            return result.scalar_one_or_none()

    return _fetch


@pytest.fixture
def activity_count(session_factory):
    """Number of activity entries, optionally narrowed by user and action."""
    async def _count(user_id=None, action_type=None) -> int:
        query = select(func.count(Activity.id))
        if user_id is not None:
            query = query.where(Activity.user_id == user_id)
        if action_type is not None:
            query = query.where(Activity.action_type == action_type)
        async with session_factory() as session:
            return (await session.execute(query)).scalar_one()

    return _count


@pytest.fixture
def sample_contact_data():
    """Sample contact payload."""
    return {
        "name": "Jane Doe",
        "email": "jane.doe@gmail.com",
        "phone": "+919800000000",
        "leadSource": "Referral",
        "unitType": "Plot",
        "projectSuggestion": "Green Acres Phase 2",
    }
