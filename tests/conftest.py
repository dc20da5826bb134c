from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.security import token_manager
from app.db.session import Database, get_session
from app.main import app
from app.models.user_model import User, UserType, Status
from app.models.review_model import Review

# --- Test Database Setup ---
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# --- Pytest Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """
    A fresh in-memory database with all tables, per test function.
    """
    test_db = Database(TEST_DATABASE_URL)
    await test_db.connect()
    await test_db.create_all()
    yield test_db
    await test_db.disconnect()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an HTTP client for API testing, overriding the DB dependency.
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


# --- Test Data Fixtures ---


async def _persist(session: AsyncSession, *objs):
    for obj in objs:
        session.add(obj)
    await session.commit()
    for obj in objs:
        await session.refresh(obj)


@pytest_asyncio.fixture
async def active_user(db_session: AsyncSession) -> User:
    user = User(
        username="jane_doe",
        name="Jane Doe",
        user_type=UserType.INDIVIDUAL,
        status=Status.ACTIVE,
        logo_url="https://cdn.example.com/jane.png",
    )
    await _persist(db_session, user)
    return user


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> User:
    user = User(
        username="corner_bakery",
        name="Corner Bakery",
        user_type=UserType.BUSINESS,
        status=Status.ACTIVE,
    )
    await _persist(db_session, user)
    return user


@pytest_asyncio.fixture
async def inactive_user(db_session: AsyncSession) -> User:
    user = User(
        username="dormant",
        user_type=UserType.INDIVIDUAL,
        status=Status.INACTIVE,
    )
    await _persist(db_session, user)
    return user


@pytest_asyncio.fixture
async def review(db_session: AsyncSession, second_user: User) -> Review:
    """An active review authored by the business account."""
    item = Review(user_id=second_user.id, title="Best croissants in town")
    await _persist(db_session, item)
    return item


@pytest_asyncio.fixture
async def other_review(db_session: AsyncSession, second_user: User) -> Review:
    item = Review(user_id=second_user.id, title="Weekend brunch")
    await _persist(db_session, item)
    return item


@pytest_asyncio.fixture
async def deleted_review(db_session: AsyncSession, second_user: User) -> Review:
    item = Review(user_id=second_user.id, title="Removed", status=Status.DELETED)
    await _persist(db_session, item)
    return item


@pytest.fixture
def auth_headers() -> Generator:
    """Builds Authorization headers for a given user id."""

    def _headers(user_id) -> dict:
        token = token_manager.create_token(subject=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    yield _headers
