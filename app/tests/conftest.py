import pytest_asyncio
import uuid
import os
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-min-32-chars")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/1")
os.environ.setdefault("SKIP_CONFIG_VALIDATION", "true")

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"

from app.main import app
from app.database import get_db
from app.models.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False}
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

        db_file = "./test.db"
        if os.path.exists(db_file):
            os.remove(db_file)

    except Exception as e:
        print(f"Test cleanup warning: {e}")

@pytest_asyncio.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

@pytest_asyncio.fixture
async def async_client(async_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield async_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        timeout=30.0
    ) as ac:
        yield ac

    app.dependency_overrides.clear()

def _get_unique_user_data(base_name: str = "testuser"):
    unique_id = str(uuid.uuid4())[:8]
    return {
        "username": f"{base_name}_{unique_id}",
        "email": f"{base_name}_{unique_id}@example.com",
        "password": "TestPass123!",
        "location": "Elm St"
    }

@pytest_asyncio.fixture
async def test_user_data():
    return _get_unique_user_data("testuser")

@pytest_asyncio.fixture
async def second_user_data():
    return _get_unique_user_data("seconduser")

@pytest_asyncio.fixture
async def third_user_data():
    return _get_unique_user_data("thirduser")

@pytest_asyncio.fixture
async def admin_user_data():
    return _get_unique_user_data("admin")

@pytest_asyncio.fixture
async def test_post_data():
    unique_id = str(uuid.uuid4())[:8]
    return {
        "type": "need",
        "category": "tool",
        "urgency": "medium",
        "title": f"Need a drill {unique_id}",
        "description": "For a weekend shelf project",
        "location": "Elm St"
    }

@pytest_asyncio.fixture
async def test_emergency_data():
    return {
        "title": "Car broke down",
        "location": "Highway 9 exit 12",
        "template_id": "breakdown"
    }
