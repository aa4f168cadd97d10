"""
Test infrastructure for the Article Folder API.

Strategy
--------
- SQLite in-memory via aiosqlite, with StaticPool so every task shares
  the single connection an in-memory database lives on.
- The app's get_db dependency is overridden to use the test session
  factory.
- Tables are created before and dropped after each test.
- Redis is disabled by setting ``cache._redis = None``; the CacheManager
  turns that into misses and skipped writes, so providers always hit
  the database.  test_cache.py installs an in-memory stand-in where the
  cache-aside path itself is under test.
"""
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from article_folder.database import Base, get_db
from article_folder.main import app
from article_folder.cache import cache
from article_folder.middleware import install_query_counter

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    cache._redis = None
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
