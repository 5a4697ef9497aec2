"""
Test infrastructure for the News Portal API.

Strategy
--------
- SQLite in-memory via aiosqlite, so the suite needs no running Postgres.
- StaticPool makes every session share the one in-memory connection;
  a second connection would see an empty database.
- ``PRAGMA foreign_keys=ON`` is installed on the test engine as in
  production, otherwise category/user deletes would not cascade to news.
- The app's get_db dependency is overridden so HTTP requests use the test
  session factory.
- Tables are created before each test and dropped after.
- Redis is disabled with ``cache._redis = None``; the CacheManager treats
  that as a permanent miss, so every read goes to the database.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from newsportal.cache import cache
from newsportal.database import Base, get_db, install_sqlite_foreign_keys
from newsportal.main import app
from newsportal.middleware import install_query_counter
from newsportal.models import Category, User
from newsportal.security import hash_password

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)
install_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    cache._redis = None
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Live session for tests that call services or seed rows directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def author(db_session: AsyncSession) -> User:
    """A persisted user for service-level tests."""
    user = User(email="author@example.com", password=hash_password("secret123"), name="Aman Author")
    db_session.add(user)
    await db_session.flush()
    return user


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    """A persisted bilingual category for service-level tests."""
    cat = Category(
        name_ru="Технологии",
        name_tm="Tehnologiýa",
        slug="tech",
        description_ru="Новости технологий",
        description_tm="Tehnologiýa habarlary",
    )
    db_session.add(cat)
    await db_session.flush()
    return cat
