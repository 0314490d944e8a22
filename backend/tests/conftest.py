"""
Blog API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh in-memory SQLite database (aiosqlite).
       Tables are created before the test and dropped after it, so
       tests never see each other's posts.

Fixture Hierarchy:
    engine          → in-memory async engine with all tables created
    db_session      → AsyncSession bound to that engine
    sample_posts    → the four fixture posts, inserted with fixed timestamps
    test_client     → HTTPX AsyncClient talking to the app, with
                      get_db_session overridden to use the test engine
    unraising_client → same, but unhandled errors return the app's 500
"""

import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List

# Must be set before any blogapi import builds the settings/engine
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from blogapi.database import Base, get_db_session
from blogapi.models.post import Post


# ══════════════════════════════════════════════════════════════════════════
# Database lifecycle
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def engine():
    """
    In-memory database, created fresh for each test.

    StaticPool keeps the single connection alive, otherwise each new
    connection would open an empty in-memory database.
    """
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Data fixtures
# ══════════════════════════════════════════════════════════════════════════

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

SAMPLE_POSTS = [
    {"title": "Learning Redux", "author": "Daniel Bugl", "tags": ["redux"]},
    {"title": "Learn React Hooks", "author": "Daniel Bugl", "tags": ["react"]},
    {"title": "Full-Stack React Projects", "author": "Shama Hoque", "tags": ["react", "nodejs"]},
    {"title": "Guide to TypeScript"},
]


@pytest_asyncio.fixture
async def sample_posts(db_session) -> List[Post]:
    """
    Insert the four sample posts, one minute apart, in list order.

    created_at increases with the list index; updated_at runs the other
    way so the two timestamp sorts give different orders.
    """
    posts = []
    count = len(SAMPLE_POSTS)
    for i, data in enumerate(SAMPLE_POSTS):
        post = Post(
            title=data["title"],
            author=data.get("author"),
            tags=list(data.get("tags", [])),
            created_at=BASE_TIME + timedelta(minutes=i),
            updated_at=BASE_TIME + timedelta(hours=1, minutes=count - i),
        )
        db_session.add(post)
        posts.append(post)
    await db_session.commit()
    return posts


# ══════════════════════════════════════════════════════════════════════════
# HTTP client
# ══════════════════════════════════════════════════════════════════════════

def _override_session(session_factory):
    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db_session


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client wired to the app, sharing the test database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/v1/posts")
    """
    from blogapi.main import app

    app.dependency_overrides[get_db_session] = _override_session(session_factory)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unraising_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Like test_client, but unhandled exceptions come back as the app's 500
    response instead of being re-raised into the test.
    """
    from blogapi.main import app

    app.dependency_overrides[get_db_session] = _override_session(session_factory)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
