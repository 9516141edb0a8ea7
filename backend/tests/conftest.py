"""
Pytest configuration and fixtures.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.

Tests run against an in-memory SQLite database (aiosqlite). Each test gets
a fresh schema; every HTTP request gets its own session, like production.

References:
-----------
- Pytest Fixtures: https://docs.pytest.org/en/stable/fixture.html
- FastAPI Testing: https://fastapi.tiangolo.com/advanced/async-tests/
"""

import os

# Settings are read at import time; configure them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-0123456789abcdefghijklmnop")
os.environ.setdefault("APP_ENV", "staging")
os.environ.setdefault("STORAGE_PUBLIC_URL", "https://cdn.storyteller.test")
os.environ.setdefault("LOG_FORMAT", "text")

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base
from app.db.deps import get_db
from app.main import app
from app.models import (
    Category,
    CategoryTranslation,
    Language,
    PlaylistStory,
    Profile,
    Story,
    StoryCategory,
    StoryPage,
    StoryTranslation,
)
from app.services.storage import InMemoryStorageClient, get_storage_client, public_url_for

USER_ID = "0b6c6f0e-8f3b-4d4e-9a52-2f1d3c5e8a90"
OTHER_USER_ID = "7d1e2a44-35c0-4f61-b2a8-9e0c4d7f1b23"


# ================================
# Database Fixtures
# ================================

@pytest_asyncio.fixture
async def test_engine():
    """
    Create a fresh in-memory database with all tables.

    StaticPool keeps the single in-memory connection alive so every
    session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging data. Commit what a request should see."""
    async with session_factory() as session:
        yield session


# ================================
# FastAPI Client Fixtures
# ================================

@pytest.fixture
def storage() -> InMemoryStorageClient:
    return InMemoryStorageClient()


@pytest_asyncio.fixture
async def client(session_factory, storage) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing FastAPI endpoints.

    Overrides the database and storage dependencies.

    Usage:
        async def test_something(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/languages", headers=auth_headers)
            assert response.status_code == 200
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_client] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Clean up
    app.dependency_overrides.clear()


# ================================
# Authentication Fixtures
# ================================

@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Bearer token for USER_ID."""
    token = create_access_token(USER_ID, email="parent@example.com", expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    """Bearer token for a second account that owns nothing of USER_ID's."""
    token = create_access_token(OTHER_USER_ID, email="other@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_token() -> str:
    return create_access_token(USER_ID, expires_delta=timedelta(hours=-1))


# ================================
# Catalog Fixtures
# ================================

@dataclass
class SeededCatalog:
    english_id: int
    spanish_id: int
    story_ids: list[int]
    category_ids: list[int]
    english_translation_id: int


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> SeededCatalog:
    """
    Two languages, two categories and five stories.

    Story 0 has English (7 pages) and Spanish translations; the others
    are English only. Stories 0 and 1 are in category 0.
    """
    english = Language(name="English", country_code="GB")
    spanish = Language(name="Español", country_code="ES")
    db_session.add_all([english, spanish])
    await db_session.flush()

    categories = [Category(photo_url=f"https://cdn.storyteller.test/category/{i}.png") for i in range(2)]
    db_session.add_all(categories)
    await db_session.flush()
    db_session.add_all([
        CategoryTranslation(category_id=categories[0].id, language_id=english.id, name="Animals"),
        CategoryTranslation(category_id=categories[0].id, language_id=spanish.id, name="Animales"),
        CategoryTranslation(category_id=categories[1].id, language_id=english.id, name="Bedtime"),
    ])

    stories = [Story(photo_url=f"https://cdn.storyteller.test/story/{i}.png", duration=60 * (i + 1)) for i in range(5)]
    db_session.add_all(stories)
    await db_session.flush()

    translations = [
        StoryTranslation(story_id=story.id, language_id=english.id, title=f"Story {i}", description=f"About story {i}")
        for i, story in enumerate(stories)
    ]
    translations.append(
        StoryTranslation(story_id=stories[0].id, language_id=spanish.id, title="Cuento 0")
    )
    db_session.add_all(translations)
    await db_session.flush()

    db_session.add_all(
        StoryPage(story_translation_id=translations[0].id, page_number=n, text_content=f"Page {n}")
        for n in range(1, 8)
    )
    db_session.add_all([
        StoryCategory(story_id=stories[0].id, category_id=categories[0].id),
        StoryCategory(story_id=stories[1].id, category_id=categories[0].id),
    ])
    await db_session.commit()

    return SeededCatalog(
        english_id=english.id,
        spanish_id=spanish.id,
        story_ids=[story.id for story in stories],
        category_ids=[category.id for category in categories],
        english_translation_id=translations[0].id,
    )


# ================================
# Profile Fixtures
# ================================

@pytest.fixture
def make_profile(db_session: AsyncSession, storage: InMemoryStorageClient) -> Callable[..., Awaitable[Profile]]:
    """
    Factory for committed profiles.

    With `photo_key` the photo is also put into the in-memory storage and
    the profile's photo_url points at it.
    """
    async def _make(
        name: str = "Mia",
        user_id: str = USER_ID,
        photo_key: Optional[str] = None,
        date_of_birth: Optional[date] = None,
    ) -> Profile:
        photo_url = None
        if photo_key:
            storage.put_object(photo_key, b"\x89PNG", "image/png")
            photo_url = public_url_for(photo_key)

        profile = Profile(user_id=user_id, name=name, photo_url=photo_url, date_of_birth=date_of_birth)
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _make


@pytest_asyncio.fixture
async def profile(make_profile) -> Profile:
    return await make_profile()


@pytest.fixture
def playlist_orders(session_factory) -> Callable[[int], Awaitable[list[tuple[int, int]]]]:
    """
    Read a playlist's (story_id, order) pairs straight from the database,
    ordered by position.
    """
    async def _orders(playlist_id: int) -> list[tuple[int, int]]:
        async with session_factory() as session:
            result = await session.execute(
                select(PlaylistStory.story_id, PlaylistStory.order)
                .where(PlaylistStory.playlist_id == playlist_id)
                .order_by(PlaylistStory.order)
            )
            return [(row.story_id, row.order) for row in result]

    return _orders


# ================================
# Pytest Hooks
# ================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as exercising several components through the HTTP API"
    )
