"""
Pytest configuration and fixtures for the categorization tests.

Provides:
- Test environment (no API key, so nothing reaches the real model)
- In-memory SQLite session with the forum schema
- Seeded predefined categories
- Fake model clients
"""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tests.fakes import FORUM_CATEGORIES, SCHEMA

# ============ Environment Setup ============
# Must run before packages.common.config.get_settings() is first called.

os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("ANTHROPIC_API_KEY", None)
os.environ.pop("ADMIN_TOKEN", None)


# ============ Database ============


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        for ddl in SCHEMA:
            await conn.execute(text(ddl))

    maker = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_session(db_session):
    """Database with the predefined forum categories (id = lowercase name)."""
    for name in FORUM_CATEGORIES:
        await db_session.execute(
            text("INSERT INTO categories (id, name, slug) VALUES (:id, :name, :slug)"),
            {"id": name.lower(), "name": name, "slug": name.lower()},
        )
    await db_session.commit()
    return db_session


# ============ Model Client Fakes ============


@pytest.fixture
def unavailable_client():
    """Model client with no API key configured."""
    client = MagicMock()
    client.available = False
    client.complete_json = AsyncMock()
    return client


@pytest.fixture
def fake_client():
    """Available model client whose JSON responses are set per test."""
    client = MagicMock()
    client.available = True
    client.complete_json = AsyncMock()
    return client


@pytest.fixture
def mock_anthropic():
    """Mock AsyncAnthropic SDK client returning one text block."""

    def respond(text_body: str):
        response = MagicMock()
        response.content = [MagicMock(text=text_body)]
        response.usage = MagicMock(input_tokens=120, output_tokens=40)
        return response

    sdk = MagicMock()
    sdk.messages.create = AsyncMock(return_value=respond("{}"))
    sdk.respond = respond
    return sdk
