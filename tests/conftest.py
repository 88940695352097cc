"""Pytest configuration and fixtures for BuildRight tests.

Provides an in-memory SQLite database and small record factories.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from buildright.config import reset_config
from buildright.db.models import (
    Base,
    BuildingCodeModel,
    BuildingCodeSectionModel,
    BuildingCodeVersionModel,
)


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("BUILDRIGHT_AUTH_DISABLED", raising=False)
    reset_config()
    yield
    reset_config()


@pytest_asyncio.fixture()
async def db_session() -> AsyncIterator[AsyncSession]:
    """Create in-memory database for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    SessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
def base_time() -> datetime:
    return datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def make_code(db_session: AsyncSession, base_time: datetime):
    """Factory inserting a building code; ``age`` orders rows by created_at."""

    async def _make(abbreviation: str, age: int = 0, **overrides) -> BuildingCodeModel:
        values = {
            "code_name": f"{abbreviation} Code",
            "code_abbreviation": abbreviation,
            "jurisdiction": "International",
            "code_type": "building",
            "is_active": True,
            "created_at": base_time + timedelta(minutes=age),
            "updated_at": base_time + timedelta(minutes=age),
        }
        values.update(overrides)
        code = BuildingCodeModel(**values)
        db_session.add(code)
        await db_session.flush()
        return code

    return _make


@pytest.fixture
def make_version(db_session: AsyncSession, base_time: datetime):
    async def _make(
        code: BuildingCodeModel, version: str, age: int = 0, sections: int = 0, **overrides
    ) -> BuildingCodeVersionModel:
        model = BuildingCodeVersionModel(
            building_code_id=code.id,
            version=version,
            created_at=base_time + timedelta(minutes=age),
            **overrides,
        )
        db_session.add(model)
        await db_session.flush()
        for i in range(sections):
            db_session.add(
                BuildingCodeSectionModel(
                    building_code_version_id=model.id,
                    section_number=f"{i + 1}.1",
                    title=f"Section {i + 1}",
                    content="Lorem ipsum",
                )
            )
        await db_session.flush()
        return model

    return _make
