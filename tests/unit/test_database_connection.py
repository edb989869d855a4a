"""
Tests for the Database connection manager.
"""

import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy.ext.asyncio import AsyncEngine

from src.database import Database
from src.database.connection import normalize_database_url

UNREACHABLE_URL = "sqlite+aiosqlite:////nonexistent-dir/taskflow/unreachable.db"


class TestNormalizeDatabaseUrl:
    """Test driver selection from the configured URL."""

    @pytest.mark.parametrize("url,expected", [
        ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("sqlite+aiosqlite:///tmp.db", "sqlite+aiosqlite:///tmp.db"),
    ])
    def test_normalize(self, url, expected):
        assert normalize_database_url(url) == expected


@pytest.mark.asyncio
class TestInitialize:
    """Test initialization and retry after failure."""

    async def test_initialize_creates_session_factory(self, database_url):
        db = Database(database_url)

        assert await db.initialize()
        assert db.session_factory is not None

        await db.close()

    async def test_failed_initialize_disposes_engine(self):
        db = Database(UNREACHABLE_URL)

        with patch.object(AsyncEngine, "dispose", new=AsyncMock()) as dispose:
            assert await db.initialize() is False
            assert await db.initialize() is False

        assert dispose.await_count == 2
        assert db.engine is None
        assert db.session_factory is None

    async def test_session_raises_while_database_unreachable(self):
        db = Database(UNREACHABLE_URL)

        with pytest.raises(RuntimeError):
            async with db.session():
                pass

        assert db.engine is None

    async def test_health_check_reports_unhealthy(self):
        db = Database(UNREACHABLE_URL)

        health = await db.health_check()

        assert health["status"] == "unhealthy"
