"""
Database connection and session management.

Provides the async SQLAlchemy engine and session factory. A single
``Database`` instance is created at application startup and injected into
request handlers through FastAPI dependencies; there is no module-level
connection in the request path.
"""

import logging
from typing import AsyncGenerator, Optional, Dict, Any
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine,
)
from sqlalchemy.pool import NullPool

from config import Settings, settings as default_settings
from .models import Base

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    """Convert postgres:// and postgresql:// URLs to the asyncpg driver."""
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


class Database:
    """Database connection manager."""

    def __init__(self, database_url: str, config: Optional[Settings] = None):
        self.database_url = normalize_database_url(database_url)
        self.config = config or default_settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._initialized = False

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "Database":
        config = config or default_settings
        return cls(config.database_url, config)

    @property
    def dialect(self) -> str:
        return self.database_url.split(":", 1)[0].split("+", 1)[0]

    def _engine_options(self) -> Dict[str, Any]:
        """Pool and driver options for the configured backend."""
        if self.config.environment == "test":
            logger.info("Using NullPool for test environment")
            return {"poolclass": NullPool}

        if self.dialect == "sqlite":
            return {}

        logger.info(
            f"Database pool config: size={self.config.db_pool_size}, "
            f"max_overflow={self.config.db_max_overflow}, "
            f"timeout={self.config.db_pool_timeout}s"
        )
        return {
            "pool_size": self.config.db_pool_size,
            "max_overflow": self.config.db_max_overflow,
            "pool_timeout": self.config.db_pool_timeout,
            "pool_recycle": self.config.db_pool_recycle,
            "pool_pre_ping": True,
            "connect_args": {
                "server_settings": {
                    "application_name": "taskflow-api",
                    "jit": "off",
                }
            },
        }

    async def initialize(self) -> bool:
        """Initialize database connection and create tables."""
        if self._initialized:
            return True

        try:
            self.engine = create_async_engine(
                self.database_url,
                echo=self.config.database_echo,
                **self._engine_options()
            )

            self.session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            self._initialized = True
            logger.info(f"Database initialized successfully ({self.dialect})")
            return True

        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database initialization failed: {e}")
            await self._discard_engine()
            return False

    async def _discard_engine(self):
        """Dispose a half-initialized engine so a retry starts from scratch."""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None

    async def close(self):
        """Close database connection."""
        if self.engine:
            await self.engine.dispose()
            self._initialized = False
            logger.info("Database connection closed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session. Commits on success, rolls back on error."""
        if not self._initialized:
            await self.initialize()

        if not self.session_factory:
            raise RuntimeError("Database not initialized")

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Database session error: {e}")
                raise
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> dict:
        """Perform health check on database."""
        try:
            async with self.session() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()

            return {
                "status": "healthy",
                "initialized": self._initialized,
                "dialect": self.dialect,
            }
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            return {
                "status": "unhealthy",
                "error": str(e),
            }
