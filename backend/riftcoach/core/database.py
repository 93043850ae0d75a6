"""Database connection and session management for PostgreSQL using SQLAlchemy with async support."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase

from .config import get_global_settings


class Base(DeclarativeBase):
    """Declarative base for ORM models."""


class DatabaseManager:
    """Database connection and session manager."""

    def __init__(self, database_url: str | None = None):
        """Initialize database manager with async engine."""
        settings = get_global_settings()
        self.database_url = database_url or settings.database_url

        # Engine connects lazily, on first session use
        self.engine = create_async_engine(
            self.database_url,
            echo=settings.debug,
            pool_pre_ping=True,
        )

        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session with proper cleanup."""
        async with self.async_session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()


# Global database manager instance
db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting a database session."""
    async with db_manager.get_session() as session:
        yield session
