"""SQLAlchemy 2.x async engine and session factory.

The repositories open one short-lived session per query, and a forecast
runs demand and supply for up to ``forecast_max_concurrency`` weeks at
once, so the pool is sized to hold that many concurrent sessions.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from labor_forecast.core.config import Settings

logger = logging.getLogger(__name__)

# Demand and supply queries run side by side for each week
SESSIONS_PER_WEEK = 2


class Base(DeclarativeBase):
    """Base class for all labor forecast ORM models."""

    pass


def pool_size_for(settings: Settings) -> int:
    """Connections needed so concurrent week calculations never queue on the pool."""
    return max(settings.db_pool_size, settings.forecast_max_concurrency * SESSIONS_PER_WEEK)


def create_engine(
    settings: Settings,
) -> tuple[
    AsyncEngine,
    async_sessionmaker[AsyncSession],
]:
    """Create the async engine and session factory the repositories share."""
    pool_size = pool_size_for(settings)
    engine = create_async_engine(
        settings.database_url or "",
        echo=settings.debug,
        pool_size=pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        pool_recycle=settings.db_pool_recycle_seconds,
    )
    logger.debug("Database engine created with pool_size=%d", pool_size)

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine, session_factory
