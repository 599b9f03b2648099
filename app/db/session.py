from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.db.errors import StorageUnavailableError

logger = structlog.get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


def build_engine(database_url: str, *, pool_size: int = 10, echo: bool = False) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        # Local runs: one shared connection so an in-memory database survives across sessions.
        return create_async_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(
        url,
        echo=echo,
        pool_size=max(1, int(pool_size)),
        pool_pre_ping=True,
    )


def build_session_factory(bind: AsyncEngine) -> SessionFactory:
    return async_sessionmaker(bind, expire_on_commit=False)


_settings = get_settings()
engine = build_engine(
    _settings.database_url,
    pool_size=_settings.db_pool_size,
    echo=_settings.db_echo,
)
SessionLocal = build_session_factory(engine)


@asynccontextmanager
async def transaction(session_factory: SessionFactory) -> AsyncIterator[AsyncSession]:
    """Commit on clean exit, roll back on any exception.

    Driver and pool failures are reported as ``StorageUnavailableError``; every other
    exception propagates unchanged after the rollback.
    """
    try:
        async with session_factory.begin() as session:
            yield session
    except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
        logger.error("storage_unavailable", error_type=type(exc).__name__)
        raise StorageUnavailableError from exc
