"""Database Session Manager: bounded async connection pool with rollback and error mapping.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Pool is fixed-size (pool_size + max_overflow) with an acquisition timeout
    - All SQLAlchemy exceptions mapped to UpstreamError / BackendUnavailableError
    - Database name only ever reaches SQL through the dialect's identifier quoting

Design Decisions:
    - Owned by the app lifespan and injected into ProductAdapter (no module singleton)
    - Two URLs: the pooled engine is bound to the database, a throwaway NullPool
      engine bound to the server issues CREATE DATABASE
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import MetaData, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import NullPool

from gateway.core.errors import BackendUnavailableError, UpstreamError

logger = logging.getLogger(__name__)

BACKEND = "mysql"


def _detail(e: SQLAlchemyError) -> str:
    orig = getattr(e, "orig", None)
    return str(orig) if orig is not None else str(e)


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


@asynccontextmanager
async def translate_errors(operation: str) -> AsyncGenerator[None, None]:
    """Map SQLAlchemy failures raised inside the block to gateway errors."""
    try:
        yield
    except PoolTimeoutError as e:
        logger.error(f"DB pool exhausted during {operation}: {e}")
        raise BackendUnavailableError(
            "Database connection pool exhausted", BACKEND, details=str(e),
        )
    except IntegrityError as e:
        raise UpstreamError(
            f"Database {operation} failed: integrity constraint violated",
            BACKEND, details=_detail(e),
        )
    except OperationalError as e:
        raise UpstreamError(
            f"Database {operation} failed: connection or operational error",
            BACKEND, details=_detail(e),
        )
    except DBAPIError as e:
        raise UpstreamError(
            f"Database {operation} failed: driver error",
            BACKEND, details=_detail(e),
        )
    except SQLAlchemyError as e:
        raise UpstreamError(
            f"Database {operation} failed", BACKEND, details=_detail(e),
        )


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        server_url: str | None = None,
        database_name: str | None = None,
        pool_size: int = 10,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
    ):
        engine_kwargs = {"pool_pre_ping": True}
        url = make_url(database_url)
        # In-memory SQLite runs on a StaticPool, which takes no sizing arguments
        if not _is_memory_sqlite(url):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._server_url = server_url
        self.database_name = database_name

    @asynccontextmanager
    async def session(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and error mapping."""
        session = self._session_factory()
        try:
            async with translate_errors(operation):
                try:
                    yield session
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        finally:
            await session.close()

    async def ensure_database(self) -> bool:
        """CREATE DATABASE IF NOT EXISTS over a server-level connection.

        Returns False when no server URL is configured (database_url override).
        """
        if not self._server_url or not self.database_name:
            return False
        server_engine = create_async_engine(self._server_url, poolclass=NullPool)
        quoted = server_engine.dialect.identifier_preparer.quote_identifier(
            self.database_name,
        )
        try:
            async with translate_errors("create database"):
                async with server_engine.begin() as conn:
                    await conn.execute(
                        text(f"CREATE DATABASE IF NOT EXISTS {quoted}"),
                    )
        finally:
            await server_engine.dispose()
        logger.info(f"Database {self.database_name} ensured")
        return True

    async def create_tables(self, metadata: MetaData) -> None:
        """Create every table in metadata that does not exist yet."""
        async with translate_errors("create table"):
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session("ping") as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
