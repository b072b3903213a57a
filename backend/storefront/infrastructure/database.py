"""Database Session Manager — async engine for the SQL snapshot backend.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Every SQLAlchemy exception leaves as PersistenceError naming the resource
      being written, so SnapshotAccess can report exactly what failed
    - pool_pre_ping on every engine (stale connections are replaced, not raised)

Design Decisions:
    - Only constructed when STORAGE_BACKEND=sql; the JSON backend never touches it
    - SQLite URLs skip pool sizing (aiosqlite pools are not size-configurable)
    - create_schema() is checkfirst and idempotent; alembic stays the source of
      truth for PostgreSQL deployments
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from storefront.core.errors import PersistenceError
from storefront.db.base import Base
# Registers snapshot_documents on Base.metadata
from storefront.models import snapshot_document  # noqa: F401

logger = logging.getLogger(__name__)

# Most specific first
_FAILURE_MESSAGES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "Integrity constraint violated"),
    (OperationalError, "Connection or operational error"),
    (DBAPIError, "Database driver error"),
    (SQLAlchemyError, "Database operation failed"),
)


def _strict_json_dumps(document) -> str:
    return json.dumps(document, ensure_ascii=False, allow_nan=False)


def describe_failure(exc: SQLAlchemyError) -> str:
    for exc_type, message in _FAILURE_MESSAGES:
        if isinstance(exc, exc_type):
            return message
    return "Database operation failed"


class DatabaseSessionManager:
    """Owns the engine and hands out sessions scoped to one resource write."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(
            database_url,
            json_serializer=_strict_json_dumps,
            **engine_kwargs,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(
        self, resource: str = "snapshot",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Session with auto-rollback; DB failures become PersistenceError([resource])."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message = describe_failure(e)
            logger.error(
                f"{message} ({resource}): {e}",
                extra={"resource": resource, "error_code": "DB_ERROR"},
            )
            raise PersistenceError(message, [resource])
        finally:
            await session.close()

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (PersistenceError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
