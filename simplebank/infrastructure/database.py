"""Database Session Manager — async connection pool, error translation and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Driver errors are translated into the closed ErrorKind set exactly once, here
    - SQLite connections always enforce foreign keys

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: returned rows stay readable after commit in async context
    - PostgreSQL classified by SQLSTATE, SQLite by message text (it exposes no codes)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, SQLAlchemyError, TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from simplebank.core.errors import (
    BankError, ConflictError, InternalError, InvalidArgumentError,
    NotFoundError, TransientError,
)

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
_UNIQUE_VIOLATION = "23505"
_FOREIGN_KEY_VIOLATION = "23503"
_CHECK_VIOLATION = "23514"
_TRANSIENT_SQLSTATES = frozenset({
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available
    "57014",  # query_canceled (statement/lock timeout)
    "57P01",  # admin_shutdown
})

_SQLITE_TRANSIENT_MARKERS = ("database is locked", "database table is locked")


def _sqlstate(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_db_error(
    exc: BaseException,
    operation: str = "query",
    resource: tuple[str, object] | None = None,
) -> BankError:
    """Map a SQLAlchemy/driver error onto the closed ErrorKind hierarchy.

    `resource` names what a foreign-key failure refers to, e.g. ("Account", 42).
    """
    if isinstance(exc, BankError):
        return exc

    code = _sqlstate(exc) if isinstance(exc, SQLAlchemyError) else None
    detail = str(getattr(exc, "orig", None) or exc).lower()

    if isinstance(exc, IntegrityError):
        if code == _UNIQUE_VIOLATION or "unique constraint" in detail:
            return ConflictError("Uniqueness constraint violated")
        if code == _FOREIGN_KEY_VIOLATION or "foreign key constraint" in detail:
            resource_type, resource_id = resource or ("Account", "referenced")
            return NotFoundError(resource_type, resource_id)
        if code == _CHECK_VIOLATION or "check constraint" in detail:
            return InvalidArgumentError("Check constraint violated", "constraint")
        return InternalError("Integrity constraint violated", operation)

    if isinstance(exc, PoolTimeoutError):
        return TransientError("Connection pool exhausted")

    if isinstance(exc, DBAPIError):
        if (
            exc.connection_invalidated
            or code in _TRANSIENT_SQLSTATES
            or (code or "").startswith("08")
            or any(marker in detail for marker in _SQLITE_TRANSIENT_MARKERS)
        ):
            return TransientError(f"Database {operation} interrupted, safe to retry")
        return InternalError("Database driver error", operation)

    return InternalError("Database operation failed", operation)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores REFERENCES clauses unless the pragma is set per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
        **engine_kwargs,
    ):
        # SQLite picks its own pool class (NullPool on some releases), which rejects sizing
        if make_url(database_url).get_backend_name() != "sqlite":
            engine_kwargs.setdefault("pool_size", pool_size)
            engine_kwargs.setdefault("max_overflow", max_overflow)
            engine_kwargs.setdefault("pool_recycle", 3600)
        self.engine = create_async_engine(
            database_url,
            pool_pre_ping=True,
            **engine_kwargs,
        )
        if self.engine.dialect.name == "sqlite":
            enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"DB error: {e}")
            raise translate_db_error(e) from e
        except BaseException:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (used by the readiness route)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for read-only database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
