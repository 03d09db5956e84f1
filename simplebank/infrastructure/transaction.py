"""Transaction Coordinator — runs one unit of work inside one atomic database transaction.

Invariants:
    - The unit of work receives the session explicitly; stores never reach for ambient state
    - Success commits; any failure (including cancellation) rolls back, zero side effects
    - The unit of work's own errors propagate unchanged; raw SQLAlchemy errors are
      translated once via translate_db_error
    - A failed commit is InternalError(outcome_unknown=True) and is never retried

Design Decisions:
    - Fresh AsyncSession per run: no session is shared between concurrent transfers
    - Explicit commit outside the unit-of-work try block: lets commit failures be told
      apart from unit-of-work failures
"""

import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from simplebank.core.errors import InternalError
from simplebank.infrastructure import database
from simplebank.infrastructure.database import translate_db_error

logger = logging.getLogger(__name__)

T = TypeVar("T")
UnitOfWork = Callable[[AsyncSession], Awaitable[T]]


class TransactionCoordinator:
    """Commit-on-success / rollback-on-failure wrapper around a session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def run(self, unit_of_work: UnitOfWork[T]) -> T:
        """Run `unit_of_work(session)` in a new transaction and commit it."""
        async with self._session_factory() as session:
            result = await self._invoke(session, unit_of_work)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                logger.error(f"Commit failed, outcome unknown: {e}")
                raise InternalError(
                    "Commit could not be confirmed", "commit", outcome_unknown=True,
                ) from e
            return result

    async def read(self, unit_of_work: UnitOfWork[T]) -> T:
        """Run a read-only unit of work; the transaction is always rolled back."""
        async with self._session_factory() as session:
            result = await self._invoke(session, unit_of_work)
            # detach before rollback, which would otherwise expire the returned rows
            session.expunge_all()
            await session.rollback()
            return result

    async def _invoke(self, session: AsyncSession, unit_of_work: UnitOfWork[T]) -> T:
        try:
            return await unit_of_work(session)
        except SQLAlchemyError as e:
            await self._rollback_quietly(session)
            logger.warning(f"Unit of work failed, rolled back: {e}")
            raise translate_db_error(e) from e
        except BaseException:
            await self._rollback_quietly(session)
            raise

    async def _rollback_quietly(self, session: AsyncSession) -> None:
        """Roll back without letting a rollback failure mask the unit of work's error."""
        try:
            await session.rollback()
        except Exception as e:
            logger.error(f"Rollback failed after unit-of-work error: {e}")


def get_coordinator() -> TransactionCoordinator:
    """FastAPI dependency — coordinator bound to the process-wide session factory."""
    if not database.db_manager:
        raise RuntimeError("Database not initialized")
    return TransactionCoordinator(database.db_manager.session_factory)
