"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh file-backed SQLite database under tmp_path
    - Foreign keys enforced on every connection (same as production SQLite setup)
    - Verification reads go through fresh sessions, never a cached identity map

Design Decisions:
    - File database over :memory:: aiosqlite shares one connection for :memory:,
      which would let concurrent transactions see each other's uncommitted rows
    - busy timeout raised to 30s: concurrent writers queue on SQLite's database lock
"""

import os

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

import simplebank.models  # noqa: E402,F401
from simplebank.db.base import Base  # noqa: E402
from simplebank.infrastructure.database import enable_sqlite_foreign_keys  # noqa: E402
from simplebank.infrastructure.transaction import TransactionCoordinator  # noqa: E402
from simplebank.models.account import Account  # noqa: E402
from simplebank.services.account_store import AccountStore  # noqa: E402
from simplebank.services.transfer_engine import TransferEngine  # noqa: E402


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'bank.db'}",
        echo=False,
        connect_args={"timeout": 30},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def coordinator(test_session_factory):
    return TransactionCoordinator(test_session_factory)


@pytest.fixture
def transfer_engine(coordinator):
    return TransferEngine(coordinator)


@pytest.fixture
def make_account(coordinator):
    """Factory: create a committed account and return it."""
    counter = {"n": 0}

    async def _make(
        balance: int = 0, currency: str = "USD", name: str | None = None,
    ) -> Account:
        counter["n"] += 1
        account_name = name or f"holder-{counter['n']}"
        return await coordinator.run(
            lambda db: AccountStore(db).create(account_name, currency, balance),
        )

    return _make


@pytest.fixture
def fetch_balance(test_session_factory):
    """Read an account's committed balance through a fresh session."""

    async def _fetch(account_id: int) -> int:
        async with test_session_factory() as session:
            result = await session.execute(
                select(Account.balance).where(Account.id == account_id),
            )
            return result.scalar_one()

    return _fetch


@pytest.fixture
def count_rows(test_session_factory):
    """Count committed rows of a model through a fresh session."""

    async def _count(model) -> int:
        async with test_session_factory() as session:
            result = await session.execute(select(func.count()).select_from(model))
            return result.scalar_one()

    return _count
