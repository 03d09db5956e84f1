"""API test fixtures — FastAPI test client bound to the per-test SQLite database.

Invariants:
    - db_manager replaced for the duration of each test, restored afterwards
    - get_db and get_coordinator both resolve through the replaced manager

Design Decisions:
    - db_manager patched instead of overriding each dependency: get_db, get_coordinator
      and the readiness route all read the module-level singleton
"""

import pytest
from httpx import ASGITransport, AsyncClient

import simplebank.infrastructure.database as db_module
from simplebank.infrastructure.database import DatabaseSessionManager
from simplebank.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with the database singleton pointed at the test engine."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def create_funded_account(client):
    """Create an account over HTTP and deposit `balance` into it."""

    async def _create(name: str, currency: str = "USD", balance: int = 0) -> dict:
        res = await client.post(
            "/api/v1/accounts", json={"name": name, "currency": currency},
        )
        assert res.status_code == 201, res.text
        account = res.json()
        if balance:
            res = await client.post(
                "/api/v1/accounts/deposit", json={"id": account["id"], "amount": balance},
            )
            assert res.status_code == 200, res.text
            account = res.json()
        return account

    return _create
