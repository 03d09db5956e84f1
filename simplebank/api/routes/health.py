"""Health Routes — liveness, and readiness gated on the ledger schema.

Invariants:
    - GET /health/ answers 200 whenever the process runs; it never touches the database
    - GET /health/ready answers 200 only when the database is reachable AND the
      accounts, transfers and entries tables exist; otherwise 503 naming what is missing

Design Decisions:
    - Schema presence checked through the SQLAlchemy inspector: a database that is up
      but not yet migrated must not receive transfer traffic
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from simplebank.config import get_settings
from simplebank.infrastructure import database
from simplebank.models.account import Account
from simplebank.models.entry import Entry
from simplebank.models.transfer import Transfer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

LEDGER_TABLES = (Account.__tablename__, Transfer.__tablename__, Entry.__tablename__)


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "simplebank-api",
        "overdraft_allowed": settings.allow_overdraft,
    }


async def missing_ledger_tables(manager: database.DatabaseSessionManager) -> list[str]:
    """Ledger tables absent from the connected database."""
    async with manager.engine.connect() as conn:
        present = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    return [name for name in LEDGER_TABLES if name not in present]


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if not manager or not await manager.health_check():
        return _not_ready("database_unavailable")

    missing = await missing_ledger_tables(manager)
    if missing:
        logger.warning(f"Ledger schema incomplete, missing tables: {missing}")
        return _not_ready("schema_missing", missing_tables=missing)

    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "ok"},
    }


def _not_ready(reason: str, **details) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason, **details},
    )
