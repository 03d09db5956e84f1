"""Account Routes — create, read, list, delete and deposit.

Invariants:
    - Writes go through TransactionCoordinator (commit or full rollback)
    - Reads use the request-scoped session from get_db and take no locks
    - Request bodies validated by Pydantic before reaching the handler

Design Decisions:
    - Deposit runs apply_deposit in its own coordinator transaction, outside the transfer
      engine, on the same atomic balance primitive
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.infrastructure.database import get_db
from simplebank.infrastructure.transaction import TransactionCoordinator, get_coordinator
from simplebank.schemas.account import AccountCreate, AccountResponse, DepositRequest
from simplebank.services.account_store import AccountStore
from simplebank.services.deposits import apply_deposit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])


@router.post(
    "", response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_account(
    body: AccountCreate,
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    """Create a new account with a zero balance."""
    account = await coordinator.run(
        lambda db: AccountStore(db).create(body.name, body.currency.value),
    )
    return AccountResponse.model_validate(account)


@router.get("", response_model=list[AccountResponse])
async def list_accounts(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List accounts ordered by id."""
    accounts = await AccountStore(db).list(limit, offset)
    return [AccountResponse.model_validate(a) for a in accounts]


@router.post("/deposit", response_model=AccountResponse)
async def deposit(
    body: DepositRequest,
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    """Credit an account without a counterparty."""
    account = await coordinator.run(
        lambda db: apply_deposit(db, body.id, body.amount),
    )
    return AccountResponse.model_validate(account)


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: int, db: AsyncSession = Depends(get_db),
):
    """Get account details."""
    account = await AccountStore(db).get(account_id)
    return AccountResponse.model_validate(account)


@router.delete("/{account_id}")
async def delete_account(
    account_id: int,
    coordinator: TransactionCoordinator = Depends(get_coordinator),
):
    """Delete an account that has no ledger history."""
    await coordinator.run(lambda db: AccountStore(db).delete(account_id))
    return {"success": "Account deleted successfully!"}
