"""Transfer Routes — execute a transfer and read transfer history.

Invariants:
    - Both accounts must exist and hold the requested currency before the engine runs
    - The engine is the only writer; this module never touches balances
    - Engine errors pass through unchanged to the global BankError handler
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.api.dependencies import get_transfer_engine
from simplebank.core.errors import InvalidArgumentError
from simplebank.infrastructure.database import get_db
from simplebank.schemas.transfer import (
    TransferCreate, TransferResponse, TransferResultResponse,
)
from simplebank.services.account_store import AccountStore
from simplebank.services.transfer_engine import TransferEngine
from simplebank.services.transfer_store import TransferStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/transfers", tags=["transfers"])


async def check_account_currency(
    accounts: AccountStore, account_id: int, currency: str,
) -> None:
    """Raise NotFoundError / InvalidArgumentError unless the account holds `currency`."""
    account = await accounts.get(account_id)
    if account.currency != currency:
        raise InvalidArgumentError(
            f"Account {account_id} currency mismatch: {account.currency} vs {currency}",
            "currency",
        )


@router.post(
    "", response_model=TransferResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_transfer(
    body: TransferCreate,
    db: AsyncSession = Depends(get_db),
    engine: TransferEngine = Depends(get_transfer_engine),
):
    """Move money between two accounts of the same currency."""
    accounts = AccountStore(db)
    await check_account_currency(accounts, body.from_account_id, body.currency.value)
    await check_account_currency(accounts, body.to_account_id, body.currency.value)
    # release the read snapshot before the engine opens its own transaction
    await db.rollback()

    result = await engine.execute(
        body.from_account_id, body.to_account_id, body.amount,
    )
    return TransferResultResponse.model_validate(result)


@router.get("", response_model=list[TransferResponse])
async def list_transfers(
    account_id: int = Query(..., ge=1),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List transfers where the account is source or destination."""
    transfers = await TransferStore(db).list_by_account(account_id, limit, offset)
    return [TransferResponse.model_validate(t) for t in transfers]


@router.get("/{transfer_id}", response_model=TransferResponse)
async def get_transfer(
    transfer_id: int, db: AsyncSession = Depends(get_db),
):
    transfer = await TransferStore(db).get(transfer_id)
    return TransferResponse.model_validate(transfer)
