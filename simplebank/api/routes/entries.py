"""Entry Routes — read-only access to the ledger."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.infrastructure.database import get_db
from simplebank.schemas.transfer import EntryResponse
from simplebank.services.ledger_store import LedgerStore

router = APIRouter(prefix="/api/v1/entries", tags=["entries"])


@router.get("", response_model=list[EntryResponse])
async def list_entries(
    account_id: int = Query(..., ge=1),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List ledger entries of one account, oldest first."""
    entries = await LedgerStore(db).list_by_account(account_id, limit, offset)
    return [EntryResponse.model_validate(e) for e in entries]


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(entry_id: int, db: AsyncSession = Depends(get_db)):
    entry = await LedgerStore(db).get(entry_id)
    return EntryResponse.model_validate(entry)
