"""Ledger Store — append-only creation and reads of ledger entries.

Invariants:
    - Entries are only ever inserted; no update or delete method exists
    - A missing account surfaces as NotFoundError via the foreign key
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.core.errors import NotFoundError
from simplebank.core.transfer_rules import check_pagination
from simplebank.infrastructure.database import translate_db_error
from simplebank.models.entry import Entry

logger = logging.getLogger(__name__)


class LedgerStore:
    """Entry persistence bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_entry(
        self, account_id: int, transfer_id: int | None, amount: int,
    ) -> Entry:
        entry = Entry(account_id=account_id, transfer_id=transfer_id, amount=amount)
        self.db.add(entry)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise translate_db_error(e, "insert", ("Account", account_id)) from e
        logger.debug(
            f"Entry {entry.id} appended: {amount:+d}",
            extra={"account_id": account_id, "transfer_id": transfer_id},
        )
        return entry

    async def get(self, entry_id: int) -> Entry:
        try:
            result = await self.db.execute(select(Entry).where(Entry.id == entry_id))
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("Entry", entry_id)
        return entry

    async def list_by_account(
        self, account_id: int, limit: int, offset: int = 0,
    ) -> list[Entry]:
        check_pagination(limit, offset)
        query = (
            select(Entry)
            .where(Entry.account_id == account_id)
            .order_by(Entry.id)
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        return list(result.scalars().all())
