"""Transfer Store — creation and reads of transfer records.

Invariants:
    - Callers validate from != to and amount > 0; check constraints reject again
    - A missing account surfaces as NotFoundError via the foreign keys
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.core.errors import NotFoundError
from simplebank.core.transfer_rules import check_pagination
from simplebank.infrastructure.database import translate_db_error
from simplebank.models.transfer import Transfer

logger = logging.getLogger(__name__)


class TransferStore:
    """Transfer persistence bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_transfer(
        self, from_account_id: int, to_account_id: int, amount: int,
    ) -> Transfer:
        transfer = Transfer(
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
        )
        self.db.add(transfer)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            # FK failure cannot tell which side is missing
            raise translate_db_error(
                e, "insert", ("Account", f"{from_account_id} or {to_account_id}"),
            ) from e
        return transfer

    async def get(self, transfer_id: int) -> Transfer:
        try:
            result = await self.db.execute(
                select(Transfer).where(Transfer.id == transfer_id),
            )
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        transfer = result.scalar_one_or_none()
        if transfer is None:
            raise NotFoundError("Transfer", transfer_id)
        return transfer

    async def list_by_account(
        self, account_id: int, limit: int, offset: int = 0,
    ) -> list[Transfer]:
        """Transfers where the account is source or destination, oldest first."""
        check_pagination(limit, offset)
        query = (
            select(Transfer)
            .where(or_(
                Transfer.from_account_id == account_id,
                Transfer.to_account_id == account_id,
            ))
            .order_by(Transfer.id)
            .limit(limit)
            .offset(offset)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        return list(result.scalars().all())
