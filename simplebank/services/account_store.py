"""Account Store — create/read/list/delete accounts and the atomic balance primitive.

Invariants:
    - Every method runs on the session it was constructed with (explicit handle)
    - adjust_balance is one server-side UPDATE ... SET balance = balance + :delta RETURNING;
      balance is never read into Python, modified and written back
    - Storage errors leave this class already translated into BankError subclasses

Design Decisions:
    - flush() after writes: surfaces constraint violations at the call site
      instead of at commit, so they classify as Conflict/NotFound rather than Internal
    - populate_existing on the RETURNING statement: an Account already in the identity
      map is refreshed with the post-update balance
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.core.errors import ConflictError, NotFoundError
from simplebank.core.transfer_rules import check_currency, check_pagination
from simplebank.infrastructure.database import translate_db_error
from simplebank.models.account import Account

logger = logging.getLogger(__name__)


class AccountStore:
    """Account persistence bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, name: str, currency: str, initial_balance: int = 0,
    ) -> Account:
        """Insert an account. Duplicate (name, currency) raises ConflictError."""
        account = Account(
            name=name,
            currency=check_currency(currency).value,
            balance=initial_balance,
        )
        self.db.add(account)
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise translate_db_error(e, "insert") from e
        logger.info(
            f"Account created: {account.name} ({account.currency})",
            extra={"account_id": account.id},
        )
        return account

    async def get(self, account_id: int) -> Account:
        try:
            result = await self.db.execute(
                select(Account).where(Account.id == account_id),
            )
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        account = result.scalar_one_or_none()
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def list(self, limit: int, offset: int = 0) -> list[Account]:
        """Page of accounts ordered by primary key."""
        check_pagination(limit, offset)
        try:
            result = await self.db.execute(
                select(Account).order_by(Account.id).limit(limit).offset(offset),
            )
        except SQLAlchemyError as e:
            raise translate_db_error(e, "select") from e
        return list(result.scalars().all())

    async def delete(self, account_id: int) -> None:
        """Remove an account. Accounts with ledger history raise ConflictError."""
        account = await self.get(account_id)
        try:
            await self.db.delete(account)
            await self.db.flush()
        except IntegrityError as e:
            raise ConflictError(
                f"Account {account_id} has entries or transfers and cannot be deleted",
            ) from e
        except SQLAlchemyError as e:
            raise translate_db_error(e, "delete") from e
        logger.info("Account deleted", extra={"account_id": account_id})

    async def adjust_balance(self, account_id: int, delta: int) -> Account:
        """Atomically add `delta` to the stored balance and return the updated row."""
        stmt = (
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .returning(Account)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise translate_db_error(e, "update") from e
        account = result.scalar_one_or_none()
        if account is None:
            raise NotFoundError("Account", account_id)
        return account
