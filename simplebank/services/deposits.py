"""Deposits — single-sided credit of one account, outside the transfer engine.

Invariants:
    - Uses the same atomic balance primitive as transfers (AccountStore.adjust_balance)
    - Records one credit entry with no transfer, so the ledger still explains the balance
    - Runs as a unit of work: the caller supplies the coordinator transaction
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.core.transfer_rules import check_amount
from simplebank.models.account import Account
from simplebank.services.account_store import AccountStore
from simplebank.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


async def apply_deposit(db: AsyncSession, account_id: int, amount: int) -> Account:
    """Credit `amount` minor units to `account_id` inside the caller's transaction."""
    amount = check_amount(amount)
    await LedgerStore(db).create_entry(account_id, None, amount)
    account = await AccountStore(db).adjust_balance(account_id, amount)
    logger.info(
        f"Deposit of {amount} staged",
        extra={"account_id": account_id, "amount": amount},
    )
    return account
