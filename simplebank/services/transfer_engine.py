"""Transfer Engine — moves money between two accounts as one atomic unit of work.

Invariants:
    - Preconditions (from != to, integer amount > 0) checked before any transaction opens
    - Transfer row, debit entry, credit entry and both balance adjustments commit together
      or not at all (TransactionCoordinator.run)
    - Balances adjusted lowest account id first, so A->B and B->A acquire row locks
      in the same order and cannot deadlock
    - Stateless between calls; no retry — TransientError is retried by the caller
    - Stage progression: STARTED -> TRANSFER_CREATED -> ENTRIES_CREATED ->
      BALANCES_ADJUSTED -> COMMITTED, any stage -> ABORTED

Design Decisions:
    - Overdraft check runs after the atomic debit, while the row lock is held: the
      post-update balance is authoritative and no concurrent debit can slip between
    - Deadline via asyncio.wait_for around the whole coordinator call: cancellation
      reaches the coordinator, which rolls back before the TransientError surfaces
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from simplebank.core.domain_types import AccountId, TransferStage
from simplebank.core.errors import BankError, TransientError
from simplebank.core.transfer_rules import (
    check_balance_allowed, check_transfer_request,
    entry_amounts, ordered_adjustments,
)
from simplebank.infrastructure.transaction import TransactionCoordinator
from simplebank.models.account import Account
from simplebank.models.entry import Entry
from simplebank.models.transfer import Transfer
from simplebank.services.account_store import AccountStore
from simplebank.services.ledger_store import LedgerStore
from simplebank.services.transfer_store import TransferStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    """Composite result of one committed transfer."""
    transfer: Transfer
    from_entry: Entry
    to_entry: Entry
    from_account: Account
    to_account: Account


@dataclass
class TransferProgress:
    """Per-call progress marker, never persisted."""
    stage: TransferStage = TransferStage.STARTED
    transfer_id: int | None = None


class TransferEngine:
    """Orchestrates the three stores inside one coordinator-managed transaction."""

    def __init__(
        self,
        coordinator: TransactionCoordinator,
        allow_overdraft: bool = True,
        timeout_seconds: float | None = None,
    ):
        self._coordinator = coordinator
        self._allow_overdraft = allow_overdraft
        self._timeout_seconds = timeout_seconds

    async def execute(
        self,
        from_account_id: int,
        to_account_id: int,
        amount: int,
        timeout: float | None = None,
    ) -> TransferResult:
        """Move `amount` minor units from one account to another."""
        amount = check_transfer_request(from_account_id, to_account_id, amount)
        progress = TransferProgress()
        log_extra = {
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
            "amount": amount,
        }

        async def unit_of_work(db: AsyncSession) -> TransferResult:
            return await self._transfer(
                db, AccountId(from_account_id), AccountId(to_account_id),
                amount, progress,
            )

        deadline = timeout if timeout is not None else self._timeout_seconds
        try:
            result = await self._run_with_deadline(unit_of_work, deadline)
        except asyncio.TimeoutError:
            error = TransientError(f"Transfer deadline of {deadline}s exceeded")
            self._record_abort(error, progress, log_extra)
            raise error from None
        except BankError as e:
            self._record_abort(e, progress, log_extra)
            raise
        except Exception:
            progress.stage = TransferStage.ABORTED
            logger.error("Transfer aborted on unexpected error", extra=log_extra, exc_info=True)
            raise

        progress.stage = TransferStage.COMMITTED
        logger.info(
            "Transfer committed",
            extra={**log_extra, "transfer_id": result.transfer.id, "stage": progress.stage.value},
        )
        return result

    async def _run_with_deadline(self, unit_of_work, deadline: float | None) -> TransferResult:
        if deadline is None:
            return await self._coordinator.run(unit_of_work)
        return await asyncio.wait_for(self._coordinator.run(unit_of_work), deadline)

    async def _transfer(
        self,
        db: AsyncSession,
        from_account_id: AccountId,
        to_account_id: AccountId,
        amount: int,
        progress: TransferProgress,
    ) -> TransferResult:
        transfers = TransferStore(db)
        ledger = LedgerStore(db)
        accounts = AccountStore(db)

        transfer = await transfers.create_transfer(from_account_id, to_account_id, amount)
        progress.stage = TransferStage.TRANSFER_CREATED
        progress.transfer_id = transfer.id

        debit, credit = entry_amounts(amount)
        from_entry = await ledger.create_entry(from_account_id, transfer.id, debit)
        to_entry = await ledger.create_entry(to_account_id, transfer.id, credit)
        progress.stage = TransferStage.ENTRIES_CREATED

        adjusted: dict[int, Account] = {}
        for adjustment in ordered_adjustments(from_account_id, to_account_id, amount):
            adjusted[adjustment.account_id] = await accounts.adjust_balance(
                adjustment.account_id, adjustment.delta,
            )
        from_account = adjusted[from_account_id]
        check_balance_allowed(from_account_id, from_account.balance, self._allow_overdraft)
        progress.stage = TransferStage.BALANCES_ADJUSTED

        return TransferResult(
            transfer=transfer,
            from_entry=from_entry,
            to_entry=to_entry,
            from_account=from_account,
            to_account=adjusted[to_account_id],
        )

    def _record_abort(
        self, error: BankError, progress: TransferProgress, log_extra: dict,
    ) -> None:
        failed_at = progress.stage
        progress.stage = TransferStage.ABORTED
        error.context.stage = failed_at.value
        error.context.transfer_id = progress.transfer_id
        logger.warning(
            f"Transfer aborted at {failed_at.value}: {error.message}",
            extra={**log_extra, "stage": failed_at.value, "error_code": error.code},
        )
