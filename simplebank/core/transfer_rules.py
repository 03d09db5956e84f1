"""Transfer Rules — pure validation and lock-ordering for money transfers.

Invariants:
    - A transfer moves a strictly positive integer amount between two distinct accounts
    - Balance adjustments are always applied lowest account id first
    - The two entry amounts of a transfer sum to exactly zero

Design Decisions:
    - Pure functions, no IO: the engine calls these before and inside the transaction
    - Lock order depends only on the account pair, so A->B and B->A lock rows identically
"""

from typing import NamedTuple

from simplebank.core.domain_types import AccountId, Currency
from simplebank.core.errors import InvalidArgumentError, InsufficientFundsError


class BalanceAdjustment(NamedTuple):
    account_id: AccountId
    delta: int


def check_amount(amount: object, field: str = "amount") -> int:
    """Reject non-integer and non-positive amounts."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidArgumentError(
            f"{field} must be an integer number of minor units", field,
        )
    if amount <= 0:
        raise InvalidArgumentError(f"{field} must be positive, got {amount}", field)
    return amount


def check_transfer_request(
    from_account_id: int, to_account_id: int, amount: object,
) -> int:
    """Validate engine-side transfer preconditions. Returns the amount."""
    if from_account_id == to_account_id:
        raise InvalidArgumentError(
            "Cannot transfer between the same account", "to_account_id",
        )
    return check_amount(amount)


def check_pagination(limit: int, offset: int) -> None:
    if limit <= 0:
        raise InvalidArgumentError(f"limit must be positive, got {limit}", "limit")
    if offset < 0:
        raise InvalidArgumentError(
            f"offset must be non-negative, got {offset}", "offset",
        )


def check_currency(currency: str) -> Currency:
    try:
        return Currency(currency)
    except ValueError:
        raise InvalidArgumentError(
            f"Unsupported currency '{currency}'", "currency",
        ) from None


def entry_amounts(amount: int) -> tuple[int, int]:
    """(debit, credit) entry amounts for a transfer of `amount`."""
    return -amount, amount


def ordered_adjustments(
    from_account_id: AccountId, to_account_id: AccountId, amount: int,
) -> list[BalanceAdjustment]:
    """Balance adjustments in canonical lock order (lowest account id first)."""
    debit, credit = entry_amounts(amount)
    adjustments = [
        BalanceAdjustment(from_account_id, debit),
        BalanceAdjustment(to_account_id, credit),
    ]
    return sorted(adjustments, key=lambda adj: adj.account_id)


def check_balance_allowed(
    account_id: int, balance: int, allow_overdraft: bool,
) -> None:
    """Raise InsufficientFundsError when overdraft is disabled and balance < 0."""
    if not allow_overdraft and balance < 0:
        raise InsufficientFundsError(account_id, balance)
