"""Transfer Rules — verifies pure validation and canonical lock ordering.

Tests:
    - Same-account and non-positive transfers rejected with InvalidArgumentError
    - Non-integer amounts (float, bool, str) rejected
    - Lock order is lowest id first and identical for A->B and B->A
    - Debit and credit amounts sum to zero
"""

import pytest

from simplebank.core.domain_types import AccountId, Currency
from simplebank.core.errors import (
    ErrorKind, InsufficientFundsError, InvalidArgumentError,
)
from simplebank.core.transfer_rules import (
    BalanceAdjustment,
    check_amount,
    check_balance_allowed,
    check_currency,
    check_pagination,
    check_transfer_request,
    entry_amounts,
    ordered_adjustments,
)


def test_same_account_rejected():
    with pytest.raises(InvalidArgumentError) as exc:
        check_transfer_request(7, 7, 10)
    assert exc.value.kind is ErrorKind.INVALID_ARGUMENT
    assert exc.value.field == "to_account_id"


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount_rejected(amount):
    with pytest.raises(InvalidArgumentError) as exc:
        check_transfer_request(1, 2, amount)
    assert exc.value.field == "amount"


@pytest.mark.parametrize("amount", [10.5, True, "10", None])
def test_non_integer_amount_rejected(amount):
    with pytest.raises(InvalidArgumentError):
        check_amount(amount)


def test_valid_request_returns_amount():
    assert check_transfer_request(1, 2, 30) == 30


def test_entry_amounts_conserve_value():
    debit, credit = entry_amounts(30)
    assert debit == -30
    assert credit == 30
    assert debit + credit == 0


def test_adjustments_lowest_id_first_when_source_is_higher():
    adjustments = ordered_adjustments(AccountId(5), AccountId(2), 30)
    assert adjustments == [
        BalanceAdjustment(AccountId(2), 30),
        BalanceAdjustment(AccountId(5), -30),
    ]


def test_adjustments_lowest_id_first_when_source_is_lower():
    adjustments = ordered_adjustments(AccountId(2), AccountId(5), 30)
    assert adjustments == [
        BalanceAdjustment(AccountId(2), -30),
        BalanceAdjustment(AccountId(5), 30),
    ]


def test_mirror_transfers_lock_in_same_order():
    forward = [a.account_id for a in ordered_adjustments(AccountId(9), AccountId(3), 1)]
    backward = [a.account_id for a in ordered_adjustments(AccountId(3), AccountId(9), 1)]
    assert forward == backward == [3, 9]


def test_pagination_bounds():
    check_pagination(5, 0)
    with pytest.raises(InvalidArgumentError):
        check_pagination(0, 0)
    with pytest.raises(InvalidArgumentError) as exc:
        check_pagination(5, -1)
    assert exc.value.field == "offset"


def test_currency_parsing():
    assert check_currency("EUR") is Currency.EUR
    with pytest.raises(InvalidArgumentError):
        check_currency("XYZ")


def test_overdraft_policy():
    check_balance_allowed(1, -40, allow_overdraft=True)
    check_balance_allowed(1, 0, allow_overdraft=False)
    with pytest.raises(InsufficientFundsError) as exc:
        check_balance_allowed(1, -40, allow_overdraft=False)
    assert exc.value.balance == -40
    assert exc.value.context.account_id == 1
