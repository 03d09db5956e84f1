"""Domain Types — verifies identity wrappers and enum values."""

from simplebank.core.domain_types import (
    AccountId, Currency, EntryId, TransferId, TransferStage,
)


def test_identity_types_wrap_int():
    assert AccountId(3) == 3
    assert TransferId(4) == 4
    assert EntryId(5) == 5


def test_currency_codes_are_three_letters():
    assert {c.value for c in Currency} == {"USD", "EUR", "CAD"}
    assert all(len(c.value) == 3 for c in Currency)


def test_transfer_stage_terminal_states():
    terminal = {s for s in TransferStage if s.terminal}
    assert terminal == {TransferStage.COMMITTED, TransferStage.ABORTED}


def test_transfer_stage_order():
    assert [s.value for s in TransferStage] == [
        "started", "transfer_created", "entries_created",
        "balances_adjusted", "committed", "aborted",
    ]
