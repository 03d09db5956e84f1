"""Ledger Store — verifies append-only entry creation and account-scoped reads."""

import pytest

from simplebank.core.errors import NotFoundError
from simplebank.models.entry import Entry
from simplebank.services.ledger_store import LedgerStore


async def test_create_entry(coordinator, make_account):
    account = await make_account()

    entry = await coordinator.run(
        lambda db: LedgerStore(db).create_entry(account.id, None, -15),
    )

    assert entry.id is not None
    assert entry.account_id == account.id
    assert entry.transfer_id is None
    assert entry.amount == -15


async def test_create_entry_for_missing_account(coordinator, count_rows):
    with pytest.raises(NotFoundError) as exc:
        await coordinator.run(lambda db: LedgerStore(db).create_entry(777, None, 5))

    assert exc.value.resource_id == 777
    assert await count_rows(Entry) == 0


async def test_store_has_no_mutators():
    assert not hasattr(LedgerStore, "update")
    assert not hasattr(LedgerStore, "delete")


async def test_list_by_account_filters_and_orders(coordinator, make_account):
    first = await make_account()
    second = await make_account()
    for amount in (1, 2, 3):
        await coordinator.run(lambda db: LedgerStore(db).create_entry(first.id, None, amount))
    await coordinator.run(lambda db: LedgerStore(db).create_entry(second.id, None, 99))

    entries = await coordinator.read(
        lambda db: LedgerStore(db).list_by_account(first.id, limit=2, offset=1),
    )

    assert [e.amount for e in entries] == [2, 3]


async def test_get_entry(coordinator, make_account):
    account = await make_account()
    entry = await coordinator.run(lambda db: LedgerStore(db).create_entry(account.id, None, 5))

    fetched = await coordinator.read(lambda db: LedgerStore(db).get(entry.id))
    assert fetched.amount == 5

    with pytest.raises(NotFoundError):
        await coordinator.read(lambda db: LedgerStore(db).get(entry.id + 100))
