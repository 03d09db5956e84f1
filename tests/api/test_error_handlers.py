"""Error Handlers — verifies kind-to-status mapping and retry guidance.

Invariants:
    - Every ErrorKind maps to its documented status
    - Transient errors are retryable and carry Retry-After; internal errors do not
    - An indeterminate commit is flagged outcome_unknown in the body
    - Body validation failures name the offending field
"""

import pytest

from simplebank.api.error_handlers import bank_error_response
from simplebank.core.errors import (
    ConflictError, InsufficientFundsError, InternalError, InvalidArgumentError,
    NotFoundError, TransientError,
)
from simplebank.services.account_store import AccountStore


@pytest.mark.parametrize("error, status", [
    (InvalidArgumentError("bad", "amount"), 400),
    (ConflictError("dup"), 400),
    (InsufficientFundsError(1, -5), 400),
    (NotFoundError("Account", 1), 404),
    (TransientError("lock timeout"), 500),
    (InternalError("boom", "select"), 500),
])
def test_status_by_kind(error, status):
    assert bank_error_response(error).status_code == status


def test_transient_error_has_retry_after():
    response = bank_error_response(TransientError("lock timeout"))
    assert response.headers["retry-after"] == "1"


def test_indeterminate_commit_is_flagged_and_not_retryable():
    response = bank_error_response(InternalError("lost", "commit", outcome_unknown=True))

    assert "retry-after" not in response.headers
    assert b'"outcome_unknown":true' in response.body
    assert b'"retryable":false' in response.body


async def test_transient_error_over_http(client, monkeypatch):
    async def busy(self, account_id):
        raise TransientError("lock wait timeout")

    monkeypatch.setattr(AccountStore, "get", busy)

    res = await client.get("/api/v1/accounts/1")

    assert res.status_code == 500
    assert res.headers["retry-after"] == "1"
    assert res.json()["error"]["kind"] == "transient"
    assert res.json()["error"]["retryable"] is True


async def test_validation_error_names_field(client):
    res = await client.post(
        "/api/v1/transfers",
        json={"from_account_id": 1, "to_account_id": 2, "amount": -3, "currency": "USD"},
    )

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["kind"] == "invalid_argument"
    assert error["field"] == "amount"
