"""Transfer & Entry Schemas — request validation and composite transfer responses.

Invariants:
    - TransferCreate: both ids >= 1, amount > 0, accounts distinct
    - TransferResultResponse mirrors TransferResult (transfer, two entries, two accounts)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from simplebank.core.domain_types import Currency
from simplebank.schemas.account import AccountResponse


class TransferCreate(BaseModel):
    """Transfer request — currency must match both accounts."""
    from_account_id: int = Field(ge=1)
    to_account_id: int = Field(ge=1)
    amount: int = Field(gt=0)
    currency: Currency

    @model_validator(mode="after")
    def validate_distinct_accounts(self):
        if self.from_account_id == self.to_account_id:
            raise ValueError("from_account_id and to_account_id must differ")
        return self


class TransferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    from_account_id: int
    to_account_id: int
    amount: int
    created_at: datetime


class EntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_id: int
    transfer_id: int | None
    amount: int
    created_at: datetime


class TransferResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transfer: TransferResponse
    from_entry: EntryResponse
    to_entry: EntryResponse
    from_account: AccountResponse
    to_account: AccountResponse
