"""Account Schemas — Pydantic models for account creation, deposit and responses.

Invariants:
    - AccountCreate.name: 1-255 chars, stripped, non-empty
    - currency restricted to the Currency enum
    - DepositRequest.amount strictly positive
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from simplebank.core.domain_types import Currency


class AccountCreate(BaseModel):
    """Account creation — balance always starts at zero."""
    name: str = Field(min_length=1, max_length=255)
    currency: Currency

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class DepositRequest(BaseModel):
    id: int = Field(ge=1)
    amount: int = Field(gt=0)


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    currency: str
    balance: int
    created_at: datetime
