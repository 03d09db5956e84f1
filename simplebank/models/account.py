"""Account ORM — persists an account and its materialized balance.

Invariants:
    - id is an autoincrement integer primary key (defines the lock order)
    - (name, currency) is unique
    - balance is signed minor units, mutated only by AccountStore.adjust_balance

Design Decisions:
    - balance column is authoritative: never recomputed from entries at read time
    - No ORM cascade to entries/transfers: deletion is blocked by RESTRICT FKs
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from simplebank.db.base import Base, BigId


class Account(Base):
    """Account entity — a named balance in one currency."""
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("name", "currency", name="uq_accounts_name_currency"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
