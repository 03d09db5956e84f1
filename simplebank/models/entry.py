"""Entry ORM — append-only ledger row recording one signed balance movement.

Invariants:
    - Always belongs to an Account (account_id FK, ON DELETE RESTRICT)
    - transfer_id set for transfer legs, NULL for single-sided deposits
    - amount < 0 is a debit, amount > 0 a credit
    - Rows are never updated or deleted

Design Decisions:
    - RESTRICT FK: an account with ledger history cannot be deleted, so a
      concurrent delete cannot orphan an in-flight transfer
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from simplebank.db.base import Base, BigId


class Entry(Base):
    """Ledger entry — one signed delta against one account."""
    __tablename__ = "entries"
    __table_args__ = (
        Index("ix_entries_account_id", "account_id"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False,
    )
    transfer_id: Mapped[int | None] = mapped_column(
        BigId, ForeignKey("transfers.id", ondelete="RESTRICT"), nullable=True,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
