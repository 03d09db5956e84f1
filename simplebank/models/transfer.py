"""Transfer ORM — the logical movement of a positive amount between two accounts.

Invariants:
    - from_account_id != to_account_id (check constraint)
    - amount > 0 (check constraint)
    - Owns exactly two entries whose amounts sum to zero

Design Decisions:
    - Check constraints duplicate the engine's preconditions at the storage layer
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from simplebank.db.base import Base, BigId


class Transfer(Base):
    """Transfer record binding a source, a destination and an amount."""
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
        CheckConstraint(
            "from_account_id <> to_account_id", name="ck_transfers_distinct_accounts",
        ),
        Index("ix_transfers_from_account_id", "from_account_id"),
        Index("ix_transfers_to_account_id", "to_account_id"),
    )

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    from_account_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False,
    )
    to_account_id: Mapped[int] = mapped_column(
        BigId, ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
