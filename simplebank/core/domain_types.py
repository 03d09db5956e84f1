"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, TransferId, EntryId wrap integer primary keys
    - Amounts are integers in minor currency units, never floats
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", int)
TransferId = NewType("TransferId", int)
EntryId = NewType("EntryId", int)


# ─── Value Types ─────────────────────────────────────────────────

MinorUnits = NewType("MinorUnits", int)   # signed, e.g. cents


# ─── Enums ───────────────────────────────────────────────────────

class Currency(str, Enum):
    """Supported ISO-4217 currency codes."""
    USD = "USD"
    EUR = "EUR"
    CAD = "CAD"


class TransferStage(str, Enum):
    """Per-call transfer progress. COMMITTED and ABORTED are terminal."""
    STARTED = "started"
    TRANSFER_CREATED = "transfer_created"
    ENTRIES_CREATED = "entries_created"
    BALANCES_ADJUSTED = "balances_adjusted"
    COMMITTED = "committed"
    ABORTED = "aborted"

    @property
    def terminal(self) -> bool:
        return self in (TransferStage.COMMITTED, TransferStage.ABORTED)
