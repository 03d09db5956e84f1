"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Account is the aggregate root for balances; entries and transfers reference it

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from simplebank.models.account import Account  # noqa: F401
from simplebank.models.entry import Entry  # noqa: F401
from simplebank.models.transfer import Transfer  # noqa: F401
from simplebank.models.user import User  # noqa: F401
