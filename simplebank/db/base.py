"""SQLAlchemy Declarative Base — shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base is the single source of truth for table metadata
    - Integer primary keys are BIGINT on PostgreSQL and INTEGER on SQLite

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - BigId variant: SQLite only autoincrements an INTEGER PRIMARY KEY
"""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase

BigId = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class for all SimpleBank ORM models."""
    pass
