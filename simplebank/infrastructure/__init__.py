"""Infrastructure Layer — database access, transactions and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All storage failures leave this layer as BankError subclasses

Design Decisions:
    - Transaction coordinator lives beside the session manager: both own connection lifecycle
"""
