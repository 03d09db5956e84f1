"""Service Layer — stores bound to an explicit session, and the transfer engine.

Invariants:
    - Stores take the AsyncSession in their constructor; none open sessions themselves
    - Writes participating in a transfer only run inside TransactionCoordinator.run

Design Decisions:
    - One class per table plus one orchestrator (ADR: max 3-4 files to understand a feature)
"""
