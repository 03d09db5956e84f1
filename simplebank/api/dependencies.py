"""Route Dependencies — FastAPI providers for the coordinator and transfer engine.

Invariants:
    - A new TransferEngine per request; it holds no state between calls
    - Engine policy (overdraft, deadline) comes from Settings only
"""

from fastapi import Depends

from simplebank.config import get_settings
from simplebank.infrastructure.transaction import TransactionCoordinator, get_coordinator
from simplebank.services.transfer_engine import TransferEngine


def get_transfer_engine(
    coordinator: TransactionCoordinator = Depends(get_coordinator),
) -> TransferEngine:
    settings = get_settings()
    return TransferEngine(
        coordinator,
        allow_overdraft=settings.allow_overdraft,
        timeout_seconds=settings.transfer_timeout_seconds,
    )
