"""Error Hierarchy — typed, categorized exceptions for all SimpleBank failure modes.

Invariants:
    - Every error has a code (str), kind (ErrorKind), category (ErrorCategory), severity
    - ErrorKind is a closed set: nothing above the store layer inspects driver errors
    - Transient errors are safe to retry as a whole call; Internal errors may be indeterminate
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BankError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


class ErrorKind(str, Enum):
    """Closed error-kind enumeration surfaced by stores, coordinator and engine."""
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    TRANSIENT = "transient"
    INTERNAL = "internal"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    account_id: int | None = None
    transfer_id: int | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class BankError(Exception):
    """Base exception for all SimpleBank errors."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def retryable(self) -> bool:
        return self.kind is ErrorKind.TRANSIENT

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "kind": self.kind.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "account_id": self.context.account_id,
                    "transfer_id": self.context.transfer_id,
                    "stage": self.context.stage,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidArgumentError(BankError):
    """Request arguments violate a transfer or pagination precondition."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorKind.INVALID_ARGUMENT,
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context,
        )
        self.field = field


class NotFoundError(BankError):
    """Requested or referenced resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: object, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorKind.NOT_FOUND,
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(BankError):
    """Uniqueness or referential constraint blocks the write."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorKind.CONFLICT,
            ErrorCategory.CONFLICT, ErrorSeverity.ERROR, context,
        )


class InsufficientFundsError(BankError):
    """Debit would leave the source balance negative (overdraft disabled)."""
    def __init__(
        self, account_id: int, balance: int, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.account_id = account_id
        super().__init__(
            f"Account {account_id} has insufficient funds (balance would be {balance})",
            "INSUFFICIENT_FUNDS", ErrorKind.INSUFFICIENT_FUNDS,
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.ERROR, ctx,
        )
        self.balance = balance


# ─── Infrastructure Errors (500-level) ──────────────────────────

class TransientError(BankError):
    """Lock timeout, serialization failure, lost connection or deadline. Retry the whole call."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSIENT_ERROR", ErrorKind.TRANSIENT,
            ErrorCategory.TIMEOUT, ErrorSeverity.WARNING, context,
        )


class InternalError(BankError):
    """Unclassified storage failure, or a commit whose outcome is unknown."""
    def __init__(
        self,
        message: str,
        operation: str,
        outcome_unknown: bool = False,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            "INTERNAL_ERROR", ErrorKind.INTERNAL,
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, context,
        )
        self.operation = operation
        self.outcome_unknown = outcome_unknown
