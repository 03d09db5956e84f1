"""Error Handlers — map the closed ErrorKind set onto HTTP responses.

Invariants:
    - Status chosen from the error's kind only: InvalidArgument/Conflict/InsufficientFunds
      -> 400, NotFound -> 404, Transient/Internal -> 500
    - Transient errors carry a Retry-After header; an indeterminate commit never does,
      and its body says the outcome is unknown
    - Request-body validation failures use the same envelope as InvalidArgumentError
    - Unhandled exceptions never leak internal details

Design Decisions:
    - Stores, coordinator and engine raise kinds, never transport codes; this module
      is the only place an HTTP status is decided
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from simplebank.core.errors import (
    BankError, ErrorKind, ErrorSeverity, InternalError, InvalidArgumentError,
)

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INSUFFICIENT_FUNDS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.TRANSIENT: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

RETRY_AFTER_SECONDS = 1


def status_for(error: BankError) -> int:
    return STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def bank_error_response(error: BankError) -> JSONResponse:
    """Build the JSON response for a BankError, including retry guidance."""
    content = error.to_response()
    headers = None
    if error.retryable:
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)}
    if isinstance(error, InternalError) and error.outcome_unknown:
        # the transfer may have committed; a blind retry could apply it twice
        content["error"]["outcome_unknown"] = True
    return JSONResponse(status_code=status_for(error), content=content, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    """Register the BankError, validation and catch-all handlers on the app."""

    @app.exception_handler(BankError)
    async def bank_error_handler(request: Request, exc: BankError):
        response = bank_error_response(exc)
        log = logger.error if response.status_code >= 500 else logger.info
        log(
            f"{exc.kind.value} on {request.method} {request.url.path}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "account_id": exc.context.account_id,
                "transfer_id": exc.context.transfer_id,
                "stage": exc.context.stage,
            },
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        problems = exc.errors()
        field = _field_name(problems[0]["loc"]) if problems else "body"
        error = InvalidArgumentError("Invalid request data", field)
        error.code = "VALIDATION_ERROR"
        logger.info(
            f"Rejected request on {request.url.path}: {len(problems)} invalid field(s)",
            extra={"error_code": error.code, "path": request.url.path},
        )
        content = error.to_response()
        content["error"]["field"] = field
        content["error"]["details"] = [
            {"field": _field_name(p["loc"]), "message": p["msg"], "type": p["type"]}
            for p in problems
        ]
        return JSONResponse(status_code=status_for(error), content=content)

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "kind": ErrorKind.INTERNAL.value,
                    "message": "An unexpected error occurred",
                    "severity": ErrorSeverity.CRITICAL.value,
                    "retryable": False,
                },
            },
        )


def _field_name(loc) -> str:
    """Drop the leading 'body'/'query' segment from a pydantic error location."""
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts)
