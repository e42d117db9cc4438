"""Error Handlers — global exception handlers for the debatekb API.

Invariants:
    - DebateKBError → structured JSON with error code, message, severity
    - Client-side domain errors (< 500) log at WARNING, store failures at ERROR
    - A refused transfer (409) and an unavailable store (503) carry Retry-After
    - Snapshot version errors name the found and supported versions, so a client
      can tell a newer export from a corrupted one
    - RequestValidationError → field-level error details
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (DebateKBError), validation (Pydantic), catch-all (Exception)
    - Per-item import failures never reach these handlers: they are MergeReport data
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from debatekb.core.errors import (
    DatabaseError, DebateKBError, ErrorSeverity, TransferInProgressError,
    UnsupportedSnapshotVersionError,
)

logger = logging.getLogger(__name__)

# Retry-After, in seconds
TRANSFER_RETRY_AFTER = 1
STORE_RETRY_AFTER = 5


def _retry_headers(exc: DebateKBError) -> dict[str, str] | None:
    if isinstance(exc, TransferInProgressError):
        return {"Retry-After": str(TRANSFER_RETRY_AFTER)}
    if isinstance(exc, DatabaseError):
        return {"Retry-After": str(STORE_RETRY_AFTER)}
    return None


def _domain_error_body(exc: DebateKBError) -> dict:
    body = exc.to_response()
    if isinstance(exc, UnsupportedSnapshotVersionError):
        body["error"]["details"] = {"found": exc.found, "supported": exc.supported}
    elif isinstance(exc, TransferInProgressError):
        body["error"]["details"] = {"operation": exc.operation}
    return body


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register debatekb domain/infrastructure error handler."""

    @app.exception_handler(DebateKBError)
    async def domain_error_handler(request: Request, exc: DebateKBError):
        """Handle all debatekb domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"DebateKBError: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "entity_type": exc.context.entity_type,
                "entity_id": exc.context.entity_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=_domain_error_body(exc),
            headers=_retry_headers(exc),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
