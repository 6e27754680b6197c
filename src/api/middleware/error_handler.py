"""
Global error handling middleware for the FastAPI application.

Catches EchoVaultError subclasses, Pydantic validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core.exceptions import EchoVaultError
from src.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, detail: str, code: str, timestamp: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, code=code, timestamp=timestamp).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``EchoVaultError`` maps domain errors to their status and code.
    2. ``RequestValidationError`` for malformed body/params (422).
    3. ``Exception`` as a catch-all (500, no stack trace in the body).
    """

    @app.exception_handler(EchoVaultError)
    async def echovault_error_handler(_request: Request, exc: EchoVaultError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, str(exc), "VALIDATION_ERROR", datetime.now(UTC).isoformat())

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _envelope(
            500, "Internal server error", "INTERNAL_ERROR", datetime.now(UTC).isoformat()
        )
