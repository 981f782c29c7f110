"""API middleware: CORS, request logging, and error handling.

Starlette middleware runs last-added-first, so ``RequestLoggingMiddleware``
is added after CORS in main.py and sees the final status code, including
the structured errors produced by the handlers registered here.

Application errors are converted by an exception handler rather than a
``BaseHTTPMiddleware``: the handler runs inside the routing layer, so the
request logger still records the mapped status code.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from lexassist.api.schemas import ErrorResponse
from lexassist.utils.errors import (
    CompletionError,
    EmbeddingError,
    LexAssistError,
    ResponseParseError,
    RetrievalError,
    UnsupportedInputError,
)
from lexassist.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Checked in order; the first matching class wins.
_STATUS_BY_ERROR: tuple[tuple[type[LexAssistError], int], ...] = (
    (UnsupportedInputError, 400),
    (ResponseParseError, 502),
    (EmbeddingError, 502),
    (RetrievalError, 502),
    (CompletionError, 502),
)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware.  Defaults to ``["*"]`` for development."""
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


def status_for(exc: LexAssistError) -> int:
    """Return the HTTP status code an application error maps to."""
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


async def _handle_application_error(request: Request, exc: LexAssistError) -> JSONResponse:
    """Log the full error server-side and return a sanitized body.

    Stack traces and provider internals stay in the logs.  A parse failure
    also returns the model's raw text so the caller can inspect it.
    """
    status = status_for(exc)
    _logger.error(
        "application_error",
        error_type=type(exc).__name__,
        message=exc.message,
        provider=exc.provider_name,
        path=str(request.url.path),
        status=status,
    )
    body = ErrorResponse(
        error=type(exc).__name__,
        detail=exc.message,
        raw_text=exc.raw_text if isinstance(exc, ResponseParseError) else None,
    )
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def register_error_handlers(app: FastAPI) -> None:
    """Route every :class:`LexAssistError` through one JSON handler."""
    app.add_exception_handler(LexAssistError, _handle_application_error)
