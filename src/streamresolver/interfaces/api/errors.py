"""Domain error -> JSON response mapping, registered on the app."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from streamresolver.domain.entities import (
    AnomalousState,
    ContentNotFound,
    DebridError,
    DebridNotConfigured,
    InvalidMagnetFormat,
    ServiceRejected,
    TmdbNotConfigured,
    TorrentIndexError,
    TransportError,
)

log = structlog.get_logger(__name__)

# Checked in order; subclasses before their base.
_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (DebridNotConfigured, 400),
    (TmdbNotConfigured, 400),
    (InvalidMagnetFormat, 422),
    (ServiceRejected, 502),
    (AnomalousState, 502),
    (TransportError, 503),
    (TorrentIndexError, 503),
    (ContentNotFound, 404),
    (DebridError, 502),
)


def status_for(exc: Exception) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status = status_for(exc)
    content: dict[str, Any] = {"error": str(exc), "success": False}

    if isinstance(exc, (DebridNotConfigured, TmdbNotConfigured)):
        content["configured"] = False
    if isinstance(exc, ServiceRejected) and exc.error_code is not None:
        content["error_code"] = exc.error_code

    log.warning(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=status,
        error=str(exc),
    )
    return JSONResponse(status_code=status, content=content)


def register_error_handlers(app: FastAPI) -> None:
    for error_type in (
        DebridError,
        TorrentIndexError,
        TmdbNotConfigured,
        ContentNotFound,
    ):
        app.add_exception_handler(error_type, domain_error_handler)
