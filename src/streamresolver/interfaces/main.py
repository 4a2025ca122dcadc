from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request

from streamresolver.infrastructure.config import AppConfig
from streamresolver.interfaces.api.errors import register_error_handlers
from streamresolver.interfaces.app_state import AppState
from streamresolver.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app: configuration only, no resource setup.

    Resources (HTTP client, cache, upstream adapters) are created in lifespan().
    """
    app = FastAPI(
        title="streamresolver",
        description="Multi-source stream resolution service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from streamresolver.interfaces.api.automation.router import (
        router as automation_router,
    )
    from streamresolver.interfaces.api.catalog.router import router as catalog_router
    from streamresolver.interfaces.api.content.router import router as content_router
    from streamresolver.interfaces.api.debrid.router import router as debrid_router

    app.include_router(catalog_router)
    app.include_router(debrid_router)
    app.include_router(content_router)
    app.include_router(automation_router)

    register_error_handlers(app)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(response, "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
