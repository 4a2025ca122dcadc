"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streamresolver.application.use_cases import (
    AutomationUseCase,
    StreamResolutionEngine,
)
from streamresolver.infrastructure.cache import DiskcacheAdapter
from streamresolver.infrastructure.catalog import JustWatchCatalogMatcher
from streamresolver.infrastructure.debrid import RealDebridResolver
from streamresolver.infrastructure.persistence.content_cache import (
    CacheContentRepository,
)
from streamresolver.infrastructure.sources import SourceRegistry
from streamresolver.infrastructure.tmdb import HttpxTmdbClient
from streamresolver.infrastructure.torrent_index import ApibayTorrentIndex
from streamresolver.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (content repository and TMDB client depend on it)
        2. HTTP Client (shared by every upstream adapter)
        3. Upstream adapters (catalog, torrent index, debrid, TMDB)
        4. Source registry + resolution engine
        5. Automation use case
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache (must be first - other components depend on it)
    cache = DiskcacheAdapter(
        directory=config.cache_dir,
        ttl_seconds=config.cache_ttl_seconds,
        max_concurrent=config.cache_max_concurrent,
    )
    await cache.__aenter__()
    state.cache = cache
    state.content_repo = CacheContentRepository(
        cache=cache,
        ttl_seconds=config.cache_ttl_seconds,
    )
    log.info("cache_initialized", directory=str(config.cache_dir))

    # 2) HTTP client (no retry transport: retry policy belongs to callers)
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Upstream adapters
    state.catalog = JustWatchCatalogMatcher(
        http_client=state.http_client,
        config=config.catalog,
    )
    state.torrent_index = ApibayTorrentIndex(
        http_client=state.http_client,
        config=config.torrent_index,
    )

    if config.debrid.api_key:
        state.debrid = RealDebridResolver(
            http_client=state.http_client,
            api_key=config.debrid.api_key,
            api_url=config.debrid.api_url,
            sync_wait_seconds=config.debrid.sync_wait_seconds,
            max_sync_links=config.debrid.max_sync_links,
        )
        log.info("debrid_configured", api_url=config.debrid.api_url)
    else:
        state.debrid = None
        log.warning("debrid_not_configured")

    if config.tmdb_api_key:
        state.tmdb_client = HttpxTmdbClient(
            api_key=config.tmdb_api_key,
            http_client=state.http_client,
            cache=cache,
        )
        log.info("tmdb_client_initialized")
    else:
        state.tmdb_client = None

    # 4) Source registry + engine (built once, shared by reference)
    state.source_registry = SourceRegistry.from_config(config.sources.providers)
    state.engine = StreamResolutionEngine(state.source_registry)
    log.info(
        "source_registry_initialized",
        providers=[p.name for p in state.source_registry.providers],
    )

    # 5) Automation
    state.automation_uc = AutomationUseCase(
        torrent_index=state.torrent_index,
        debrid=state.debrid,
        catalog=state.catalog,
        content_repo=state.content_repo,
        config=config.automation,
        tmdb=state.tmdb_client,
    )
    state.pending_refresh = None

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
