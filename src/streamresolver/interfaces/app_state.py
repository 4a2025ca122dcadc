"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streamresolver.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streamresolver.application.use_cases import (
        AutomationUseCase,
        StreamResolutionEngine,
    )
    from streamresolver.domain.entities import CatalogRefreshReport
    from streamresolver.domain.ports import (
        CachePort,
        CatalogMatcherPort,
        ContentRepository,
        DebridResolverPort,
        TmdbClientPort,
        TorrentIndexPort,
    )
    from streamresolver.infrastructure.sources import SourceRegistry


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain Ports
    catalog: CatalogMatcherPort
    torrent_index: TorrentIndexPort
    content_repo: ContentRepository

    # Debrid (optional, requires debrid.api_key)
    debrid: DebridResolverPort | None

    # TMDB (optional, requires tmdb_api_key)
    tmdb_client: TmdbClientPort | None

    # Application Services
    source_registry: SourceRegistry
    engine: StreamResolutionEngine
    automation_uc: AutomationUseCase

    # Last bulk catalog refresh, held until an operator applies it
    pending_refresh: CatalogRefreshReport | None
