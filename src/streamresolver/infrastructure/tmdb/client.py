"""TMDB API client: async httpx implementation with optional caching."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streamresolver.domain.entities.automation import TmdbMovie, TrendingCategory
from streamresolver.domain.entities.content import MediaType
from streamresolver.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"

# Release years do not change; keep them for a day.
_TTL_DETAILS = 86_400
_TTL_TRENDING = 21_600

_LIST_PATHS: dict[str, str] = {
    "trending": "/trending/movie/week",
    "popular": "/movie/popular",
}


class HttpxTmdbClient:
    """Async TMDB client using httpx + CachePort.

    Implements ``TmdbClientPort`` from domain.ports.tmdb.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        cache: CachePort | None = None,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._cache = cache

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(url, params={"api_key": self._api_key, **extra})
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None

    async def get_release_year(
        self, tmdb_id: str, media_type: MediaType
    ) -> int | None:
        """Release year (movies) or first-air year (TV) for a TMDB id."""
        endpoint = "tv" if media_type == "tv" else "movie"
        cache_key = f"tmdb:year:{endpoint}:{tmdb_id}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return cached

        data = await self._get(f"/{endpoint}/{tmdb_id}")
        if data is None:
            return None

        year = self._year(data.get("release_date") or data.get("first_air_date"))
        if year is not None and self._cache is not None:
            await self._cache.set(cache_key, year, ttl=_TTL_DETAILS)
        return year

    @staticmethod
    def _year(date_str: str | None) -> int | None:
        date_str = date_str or ""
        head = date_str[:4]
        return int(head) if len(head) == 4 and head.isdigit() else None

    async def movie_list(
        self, category: TrendingCategory = "trending", page: int = 1
    ) -> list[TmdbMovie]:
        """Weekly trending movies, or ``/movie/popular`` for ``"popular"``."""
        path = _LIST_PATHS.get(category, _LIST_PATHS["trending"])
        cache_key = f"tmdb:list:{category}:{page}"
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return cached

        data = await self._get(path, page=page)
        if data is None:
            return []

        movies = [
            TmdbMovie(
                id=int(m["id"]),
                title=str(m.get("title") or m.get("original_title") or ""),
                year=self._year(m.get("release_date")),
            )
            for m in data.get("results", [])
            if isinstance(m, dict) and m.get("id") is not None
        ]
        if self._cache is not None:
            await self._cache.set(cache_key, movies, ttl=_TTL_TRENDING)
        return movies
