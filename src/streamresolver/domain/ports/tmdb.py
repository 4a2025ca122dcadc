"""Port for TMDB metadata lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamresolver.domain.entities.automation import TmdbMovie, TrendingCategory
from streamresolver.domain.entities.content import MediaType


@runtime_checkable
class TmdbClientPort(Protocol):
    async def get_release_year(
        self, tmdb_id: str, media_type: MediaType
    ) -> int | None:
        """Release (or first-air) year for a TMDB id, None if unknown."""
        ...

    async def movie_list(
        self, category: TrendingCategory = "trending", page: int = 1
    ) -> list[TmdbMovie]:
        """Weekly trending or popular movies; empty on any upstream failure."""
        ...
