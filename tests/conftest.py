"""Shared test fixtures for the streamresolver test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from streamresolver.domain.entities import (
    ContentItem,
    ContentRef,
    ResolutionResult,
    StreamOffer,
)
from streamresolver.domain.entities.content import AUTO_IMPORTED_TAG

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def content_item() -> ContentItem:
    """Movie with a TMDB tag and no stream yet."""
    return ContentItem(
        id="item-1",
        ref=ContentRef(title="Inception", media_type="movie", year=2010),
        tags=("tmdb:27205",),
        created_at=datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture()
def pending_item() -> ContentItem:
    """Auto-imported draft waiting for a stream."""
    return ContentItem(
        id="pending-1",
        ref=ContentRef(title="Heat", media_type="movie", year=1995),
        tags=(AUTO_IMPORTED_TAG, "tmdb:949"),
        created_at=datetime(2025, 1, 2, 12, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture()
def tubi_offer() -> StreamOffer:
    return StreamOffer(
        provider_name="Tubi",
        provider_id=73,
        url="https://tubitv.com/movies/123",
        monetization="FREE",
    )


@pytest.fixture()
def found_result(tubi_offer: StreamOffer) -> ResolutionResult:
    return ResolutionResult(
        found=True,
        free_offers=[tubi_offer],
        all_offers=[tubi_offer],
        matched_title="Inception",
        matched_year=2010,
    )


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


class InMemoryCache:
    """Dict-backed CachePort for repository tests."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.ttls: dict[str, int | None] = {}

    async def get(self, key: str) -> Any:
        return self.data.get(key)

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> bool:
        self.ttls.pop(key, None)
        return self.data.pop(key, None) is not None

    async def aclose(self) -> None:
        return None


@pytest.fixture()
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_content_repo() -> AsyncMock:
    """Mock ContentRepository."""
    repo = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.save = AsyncMock()
    repo.list_all = AsyncMock(return_value=[])
    repo.list_pending = AsyncMock(return_value=[])
    return repo


@pytest.fixture()
def mock_catalog() -> AsyncMock:
    """Mock CatalogMatcherPort."""
    catalog = AsyncMock()
    catalog.lookup = AsyncMock(return_value=ResolutionResult.not_found())
    return catalog


@pytest.fixture()
def mock_torrent_index() -> AsyncMock:
    """Mock TorrentIndexPort."""
    index = AsyncMock()
    index.search = AsyncMock(return_value=[])
    return index


@pytest.fixture()
def mock_debrid() -> AsyncMock:
    """Mock DebridResolverPort."""
    return AsyncMock()


@pytest.fixture()
def fake_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep; records requested delays."""
    return AsyncMock(return_value=None)
