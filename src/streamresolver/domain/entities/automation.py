from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from streamresolver.domain.entities.content import ContentItem
from streamresolver.domain.entities.offers import ResolutionResult

AutoResolveStatus = Literal["ready", "pending", "no_results", "no_playable", "failed"]
TrendingCategory = Literal["trending", "popular"]


@dataclass(frozen=True)
class TorrentResult:
    name: str
    info_hash: str
    seeders: int
    leechers: int
    size_bytes: int
    magnet: str

    @property
    def size(self) -> str:
        return f"{self.size_bytes / (1024**3):.2f} GB"


@dataclass(frozen=True)
class AutoResolveOutcome:
    content_id: str
    status: AutoResolveStatus
    message: str = ""
    torrent_name: str | None = None
    torrent_id: str | None = None
    progress: int = 0
    stream_url: str | None = None


@dataclass
class BulkResolveReport:
    """Per-item results of a bulk auto-resolve. Failures never abort the batch."""

    processed: int = 0
    resolved: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TmdbMovie:
    id: int
    title: str
    year: int | None = None


@dataclass
class TrendingImportReport:
    """Drafts created from a TMDB movie list, plus titles left alone."""

    imported: list[TmdbMovie] = field(default_factory=list)
    skipped: list[tuple[TmdbMovie, str]] = field(default_factory=list)


@dataclass(frozen=True)
class CatalogRefreshEntry:
    item: ContentItem
    result: ResolutionResult
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.result.found and bool(self.result.free_offers)


@dataclass
class CatalogRefreshReport:
    """Aggregated catalog lookups awaiting operator approval."""

    entries: list[CatalogRefreshEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def found(self) -> int:
        return sum(1 for e in self.entries if e.success)

    @property
    def successful(self) -> list[CatalogRefreshEntry]:
        return [e for e in self.entries if e.success]


@dataclass(frozen=True)
class AutomationStats:
    total_drafts: int = 0
    auto_imported: int = 0
    needs_source: int = 0
    published: int = 0


class TorrentIndexError(Exception):
    """Torrent index search failed (network, status or response format)."""


class TmdbNotConfigured(Exception):
    """An operation needs TMDB but no API key was configured."""
