"""Domain entities for catalog content items.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Literal

MediaType = Literal["movie", "tv"]

AUTO_IMPORTED_TAG = "auto-imported"


@dataclass(frozen=True)
class ContentRef:
    """Identifies a playable title. Immutable input to the resolution engine."""

    title: str
    media_type: MediaType = "movie"
    year: int | None = None
    season: int | None = None
    episode: int | None = None
    external_id: str | None = None  # TMDB id, e.g. "27205"


@dataclass(frozen=True)
class ContentItem:
    """A catalog entry as stored by the surrounding content layer.

    Only the fields the resolution engine reads or computes are modelled;
    ``video_embed_url`` and ``external_watch_links`` are the persisted
    outputs of stream resolution.
    """

    id: str
    ref: ContentRef
    video_embed_url: str | None = None
    external_watch_links: dict[str, str] | None = None
    tags: tuple[str, ...] = ()
    is_published: bool = False
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def title(self) -> str:
        return self.ref.title

    @property
    def has_streams(self) -> bool:
        """True when a curated stream or at least one external link exists."""
        return bool(self.video_embed_url) or bool(self.external_watch_links)

    @property
    def is_auto_imported(self) -> bool:
        return AUTO_IMPORTED_TAG in self.tags

    def with_stream(self, url: str, *, publish: bool = True) -> ContentItem:
        """Return a copy with ``video_embed_url`` set (and optionally published)."""
        return replace(
            self,
            video_embed_url=url,
            is_published=self.is_published or publish,
        )

    def with_watch_links(self, links: dict[str, str]) -> ContentItem:
        """Return a copy with *links* merged over the existing watch links."""
        merged = {**(self.external_watch_links or {}), **links}
        return replace(self, external_watch_links=merged)


class ContentNotFound(Exception):
    """Raised when a content item id is unknown to the repository."""

    def __init__(self, content_id: str) -> None:
        super().__init__(f"Content item not found: {content_id}")
        self.content_id = content_id
