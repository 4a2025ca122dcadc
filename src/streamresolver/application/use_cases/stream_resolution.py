"""Playback source selection and runtime fallback."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

import structlog

from streamresolver.domain.entities.content import ContentItem, MediaType
from streamresolver.domain.entities.playback import (
    ExternalLink,
    PlaybackKind,
    PlaybackPlan,
    PlaybackSource,
)
from streamresolver.infrastructure.playback.classifier import classify_playback_url
from streamresolver.infrastructure.sources.registry import SourceRegistry

log = structlog.get_logger(__name__)

_TMDB_TAG_PREFIX = "tmdb:"
_TMDB_URL_RE = re.compile(r"/(movie|tv)/(\d+)")

CURATED_SOURCE_NAME = "Primary"


def extract_external_id(item: ContentItem) -> tuple[str | None, MediaType]:
    """TMDB id and media type for *item*.

    Looked up in order: a ``tmdb:<id>`` tag, a themoviedb.org URL among the
    watch links (which also carries the media type), ``ref.external_id``.
    """
    media_type = item.ref.media_type
    for tag in item.tags:
        if tag.startswith(_TMDB_TAG_PREFIX):
            tmdb_id = tag[len(_TMDB_TAG_PREFIX) :].strip()
            if tmdb_id:
                return tmdb_id, media_type

    for url in (item.external_watch_links or {}).values():
        if "themoviedb.org" not in url:
            continue
        m = _TMDB_URL_RE.search(url)
        if m:
            kind: MediaType = "tv" if m.group(1) == "tv" else "movie"
            return m.group(2), kind

    return item.ref.external_id or None, media_type


class SourceCursor:
    """Runtime fallback over a plan's sources.

    The index only moves forward, one step per playback error. Advancing
    past the last source marks the cursor exhausted instead of wrapping.
    """

    def __init__(self, sources: Sequence[PlaybackSource]) -> None:
        self._sources = tuple(sources)
        self._index = 0
        self._exhausted = not self._sources

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> PlaybackSource | None:
        if self._exhausted:
            return None
        return self._sources[self._index]

    @property
    def next_source(self) -> PlaybackSource | None:
        """Peek at the source a playback error would switch to."""
        if self._exhausted or self._index + 1 >= len(self._sources):
            return None
        return self._sources[self._index + 1]

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def on_playback_error(self) -> PlaybackSource | None:
        """Advance to the next source; None once nothing is left."""
        if self._exhausted:
            return None
        if self._index + 1 < len(self._sources):
            self._index += 1
            log.info(
                "playback_source_advanced",
                index=self._index,
                source=self._sources[self._index].name,
            )
            return self._sources[self._index]
        self._exhausted = True
        log.info("playback_sources_exhausted", tried=len(self._sources))
        return None


class StreamResolutionEngine:
    """Builds the ordered playback plan for a content item.

    Order: the curated ``video_embed_url`` (classified direct/iframe), then
    every registry mirror when a TMDB id is known. Watch links are
    returned separately; they open externally and are not part of the
    fallback chain.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        classify: Callable[[str], PlaybackKind] = classify_playback_url,
    ) -> None:
        self._registry = registry
        self._classify = classify

    def build_plan(
        self,
        item: ContentItem,
        season: int | None = None,
        episode: int | None = None,
    ) -> PlaybackPlan:
        sources: list[PlaybackSource] = []

        if item.video_embed_url:
            sources.append(
                PlaybackSource(
                    name=CURATED_SOURCE_NAME,
                    url=item.video_embed_url,
                    kind=self._classify(item.video_embed_url),
                    origin="curated",
                )
            )

        tmdb_id, media_type = extract_external_id(item)
        if tmdb_id:
            candidates = self._registry.get_all_stream_urls(
                tmdb_id,
                media_type,
                season if season is not None else item.ref.season,
                episode if episode is not None else item.ref.episode,
            )
            sources.extend(
                PlaybackSource(
                    name=c.provider_name,
                    url=c.embed_url,
                    kind=PlaybackKind.IFRAME,
                    origin="mirror",
                )
                for c in candidates
            )

        external_links = [
            ExternalLink(name=name, url=url)
            for name, url in (item.external_watch_links or {}).items()
            if url and "themoviedb.org" not in url
        ]

        log.debug(
            "playback_plan_built",
            content_id=item.id,
            sources=len(sources),
            external_links=len(external_links),
        )
        return PlaybackPlan(sources=sources, external_links=external_links)

    def has_embeddable_stream(self, item: ContentItem) -> bool:
        """True if the plan for *item* has at least one in-app source."""
        if item.video_embed_url:
            return True
        tmdb_id, _ = extract_external_id(item)
        return tmdb_id is not None

    @staticmethod
    def cursor(plan: PlaybackPlan) -> SourceCursor:
        return SourceCursor(plan.sources)
