"""Tests for the playback plan builder and the runtime source cursor."""

from __future__ import annotations

from dataclasses import replace

import pytest

from streamresolver.application.use_cases import (
    SourceCursor,
    StreamResolutionEngine,
    extract_external_id,
)
from streamresolver.domain.entities import (
    ContentItem,
    ContentRef,
    PlaybackKind,
    PlaybackSource,
)
from streamresolver.infrastructure.sources import EmbedProvider, SourceRegistry


def _registry() -> SourceRegistry:
    return SourceRegistry(
        [
            EmbedProvider(
                "MirrorA",
                1,
                "https://a.example/{media_type}/{external_id}",
                "https://a.example/tv/{external_id}/{season}/{episode}",
            ),
            EmbedProvider(
                "MirrorB",
                2,
                "https://b.example/{external_id}",
                "https://b.example/{external_id}?s={season}&e={episode}",
            ),
        ]
    )


def _source(name: str) -> PlaybackSource:
    return PlaybackSource(
        name=name, url=f"https://{name}.example", kind=PlaybackKind.IFRAME, origin="mirror"
    )


@pytest.fixture()
def engine() -> StreamResolutionEngine:
    return StreamResolutionEngine(_registry())


# ---------------------------------------------------------------------------
# extract_external_id
# ---------------------------------------------------------------------------


class TestExtractExternalId:
    def test_from_tag(self, content_item: ContentItem) -> None:
        assert extract_external_id(content_item) == ("27205", "movie")

    def test_from_tmdb_url_carries_media_type(self) -> None:
        item = ContentItem(
            id="x",
            ref=ContentRef(title="Dark"),
            external_watch_links={"tmdb": "https://www.themoviedb.org/tv/70523-dark"},
        )
        assert extract_external_id(item) == ("70523", "tv")

    def test_from_ref(self) -> None:
        item = ContentItem(id="x", ref=ContentRef(title="Heat", external_id="949"))
        assert extract_external_id(item) == ("949", "movie")

    def test_tag_wins_over_ref(self) -> None:
        item = ContentItem(
            id="x",
            ref=ContentRef(title="Heat", external_id="1"),
            tags=("tmdb:949",),
        )
        assert extract_external_id(item)[0] == "949"

    def test_none(self) -> None:
        item = ContentItem(id="x", ref=ContentRef(title="Home video"))
        assert extract_external_id(item) == (None, "movie")


# ---------------------------------------------------------------------------
# build_plan
# ---------------------------------------------------------------------------


class TestBuildPlan:
    def test_curated_first_then_mirrors(
        self, engine: StreamResolutionEngine, content_item: ContentItem
    ) -> None:
        item = content_item.with_stream("https://rdb.so/d/inception.mp4")

        plan = engine.build_plan(item)

        assert [s.name for s in plan.sources] == ["Primary", "MirrorA", "MirrorB"]
        assert plan.sources[0].kind is PlaybackKind.DIRECT
        assert plan.sources[0].origin == "curated"
        assert plan.sources[1].url == "https://a.example/movie/27205"
        assert all(s.kind is PlaybackKind.IFRAME for s in plan.sources[1:])

    def test_curated_embed_classified_as_iframe(
        self, engine: StreamResolutionEngine
    ) -> None:
        item = ContentItem(
            id="x",
            ref=ContentRef(title="Trailer"),
            video_embed_url="https://www.youtube.com/embed/abc",
        )

        plan = engine.build_plan(item)

        assert [s.name for s in plan.sources] == ["Primary"]
        assert plan.sources[0].kind is PlaybackKind.IFRAME

    def test_no_curated_and_no_id_is_empty(self, engine: StreamResolutionEngine) -> None:
        plan = engine.build_plan(ContentItem(id="x", ref=ContentRef(title="Nothing")))
        assert plan.is_empty

    def test_episode_from_request_overrides_ref(
        self, engine: StreamResolutionEngine
    ) -> None:
        item = ContentItem(
            id="x",
            ref=ContentRef(title="Dark", media_type="tv", season=1, episode=1),
            tags=("tmdb:70523",),
        )

        plan = engine.build_plan(item, season=2, episode=4)

        assert plan.sources[0].url == "https://a.example/tv/70523/2/4"

    def test_episode_defaults_to_ref(self, engine: StreamResolutionEngine) -> None:
        item = ContentItem(
            id="x",
            ref=ContentRef(title="Dark", media_type="tv", season=3, episode=8),
            tags=("tmdb:70523",),
        )

        plan = engine.build_plan(item)

        assert plan.sources[1].url == "https://b.example/70523?s=3&e=8"

    def test_external_links_separate_and_tmdb_excluded(
        self, engine: StreamResolutionEngine, content_item: ContentItem
    ) -> None:
        item = replace(
            content_item,
            external_watch_links={
                "tubi": "https://tubitv.com/movies/123",
                "tmdb": "https://www.themoviedb.org/movie/27205",
            },
        )

        plan = engine.build_plan(item)

        assert [(link.name, link.url) for link in plan.external_links] == [
            ("tubi", "https://tubitv.com/movies/123")
        ]
        assert all("tubitv" not in s.url for s in plan.sources)

    def test_has_embeddable_stream(
        self, engine: StreamResolutionEngine, content_item: ContentItem
    ) -> None:
        assert engine.has_embeddable_stream(content_item) is True
        assert (
            engine.has_embeddable_stream(ContentItem(id="x", ref=ContentRef(title="y")))
            is False
        )


# ---------------------------------------------------------------------------
# SourceCursor
# ---------------------------------------------------------------------------


class TestSourceCursor:
    def test_advances_one_step_per_error(self) -> None:
        cursor = SourceCursor([_source("a"), _source("b"), _source("c")])

        assert cursor.current.name == "a"
        assert cursor.next_source.name == "b"
        assert cursor.on_playback_error().name == "b"
        assert cursor.current_index == 1
        assert cursor.on_playback_error().name == "c"
        assert cursor.next_source is None

    def test_exhausts_instead_of_wrapping(self) -> None:
        cursor = SourceCursor([_source("a"), _source("b")])

        cursor.on_playback_error()
        assert cursor.on_playback_error() is None
        assert cursor.exhausted is True
        assert cursor.current is None
        assert cursor.on_playback_error() is None
        assert cursor.current_index == 1

    def test_index_never_decreases(self) -> None:
        cursor = SourceCursor([_source(str(i)) for i in range(4)])
        seen = [cursor.current_index]
        for _ in range(6):
            cursor.on_playback_error()
            seen.append(cursor.current_index)
        assert seen == sorted(seen)

    def test_empty_plan_starts_exhausted(self) -> None:
        cursor = SourceCursor([])
        assert cursor.exhausted is True
        assert cursor.current is None

    def test_cursor_from_plan(
        self, engine: StreamResolutionEngine, content_item: ContentItem
    ) -> None:
        cursor = engine.cursor(engine.build_plan(content_item))
        assert cursor.current.name == "MirrorA"
