"""Tests for AutomationUseCase (auto-resolve, catalog refresh and TMDB import)."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, call

import pytest

from streamresolver.application.use_cases import (
    AutomationUseCase,
    pick_best_torrent,
    split_title_year,
)
from streamresolver.domain.entities import (
    ContentItem,
    ContentRef,
    DebridNotConfigured,
    DebridStatus,
    DebridStream,
    ResolutionOutcome,
    ResolutionResult,
    TmdbMovie,
    TmdbNotConfigured,
    TorrentIndexError,
    TorrentResult,
    TransportError,
)
from streamresolver.domain.entities.content import AUTO_IMPORTED_TAG
from streamresolver.infrastructure.config.schema import AutomationConfig


def _torrent(name: str, seeders: int) -> TorrentResult:
    return TorrentResult(
        name=name,
        info_hash="A" * 40,
        seeders=seeders,
        leechers=0,
        size_bytes=1024**3,
        magnet=f"magnet:?xt=urn:btih:{'A' * 40}&dn={name}",
    )


def _ready(url: str = "https://rdb.so/d/heat.mkv") -> ResolutionOutcome:
    return ResolutionOutcome(
        torrent_id="T1",
        status=DebridStatus.DOWNLOADED,
        progress=100,
        streams=[DebridStream(download_url=url, filename="heat.mkv", streamable=True)],
    )


def _draft(content_id: str, title: str, **kwargs) -> ContentItem:
    return ContentItem(
        id=content_id,
        ref=ContentRef(title=title, **kwargs),
        tags=(AUTO_IMPORTED_TAG,),
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture()
def config() -> AutomationConfig:
    return AutomationConfig(
        min_seeders=5,
        bulk_resolve_limit=5,
        bulk_resolve_delay_seconds=1.0,
        catalog_refresh_delay_seconds=0.5,
    )


@pytest.fixture()
def use_case(
    mock_torrent_index: AsyncMock,
    mock_debrid: AsyncMock,
    mock_catalog: AsyncMock,
    mock_content_repo: AsyncMock,
    config: AutomationConfig,
    fake_sleep: AsyncMock,
) -> AutomationUseCase:
    return AutomationUseCase(
        torrent_index=mock_torrent_index,
        debrid=mock_debrid,
        catalog=mock_catalog,
        content_repo=mock_content_repo,
        config=config,
        sleep=fake_sleep,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestSplitTitleYear:
    def test_with_year(self) -> None:
        assert split_title_year("Heat (1995)") == ("Heat", 1995)

    def test_without_year(self) -> None:
        assert split_title_year("  Heat ") == ("Heat", None)

    def test_year_in_middle_untouched(self) -> None:
        assert split_title_year("Blade Runner (1982) Final Cut") == (
            "Blade Runner (1982) Final Cut",
            None,
        )


class TestPickBestTorrent:
    def test_highest_seeders_wins(self) -> None:
        best = pick_best_torrent([_torrent("a", 10), _torrent("b", 50)], 5)
        assert best is not None and best.name == "b"

    def test_floor_is_inclusive(self) -> None:
        best = pick_best_torrent([_torrent("edge", 5)], 5)
        assert best is not None and best.name == "edge"

    def test_below_floor_excluded(self) -> None:
        assert pick_best_torrent([_torrent("weak", 4)], 5) is None

    def test_empty(self) -> None:
        assert pick_best_torrent([], 5) is None


# ---------------------------------------------------------------------------
# auto_resolve
# ---------------------------------------------------------------------------


class TestAutoResolve:
    @pytest.mark.asyncio()
    async def test_ready_writes_stream_back(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [
            _torrent("Heat.1995.720p", 20),
            _torrent("Heat.1995.1080p", 90),
        ]
        mock_debrid.resolve_magnet_sync.return_value = _ready()

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "ready"
        assert outcome.torrent_name == "Heat.1995.1080p"
        assert outcome.stream_url == "https://rdb.so/d/heat.mkv"
        mock_torrent_index.search.assert_awaited_once_with("Heat 1995")
        saved: ContentItem = mock_content_repo.save.await_args.args[0]
        assert saved.video_embed_url == "https://rdb.so/d/heat.mkv"
        assert saved.is_published is True

    @pytest.mark.asyncio()
    async def test_prefers_streamable_file(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 30)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1",
            status=DebridStatus.DOWNLOADED,
            progress=100,
            streams=[
                DebridStream(download_url="https://rdb.so/d/sample.rar", filename="x.rar"),
                DebridStream(
                    download_url="https://rdb.so/d/heat.mp4",
                    filename="heat.mp4",
                    streamable=True,
                ),
            ],
        )

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.stream_url == "https://rdb.so/d/heat.mp4"

    @pytest.mark.asyncio()
    async def test_pending_when_not_cached(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 30)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1", status=DebridStatus.DOWNLOADING, progress=37
        )

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "pending"
        assert outcome.torrent_id == "T1"
        assert outcome.progress == 37
        assert "downloading" in outcome.message
        mock_content_repo.save.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_no_results_below_floor(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 2)]

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "no_results"
        assert outcome.message == "No torrents found"
        mock_debrid.resolve_magnet_sync.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_without_debrid(
        self,
        mock_torrent_index: AsyncMock,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
        pending_item: ContentItem,
    ) -> None:
        use_case = AutomationUseCase(
            torrent_index=mock_torrent_index,
            debrid=None,
            catalog=mock_catalog,
            content_repo=mock_content_repo,
        )

        with pytest.raises(DebridNotConfigured):
            await use_case.auto_resolve(pending_item)
        mock_torrent_index.search.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_year_from_tmdb_when_missing(
        self,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
        fake_sleep: AsyncMock,
    ) -> None:
        tmdb = AsyncMock()
        tmdb.get_release_year.return_value = 1995
        use_case = AutomationUseCase(
            torrent_index=mock_torrent_index,
            debrid=mock_debrid,
            catalog=mock_catalog,
            content_repo=mock_content_repo,
            tmdb=tmdb,
            sleep=fake_sleep,
        )
        item = ContentItem(id="x", ref=ContentRef(title="Heat"), tags=("tmdb:949",))

        await use_case.auto_resolve(item)

        tmdb.get_release_year.assert_awaited_once_with("949", "movie")
        mock_torrent_index.search.assert_awaited_once_with("Heat 1995")

    @pytest.mark.asyncio()
    async def test_index_error_propagates(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
    ) -> None:
        mock_torrent_index.search.side_effect = TorrentIndexError("down")

        with pytest.raises(TorrentIndexError):
            await use_case.auto_resolve(pending_item)

    @pytest.mark.asyncio()
    async def test_downloaded_without_streamable_file_is_not_saved(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 30)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1",
            status=DebridStatus.DOWNLOADED,
            progress=100,
            streams=[
                DebridStream(download_url="https://rdb.so/d/heat.rar", filename="heat.rar")
            ],
        )

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "no_playable"
        assert outcome.stream_url is None
        assert outcome.torrent_id == "T1"
        mock_content_repo.save.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_downloaded_without_files_is_not_pending(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 30)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1", status=DebridStatus.DOWNLOADED, progress=100
        )

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "no_playable"
        mock_content_repo.save.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_dead_torrent_is_failed(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
    ) -> None:
        mock_torrent_index.search.return_value = [_torrent("Heat", 30)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1", status=DebridStatus.DEAD
        )

        outcome = await use_case.auto_resolve(pending_item)

        assert outcome.status == "failed"
        assert outcome.message == "Torrent failed (dead)"


# ---------------------------------------------------------------------------
# resolve_for_item
# ---------------------------------------------------------------------------


class TestResolveForItem:
    @pytest.mark.asyncio()
    async def test_uses_given_magnet(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        magnet = "magnet:?xt=urn:btih:" + "B" * 40
        mock_debrid.resolve_magnet_sync.return_value = _ready()

        outcome = await use_case.resolve_for_item(pending_item, magnet)

        assert outcome.status == "ready"
        assert outcome.torrent_name is None
        mock_debrid.resolve_magnet_sync.assert_awaited_once_with(magnet)
        mock_torrent_index.search.assert_not_awaited()
        saved: ContentItem = mock_content_repo.save.await_args.args[0]
        assert saved.id == "pending-1"
        assert saved.is_published is True

    @pytest.mark.asyncio()
    async def test_still_downloading(
        self,
        use_case: AutomationUseCase,
        pending_item: ContentItem,
        mock_debrid: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T9", status=DebridStatus.DOWNLOADING, progress=12
        )

        outcome = await use_case.resolve_for_item(pending_item, "magnet:?xt=urn:btih:x")

        assert outcome.status == "pending"
        assert outcome.torrent_id == "T9"
        assert outcome.progress == 12
        mock_content_repo.save.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_without_debrid(
        self,
        mock_torrent_index: AsyncMock,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
        pending_item: ContentItem,
    ) -> None:
        use_case = AutomationUseCase(
            torrent_index=mock_torrent_index,
            debrid=None,
            catalog=mock_catalog,
            content_repo=mock_content_repo,
        )

        with pytest.raises(DebridNotConfigured):
            await use_case.resolve_for_item(pending_item, "magnet:?xt=urn:btih:x")


# ---------------------------------------------------------------------------
# bulk_auto_resolve
# ---------------------------------------------------------------------------


class TestBulkAutoResolve:
    @pytest.mark.asyncio()
    async def test_one_failure_does_not_abort_batch(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        fake_sleep: AsyncMock,
    ) -> None:
        items = [_draft("1", "Heat", year=1995), _draft("2", "Ronin", year=1998)]
        mock_content_repo.list_pending.return_value = items
        mock_torrent_index.search.return_value = [_torrent("t", 50)]
        mock_debrid.resolve_magnet_sync.side_effect = [
            TransportError("timeout"),
            _ready(),
        ]

        report = await use_case.bulk_auto_resolve()

        assert report.processed == 2
        assert report.resolved == ["Ronin"]
        assert report.failed == ["Heat: timeout"]
        assert report.pending == []
        mock_content_repo.list_pending.assert_awaited_once_with(5)
        assert fake_sleep.await_args_list == [call(1.0), call(1.0)]

    @pytest.mark.asyncio()
    async def test_classifies_pending_and_no_results(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
    ) -> None:
        mock_content_repo.list_pending.return_value = [
            _draft("1", "Heat", year=1995),
            _draft("2", "Obscure", year=2001),
        ]
        mock_torrent_index.search.side_effect = [[_torrent("t", 50)], []]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1", status=DebridStatus.QUEUED
        )

        report = await use_case.bulk_auto_resolve(limit=2)

        assert report.pending == ["Heat: Torrent added, waiting for download (queued)"]
        assert report.failed == ["Obscure: No torrents found"]
        mock_content_repo.list_pending.assert_awaited_once_with(2)

    @pytest.mark.asyncio()
    async def test_nothing_pending(
        self,
        use_case: AutomationUseCase,
        fake_sleep: AsyncMock,
    ) -> None:
        report = await use_case.bulk_auto_resolve()

        assert report.processed == 0
        fake_sleep.assert_not_awaited()


    @pytest.mark.asyncio()
    async def test_index_error_mid_batch(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
        fake_sleep: AsyncMock,
    ) -> None:
        mock_content_repo.list_pending.return_value = [
            _draft("1", "Heat", year=1995),
            _draft("2", "Ronin", year=1998),
            _draft("3", "Thief", year=1981),
        ]
        mock_torrent_index.search.side_effect = [
            [_torrent("heat", 50)],
            TorrentIndexError("index unreachable"),
            [_torrent("thief", 40)],
        ]
        mock_debrid.resolve_magnet_sync.return_value = _ready()

        report = await use_case.bulk_auto_resolve()

        assert report.processed == 3
        assert report.resolved == ["Heat", "Thief"]
        assert report.failed == ["Ronin: index unreachable"]
        assert mock_torrent_index.search.await_count == 3
        assert fake_sleep.await_count == 3

    @pytest.mark.asyncio()
    async def test_unplayable_download_counted_as_failed(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        mock_torrent_index: AsyncMock,
        mock_debrid: AsyncMock,
    ) -> None:
        mock_content_repo.list_pending.return_value = [_draft("1", "Heat", year=1995)]
        mock_torrent_index.search.return_value = [_torrent("t", 50)]
        mock_debrid.resolve_magnet_sync.return_value = ResolutionOutcome(
            torrent_id="T1", status=DebridStatus.DOWNLOADED, progress=100
        )

        report = await use_case.bulk_auto_resolve()

        assert report.resolved == []
        assert report.pending == []
        assert report.failed == [
            "Heat: Torrent downloaded but contains no streamable file"
        ]
        mock_content_repo.save.assert_not_awaited()


# ---------------------------------------------------------------------------
# Catalog refresh
# ---------------------------------------------------------------------------


class TestCatalogRefresh:
    @pytest.mark.asyncio()
    async def test_lookup_uses_clean_title_and_year(
        self,
        use_case: AutomationUseCase,
        mock_catalog: AsyncMock,
        fake_sleep: AsyncMock,
    ) -> None:
        item = ContentItem(id="x", ref=ContentRef(title="Heat (1995)"), tags=("tmdb:949",))

        report = await use_case.bulk_catalog_refresh([item])

        mock_catalog.lookup.assert_awaited_once_with("Heat", 1995, "movie", "949")
        assert report.total == 1
        assert report.found == 0
        fake_sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio()
    async def test_defaults_to_items_without_streams(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        mock_catalog: AsyncMock,
        content_item: ContentItem,
    ) -> None:
        mock_content_repo.list_all.return_value = [
            content_item,
            content_item.with_stream("https://x/embed"),
        ]

        report = await use_case.bulk_catalog_refresh()

        assert report.total == 1
        assert mock_catalog.lookup.await_count == 1

    @pytest.mark.asyncio()
    async def test_lookup_failure_recorded(
        self,
        use_case: AutomationUseCase,
        mock_catalog: AsyncMock,
        content_item: ContentItem,
        pending_item: ContentItem,
        found_result: ResolutionResult,
    ) -> None:
        mock_catalog.lookup.side_effect = [RuntimeError("boom"), found_result]

        report = await use_case.bulk_catalog_refresh([content_item, pending_item])

        assert report.total == 2
        assert report.found == 1
        assert report.entries[0].error == "boom"
        assert report.entries[1].success is True

    @pytest.mark.asyncio()
    async def test_apply_merges_free_offers(
        self,
        use_case: AutomationUseCase,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
        found_result: ResolutionResult,
    ) -> None:
        mock_catalog.lookup.return_value = found_result
        report = await use_case.bulk_catalog_refresh([content_item])
        mock_content_repo.get.return_value = content_item

        applied = await use_case.apply_catalog_refresh(report)

        assert applied == 1
        saved: ContentItem = mock_content_repo.save.await_args.args[0]
        assert saved.external_watch_links == {"tubi": "https://tubitv.com/movies/123"}

    @pytest.mark.asyncio()
    async def test_apply_skips_unsuccessful(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
    ) -> None:
        report = await use_case.bulk_catalog_refresh([content_item])

        assert await use_case.apply_catalog_refresh(report) == 0
        mock_content_repo.save.assert_not_awaited()


# ---------------------------------------------------------------------------
# stats and pending drafts
# ---------------------------------------------------------------------------


class TestStats:
    @pytest.mark.asyncio()
    async def test_counts(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
        pending_item: ContentItem,
    ) -> None:
        mock_content_repo.list_all.return_value = [
            content_item,
            pending_item,
            pending_item.with_stream("https://x/v.mp4"),
        ]

        stats = await use_case.stats()

        assert stats.total_drafts == 2
        assert stats.auto_imported == 2
        assert stats.needs_source == 2
        assert stats.published == 1

    @pytest.mark.asyncio()
    async def test_pending_newest_first(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
        pending_item: ContentItem,
    ) -> None:
        published = ContentItem(
            id="done",
            ref=ContentRef(title="Done"),
            video_embed_url="https://x/v.mp4",
            is_published=True,
        )
        mock_content_repo.list_all.return_value = [content_item, published, pending_item]

        items = await use_case.pending()

        # manual drafts count too, not only auto-imported ones
        assert [i.id for i in items] == ["pending-1", "item-1"]

    @pytest.mark.asyncio()
    async def test_pending_limit(
        self,
        use_case: AutomationUseCase,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
        pending_item: ContentItem,
    ) -> None:
        mock_content_repo.list_all.return_value = [content_item, pending_item]

        assert [i.id for i in await use_case.pending(limit=1)] == ["pending-1"]


# ---------------------------------------------------------------------------
# TMDB import
# ---------------------------------------------------------------------------


class TestImportTrending:
    @pytest.fixture()
    def tmdb(self) -> AsyncMock:
        tmdb = AsyncMock()
        tmdb.movie_list.return_value = [
            TmdbMovie(id=27205, title="Inception", year=2010),
            TmdbMovie(id=603, title="The Matrix", year=1999),
            TmdbMovie(id=949, title="Heat", year=1995),
        ]
        return tmdb

    @pytest.fixture()
    def use_case(
        self,
        mock_torrent_index: AsyncMock,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
        tmdb: AsyncMock,
    ) -> AutomationUseCase:
        return AutomationUseCase(
            torrent_index=mock_torrent_index,
            debrid=None,
            catalog=mock_catalog,
            content_repo=mock_content_repo,
            tmdb=tmdb,
        )

    @pytest.mark.asyncio()
    async def test_creates_drafts_and_skips_known(
        self,
        use_case: AutomationUseCase,
        tmdb: AsyncMock,
        mock_content_repo: AsyncMock,
        content_item: ContentItem,
    ) -> None:
        mock_content_repo.list_all.return_value = [content_item]

        report = await use_case.import_trending("popular", limit=2)

        tmdb.movie_list.assert_awaited_once_with("popular")
        assert [m.title for m in report.imported] == ["The Matrix"]
        assert report.skipped == [
            (TmdbMovie(id=27205, title="Inception", year=2010), "Already exists")
        ]
        saved: ContentItem = mock_content_repo.save.await_args.args[0]
        assert saved.title == "The Matrix"
        assert saved.ref.year == 1999
        assert saved.ref.external_id == "603"
        assert saved.tags == ("tmdb:603", AUTO_IMPORTED_TAG, "popular")
        assert saved.is_published is False
        assert saved.video_embed_url is None
        assert mock_content_repo.save.await_count == 1

    @pytest.mark.asyncio()
    async def test_duplicate_ids_in_one_list(
        self,
        use_case: AutomationUseCase,
        tmdb: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        movie = TmdbMovie(id=1, title="Heat", year=1995)
        tmdb.movie_list.return_value = [movie, movie]

        report = await use_case.import_trending()

        assert report.imported == [movie]
        assert report.skipped == [(movie, "Already exists")]
        assert mock_content_repo.save.await_count == 1

    @pytest.mark.asyncio()
    async def test_without_tmdb(
        self,
        mock_torrent_index: AsyncMock,
        mock_catalog: AsyncMock,
        mock_content_repo: AsyncMock,
    ) -> None:
        use_case = AutomationUseCase(
            torrent_index=mock_torrent_index,
            debrid=None,
            catalog=mock_catalog,
            content_repo=mock_content_repo,
        )

        with pytest.raises(TmdbNotConfigured):
            await use_case.import_trending()
        mock_content_repo.save.assert_not_awaited()
