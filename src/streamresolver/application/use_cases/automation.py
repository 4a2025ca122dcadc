"""Admin automation: torrent auto-resolve, catalog refresh and TMDB import."""

from __future__ import annotations

import asyncio
import re
import uuid
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from streamresolver.application.use_cases.stream_resolution import (
    extract_external_id,
)
from streamresolver.domain.entities import (
    AutoResolveOutcome,
    AutomationStats,
    BulkResolveReport,
    CatalogRefreshEntry,
    CatalogRefreshReport,
    ContentItem,
    ContentRef,
    DebridNotConfigured,
    DebridStatus,
    ResolutionOutcome,
    ResolutionResult,
    TmdbNotConfigured,
    TorrentResult,
    TrendingImportReport,
)
from streamresolver.domain.entities.automation import TrendingCategory
from streamresolver.domain.entities.content import AUTO_IMPORTED_TAG
from streamresolver.domain.ports import (
    CatalogMatcherPort,
    ContentRepository,
    DebridResolverPort,
    TmdbClientPort,
    TorrentIndexPort,
)
from streamresolver.infrastructure.config.schema import AutomationConfig

log = structlog.get_logger(__name__)

_TRAILING_YEAR_RE = re.compile(r"\s*\((\d{4})\)\s*$")


def split_title_year(title: str) -> tuple[str, int | None]:
    """``"Heat (1995)"`` -> ``("Heat", 1995)``; titles without a suffix pass through."""
    m = _TRAILING_YEAR_RE.search(title)
    if not m:
        return title.strip(), None
    return title[: m.start()].strip(), int(m.group(1))


def pick_best_torrent(
    results: Sequence[TorrentResult], min_seeders: int
) -> TorrentResult | None:
    """Most-seeded result at or above the floor; results below are excluded."""
    eligible = [r for r in results if r.seeders >= min_seeders]
    if not eligible:
        return None
    return max(eligible, key=lambda r: r.seeders)


class AutomationUseCase:
    """Drives the catalog, torrent index and debrid ports for admin tooling.

    Bulk operations run strictly sequentially with a fixed delay after
    each item, and one item's failure never aborts the batch.
    """

    def __init__(
        self,
        torrent_index: TorrentIndexPort,
        debrid: DebridResolverPort | None,
        catalog: CatalogMatcherPort,
        content_repo: ContentRepository,
        config: AutomationConfig | None = None,
        tmdb: TmdbClientPort | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._torrent_index = torrent_index
        self._debrid = debrid
        self._catalog = catalog
        self._content_repo = content_repo
        self._config = config or AutomationConfig()
        self._tmdb = tmdb
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Torrent auto-resolve
    # ------------------------------------------------------------------

    async def search_torrents(
        self, title: str, year: int | None = None
    ) -> list[TorrentResult]:
        query = f"{title} {year}" if year else title
        return await self._torrent_index.search(query)

    def pick_best_torrent(
        self, results: Sequence[TorrentResult]
    ) -> TorrentResult | None:
        return pick_best_torrent(results, self._config.min_seeders)

    async def _release_year(self, item: ContentItem) -> int | None:
        if item.ref.year is not None:
            return item.ref.year
        if self._tmdb is None:
            return None
        tmdb_id, media_type = extract_external_id(item)
        if not tmdb_id:
            return None
        return await self._tmdb.get_release_year(tmdb_id, media_type)

    async def auto_resolve(self, item: ContentItem) -> AutoResolveOutcome:
        """Search, pick the best torrent and try to resolve it right away.

        On ``ready`` the stream URL is written back and the item published.
        Index and debrid errors propagate to the caller.
        """
        if self._debrid is None:
            raise DebridNotConfigured("Real-Debrid API key not configured")

        year = await self._release_year(item)
        results = await self.search_torrents(item.title, year)
        best = self.pick_best_torrent(results)
        if best is None:
            log.info(
                "auto_resolve_no_results",
                content_id=item.id,
                results=len(results),
                min_seeders=self._config.min_seeders,
            )
            return AutoResolveOutcome(
                content_id=item.id,
                status="no_results",
                message="No torrents found",
            )

        log.info(
            "auto_resolve_torrent_selected",
            content_id=item.id,
            torrent=best.name,
            seeders=best.seeders,
        )
        outcome = await self._debrid.resolve_magnet_sync(best.magnet)
        return await self._finish(item, outcome, best.name)

    async def resolve_for_item(
        self, item: ContentItem, magnet: str
    ) -> AutoResolveOutcome:
        """Resolve an operator-chosen magnet for *item* without searching."""
        if self._debrid is None:
            raise DebridNotConfigured("Real-Debrid API key not configured")

        log.info("resolve_for_item_started", content_id=item.id)
        outcome = await self._debrid.resolve_magnet_sync(magnet)
        return await self._finish(item, outcome, None)

    async def _finish(
        self,
        item: ContentItem,
        outcome: ResolutionOutcome,
        torrent_name: str | None,
    ) -> AutoResolveOutcome:
        """Publish the first streamable file, or report why nothing was saved."""
        if outcome.status is DebridStatus.DOWNLOADED:
            playable = outcome.playable
            if not playable:
                log.warning(
                    "auto_resolve_no_playable",
                    content_id=item.id,
                    torrent_id=outcome.torrent_id,
                    files=len(outcome.streams),
                )
                return AutoResolveOutcome(
                    content_id=item.id,
                    status="no_playable",
                    message="Torrent downloaded but contains no streamable file",
                    torrent_name=torrent_name,
                    torrent_id=outcome.torrent_id,
                    progress=100,
                )

            stream_url = playable[0].download_url
            await self._content_repo.save(item.with_stream(stream_url))
            log.info("auto_resolve_ready", content_id=item.id, torrent=torrent_name)
            return AutoResolveOutcome(
                content_id=item.id,
                status="ready",
                message="Stream resolved",
                torrent_name=torrent_name,
                torrent_id=outcome.torrent_id,
                progress=100,
                stream_url=stream_url,
            )

        if outcome.status.is_failure:
            log.warning(
                "auto_resolve_torrent_failed",
                content_id=item.id,
                torrent_id=outcome.torrent_id,
                status=outcome.status.value,
            )
            return AutoResolveOutcome(
                content_id=item.id,
                status="failed",
                message=f"Torrent failed ({outcome.status.value})",
                torrent_name=torrent_name,
                torrent_id=outcome.torrent_id,
                progress=outcome.progress,
            )

        return AutoResolveOutcome(
            content_id=item.id,
            status="pending",
            message=f"Torrent added, waiting for download ({outcome.status.value})",
            torrent_name=torrent_name,
            torrent_id=outcome.torrent_id,
            progress=outcome.progress,
        )

    async def bulk_auto_resolve(self, limit: int | None = None) -> BulkResolveReport:
        items = await self._content_repo.list_pending(
            limit if limit is not None else self._config.bulk_resolve_limit
        )
        report = BulkResolveReport()

        for item in items:
            report.processed += 1
            try:
                outcome = await self.auto_resolve(item)
            except Exception as exc:  # one item never aborts the batch
                log.warning(
                    "bulk_auto_resolve_item_failed",
                    content_id=item.id,
                    error=str(exc),
                    exc_info=True,
                )
                report.failed.append(f"{item.title}: {exc}")
            else:
                if outcome.status == "ready":
                    report.resolved.append(item.title)
                elif outcome.status == "pending":
                    report.pending.append(f"{item.title}: {outcome.message}")
                else:
                    report.failed.append(f"{item.title}: {outcome.message}")

            await self._sleep(self._config.bulk_resolve_delay_seconds)

        log.info(
            "bulk_auto_resolve_done",
            processed=report.processed,
            resolved=len(report.resolved),
            pending=len(report.pending),
            failed=len(report.failed),
        )
        return report

    # ------------------------------------------------------------------
    # Catalog refresh
    # ------------------------------------------------------------------

    async def bulk_catalog_refresh(
        self, items: Sequence[ContentItem] | None = None
    ) -> CatalogRefreshReport:
        """Look up free offers for every item without a stream.

        Nothing is written; the report is applied separately once approved.
        """
        if items is None:
            items = [i for i in await self._content_repo.list_all() if not i.has_streams]

        report = CatalogRefreshReport()
        for item in items:
            title, title_year = split_title_year(item.title)
            external_id, _ = extract_external_id(item)
            try:
                result = await self._catalog.lookup(
                    title,
                    item.ref.year or title_year,
                    item.ref.media_type,
                    external_id,
                )
                report.entries.append(CatalogRefreshEntry(item=item, result=result))
            except Exception as exc:  # one item never aborts the batch
                log.warning(
                    "catalog_refresh_item_failed",
                    content_id=item.id,
                    exc_info=True,
                )
                report.entries.append(
                    CatalogRefreshEntry(
                        item=item,
                        result=ResolutionResult.not_found(),
                        error=str(exc),
                    )
                )

            await self._sleep(self._config.catalog_refresh_delay_seconds)

        log.info(
            "catalog_refresh_done",
            total=report.total,
            found=report.found,
        )
        return report

    async def apply_catalog_refresh(self, report: CatalogRefreshReport) -> int:
        """Merge approved free offers into each item's watch links."""
        applied = 0
        for entry in report.successful:
            current = await self._content_repo.get(entry.item.id) or entry.item
            await self._content_repo.save(
                current.with_watch_links(entry.result.to_watch_links())
            )
            applied += 1
        log.info("catalog_refresh_applied", items=applied)
        return applied

    # ------------------------------------------------------------------
    # Draft overview
    # ------------------------------------------------------------------

    async def stats(self) -> AutomationStats:
        items = await self._content_repo.list_all()
        return AutomationStats(
            total_drafts=sum(1 for i in items if not i.is_published),
            auto_imported=sum(1 for i in items if i.is_auto_imported),
            needs_source=sum(
                1 for i in items if not i.is_published and not i.video_embed_url
            ),
            published=sum(1 for i in items if i.is_published),
        )

    async def pending(self, limit: int = 50) -> list[ContentItem]:
        """Unpublished items without a stream, newest first."""
        items = [
            i
            for i in await self._content_repo.list_all()
            if not i.is_published and not i.video_embed_url
        ]
        items.sort(key=lambda i: i.created_at, reverse=True)
        return items[:limit]

    # ------------------------------------------------------------------
    # TMDB import
    # ------------------------------------------------------------------

    async def import_trending(
        self, category: TrendingCategory = "trending", limit: int = 10
    ) -> TrendingImportReport:
        """Create unpublished drafts for TMDB movies not yet in the catalog.

        Titles already tagged ``tmdb:<id>`` are skipped; nothing is resolved.
        """
        if self._tmdb is None:
            raise TmdbNotConfigured("TMDB API key not configured")

        movies = (await self._tmdb.movie_list(category))[:limit]
        known = {
            tag
            for item in await self._content_repo.list_all()
            for tag in item.tags
            if tag.startswith("tmdb:")
        }

        report = TrendingImportReport()
        for movie in movies:
            tag = f"tmdb:{movie.id}"
            if tag in known:
                report.skipped.append((movie, "Already exists"))
                continue

            item = ContentItem(
                id=uuid.uuid4().hex,
                ref=ContentRef(
                    title=movie.title,
                    media_type="movie",
                    year=movie.year,
                    external_id=str(movie.id),
                ),
                tags=(tag, AUTO_IMPORTED_TAG, category),
            )
            await self._content_repo.save(item)
            known.add(tag)
            report.imported.append(movie)

        log.info(
            "trending_import_done",
            category=category,
            imported=len(report.imported),
            skipped=len(report.skipped),
        )
        return report
