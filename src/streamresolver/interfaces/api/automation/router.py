"""Admin automation endpoints: auto-resolve, catalog refresh and TMDB import."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from streamresolver.domain.entities import (
    AutoResolveOutcome,
    CatalogRefreshReport,
    ContentItem,
    ContentNotFound,
    TorrentResult,
)
from streamresolver.domain.entities.automation import TrendingCategory
from streamresolver.interfaces.api.catalog.presenter import offer_to_dict
from streamresolver.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/automation", tags=["automation"])


class BulkResolveRequest(BaseModel):
    limit: int | None = Field(default=None, ge=1)


class ResolveMagnetRequest(BaseModel):
    magnet: str = Field(min_length=1)


class ImportTrendingRequest(BaseModel):
    category: TrendingCategory = "trending"
    limit: int = Field(default=10, ge=1, le=20)


def _torrent_to_dict(result: TorrentResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "info_hash": result.info_hash,
        "seeders": result.seeders,
        "leechers": result.leechers,
        "size": result.size,
        "magnet": result.magnet,
    }


def _outcome_to_dict(outcome: AutoResolveOutcome) -> dict[str, Any]:
    return {
        "success": outcome.status in ("ready", "pending"),
        "status": outcome.status,
        "message": outcome.message,
        "torrent": outcome.torrent_name,
        "torrent_id": outcome.torrent_id,
        "progress": outcome.progress,
        "streamUrl": outcome.stream_url,
    }


def _pending_to_dict(item: ContentItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "title": item.title,
        "tags": list(item.tags),
        "created_at": item.created_at.isoformat(),
    }


def _refresh_to_dict(report: CatalogRefreshReport) -> dict[str, Any]:
    return {
        "total": report.total,
        "found": report.found,
        "results": [
            {
                "id": e.item.id,
                "title": e.item.title,
                "success": e.success,
                "error": e.error,
                "freeStreaming": [offer_to_dict(o) for o in e.result.free_offers],
            }
            for e in report.entries
        ],
    }


@router.get("/torrents")
async def search_torrents(
    request: Request,
    query: str = Query(min_length=1),
    year: int | None = Query(default=None),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    results = await state.automation_uc.search_torrents(query, year)
    return JSONResponse(
        content={
            "success": True,
            "torrents": [_torrent_to_dict(r) for r in results],
        }
    )


@router.post("/auto-resolve/{content_id}")
async def auto_resolve(content_id: str, request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    item = await state.content_repo.get(content_id)
    if item is None:
        raise ContentNotFound(content_id)

    outcome = await state.automation_uc.auto_resolve(item)
    return JSONResponse(content=_outcome_to_dict(outcome))


@router.post("/resolve/{content_id}")
async def resolve_magnet(
    content_id: str, body: ResolveMagnetRequest, request: Request
) -> JSONResponse:
    """Resolve an operator-chosen magnet for one content item."""
    state = cast(AppState, request.app.state)
    item = await state.content_repo.get(content_id)
    if item is None:
        raise ContentNotFound(content_id)

    outcome = await state.automation_uc.resolve_for_item(item, body.magnet)
    return JSONResponse(content=_outcome_to_dict(outcome))


@router.post("/bulk-auto-resolve")
async def bulk_auto_resolve(
    request: Request, body: BulkResolveRequest | None = None
) -> JSONResponse:
    """Sequential over pending items; per-item failures land in ``failed``."""
    state = cast(AppState, request.app.state)
    limit = body.limit if body is not None else None
    report = await state.automation_uc.bulk_auto_resolve(limit)
    return JSONResponse(content={"success": True, **asdict(report)})


@router.post("/catalog-refresh")
async def catalog_refresh(request: Request) -> JSONResponse:
    """Look up every item without a stream; results wait for ``/apply``."""
    state = cast(AppState, request.app.state)
    report = await state.automation_uc.bulk_catalog_refresh()
    state.pending_refresh = report
    return JSONResponse(content=_refresh_to_dict(report))


@router.post("/catalog-refresh/apply")
async def apply_catalog_refresh(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    report = state.pending_refresh
    if report is None:
        return JSONResponse(
            status_code=409,
            content={"error": "no_pending_refresh", "success": False},
        )

    applied = await state.automation_uc.apply_catalog_refresh(report)
    state.pending_refresh = None
    return JSONResponse(content={"success": True, "applied": applied})


@router.get("/stats")
async def stats(request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.automation_uc.stats()
    return JSONResponse(
        content={
            "success": True,
            "stats": {
                "totalDrafts": result.total_drafts,
                "autoImported": result.auto_imported,
                "needsSource": result.needs_source,
                "published": result.published,
            },
        }
    )


@router.get("/pending")
async def pending(
    request: Request, limit: int = Query(default=50, ge=1, le=200)
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    items = await state.automation_uc.pending(limit)
    return JSONResponse(
        content={
            "success": True,
            "count": len(items),
            "items": [_pending_to_dict(i) for i in items],
        }
    )


@router.post("/import-trending")
async def import_trending(
    request: Request, body: ImportTrendingRequest | None = None
) -> JSONResponse:
    """Create drafts from TMDB's trending (or popular) movies."""
    state = cast(AppState, request.app.state)
    body = body or ImportTrendingRequest()
    report = await state.automation_uc.import_trending(body.category, body.limit)
    return JSONResponse(
        content={
            "success": True,
            "imported": len(report.imported),
            "skipped": len(report.skipped),
            "importedMovies": [
                {"title": m.title, "tmdb_id": m.id} for m in report.imported
            ],
            "skippedMovies": [
                {"title": m.title, "reason": reason} for m, reason in report.skipped
            ],
        }
    )
