"""Content item storage and playback plan endpoints."""

from __future__ import annotations

from dataclasses import replace
from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from streamresolver.domain.entities import (
    ContentItem,
    ContentNotFound,
    ContentRef,
    MediaType,
)
from streamresolver.interfaces.api.content.presenter import item_to_dict, plan_to_dict
from streamresolver.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/content", tags=["content"])


class ContentIn(BaseModel):
    title: str = Field(min_length=1)
    media_type: MediaType = "movie"
    year: int | None = None
    season: int | None = None
    episode: int | None = None
    external_id: str | None = None
    video_embed_url: str | None = None
    external_watch_links: dict[str, str] | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool = False


async def _require_item(state: AppState, content_id: str) -> ContentItem:
    item = await state.content_repo.get(content_id)
    if item is None:
        raise ContentNotFound(content_id)
    return item


@router.put("/{content_id}")
async def put_content(content_id: str, body: ContentIn, request: Request) -> JSONResponse:
    """Create or replace an item; ``created_at`` survives replacement."""
    state = cast(AppState, request.app.state)

    item = ContentItem(
        id=content_id,
        ref=ContentRef(
            title=body.title,
            media_type=body.media_type,
            year=body.year,
            season=body.season,
            episode=body.episode,
            external_id=body.external_id,
        ),
        video_embed_url=body.video_embed_url,
        external_watch_links=body.external_watch_links,
        tags=tuple(body.tags),
        is_published=body.is_published,
    )
    existing = await state.content_repo.get(content_id)
    if existing is not None:
        item = replace(item, created_at=existing.created_at)

    await state.content_repo.save(item)
    log.info("content_stored", content_id=content_id, replaced=existing is not None)
    return JSONResponse(content=item_to_dict(item))


@router.get("/{content_id}")
async def get_content(content_id: str, request: Request) -> JSONResponse:
    state = cast(AppState, request.app.state)
    item = await _require_item(state, content_id)
    return JSONResponse(content=item_to_dict(item))


@router.get("/{content_id}/playback")
async def get_playback(
    content_id: str,
    request: Request,
    season: int | None = Query(default=None, ge=1),
    episode: int | None = Query(default=None, ge=1),
) -> JSONResponse:
    """Ordered in-app sources plus external watch links for an item."""
    state = cast(AppState, request.app.state)
    item = await _require_item(state, content_id)
    plan = state.engine.build_plan(item, season=season, episode=episode)
    return JSONResponse(content=plan_to_dict(plan))
