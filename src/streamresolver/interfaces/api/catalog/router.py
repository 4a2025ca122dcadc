"""Catalog lookup endpoint (free streaming offers for a title)."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from streamresolver.domain.entities import MediaType
from streamresolver.interfaces.api.catalog.presenter import resolution_to_dict
from streamresolver.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


class LookupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    year: int | None = None
    media_type: MediaType | None = Field(default=None, alias="type")
    tmdb_id: str | int | None = None


@router.post("/lookup")
async def lookup(body: LookupRequest, request: Request) -> JSONResponse:
    """Match a title against the catalog; failures come back as ``found: false``."""
    state = cast(AppState, request.app.state)

    external_id = str(body.tmdb_id) if body.tmdb_id not in (None, "") else None
    result = await state.catalog.lookup(
        body.title,
        body.year,
        body.media_type,
        external_id,
    )
    log.info(
        "catalog_lookup",
        title=body.title,
        found=result.found,
        free_offers=len(result.free_offers),
    )
    return JSONResponse(content=resolution_to_dict(result))
