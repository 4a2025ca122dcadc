"""Debrid endpoints: magnet submission, status polling and link unrestriction.

Domain errors raised here are turned into JSON by ``api/errors.py``.
"""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from streamresolver.domain.entities import DebridNotConfigured
from streamresolver.domain.ports import DebridResolverPort
from streamresolver.interfaces.api.debrid.presenter import (
    account_to_dict,
    added_to_dict,
    job_to_dict,
    outcome_to_dict,
    unrestricted_to_dict,
)
from streamresolver.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/debrid", tags=["debrid"])


class MagnetRequest(BaseModel):
    magnet: str


class UnrestrictRequest(BaseModel):
    link: str


def _debrid(request: Request) -> DebridResolverPort:
    state = cast(AppState, request.app.state)
    if state.debrid is None:
        raise DebridNotConfigured("Real-Debrid API key not configured")
    return state.debrid


@router.get("/status")
async def status(request: Request) -> JSONResponse:
    account = await _debrid(request).account_status()
    return JSONResponse(content=account_to_dict(account))


@router.post("/magnets")
async def add_magnet(body: MagnetRequest, request: Request) -> JSONResponse:
    added = await _debrid(request).add_magnet(body.magnet)
    return JSONResponse(content=added_to_dict(added))


@router.get("/torrents/{torrent_id}")
async def poll_torrent(torrent_id: str, request: Request) -> JSONResponse:
    """Single status fetch; callers poll at their own interval."""
    job = await _debrid(request).poll_status(torrent_id)
    return JSONResponse(content=job_to_dict(job))


@router.post("/unrestrict")
async def unrestrict(body: UnrestrictRequest, request: Request) -> JSONResponse:
    link = await _debrid(request).unrestrict_link(body.link)
    return JSONResponse(content=unrestricted_to_dict(link))


@router.post("/resolve")
async def resolve(body: MagnetRequest, request: Request) -> JSONResponse:
    outcome = await _debrid(request).resolve_magnet_sync(body.magnet)
    log.info(
        "debrid_resolve",
        torrent_id=outcome.torrent_id,
        status=outcome.status.value,
        streams=len(outcome.streams),
    )
    return JSONResponse(content=outcome_to_dict(outcome))
