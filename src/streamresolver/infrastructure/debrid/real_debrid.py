"""Real-Debrid resolver: async httpx implementation.

Request/response only: no timers and no internal retries. Callers drive
``poll_status`` themselves and stop on a terminal status.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

from streamresolver.domain.entities.debrid import (
    AddedTorrent,
    AnomalousState,
    DebridAccount,
    DebridError,
    DebridJob,
    DebridNotConfigured,
    DebridStatus,
    DebridStream,
    InvalidMagnetFormat,
    ResolutionOutcome,
    ServiceRejected,
    TransportError,
    UnrestrictedLink,
)

log = structlog.get_logger(__name__)

_DEFAULT_API_URL = "https://api.real-debrid.com/rest/1.0"
_EPISODE_RE = re.compile(r"[Ss](\d{1,2})[Ee](\d{1,2})")


def _parse_status(raw: Any) -> DebridStatus:
    try:
        return DebridStatus(str(raw).lower())
    except ValueError:
        log.warning("debrid_unknown_status", status=raw)
        return DebridStatus.ERROR


def _progress(raw: Any) -> int:
    try:
        value = int(round(float(raw)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, value))


def _episode_marker(filename: str) -> tuple[int | None, int | None]:
    m = _EPISODE_RE.search(filename)
    if not m:
        return None, None
    return int(m.group(1)), int(m.group(2))


def _stream_sort_key(stream: DebridStream) -> tuple[bool, int, int]:
    return (stream.season is None, stream.season or 0, stream.episode or 0)


class RealDebridResolver:
    """Async debrid client using httpx.

    Implements ``DebridResolverPort`` from domain.ports.debrid.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        api_key: str | None,
        api_url: str = _DEFAULT_API_URL,
        sync_wait_seconds: float = 2.0,
        max_sync_links: int = 5,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if not api_key:
            raise DebridNotConfigured("Real-Debrid API key not configured")
        self._http = http_client
        self._api_url = api_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._sync_wait = sync_wait_seconds
        self._max_sync_links = max_sync_links
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _call(
        self,
        method: str,
        path: str,
        *,
        data: dict[str, str] | None = None,
        missing_is_transport: bool = False,
    ) -> dict[str, Any]:
        """Single request, mapped onto the debrid error taxonomy.

        Form-encoded body, bearer auth. 204/empty bodies yield ``{}``.
        """
        url = f"{self._api_url}/{path}"
        try:
            resp = await self._http.request(
                method, url, data=data, headers=self._headers
            )
        except httpx.HTTPError as exc:
            log.warning("debrid_network_error", path=path, exc_info=True)
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 500:
            log.warning("debrid_server_error", path=path, status=resp.status_code)
            raise TransportError(f"{method} {path} returned HTTP {resp.status_code}")

        if resp.status_code == 404 and missing_is_transport:
            log.warning("debrid_torrent_missing", path=path)
            raise TransportError(f"{path}: torrent not found")

        if resp.status_code >= 400:
            payload = self._safe_json(resp)
            message = payload.get("error") or f"HTTP {resp.status_code}"
            log.warning(
                "debrid_request_rejected",
                path=path,
                status=resp.status_code,
                error=message,
                error_code=payload.get("error_code"),
            )
            raise ServiceRejected(
                str(message),
                status_code=resp.status_code,
                error_code=payload.get("error_code"),
            )

        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            data_out = resp.json()
        except ValueError as exc:
            raise TransportError(f"{method} {path}: invalid JSON response") from exc
        if not isinstance(data_out, dict):
            raise TransportError(f"{method} {path}: unexpected response shape")
        return data_out

    @staticmethod
    def _safe_json(resp: httpx.Response) -> dict[str, Any]:
        try:
            payload = resp.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    async def _fetch_job(self, torrent_id: str) -> DebridJob:
        data = await self._call(
            "GET", f"torrents/info/{torrent_id}", missing_is_transport=True
        )
        return DebridJob(
            torrent_id=str(data.get("id") or torrent_id),
            status=_parse_status(data.get("status")),
            progress=_progress(data.get("progress")),
            filename=data.get("filename"),
            links=[str(link) for link in data.get("links") or []],
        )

    # ------------------------------------------------------------------
    # Public API (DebridResolverPort)
    # ------------------------------------------------------------------

    async def add_magnet(self, magnet: str) -> AddedTorrent:
        """Submit a magnet and select all files; both calls are mandatory."""
        magnet = (magnet or "").strip()
        if not magnet.lower().startswith("magnet:"):
            log.info("debrid_invalid_magnet", magnet=magnet[:64])
            raise InvalidMagnetFormat("Magnet link must start with 'magnet:'")

        data = await self._call("POST", "torrents/addMagnet", data={"magnet": magnet})
        torrent_id = data.get("id")
        if not torrent_id:
            raise TransportError("addMagnet response did not include a torrent id")
        torrent_id = str(torrent_id)

        await self._call(
            "POST", f"torrents/selectFiles/{torrent_id}", data={"files": "all"}
        )
        log.info("debrid_magnet_added", torrent_id=torrent_id)
        return AddedTorrent(torrent_id=torrent_id, status=DebridStatus.QUEUED)

    async def poll_status(self, torrent_id: str) -> DebridJob:
        """Single status fetch.

        ``downloaded`` without links is reported as ``error`` so a polling
        caller stops instead of waiting forever.
        """
        job = await self._fetch_job(torrent_id)
        if job.status is DebridStatus.DOWNLOADED and not job.links:
            log.error("debrid_downloaded_without_links", torrent_id=torrent_id)
            job.status = DebridStatus.ERROR
            job.error = "Torrent reported downloaded but exposes no links"
        return job

    async def unrestrict_link(self, link: str) -> UnrestrictedLink:
        data = await self._call("POST", "unrestrict/link", data={"link": link})
        download = data.get("download")
        if not download:
            raise TransportError("unrestrict response did not include a download URL")
        return UnrestrictedLink(
            download_url=str(download),
            filename=data.get("filename") or "",
            filesize=int(data.get("filesize") or 0),
            streamable=bool(data.get("streamable")),
            mime_type=data.get("mimeType"),
            host=data.get("host"),
        )

    async def resolve_magnet_sync(self, magnet: str) -> ResolutionOutcome:
        """Add, wait, poll once and unrestrict if the torrent is already cached.

        Returns the in-progress status (no streams) when it is not; the
        caller continues with ``poll_status``.
        """
        added = await self.add_magnet(magnet)
        await self._sleep(self._sync_wait)

        job = await self._fetch_job(added.torrent_id)
        if job.status is DebridStatus.DOWNLOADED and not job.links:
            log.error("debrid_downloaded_without_links", torrent_id=job.torrent_id)
            raise AnomalousState(
                f"Torrent {job.torrent_id} reported downloaded but exposes no links"
            )
        if job.status is not DebridStatus.DOWNLOADED:
            return ResolutionOutcome(
                torrent_id=added.torrent_id,
                status=job.status,
                progress=job.progress,
            )

        streams: list[DebridStream] = []
        for link in job.links[: self._max_sync_links]:
            try:
                unrestricted = await self.unrestrict_link(link)
            except DebridError as exc:
                log.warning(
                    "debrid_unrestrict_skipped",
                    torrent_id=added.torrent_id,
                    link=link,
                    error=str(exc),
                )
                continue
            season, episode = _episode_marker(unrestricted.filename)
            streams.append(
                DebridStream(
                    download_url=unrestricted.download_url,
                    filename=unrestricted.filename,
                    filesize=unrestricted.filesize,
                    streamable=unrestricted.streamable,
                    season=season,
                    episode=episode,
                )
            )

        streams.sort(key=_stream_sort_key)
        log.info(
            "debrid_magnet_resolved",
            torrent_id=added.torrent_id,
            streams=len(streams),
        )
        return ResolutionOutcome(
            torrent_id=added.torrent_id,
            status=DebridStatus.DOWNLOADED,
            progress=100,
            streams=streams,
        )

    async def account_status(self) -> DebridAccount:
        data = await self._call("GET", "user")
        return DebridAccount(
            username=data.get("username") or "",
            premium=int(data.get("premium") or 0) > 0,
            expiration=data.get("expiration"),
        )
