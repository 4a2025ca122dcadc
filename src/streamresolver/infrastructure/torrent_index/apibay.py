"""Torrent index search against the apibay JSON API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from streamresolver.domain.entities.automation import TorrentIndexError, TorrentResult
from streamresolver.infrastructure.config.schema import TorrentIndexConfig

log = structlog.get_logger(__name__)

# apibay answers "no results" with a single placeholder row carrying this hash
_EMPTY_HASH = "0" * 40


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def build_magnet(info_hash: str, name: str) -> str:
    return f"magnet:?xt=urn:btih:{info_hash}&dn={quote(name, safe='')}"


class ApibayTorrentIndex:
    """Async torrent index client using httpx.

    Implements ``TorrentIndexPort`` from domain.ports.torrent_index.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        config: TorrentIndexConfig | None = None,
    ) -> None:
        self._http = http_client
        self._config = config or TorrentIndexConfig()

    @staticmethod
    def _to_result(row: dict[str, Any]) -> TorrentResult:
        name = str(row.get("name") or "")
        info_hash = str(row.get("info_hash") or "")
        return TorrentResult(
            name=name,
            info_hash=info_hash,
            seeders=_as_int(row.get("seeders")),
            leechers=_as_int(row.get("leechers")),
            size_bytes=_as_int(row.get("size")),
            magnet=build_magnet(info_hash, name),
        )

    async def search(self, query: str) -> list[TorrentResult]:
        """Search the index; results with seeders, best first."""
        params = {"q": query, "cat": str(self._config.category)}
        try:
            resp = await self._http.get(self._config.search_url, params=params)
            resp.raise_for_status()
            rows = resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning("torrent_index_http_error", query=query, exc_info=True)
            raise TorrentIndexError(
                f"Torrent search failed with HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("torrent_index_network_error", query=query, exc_info=True)
            raise TorrentIndexError("Torrent search API unreachable") from exc
        except ValueError as exc:
            raise TorrentIndexError("Torrent search returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise TorrentIndexError("Torrent search returned an unexpected shape")

        results = [
            self._to_result(row)
            for row in rows
            if isinstance(row, dict)
            and str(row.get("info_hash") or "") not in ("", _EMPTY_HASH)
            and _as_int(row.get("seeders")) > 0
        ][: self._config.max_results]
        results.sort(key=lambda r: r.seeders, reverse=True)

        log.info("torrent_index_search", query=query, results=len(results))
        return results
