"""Port for torrent index searches."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamresolver.domain.entities.automation import TorrentResult


@runtime_checkable
class TorrentIndexPort(Protocol):
    async def search(self, query: str) -> list[TorrentResult]:
        """Return results ranked by seeders (descending).

        Raises ``TorrentIndexError`` on transport or format failures.
        """
        ...
