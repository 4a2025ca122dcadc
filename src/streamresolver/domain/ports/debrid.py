"""Port for the magnet → direct stream debrid service."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamresolver.domain.entities.debrid import (
    AddedTorrent,
    DebridAccount,
    DebridJob,
    ResolutionOutcome,
    UnrestrictedLink,
)


@runtime_checkable
class DebridResolverPort(Protocol):
    """Request/response API over a debrid service.

    Owns no timers: callers drive ``poll_status`` at their own interval
    and stop on a terminal status. No call is retried internally.
    """

    async def add_magnet(self, magnet: str) -> AddedTorrent:
        """Submit a magnet and select all of its files."""
        ...

    async def poll_status(self, torrent_id: str) -> DebridJob:
        """Single status fetch for a torrent."""
        ...

    async def unrestrict_link(self, link: str) -> UnrestrictedLink:
        """Convert one cached-service link into a direct URL."""
        ...

    async def resolve_magnet_sync(self, magnet: str) -> ResolutionOutcome:
        """Add, wait briefly, poll once and unrestrict when already cached."""
        ...

    async def account_status(self) -> DebridAccount: ...
