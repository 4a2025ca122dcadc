"""Domain entities and errors for debrid (magnet → direct stream) resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DebridStatus(str, Enum):
    """Torrent lifecycle states as reported by the debrid service."""

    ADDING = "adding"
    MAGNET_ERROR = "magnet_error"
    MAGNET_CONVERSION = "magnet_conversion"
    WAITING_FILES_SELECTION = "waiting_files_selection"
    QUEUED = "queued"
    DOWNLOADING = "downloading"
    COMPRESSING = "compressing"
    UPLOADING = "uploading"
    DOWNLOADED = "downloaded"
    ERROR = "error"
    VIRUS = "virus"
    DEAD = "dead"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_failure(self) -> bool:
        return self in _TERMINAL and self is not DebridStatus.DOWNLOADED


_TERMINAL = frozenset(
    {
        DebridStatus.DOWNLOADED,
        DebridStatus.ERROR,
        DebridStatus.DEAD,
        DebridStatus.MAGNET_ERROR,
        DebridStatus.VIRUS,
    }
)


@dataclass(frozen=True)
class AddedTorrent:
    """Result of submitting a magnet (files already selected)."""

    torrent_id: str
    status: DebridStatus
    progress: int = 0


@dataclass
class DebridJob:
    """Mutable per-torrent state, refreshed by each status poll."""

    torrent_id: str
    status: DebridStatus
    progress: int = 0
    filename: str | None = None
    links: list[str] = field(default_factory=list)
    resolved_links: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_ready(self) -> bool:
        return self.status is DebridStatus.DOWNLOADED and bool(self.links)


@dataclass(frozen=True)
class UnrestrictedLink:
    """A cached-service link converted into a direct download URL."""

    download_url: str
    filename: str
    filesize: int = 0
    streamable: bool = False
    mime_type: str | None = None
    host: str | None = None


@dataclass(frozen=True)
class DebridStream:
    """One playable file produced by a resolved torrent."""

    download_url: str
    filename: str
    filesize: int = 0
    streamable: bool = False
    season: int | None = None
    episode: int | None = None


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of the synchronous add → poll-once → unrestrict attempt.

    ``streams`` is empty while the torrent is still processing; callers
    continue with ``poll_status(torrent_id)`` in that case.
    """

    torrent_id: str
    status: DebridStatus
    progress: int = 0
    streams: list[DebridStream] = field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        return self.status is DebridStatus.DOWNLOADED and bool(self.streams)

    @property
    def playable(self) -> list[DebridStream]:
        """Streams the player may be offered (upstream ``streamable`` flag)."""
        return [s for s in self.streams if s.streamable]

    @property
    def is_tv_show(self) -> bool:
        return any(s.season is not None for s in self.streams)


@dataclass(frozen=True)
class DebridAccount:
    username: str
    premium: bool
    expiration: str | None = None


class DebridError(Exception):
    """Base error for debrid resolution."""


class DebridNotConfigured(DebridError):
    """No API key configured for the debrid service."""


class InvalidMagnetFormat(DebridError):
    """Rejected locally: the string is not a ``magnet:`` URI."""


class ServiceRejected(DebridError):
    """Structured upstream rejection (bad magnet, quota exceeded, auth).

    The upstream message is kept verbatim so an operator can act on it.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


class TransportError(DebridError):
    """Network failure, timeout, 5xx or a vanished torrent."""


class AnomalousState(DebridError):
    """Service reports ``downloaded`` but exposes no links. Never retried."""
