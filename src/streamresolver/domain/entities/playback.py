"""Domain entities for playback source selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

SourceOrigin = Literal["curated", "mirror"]


class PlaybackKind(str, Enum):
    """Which rendering strategy the player uses for a URL."""

    DIRECT = "direct"  # native <video> element
    IFRAME = "iframe"  # embedded third-party player


@dataclass(frozen=True)
class SourceCandidate:
    """A generated embed-mirror URL for one title. Never persisted."""

    provider_name: str
    embed_url: str
    priority: int


@dataclass(frozen=True)
class PlaybackSource:
    """One entry of the in-app fallback chain."""

    name: str
    url: str
    kind: PlaybackKind
    origin: SourceOrigin


@dataclass(frozen=True)
class ExternalLink:
    """Named provider link opened in a new context (not embedded)."""

    name: str
    url: str


@dataclass(frozen=True)
class PlaybackPlan:
    """Ordered playable sources plus supplementary external links."""

    sources: list[PlaybackSource] = field(default_factory=list)
    external_links: list[ExternalLink] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sources and not self.external_links
