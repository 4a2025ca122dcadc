"""Domain entities for catalog offer lookups (free/legal streaming offers)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from streamresolver.domain.entities.content import MediaType

# Canonical monetization vocabulary. Upstream may send other values;
# those are kept verbatim (upper-cased).
Monetization = Literal[
    "FREE",
    "ADS",
    "FLATRATE_AND_ADS",
    "FLATRATE",
    "SUBSCRIPTION",
    "RENTAL",
    "RENT",
    "PURCHASE",
    "BUY",
]

FREE_MONETIZATIONS: frozenset[str] = frozenset({"FREE", "ADS", "FLATRATE_AND_ADS"})

_WHITESPACE_RE = re.compile(r"\s+")


def watch_link_key(provider_name: str) -> str:
    """Persisted ``external_watch_links`` key: lowercase, whitespace → ``_``."""
    return _WHITESPACE_RE.sub("_", provider_name.lower())


@dataclass(frozen=True)
class StreamOffer:
    """A single discovered way to watch a title."""

    provider_name: str
    provider_id: int | None
    url: str
    monetization: str

    @property
    def is_free(self) -> bool:
        return self.monetization in FREE_MONETIZATIONS


@dataclass(frozen=True)
class CatalogCandidate:
    """One search hit from the catalog service, normalised across schemas."""

    title: str
    object_type: str  # "MOVIE" | "SHOW" | ...
    release_year: int | str | None = None
    external_id: str | None = None  # TMDB id as string
    offers: tuple[StreamOffer, ...] = ()


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one catalog lookup. Constructed fresh per query."""

    found: bool
    free_offers: list[StreamOffer] = field(default_factory=list)
    all_offers: list[StreamOffer] = field(default_factory=list)
    matched_title: str | None = None
    matched_year: int | None = None

    @classmethod
    def not_found(cls) -> ResolutionResult:
        return cls(found=False)

    def to_watch_links(self) -> dict[str, str]:
        """Map free offers to the persisted ``external_watch_links`` shape."""
        return {watch_link_key(o.provider_name): o.url for o in self.free_offers}


def catalog_object_type(media_type: MediaType | None) -> str | None:
    """Translate a request media type to the catalog's object type."""
    if media_type == "movie":
        return "MOVIE"
    if media_type == "tv":
        return "SHOW"
    return None
