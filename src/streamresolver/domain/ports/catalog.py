"""Port for free-offer catalog lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamresolver.domain.entities.content import MediaType
from streamresolver.domain.entities.offers import ResolutionResult


@runtime_checkable
class CatalogMatcherPort(Protocol):
    """Finds free/ad-supported offers for a title.

    Never raises for upstream failures: those resolve to
    ``ResolutionResult(found=False)``.
    """

    async def lookup(
        self,
        title: str,
        year: int | None = None,
        media_type: MediaType | None = None,
        external_id: str | None = None,
    ) -> ResolutionResult: ...
