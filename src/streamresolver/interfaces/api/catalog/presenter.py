"""JSON presentation of catalog lookup results."""

from __future__ import annotations

from typing import Any

from streamresolver.domain.entities import ResolutionResult, StreamOffer


def offer_to_dict(offer: StreamOffer) -> dict[str, Any]:
    return {
        "provider": offer.provider_name,
        "providerId": offer.provider_id,
        "url": offer.url,
        "monetizationType": offer.monetization,
    }


def resolution_to_dict(result: ResolutionResult) -> dict[str, Any]:
    return {
        "found": result.found,
        "title": result.matched_title,
        "year": result.matched_year,
        "freeStreaming": [offer_to_dict(o) for o in result.free_offers],
        "allOffers": [offer_to_dict(o) for o in result.all_offers],
    }
