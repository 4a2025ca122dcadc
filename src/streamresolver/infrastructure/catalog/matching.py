"""Best-match selection and offer extraction for catalog lookups.

Pure transformation logic: no I/O. Operates on canonical
``CatalogCandidate`` / ``StreamOffer`` objects, so it does not care which
upstream schema produced them.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence

from streamresolver.domain.entities.content import MediaType
from streamresolver.domain.entities.offers import (
    FREE_MONETIZATIONS,
    CatalogCandidate,
    StreamOffer,
    catalog_object_type,
)


def _title_matches(candidate_title: str, query: str) -> bool:
    """Case-insensitive containment in either direction."""
    a = candidate_title.strip().lower()
    b = query.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def _year_matches(candidate_year: int | str | None, year: int | None) -> bool:
    if year is None:
        return True
    if candidate_year is None:
        return False
    return candidate_year == year or str(candidate_year).strip() == str(year)


def select_best_match(
    candidates: Sequence[CatalogCandidate],
    *,
    title: str,
    year: int | None = None,
    media_type: MediaType | None = None,
    external_id: str | None = None,
) -> CatalogCandidate | None:
    """Pick the best candidate using three strictly ordered tiers.

    1. Exact external-ID match (ignores type), anywhere in the list.
    2. Type match + title containment + year match.
    3. First candidate of the requested type (or first overall when no
       type was requested).

    Each tier scans the whole list before the next tier is tried, so an
    ID match further down always beats a text match at the top.
    """
    if external_id:
        wanted_id = str(external_id)
        for candidate in candidates:
            if candidate.external_id is not None and candidate.external_id == wanted_id:
                return candidate

    wanted_type = catalog_object_type(media_type)

    for candidate in candidates:
        if wanted_type is not None and candidate.object_type != wanted_type:
            continue
        if _title_matches(candidate.title, title) and _year_matches(
            candidate.release_year, year
        ):
            return candidate

    for candidate in candidates:
        if wanted_type is None or candidate.object_type == wanted_type:
            return candidate

    return None


def extract_free_offers(
    offers: Sequence[StreamOffer], free_provider_ids: Collection[int]
) -> list[StreamOffer]:
    """Offers from allow-listed providers or with a free monetization.

    De-duplicated by provider id; the first occurrence wins.
    """
    seen: set[int | None] = set()
    free: list[StreamOffer] = []
    for offer in offers:
        qualifies = (
            offer.provider_id in free_provider_ids
            or offer.monetization in FREE_MONETIZATIONS
        )
        if not qualifies or offer.provider_id in seen:
            continue
        seen.add(offer.provider_id)
        free.append(offer)
    return free


def extract_all_offers(
    offers: Sequence[StreamOffer], limit: int = 20
) -> list[StreamOffer]:
    """First *limit* raw offers, de-duplicated by (provider id, monetization)."""
    seen: set[tuple[int | None, str]] = set()
    result: list[StreamOffer] = []
    for offer in offers[:limit]:
        key = (offer.provider_id, offer.monetization)
        if key in seen:
            continue
        seen.add(key)
        result.append(offer)
    return result
