"""JustWatch catalog matcher: GraphQL primary, REST fallback.

Both access patterns are normalised into ``CatalogCandidate`` /
``StreamOffer`` at the boundary; matching and de-duplication live in
``matching.py`` and never see upstream shapes.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import httpx
import structlog

from streamresolver.domain.entities.content import MediaType
from streamresolver.domain.entities.offers import (
    CatalogCandidate,
    ResolutionResult,
    StreamOffer,
)
from streamresolver.infrastructure.catalog.matching import (
    extract_all_offers,
    extract_free_offers,
    select_best_match,
)
from streamresolver.infrastructure.config.schema import CatalogConfig

log = structlog.get_logger(__name__)

_SEARCH_QUERY = """
query SearchTitles($searchTitlesInput: SearchTitlesInput!, $country: Country!, $language: Language!) {
  searchTitles(input: $searchTitlesInput, country: $country, language: $language) {
    edges {
      node {
        id
        objectId
        objectType
        content(country: $country, language: $language) {
          title
          originalReleaseYear
          externalIds {
            tmdbId
          }
        }
        offers(country: $country, platform: WEB) {
          monetizationType
          presentationType
          standardWebURL
          package {
            id
            packageId
            clearName
            technicalName
          }
        }
      }
    }
  }
}
"""


class _CatalogRequestFailed(Exception):
    """A single access pattern failed. ``transient`` = network/5xx."""

    def __init__(self, reason: str, *, transient: bool) -> None:
        super().__init__(reason)
        self.reason = reason
        self.transient = transient


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> str:
    """Upstream strings sometimes arrive as numbers (``"title": 1917``)."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _as_id(value: Any) -> str | None:
    """Normalise an external id (int, float or str) to its string form."""
    if value is None or value == "":
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ----------------------------------------------------------------------
# Schema adapters
# ----------------------------------------------------------------------


def _from_graphql_offer(offer: Mapping[str, Any], names: Mapping[int, str]) -> StreamOffer:
    package = offer.get("package") or {}
    provider_id = _as_int(package.get("packageId"))
    return StreamOffer(
        provider_name=_as_text(package.get("clearName"))
        or names.get(provider_id)
        or "Unknown",
        provider_id=provider_id,
        url=_as_text(offer.get("standardWebURL")),
        monetization=str(offer.get("monetizationType") or "").upper(),
    )


def _from_graphql_node(node: Mapping[str, Any], names: Mapping[int, str]) -> CatalogCandidate:
    content = node.get("content") or {}
    external_ids = content.get("externalIds") or {}
    return CatalogCandidate(
        title=_as_text(content.get("title")),
        object_type=str(node.get("objectType") or "").upper(),
        release_year=content.get("originalReleaseYear"),
        external_id=_as_id(external_ids.get("tmdbId")),
        offers=tuple(
            _from_graphql_offer(o, names) for o in node.get("offers") or []
        ),
    )


def _from_rest_offer(offer: Mapping[str, Any], names: Mapping[int, str]) -> StreamOffer:
    provider_id = _as_int(offer.get("provider_id"))
    urls = offer.get("urls") or {}
    return StreamOffer(
        provider_name=names.get(provider_id)
        or _as_text(offer.get("package_short_name"))
        or "Unknown",
        provider_id=provider_id,
        url=_as_text(urls.get("standard_web")),
        monetization=str(offer.get("monetization_type") or "").upper(),
    )


def _rest_external_id(item: Mapping[str, Any]) -> str | None:
    for entry in item.get("external_ids") or []:
        if entry.get("provider") == "tmdb":
            return _as_id(entry.get("external_id"))
    for entry in item.get("scoring") or []:
        if entry.get("provider_type") == "tmdb:id":
            return _as_id(entry.get("value"))
    return None


def _from_rest_item(item: Mapping[str, Any], names: Mapping[int, str]) -> CatalogCandidate:
    return CatalogCandidate(
        title=_as_text(item.get("title")),
        object_type=str(item.get("object_type") or "").upper(),
        release_year=item.get("original_release_year"),
        external_id=_rest_external_id(item),
        offers=tuple(_from_rest_offer(o, names) for o in item.get("offers") or []),
    )


class JustWatchCatalogMatcher:
    """Async catalog matcher using httpx.

    Implements ``CatalogMatcherPort`` from domain.ports.catalog.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        config: CatalogConfig | None = None,
    ) -> None:
        self._http = http_client
        self._config = config or CatalogConfig()
        self._names: dict[int, str] = dict(self._config.free_providers)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _decode(resp: httpx.Response, source: str) -> dict[str, Any]:
        if resp.status_code >= 500:
            raise _CatalogRequestFailed(
                f"{source}_http_{resp.status_code}", transient=True
            )
        if resp.status_code >= 400:
            raise _CatalogRequestFailed(
                f"{source}_http_{resp.status_code}", transient=False
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise _CatalogRequestFailed(f"{source}_invalid_json", transient=False) from exc
        if not isinstance(data, dict):
            raise _CatalogRequestFailed(f"{source}_unexpected_shape", transient=False)
        return data

    def _parse(
        self,
        raw: Iterable[Any],
        adapter: Callable[[Mapping[str, Any], Mapping[int, str]], CatalogCandidate],
        source: str,
    ) -> list[CatalogCandidate]:
        try:
            return [adapter(entry, self._names) for entry in raw]
        except (AttributeError, TypeError, ValueError) as exc:
            raise _CatalogRequestFailed(f"{source}_schema_error", transient=False) from exc

    async def _search_graphql(self, title: str) -> list[CatalogCandidate]:
        payload = {
            "query": _SEARCH_QUERY,
            "variables": {
                "searchTitlesInput": {
                    "searchQuery": title,
                    "first": self._config.max_candidates,
                },
                "country": self._config.country,
                "language": self._config.language,
            },
        }
        try:
            resp = await self._http.post(self._config.graphql_url, json=payload)
        except httpx.HTTPError as exc:
            raise _CatalogRequestFailed("graphql_transport_error", transient=True) from exc

        data = self._decode(resp, "graphql")
        if data.get("errors"):
            log.warning("catalog_graphql_errors", errors=data["errors"])
            raise _CatalogRequestFailed("graphql_errors", transient=False)

        search = (data.get("data") or {}).get("searchTitles")
        if not isinstance(search, dict):
            raise _CatalogRequestFailed("graphql_missing_data", transient=False)

        edges = search.get("edges") or []
        return self._parse(
            (edge.get("node") or {} for edge in edges),
            _from_graphql_node,
            "graphql",
        )

    async def _search_rest(self, title: str) -> list[CatalogCandidate]:
        body = json.dumps(
            {"query": title, "page_size": self._config.max_candidates}
        )
        try:
            resp = await self._http.get(self._config.rest_url, params={"body": body})
        except httpx.HTTPError as exc:
            raise _CatalogRequestFailed("rest_transport_error", transient=True) from exc

        data = self._decode(resp, "rest")
        items = data.get("items")
        if not isinstance(items, list):
            raise _CatalogRequestFailed("rest_missing_items", transient=False)
        return self._parse(items[: self._config.max_candidates], _from_rest_item, "rest")

    async def _search(self, title: str) -> list[CatalogCandidate] | None:
        """Primary, then (once) secondary. None = both unavailable."""
        try:
            return await self._search_graphql(title)
        except _CatalogRequestFailed as exc:
            if not (exc.transient or self._config.fallback_on_any_error):
                log.warning("catalog_primary_failed_no_fallback", reason=exc.reason)
                return None
            log.warning(
                "catalog_primary_failed",
                reason=exc.reason,
                title=title,
                exc_info=exc.__cause__ is not None,
            )

        try:
            return await self._search_rest(title)
        except _CatalogRequestFailed as exc:
            log.warning(
                "catalog_fallback_failed",
                reason=exc.reason,
                title=title,
                exc_info=exc.__cause__ is not None,
            )
            return None

    # ------------------------------------------------------------------
    # Public API (CatalogMatcherPort)
    # ------------------------------------------------------------------

    async def lookup(
        self,
        title: str,
        year: int | None = None,
        media_type: MediaType | None = None,
        external_id: str | None = None,
    ) -> ResolutionResult:
        """Find free offers for a title. Failures resolve to ``found=False``."""
        if not title or not title.strip():
            log.info("catalog_lookup_missing_title")
            return ResolutionResult.not_found()

        candidates = await self._search(title)
        if candidates is None:
            return ResolutionResult.not_found()

        match = select_best_match(
            candidates,
            title=title,
            year=year,
            media_type=media_type,
            external_id=external_id,
        )
        if match is None:
            log.info("catalog_no_match", title=title, candidates=len(candidates))
            return ResolutionResult.not_found()

        free_offers = extract_free_offers(match.offers, self._config.free_providers)
        all_offers = extract_all_offers(match.offers, self._config.max_all_offers)

        log.info(
            "catalog_match_found",
            title=title,
            matched_title=match.title,
            free_offers=len(free_offers),
            all_offers=len(all_offers),
        )
        return ResolutionResult(
            found=True,
            free_offers=free_offers,
            all_offers=all_offers,
            matched_title=match.title or None,
            matched_year=_as_int(match.release_year),
        )
