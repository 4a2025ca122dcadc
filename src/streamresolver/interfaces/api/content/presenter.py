"""JSON presentation of content items and playback plans."""

from __future__ import annotations

from typing import Any

from streamresolver.domain.entities import ContentItem, PlaybackPlan


def item_to_dict(item: ContentItem) -> dict[str, Any]:
    ref = item.ref
    return {
        "id": item.id,
        "title": ref.title,
        "media_type": ref.media_type,
        "year": ref.year,
        "season": ref.season,
        "episode": ref.episode,
        "external_id": ref.external_id,
        "video_embed_url": item.video_embed_url,
        "external_watch_links": item.external_watch_links,
        "tags": list(item.tags),
        "is_published": item.is_published,
        "created_at": item.created_at.isoformat(),
    }


def plan_to_dict(plan: PlaybackPlan) -> dict[str, Any]:
    return {
        "sources": [
            {
                "name": s.name,
                "url": s.url,
                "kind": s.kind.value,
                "origin": s.origin,
            }
            for s in plan.sources
        ],
        "external_links": [
            {"name": link.name, "url": link.url} for link in plan.external_links
        ],
    }
