"""Content repository backed by CachePort (diskcache)."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import structlog

from streamresolver.domain.entities.content import ContentItem, ContentRef
from streamresolver.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_INDEX_KEY = "content:index"


def _key(content_id: str) -> str:
    return f"content:{content_id}"


def serialize_item(item: ContentItem) -> str:
    """Serialize ContentItem to JSON string."""
    ref = item.ref
    return json.dumps(
        {
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
    )


def deserialize_item(data: str) -> ContentItem:
    """Deserialize ContentItem from JSON string."""
    d: dict[str, Any] = json.loads(data)
    return ContentItem(
        id=d["id"],
        ref=ContentRef(
            title=d["title"],
            media_type=d.get("media_type", "movie"),
            year=d.get("year"),
            season=d.get("season"),
            episode=d.get("episode"),
            external_id=d.get("external_id"),
        ),
        video_embed_url=d.get("video_embed_url"),
        external_watch_links=d.get("external_watch_links"),
        tags=tuple(d.get("tags", ())),
        is_published=d.get("is_published", False),
        created_at=datetime.fromisoformat(d["created_at"]),
    )


class CacheContentRepository:
    """Stores content items via CachePort, plus an id index for listing."""

    def __init__(self, cache: CachePort, ttl_seconds: int = 0) -> None:
        self.cache = cache
        self.ttl = ttl_seconds

    async def _index(self) -> list[str]:
        return list(await self.cache.get(_INDEX_KEY) or [])

    async def save(self, item: ContentItem) -> None:
        await self.cache.set(_key(item.id), serialize_item(item), ttl=self.ttl)
        index = await self._index()
        if item.id not in index:
            index.append(item.id)
            await self.cache.set(_INDEX_KEY, index, ttl=0)
        log.debug("content_saved", content_id=item.id, title=item.title)

    async def get(self, content_id: str) -> ContentItem | None:
        data = await self.cache.get(_key(content_id))
        if data is None:
            return None
        try:
            return deserialize_item(data)
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            log.error(
                "content_deserialize_error",
                content_id=content_id,
                error=str(e),
            )
            return None

    async def list_all(self) -> list[ContentItem]:
        items: list[ContentItem] = []
        for content_id in await self._index():
            item = await self.get(content_id)
            if item is not None:
                items.append(item)
        return items

    async def list_pending(self, limit: int) -> list[ContentItem]:
        pending = [
            item
            for item in await self.list_all()
            if not item.video_embed_url
            and not item.is_published
            and item.is_auto_imported
        ]
        pending.sort(key=lambda i: i.created_at, reverse=True)
        return pending[:limit]
