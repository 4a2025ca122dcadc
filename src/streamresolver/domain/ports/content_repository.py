"""Port for content item persistence (owned by the surrounding content layer)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamresolver.domain.entities.content import ContentItem


@runtime_checkable
class ContentRepository(Protocol):
    async def get(self, content_id: str) -> ContentItem | None: ...

    async def save(self, item: ContentItem) -> None: ...

    async def list_all(self) -> list[ContentItem]: ...

    async def list_pending(self, limit: int) -> list[ContentItem]:
        """Unpublished auto-imported items without a stream, newest first."""
        ...
