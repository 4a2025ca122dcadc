"""Fallback embed-mirror registry.

Pure URL construction: no I/O, no failure mode. A mirror may still hand
out a URL that does not play; the player detects that and the caller
advances to the next source.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from streamresolver.domain.entities.content import MediaType
from streamresolver.domain.entities.playback import SourceCandidate
from streamresolver.infrastructure.config.schema import EmbedProviderConfig


@dataclass(frozen=True)
class EmbedProvider:
    """One mirror with a flat (movie) and a season/episode-aware (TV) template.

    Templates are ``str.format`` strings with ``{external_id}``,
    ``{media_type}``, ``{season}`` and ``{episode}`` placeholders.
    """

    name: str
    priority: int
    movie_template: str
    tv_template: str

    def embed_url(
        self,
        external_id: str,
        media_type: MediaType,
        season: int | None = None,
        episode: int | None = None,
    ) -> str:
        if media_type == "tv" and season and episode:
            return self.tv_template.format(
                external_id=external_id,
                media_type=media_type,
                season=season,
                episode=episode,
            )
        return self.movie_template.format(
            external_id=external_id,
            media_type=media_type,
            season="",
            episode="",
        )


DEFAULT_PROVIDERS: tuple[EmbedProvider, ...] = (
    EmbedProvider(
        name="VidSrc",
        priority=1,
        movie_template="https://vidsrc.xyz/embed/{media_type}?tmdb={external_id}",
        tv_template=(
            "https://vidsrc.xyz/embed/tv?tmdb={external_id}"
            "&season={season}&episode={episode}"
        ),
    ),
    EmbedProvider(
        name="VidSrc.to",
        priority=2,
        movie_template="https://vidsrc.to/embed/{media_type}/{external_id}",
        tv_template="https://vidsrc.to/embed/tv/{external_id}/{season}/{episode}",
    ),
    EmbedProvider(
        name="2Embed",
        priority=3,
        movie_template="https://www.2embed.cc/embed/{external_id}",
        tv_template="https://www.2embed.cc/embedtv/{external_id}&s={season}&e={episode}",
    ),
    EmbedProvider(
        name="VidSrc.pro",
        priority=4,
        movie_template="https://vidsrc.pro/embed/{media_type}/{external_id}",
        tv_template="https://vidsrc.pro/embed/tv/{external_id}/{season}/{episode}",
    ),
    EmbedProvider(
        name="SuperEmbed",
        priority=5,
        movie_template="https://multiembed.mov/?video_id={external_id}&tmdb=1",
        tv_template=(
            "https://multiembed.mov/?video_id={external_id}&tmdb=1"
            "&s={season}&e={episode}"
        ),
    ),
)


class SourceRegistry:
    """Immutable, priority-ordered list of embed mirrors.

    Built once at startup and passed to the engine by reference.
    """

    def __init__(self, providers: Iterable[EmbedProvider]) -> None:
        ordered = sorted(providers, key=lambda p: p.priority)
        if not ordered:
            raise ValueError("SourceRegistry needs at least one provider")
        self._providers: tuple[EmbedProvider, ...] = tuple(ordered)

    @classmethod
    def default(cls) -> SourceRegistry:
        return cls(DEFAULT_PROVIDERS)

    @classmethod
    def from_config(cls, providers: Iterable[EmbedProviderConfig]) -> SourceRegistry:
        """Build from ``sources.providers``; an empty list yields the defaults."""
        configured = [
            EmbedProvider(
                name=p.name,
                priority=p.priority,
                movie_template=p.movie_template,
                tv_template=p.tv_template,
            )
            for p in providers
        ]
        return cls(configured) if configured else cls.default()

    @property
    def providers(self) -> tuple[EmbedProvider, ...]:
        return self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def get_all_stream_urls(
        self,
        external_id: str,
        media_type: MediaType,
        season: int | None = None,
        episode: int | None = None,
    ) -> list[SourceCandidate]:
        """One candidate per provider, ascending priority."""
        return [
            SourceCandidate(
                provider_name=p.name,
                embed_url=p.embed_url(external_id, media_type, season, episode),
                priority=p.priority,
            )
            for p in self._providers
        ]

    def get_primary_stream_url(
        self,
        external_id: str,
        media_type: MediaType,
        season: int | None = None,
        episode: int | None = None,
    ) -> str:
        return self.get_all_stream_urls(external_id, media_type, season, episode)[
            0
        ].embed_url
