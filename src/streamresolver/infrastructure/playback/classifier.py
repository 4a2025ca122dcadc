"""Direct-vs-iframe classification of playback URLs.

Best-effort URL pattern sniffing: no request is made, so a URL that
looks like a file may still be an HTML page (and vice versa). The
player falls back to the next source when the guess is wrong.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from streamresolver.domain.entities.playback import PlaybackKind

VIDEO_EXTENSIONS: tuple[str, ...] = (
    ".mp4",
    ".webm",
    ".ogg",
    ".mkv",
    ".avi",
    ".mov",
    ".m4v",
)

DIRECT_DOMAINS: tuple[str, ...] = ("real-debrid.com", "rdb.so")

DIRECT_PATH_MARKERS: tuple[str, ...] = ("/download/", "/stream/")

EMBED_PLATFORMS: tuple[str, ...] = (
    "youtube.com/embed",
    "youtube-nocookie.com/embed",
    "player.vimeo.com",
    "dailymotion.com/embed",
    "twitch.tv/embed",
    "facebook.com/plugins/video",
    "tubi.tv",
    "pluto.tv",
    "peacocktv.com",
    "plex.tv",
)


def classify_playback_url(url: str) -> PlaybackKind:
    """Return DIRECT for file/stream URLs, IFRAME for everything else."""
    lower = url.lower()
    parts = urlsplit(lower)
    host = parts.hostname or ""

    # Extensions count only in the path; hosts like multiembed.mov are pages.
    if parts.path.endswith(VIDEO_EXTENSIONS):
        return PlaybackKind.DIRECT
    if any(host == d or host.endswith(f".{d}") for d in DIRECT_DOMAINS):
        return PlaybackKind.DIRECT
    if any(marker in parts.path for marker in DIRECT_PATH_MARKERS):
        return PlaybackKind.DIRECT
    if any(platform in lower for platform in EMBED_PLATFORMS):
        return PlaybackKind.IFRAME
    # Unknown URLs are embedded
    return PlaybackKind.IFRAME
