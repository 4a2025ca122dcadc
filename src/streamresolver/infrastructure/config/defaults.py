"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamresolver",
    "environment": "dev",
    "http": {
        "timeout_seconds": 20.0,
        "follow_redirects": True,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/streamresolver",
        "ttl_seconds": 0,
        "max_concurrent": 10,
    },
    "catalog": {
        "country": "US",
        "language": "en",
        "max_candidates": 10,
        "max_all_offers": 20,
        "fallback_on_any_error": True,
    },
    "debrid": {
        "sync_wait_seconds": 2.0,
        "max_sync_links": 5,
        "poll_interval_seconds": 3.0,
    },
    "torrent_index": {
        "category": 200,
        "max_results": 20,
    },
    "automation": {
        "min_seeders": 5,
        "bulk_resolve_limit": 5,
        "bulk_resolve_delay_seconds": 1.0,
        "catalog_refresh_delay_seconds": 0.5,
    },
}
