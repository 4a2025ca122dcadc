"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CatalogConfig(BaseModel):
    """Free-offer catalog lookup (JustWatch GraphQL primary + REST fallback)."""

    graphql_url: str = Field(
        default="https://apis.justwatch.com/graphql",
        description="Primary (GraphQL) search endpoint.",
    )
    rest_url: str = Field(
        default="https://apis.justwatch.com/content/titles/en_US/popular",
        description="Secondary (REST) search endpoint used when the primary fails.",
    )
    country: str = Field(default="US", description="Offer country code.")
    language: str = Field(default="en", description="Catalog language code.")
    max_candidates: int = Field(
        default=10,
        description="Candidates requested per search.",
    )
    max_all_offers: int = Field(
        default=20,
        description="Raw offers considered for the all-offers list.",
    )
    free_providers: dict[int, str] = Field(
        default={
            73: "Tubi",
            300: "Pluto TV",
            386: "Peacock",
            457: "Plex",
            207: "Roku Channel",
            387: "Freevee",
            328: "Crackle",
        },
        description="Known free/ad-supported providers (provider id -> name).",
    )
    fallback_on_any_error: bool = Field(
        default=True,
        description=(
            "Fall back to REST on any primary failure (GraphQL errors included). "
            "False = only transport errors and 5xx."
        ),
    )

    @field_validator("max_candidates", "max_all_offers")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v


class DebridConfig(BaseModel):
    """Real-Debrid REST API settings."""

    api_url: str = Field(default="https://api.real-debrid.com/rest/1.0")
    api_key: str | None = Field(
        default=None,
        description="Bearer token. Debrid endpoints report 'not configured' without it.",
    )
    sync_wait_seconds: float = Field(
        default=2.0,
        description="Delay between file selection and the single sync poll.",
    )
    max_sync_links: int = Field(
        default=5,
        description="Max links unrestricted by the synchronous resolve path.",
    )
    poll_interval_seconds: float = Field(
        default=3.0,
        description="Advisory poll interval for callers driving status polls.",
    )

    @field_validator("sync_wait_seconds", "poll_interval_seconds")
    @classmethod
    def _validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class TorrentIndexConfig(BaseModel):
    search_url: str = Field(default="https://apibay.org/q.php")
    category: int = Field(default=200, description="Index category (200 = video).")
    max_results: int = Field(default=20)


class AutomationConfig(BaseModel):
    """Admin bulk-automation policy."""

    min_seeders: int = Field(
        default=5,
        description="Reliability floor (inclusive); results below are excluded.",
    )
    bulk_resolve_limit: int = Field(
        default=5,
        description="Default number of pending items per bulk auto-resolve.",
    )
    bulk_resolve_delay_seconds: float = Field(
        default=1.0,
        description="Fixed delay after each bulk auto-resolve item.",
    )
    catalog_refresh_delay_seconds: float = Field(
        default=0.5,
        description="Fixed delay after each bulk catalog lookup.",
    )

    @field_validator("bulk_resolve_delay_seconds", "catalog_refresh_delay_seconds")
    @classmethod
    def _validate_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("delays must be >= 0")
        return v


class EmbedProviderConfig(BaseModel):
    name: str
    priority: int
    movie_template: str
    tv_template: str


class SourcesConfig(BaseModel):
    """Fallback embed mirrors. Empty list = built-in defaults."""

    providers: list[EmbedProviderConfig] = Field(default_factory=list)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/catalog/debrid/...).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streamresolver", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=20.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for upstream API calls.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Content store (YAML section: cache.*)
    cache_dir: Path = Field(
        default=Path("./.cache/streamresolver"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
    )
    cache_ttl_seconds: int = Field(
        default=0,
        validation_alias=AliasChoices(
            "cache_ttl_seconds",
            AliasPath("cache", "ttl_seconds"),
        ),
        description="TTL for stored content records (0 = never expire).",
    )
    cache_max_concurrent: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "cache_max_concurrent",
            AliasPath("cache", "max_concurrent"),
        ),
    )

    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key (release-year lookup for auto-resolve).",
    )

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    debrid: DebridConfig = Field(default_factory=DebridConfig)
    torrent_index: TorrentIndexConfig = Field(default_factory=TorrentIndexConfig)
    automation: AutomationConfig = Field(default_factory=AutomationConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.

        Secrets are masked.
        """
        debrid = self.debrid.model_dump()
        if debrid.get("api_key"):
            debrid["api_key"] = "***"
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "dir": str(self.cache_dir),
                "ttl_seconds": self.cache_ttl_seconds,
                "max_concurrent": self.cache_max_concurrent,
            },
            "catalog": self.catalog.model_dump(),
            "debrid": debrid,
            "torrent_index": self.torrent_index.model_dump(),
            "automation": self.automation.model_dump(),
            "sources": self.sources.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read STREAMRESOLVER_* variables,
    converts to dict of set values, merges into YAML/defaults,
    then validates AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMRESOLVER_LOG_LEVEL
    - STREAMRESOLVER_DEBRID_API_KEY
    - STREAMRESOLVER_MIN_SEEDERS
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMRESOLVER_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_dir: Optional[Path] = None
    cache_ttl_seconds: Optional[int] = None

    tmdb_api_key: Optional[str] = None
    debrid_api_key: Optional[str] = None

    catalog_country: Optional[str] = None
    catalog_fallback_on_any_error: Optional[bool] = None

    min_seeders: Optional[int] = None
    catalog_refresh_delay_seconds: Optional[float] = None
    bulk_resolve_delay_seconds: Optional[float] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
