from .automation import (
    AutomationStats,
    AutoResolveOutcome,
    BulkResolveReport,
    CatalogRefreshEntry,
    CatalogRefreshReport,
    TmdbMovie,
    TmdbNotConfigured,
    TorrentIndexError,
    TorrentResult,
    TrendingImportReport,
)
from .content import ContentItem, ContentNotFound, ContentRef, MediaType
from .debrid import (
    AddedTorrent,
    AnomalousState,
    DebridAccount,
    DebridError,
    DebridJob,
    DebridNotConfigured,
    DebridStatus,
    DebridStream,
    InvalidMagnetFormat,
    ResolutionOutcome,
    ServiceRejected,
    TransportError,
    UnrestrictedLink,
)
from .offers import CatalogCandidate, ResolutionResult, StreamOffer
from .playback import (
    ExternalLink,
    PlaybackKind,
    PlaybackPlan,
    PlaybackSource,
    SourceCandidate,
)

__all__ = [
    "AddedTorrent",
    "AnomalousState",
    "AutoResolveOutcome",
    "AutomationStats",
    "BulkResolveReport",
    "CatalogCandidate",
    "CatalogRefreshEntry",
    "CatalogRefreshReport",
    "ContentItem",
    "ContentNotFound",
    "ContentRef",
    "DebridAccount",
    "DebridError",
    "DebridJob",
    "DebridNotConfigured",
    "DebridStatus",
    "DebridStream",
    "ExternalLink",
    "InvalidMagnetFormat",
    "MediaType",
    "PlaybackKind",
    "PlaybackPlan",
    "PlaybackSource",
    "ResolutionOutcome",
    "ResolutionResult",
    "ServiceRejected",
    "SourceCandidate",
    "StreamOffer",
    "TmdbMovie",
    "TmdbNotConfigured",
    "TorrentIndexError",
    "TorrentResult",
    "TransportError",
    "TrendingImportReport",
    "UnrestrictedLink",
]
