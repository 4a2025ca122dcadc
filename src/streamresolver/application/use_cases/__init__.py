from .automation import AutomationUseCase, pick_best_torrent, split_title_year
from .stream_resolution import (
    SourceCursor,
    StreamResolutionEngine,
    extract_external_id,
)

__all__ = [
    "AutomationUseCase",
    "SourceCursor",
    "StreamResolutionEngine",
    "extract_external_id",
    "pick_best_torrent",
    "split_title_year",
]
