from .cache import CachePort
from .catalog import CatalogMatcherPort
from .content_repository import ContentRepository
from .debrid import DebridResolverPort
from .tmdb import TmdbClientPort
from .torrent_index import TorrentIndexPort

__all__ = [
    "CachePort",
    "CatalogMatcherPort",
    "ContentRepository",
    "DebridResolverPort",
    "TmdbClientPort",
    "TorrentIndexPort",
]
