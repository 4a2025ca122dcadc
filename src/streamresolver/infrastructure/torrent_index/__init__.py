from .apibay import ApibayTorrentIndex, build_magnet

__all__ = ["ApibayTorrentIndex", "build_magnet"]
