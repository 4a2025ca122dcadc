"""Cache infrastructure - key/value backend for persistence adapters."""

from .diskcache_adapter import DiskcacheAdapter

__all__ = ["DiskcacheAdapter"]
