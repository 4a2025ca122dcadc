from .registry import DEFAULT_PROVIDERS, EmbedProvider, SourceRegistry

__all__ = ["DEFAULT_PROVIDERS", "EmbedProvider", "SourceRegistry"]
