from __future__ import annotations

from .load import load_config
from .schema import AppConfig, AutomationConfig, CatalogConfig, EnvOverrides

__all__ = [
    "AppConfig",
    "AutomationConfig",
    "CatalogConfig",
    "EnvOverrides",
    "load_config",
]
