"""Configuration package exports.

Settings model and repository only; ``loader`` and ``watcher`` depend on the
registry and are imported from their modules directly.
"""

from .model import CatalogSettings, FallbackConfig, normalize_locale
from .repository import SettingsRepository

__all__ = [
    "CatalogSettings",
    "FallbackConfig",
    "SettingsRepository",
    "normalize_locale",
]
