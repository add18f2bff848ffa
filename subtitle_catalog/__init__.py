"""Localized subtitle catalog engine.

Parses flat ``key = text`` catalogs, serves lookups through per-locale
fallback chains, and reports translation coverage gaps.
"""

from .catalog import Catalog, CatalogStore, Resolution, build_chain, parse_catalog, resolve
from .config import CatalogSettings, FallbackConfig
from .errors import (
    AggregateLoadError,
    CatalogError,
    DuplicateKeyError,
    MalformedLineError,
    MessageNotFoundError,
    ParseError,
    RegistryClosedError,
    UnknownLocaleError,
)
from .registry import CatalogRegistry, RegistrySnapshot

__all__ = [
    "AggregateLoadError",
    "Catalog",
    "CatalogError",
    "CatalogRegistry",
    "CatalogSettings",
    "CatalogStore",
    "DuplicateKeyError",
    "FallbackConfig",
    "MalformedLineError",
    "MessageNotFoundError",
    "ParseError",
    "RegistryClosedError",
    "RegistrySnapshot",
    "Resolution",
    "UnknownLocaleError",
    "build_chain",
    "parse_catalog",
    "resolve",
]
