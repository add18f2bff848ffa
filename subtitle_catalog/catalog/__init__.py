"""Catalog parsing, storage and fallback resolution."""

from .model import Catalog, Resolution
from .parser import iter_entries, parse_catalog
from .resolver import CatalogView, SnapshotSource, build_chain, resolve
from .store import CatalogStore

__all__ = [
    "Catalog",
    "CatalogStore",
    "CatalogView",
    "Resolution",
    "SnapshotSource",
    "build_chain",
    "iter_entries",
    "parse_catalog",
    "resolve",
]
