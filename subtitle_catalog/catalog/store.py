from __future__ import annotations

from collections.abc import KeysView

from .model import Catalog


class CatalogStore:
    """One locale's parsed catalog, indexed by key."""

    __slots__ = ("locale", "catalog")

    def __init__(self, locale: str, catalog: Catalog) -> None:
        self.locale = locale
        self.catalog = catalog

    def get(self, key: str) -> str | None:
        """Return the text for ``key`` or None when absent (empty text is not absent)."""
        return self.catalog.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.catalog

    def __len__(self) -> int:
        return len(self.catalog)

    def keys(self) -> KeysView[str]:
        return self.catalog.keys()

    def __repr__(self) -> str:
        return f"CatalogStore(locale={self.locale!r}, entries={len(self.catalog)})"
