"""Fallback resolution over one immutable view of the loaded catalogs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, runtime_checkable

from ..errors.internal import MessageNotFoundError
from .model import Resolution
from .store import CatalogStore


@runtime_checkable
class CatalogView(Protocol):  # minimal structural typing
    def store_for(self, locale: str) -> CatalogStore | None: ...  # noqa: E701
    def fallback_for(self, locale: str) -> Sequence[str]: ...  # noqa: E701


@runtime_checkable
class SnapshotSource(Protocol):
    def snapshot(self) -> CatalogView: ...  # noqa: E701


def build_chain(requested_locale: str, fallback: Iterable[str]) -> tuple[str, ...]:
    """Return ``[requested] + fallback`` without duplicates, first occurrence wins."""
    return tuple(dict.fromkeys([requested_locale, *fallback]))


def resolve(
    view: CatalogView | SnapshotSource, requested_locale: str, key: str
) -> Resolution:
    """Resolve ``key`` by walking the requested locale's fallback chain.

    ``view`` may be a registry; its current snapshot is taken once so the
    whole walk sees one consistent catalog set.

    Locales in the chain that have no loaded catalog are skipped but still
    count as attempted.

    Raises:
        MessageNotFoundError: No catalog in the chain contains ``key``.
    """
    if isinstance(view, SnapshotSource):
        view = view.snapshot()
    chain = build_chain(requested_locale, view.fallback_for(requested_locale))
    for locale in chain:
        store = view.store_for(locale)
        if store is None:
            continue
        text = store.get(key)
        if text is not None:
            return Resolution(
                key=key, text=text, locale=locale, requested_locale=requested_locale
            )
    raise MessageNotFoundError(key, chain)


__all__ = ["CatalogView", "SnapshotSource", "build_chain", "resolve"]
