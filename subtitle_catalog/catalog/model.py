from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


class Catalog(Mapping[str, str]):
    """Immutable key -> text mapping for exactly one locale.

    Construction copies the given mapping; nothing can change it afterwards.
    """

    __slots__ = ("_entries", "_locale")

    def __init__(self, entries: Mapping[str, str], locale: str | None = None) -> None:
        self._entries: Mapping[str, str] = MappingProxyType(dict(entries))
        self._locale = locale

    @property
    def locale(self) -> str | None:
        return self._locale

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Catalog(locale={self.locale!r}, entries={len(self._entries)})"

    def key_set(self) -> frozenset[str]:
        return frozenset(self._entries)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of a successful lookup.

    Attributes:
        key: The requested message key.
        text: Resolved display text; may be the empty string.
        locale: Locale whose catalog supplied the text.
        requested_locale: Locale the caller asked for.
    """

    key: str
    text: str
    locale: str
    requested_locale: str

    @property
    def fallback_used(self) -> bool:
        return self.locale != self.requested_locale
