"""Catalog source parser.

The grammar is line oriented (lines end with ``\\n`` or ``\\r\\n``)::

    # comment (any number of leading '#')
    subtitle-campfire = Praskání ohně

Blank lines and comments only group entries for human readers. Every other
line must contain ``=``; it is split on the first one and both sides are
stripped. Empty keys and empty texts are legal. The first offending line
aborts the parse, so a failed source never produces a partial catalog.
"""

from __future__ import annotations

from ..constants import COMMENT_MARKER, ENTRY_SEPARATOR
from ..errors.internal import DuplicateKeyError, MalformedLineError
from .model import Catalog

_BOM = "\ufeff"


def iter_entries(
    source_text: str, *, locale: str | None = None
) -> list[tuple[int, str, str]]:
    """Split source text into ``(line_number, key, text)`` triples.

    Raises:
        MalformedLineError: A line is neither blank, a comment, nor ``key = text``.
    """
    if source_text.startswith(_BOM):
        source_text = source_text[len(_BOM) :]
    entries: list[tuple[int, str, str]] = []
    for number, raw in enumerate(source_text.split("\n"), start=1):
        raw = raw.removesuffix("\r")
        stripped = raw.strip()
        if not stripped or stripped.startswith(COMMENT_MARKER):
            continue
        key, sep, text = raw.partition(ENTRY_SEPARATOR)
        if not sep:
            raise MalformedLineError(number, raw, locale=locale)
        entries.append((number, key.strip(), text.strip()))
    return entries


def parse_catalog(source_text: str, *, locale: str | None = None) -> Catalog:
    """Parse one locale's source text into an immutable ``Catalog``.

    Args:
        source_text: Full catalog source, already decoded.
        locale: Locale tag, attached to the catalog and to any error raised.

    Raises:
        MalformedLineError: See ``iter_entries``.
        DuplicateKeyError: A key appears on two lines.
    """
    table: dict[str, str] = {}
    first_seen: dict[str, int] = {}
    for number, key, text in iter_entries(source_text, locale=locale):
        if key in first_seen:
            raise DuplicateKeyError(key, first_seen[key], number, locale=locale)
        first_seen[key] = number
        table[key] = text
    return Catalog(table, locale=locale)


__all__ = ["iter_entries", "parse_catalog"]
