"""Centralized error hierarchy for the catalog engine.

Parse-time errors are fatal to the catalog being loaded and must always
propagate; lookup-time errors are recoverable and callers pick the visible
fallback themselves.

Classes:
  CatalogError          – Base for all engine errors.
  ParseError            – Catalog source does not satisfy the entry grammar.
  MalformedLineError    – A line that is not blank, not a comment, not `key = text`.
  DuplicateKeyError     – A key appears twice in one catalog source.
  AggregateLoadError    – One or more catalogs failed during registry initialization.
  MessageNotFoundError  – No catalog in the fallback chain supplies the key.
  UnknownLocaleError    – A locale was requested that the registry never loaded.
  RegistryClosedError   – The registry was used after teardown.
  SourceError           – Reading catalog source text failed.
  SourceReadError       – Local file missing or unreadable.
  SourceFetchError      – Remote download failed (transient, safe to retry).
  ConfigurationError    – Settings file is missing required data or invalid.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence


class CatalogError(Exception):
    """Base class for all catalog engine errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ParseError(CatalogError):
    """Exception raised when a catalog source cannot be parsed.

    Attributes:
        line: 1-based line number where parsing stopped.
        locale: Locale the source belongs to, when known.
    """

    line: int
    locale: str | None

    def __init__(
        self,
        message: str,
        *,
        line: int,
        locale: str | None = None,
        data: Mapping[str, object] | None = None,
    ) -> None:
        merged = {"line": line, "locale": locale}
        if data:
            merged.update(data)
        super().__init__(message, data=merged)
        self.line = line
        self.locale = locale


class MalformedLineError(ParseError):
    """A line does not match the `key = text` shape."""

    content: str

    def __init__(self, line: int, content: str, *, locale: str | None = None) -> None:
        where = f" in locale '{locale}'" if locale else ""
        super().__init__(
            f"Malformed catalog line {line}{where}: {content!r}",
            line=line,
            locale=locale,
            data={"content": content},
        )
        self.content = content


class DuplicateKeyError(ParseError):
    """A key was defined twice within one catalog source."""

    key: str
    first_line: int
    second_line: int

    def __init__(
        self,
        key: str,
        first_line: int,
        second_line: int,
        *,
        locale: str | None = None,
    ) -> None:
        where = f" in locale '{locale}'" if locale else ""
        super().__init__(
            f"Duplicate key {key!r}{where}: first defined on line {first_line}, "
            f"again on line {second_line}",
            line=second_line,
            locale=locale,
            data={"key": key, "first_line": first_line},
        )
        self.key = key
        self.first_line = first_line
        self.second_line = second_line


class AggregateLoadError(CatalogError):
    """Raised by registry initialization when any catalog fails to parse.

    Attributes:
        errors: Every `(locale, ParseError)` pair, in source order.
    """

    errors: list[tuple[str, ParseError]]

    def __init__(self, errors: Iterable[tuple[str, ParseError]]) -> None:
        self.errors = list(errors)
        locales = self.locales
        details = "; ".join(f"[{locale}] {err}" for locale, err in self.errors)
        super().__init__(
            f"{len(self.errors)} catalog(s) failed to load ({', '.join(locales)}): {details}",
            data={"locales": locales},
        )

    @property
    def locales(self) -> list[str]:
        return sorted({locale for locale, _ in self.errors})


class MessageNotFoundError(CatalogError, LookupError):
    """No catalog in the attempted fallback chain contains the key.

    Attributes:
        key: The requested message key.
        attempted_chain: Every locale consulted, in order.
    """

    key: str
    attempted_chain: tuple[str, ...]

    def __init__(self, key: str, attempted_chain: Sequence[str]) -> None:
        self.key = key
        self.attempted_chain = tuple(attempted_chain)
        super().__init__(
            f"Message {key!r} not found in any of: {' -> '.join(self.attempted_chain)}",
            data={"key": key, "attempted_chain": list(self.attempted_chain)},
        )


class UnknownLocaleError(CatalogError, LookupError):
    """The requested locale has no loaded catalog."""

    locale: str

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"Locale {locale!r} is not loaded", data={"locale": locale})


class RegistryClosedError(CatalogError):
    """The registry was used after teardown."""


class SourceError(CatalogError):
    """Base for failures while obtaining catalog source text."""


class SourceReadError(SourceError):
    """A local catalog file is missing or cannot be decoded."""


class SourceFetchError(SourceError):
    """Exception raised for network or transport errors while downloading a catalog.

    These are transient and may be retried.
    """


class ConfigurationError(CatalogError):
    """The settings file is unreadable or fails validation."""


__all__ = [
    "CatalogError",
    "ParseError",
    "MalformedLineError",
    "DuplicateKeyError",
    "AggregateLoadError",
    "MessageNotFoundError",
    "UnknownLocaleError",
    "RegistryClosedError",
    "SourceError",
    "SourceReadError",
    "SourceFetchError",
    "ConfigurationError",
]
