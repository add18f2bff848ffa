"""Error taxonomy and error-logging helpers."""

from .handling import classify_error, log_error, wrap_fetch_error
from .internal import (
    AggregateLoadError,
    CatalogError,
    ConfigurationError,
    DuplicateKeyError,
    MalformedLineError,
    MessageNotFoundError,
    ParseError,
    RegistryClosedError,
    SourceError,
    SourceFetchError,
    SourceReadError,
    UnknownLocaleError,
)

__all__ = [
    "AggregateLoadError",
    "CatalogError",
    "ConfigurationError",
    "DuplicateKeyError",
    "MalformedLineError",
    "MessageNotFoundError",
    "ParseError",
    "RegistryClosedError",
    "SourceError",
    "SourceFetchError",
    "SourceReadError",
    "UnknownLocaleError",
    "classify_error",
    "log_error",
    "wrap_fetch_error",
]
