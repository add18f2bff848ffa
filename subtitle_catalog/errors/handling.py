from __future__ import annotations

import logging
from typing import Any

import aiohttp

from ..logging_config import log_structured_error
from .internal import (
    AggregateLoadError,
    CatalogError,
    ConfigurationError,
    MessageNotFoundError,
    ParseError,
    SourceError,
    SourceFetchError,
    UnknownLocaleError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception onto the error category used for aggregation."""
    if isinstance(error, ParseError):
        return "parse"
    if isinstance(error, AggregateLoadError):
        return "load"
    if isinstance(error, MessageNotFoundError | UnknownLocaleError):
        return "lookup"
    if isinstance(error, SourceError | OSError | aiohttp.ClientError):
        return "source"
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, CatalogError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging. Structured
            ``data`` carried by engine errors is merged in underneath it.
        level: Logging level, ERROR unless the caller treats it as recoverable.
    """
    merged: dict[str, Any] = {}
    if isinstance(error, CatalogError):
        merged.update({k: v for k, v in error.data.items() if v is not None})
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error if isinstance(error, Exception) else None,
        context=merged or None,
        level=level,
    )


def wrap_fetch_error(error: BaseException, url: str) -> SourceFetchError:
    """Translate a transport-level failure into a ``SourceFetchError``.

    Raw aiohttp errors never escape the loader; retry code only sees this type.
    """
    status = getattr(error, "status", None)
    data: dict[str, object] = {"url": url}
    if status is not None:
        data["http_status"] = status
    if isinstance(error, TimeoutError):
        detail = "request timed out"
    else:
        detail = str(error) or type(error).__name__
    return SourceFetchError(f"Failed to fetch catalog from {url}: {detail}", data=data)
