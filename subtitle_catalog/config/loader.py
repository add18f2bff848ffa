"""Catalog source loading.

This is the only place the engine touches disk or network. Sources are
read into memory here, then handed to the (synchronous) parser through
``CatalogRegistry.initialize``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable
from pathlib import Path

import aiohttp
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    CONFIG_FILE_ENV,
    DEFAULT_CONFIG_FILE,
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_MAX_BACKOFF_SECONDS,
    SOURCE_FETCH_MAX_ATTEMPTS,
    SOURCE_FETCH_TIMEOUT_SECONDS,
)
from ..errors.handling import wrap_fetch_error
from ..errors.internal import SourceError, SourceFetchError, SourceReadError
from ..logs.logger import logger
from ..registry import CatalogRegistry
from .model import CatalogSettings
from .repository import SettingsRepository


def locale_for_path(path: str | os.PathLike[str], suffix: str) -> str | None:
    """Return the locale a catalog file belongs to, or None for other files."""
    name = Path(path).name
    if not name.endswith(suffix) or name.startswith("."):
        return None
    locale = name[: -len(suffix)].strip()
    return locale or None


def discover_catalog_files(catalog_dir: str | os.PathLike[str], suffix: str) -> dict[str, Path]:
    """Map each locale to its ``<locale><suffix>`` file inside ``catalog_dir``.

    Raises:
        SourceReadError: The directory does not exist.
    """
    root = Path(catalog_dir)
    if not root.is_dir():
        raise SourceReadError(
            f"Catalog directory not found: {root}", data={"path": str(root)}
        )
    found: dict[str, Path] = {}
    for path in sorted(root.iterdir()):
        if not path.is_file():
            continue
        locale = locale_for_path(path, suffix)
        if locale is not None:
            found[locale] = path
    return found


def read_source_file(path: str | os.PathLike[str]) -> str:
    """Read one catalog file as UTF-8 text.

    Raises:
        SourceReadError: Missing, unreadable, or not valid UTF-8.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(
            f"Cannot read catalog file {path}: {e}", data={"path": str(path)}
        ) from e


async def read_source(path: str | os.PathLike[str], locale: str | None = None) -> str:
    """Read a catalog file without blocking the event loop."""
    text = await asyncio.to_thread(read_source_file, path)
    logger.log_event(
        "source", "read", level=logging.DEBUG, locale=locale, path=str(path), chars=len(text)
    )
    return text


async def _backoff_sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def _fetch_once(session: aiohttp.ClientSession, url: str) -> str:
    try:
        async with session.get(url) as response:
            status = response.status
            if status == 429 or status >= 500:
                raise SourceFetchError(
                    f"Catalog server returned HTTP {status} for {url}",
                    data={"url": url, "http_status": status},
                )
            if status >= 400:
                raise SourceError(
                    f"Catalog request rejected with HTTP {status} for {url}",
                    data={"url": url, "http_status": status},
                )
            try:
                return await response.text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise SourceError(
                    f"Catalog from {url} is not valid UTF-8: {e}", data={"url": url}
                ) from e
    except (aiohttp.ClientError, TimeoutError) as e:
        raise wrap_fetch_error(e, url) from e


async def fetch_source(
    session: aiohttp.ClientSession,
    url: str,
    *,
    locale: str | None = None,
    max_attempts: int = SOURCE_FETCH_MAX_ATTEMPTS,
) -> str:
    """Download one catalog source, retrying transient failures with backoff.

    Raises:
        SourceFetchError: Still failing after ``max_attempts``.
        SourceError: The server rejected the request (4xx other than 429) or
            sent a body that is not valid UTF-8.
    """

    def _before_sleep(retry_state) -> None:
        outcome = retry_state.outcome
        logger.log_event(
            "source",
            "fetch_retry",
            level=logging.WARNING,
            locale=locale,
            url=url,
            attempt=retry_state.attempt_number,
            error=str(outcome.exception()) if outcome is not None else "",
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=RETRY_BACKOFF_MULTIPLIER, max=RETRY_MAX_BACKOFF_SECONDS
        ),
        retry=retry_if_exception_type(SourceFetchError),
        before_sleep=_before_sleep,
        sleep=_backoff_sleep,
        reraise=True,
    )
    try:
        text = await retrying(_fetch_once, session, url)
    except SourceError as e:
        logger.log_event(
            "source", "fetch_failed", level=logging.ERROR, locale=locale, url=url, error=str(e)
        )
        raise
    logger.log_event(
        "source", "fetch", level=logging.DEBUG, locale=locale, url=url, chars=len(text)
    )
    return text


async def _collect(pending: dict[str, Awaitable[str]]) -> dict[str, str]:
    """Await every source, then raise the first failure in locale order.

    Nothing is left running when this returns or raises, so an owned
    session can be closed right after.
    """
    locales = list(pending)
    results = await asyncio.gather(*pending.values(), return_exceptions=True)
    texts: dict[str, str] = {}
    for locale, result in zip(locales, results, strict=True):
        if isinstance(result, BaseException):
            raise result
        texts[locale] = result
    return texts


async def _fetch_remote(
    remote_sources: dict[str, str], session: aiohttp.ClientSession | None
) -> dict[str, str]:
    if not remote_sources:
        return {}
    if session is None:
        timeout = aiohttp.ClientTimeout(total=SOURCE_FETCH_TIMEOUT_SECONDS)
        async with aiohttp.ClientSession(timeout=timeout) as owned:
            return await _fetch_remote(remote_sources, owned)
    return await _collect(
        {loc: fetch_source(session, url, locale=loc) for loc, url in remote_sources.items()}
    )


async def gather_sources(
    settings: CatalogSettings, session: aiohttp.ClientSession | None = None
) -> dict[str, str]:
    """Collect source text for every configured locale.

    Remote sources win over a local file for the same locale.

    Raises:
        SourceError: Any file or download failed; nothing is returned partially.
    """
    local: dict[str, Path] = {}
    if settings.catalog_dir:
        local = discover_catalog_files(settings.catalog_dir, settings.suffix)
    local = {loc: p for loc, p in local.items() if loc not in settings.remote_sources}
    sources = await _collect({loc: read_source(path, loc) for loc, path in local.items()})
    sources.update(await _fetch_remote(settings.remote_sources, session))
    if not sources:
        raise SourceReadError(
            "No catalog sources found",
            data={"catalog_dir": settings.catalog_dir, "suffix": settings.suffix},
        )
    return sources


async def build_registry(
    settings: CatalogSettings, session: aiohttp.ClientSession | None = None
) -> CatalogRegistry:
    """Gather every source and initialize a registry from them.

    Raises:
        SourceError: See ``gather_sources``.
        AggregateLoadError: One or more catalogs failed to parse.
    """
    sources = await gather_sources(settings, session)
    return CatalogRegistry.initialize(sources, settings.fallback)


def load_settings(config_file: str | os.PathLike[str] | None = None) -> CatalogSettings:
    """Load settings from ``config_file`` or the ``SUBTITLE_CATALOG_CONF`` path."""
    path = config_file or os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
    return SettingsRepository(path).load()
