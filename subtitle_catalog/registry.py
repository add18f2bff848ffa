"""Process-wide catalog registry with an explicit lifecycle.

Readers never take a lock: every lookup grabs the current ``RegistrySnapshot``
reference once and resolves against it. Writers build a complete new snapshot
and publish it with a single reference assignment, so a concurrent reader
sees either the old or the new catalog set in full.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .catalog.model import Catalog, Resolution
from .catalog.parser import parse_catalog
from .catalog.resolver import build_chain, resolve
from .catalog.store import CatalogStore
from .config.model import FallbackConfig
from .errors.handling import log_error
from .errors.internal import (
    AggregateLoadError,
    MessageNotFoundError,
    ParseError,
    RegistryClosedError,
    UnknownLocaleError,
)
from .logging_config import log_structured_error
from .logs.logger import logger


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """Immutable view of every loaded catalog at one version."""

    stores: Mapping[str, CatalogStore]
    fallback: FallbackConfig
    version: int = 0
    closed: bool = field(default=False)

    def store_for(self, locale: str) -> CatalogStore | None:
        return self.stores.get(locale)

    def fallback_for(self, locale: str) -> tuple[str, ...]:
        return self.fallback.chain_for(locale)

    def with_store(self, store: CatalogStore) -> RegistrySnapshot:
        stores = dict(self.stores)
        stores[store.locale] = store
        return RegistrySnapshot(
            stores=MappingProxyType(stores),
            fallback=self.fallback,
            version=self.version + 1,
        )


def _parse_all(
    locale_sources: Mapping[str, str],
) -> tuple[dict[str, CatalogStore], list[tuple[str, ParseError]]]:
    stores: dict[str, CatalogStore] = {}
    failures: list[tuple[str, ParseError]] = []
    for locale, source_text in locale_sources.items():
        try:
            catalog = parse_catalog(source_text, locale=locale)
        except ParseError as e:
            failures.append((locale, e))
            continue
        stores[locale] = CatalogStore(locale, catalog)
    return stores, failures


class CatalogRegistry:
    """Owns the loaded catalogs and the fallback configuration.

    Build instances with ``initialize``; they are independent of each other,
    so tests can hold as many as they like.
    """

    def __init__(self, snapshot: RegistrySnapshot) -> None:
        self._snapshot = snapshot
        self._write_lock = threading.Lock()

    @classmethod
    def initialize(
        cls,
        locale_sources: Mapping[str, str],
        fallback_config: FallbackConfig | None = None,
    ) -> CatalogRegistry:
        """Parse every source and build a registry, or fail as a whole.

        Args:
            locale_sources: Locale -> catalog source text.
            fallback_config: Fallback chains; defaults to ``FallbackConfig()``.

        Raises:
            AggregateLoadError: At least one source failed to parse. Every
                failure is included, not just the first.
        """
        fallback = fallback_config or FallbackConfig()
        stores, failures = _parse_all(locale_sources)
        if failures:
            error = AggregateLoadError(failures)
            logger.log_event(
                "registry",
                "init_failed",
                level=logging.ERROR,
                failed=len(failures),
                locales=", ".join(error.locales),
            )
            for locale, parse_error in failures:
                log_error("Catalog failed to load", parse_error, context={"locale": locale})
            raise error
        snapshot = RegistrySnapshot(
            stores=MappingProxyType(stores), fallback=fallback, version=1
        )
        logger.log_event(
            "registry",
            "init_ok",
            locale_count=len(stores),
            entry_count=sum(len(s) for s in stores.values()),
        )
        return cls(snapshot)

    def _current(self) -> RegistrySnapshot:
        snapshot = self._snapshot
        if snapshot.closed:
            raise RegistryClosedError("Catalog registry has been torn down")
        return snapshot

    def snapshot(self) -> RegistrySnapshot:
        """The snapshot in effect right now; stays valid after later reloads."""
        return self._current()

    @property
    def version(self) -> int:
        return self._snapshot.version

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(sorted(self._current().stores))

    @property
    def fallback(self) -> FallbackConfig:
        return self._current().fallback

    def catalog(self, locale: str) -> Catalog:
        store = self._current().store_for(locale)
        if store is None:
            raise UnknownLocaleError(locale)
        return store.catalog

    def reload(self, locale: str, new_source_text: str) -> Catalog:
        """Re-parse one locale and publish it atomically.

        Other locales are untouched. A locale that was not loaded before is
        added. On failure the previous catalog stays in service.

        Raises:
            ParseError: The new source is invalid.
            RegistryClosedError: The registry was torn down.
        """
        self._current()
        try:
            catalog = parse_catalog(new_source_text, locale=locale)
        except ParseError as e:
            logger.log_event(
                "registry", "reload_failed", level=logging.ERROR, locale=locale, error=str(e)
            )
            log_error("Catalog reload rejected", e, context={"locale": locale})
            raise
        with self._write_lock:
            current = self._current()
            added = locale not in current.stores
            self._snapshot = current.with_store(CatalogStore(locale, catalog))
            version = self._snapshot.version
        logger.log_event(
            "registry",
            "locale_added" if added else "reload_ok",
            locale=locale,
            entry_count=len(catalog),
            version=version,
        )
        return catalog

    def lookup(self, locale: str, key: str) -> Resolution:
        """Resolve ``key`` for ``locale`` through its fallback chain.

        Raises:
            MessageNotFoundError: No catalog in the chain has the key.
            RegistryClosedError: The registry was torn down.
        """
        resolution = resolve(self._current(), locale, key)
        if resolution.fallback_used and logger.logger.isEnabledFor(logging.DEBUG):
            logger.log_event(
                "lookup",
                "fallback_used",
                level=logging.DEBUG,
                locale=locale,
                key=key,
                resolved_locale=resolution.locale,
            )
        return resolution

    def lookup_text(self, locale: str, key: str, default: str | None = None) -> str:
        """Return display text, never raising for a missing key.

        A miss is logged, recorded as a coverage gap, and answered with
        ``default`` or, when that is None, the raw key.
        """
        try:
            return self.lookup(locale, key).text
        except MessageNotFoundError as e:
            logger.log_event(
                "lookup",
                "not_found",
                level=logging.WARNING,
                locale=locale,
                key=key,
                chain=" -> ".join(e.attempted_chain),
            )
            log_structured_error(
                "lookup",
                f"Missing subtitle {key!r}",
                context={"locale": locale, "chain": ",".join(e.attempted_chain)},
                level=logging.DEBUG,
            )
            return key if default is None else default

    def chain_for(self, locale: str) -> tuple[str, ...]:
        """Effective chain a lookup for ``locale`` would walk."""
        return build_chain(locale, self._current().fallback_for(locale))

    def coverage_report(self, reference_locale: str) -> dict[str, frozenset[str]]:
        """Keys of ``reference_locale`` missing from every other loaded locale.

        Raises:
            UnknownLocaleError: The reference locale is not loaded.
        """
        snapshot = self._current()
        reference = snapshot.store_for(reference_locale)
        if reference is None:
            raise UnknownLocaleError(reference_locale)
        reference_keys = reference.catalog.key_set()
        report: dict[str, frozenset[str]] = {}
        for locale in sorted(snapshot.stores):
            if locale == reference_locale:
                continue
            missing = reference_keys - snapshot.stores[locale].catalog.key_set()
            report[locale] = missing
            if missing:
                logger.log_event(
                    "coverage",
                    "gap",
                    level=logging.WARNING,
                    locale=locale,
                    missing=len(missing),
                    reference=reference_locale,
                )
        if not any(report.values()):
            logger.log_event(
                "coverage", "complete", reference=reference_locale, locale_count=len(report)
            )
        return report

    def teardown(self) -> None:
        """Drop every catalog; later calls raise ``RegistryClosedError``."""
        with self._write_lock:
            previous = self._snapshot
            if previous.closed:
                return
            self._snapshot = RegistrySnapshot(
                stores=MappingProxyType({}),
                fallback=previous.fallback,
                version=previous.version + 1,
                closed=True,
            )
        logger.log_event("registry", "teardown", locale_count=len(previous.stores))

    @property
    def closed(self) -> bool:
        return self._snapshot.closed
