from __future__ import annotations

from types import MappingProxyType

import pytest

from subtitle_catalog.catalog.parser import parse_catalog
from subtitle_catalog.catalog.resolver import build_chain, resolve
from subtitle_catalog.catalog.store import CatalogStore
from subtitle_catalog.config.model import FallbackConfig
from subtitle_catalog.errors import MessageNotFoundError
from subtitle_catalog.registry import CatalogRegistry, RegistrySnapshot
from tests.fixtures.sample_catalogs import CS_SOURCE, EN_SOURCE


def _snapshot(sources: dict[str, str], fallback: FallbackConfig) -> RegistrySnapshot:
    stores = {loc: CatalogStore(loc, parse_catalog(text, locale=loc)) for loc, text in sources.items()}
    return RegistrySnapshot(stores=MappingProxyType(stores), fallback=fallback)


def test_build_chain_dedupes_preserving_order():
    assert build_chain("cs", ["sk", "cs", "en", "sk"]) == ("cs", "sk", "en")
    assert build_chain("en", []) == ("en",)


def test_requested_locale_wins_when_it_has_the_key():
    view = _snapshot({"cs": CS_SOURCE, "en": EN_SOURCE}, FallbackConfig(default_locale="en"))
    result = resolve(view, "cs", "subtitle-bees")
    assert result.text == "Bzučení včel"
    assert result.locale == "cs"
    assert result.fallback_used is False


def test_fallback_to_english_reports_resolved_locale():
    view = _snapshot({"cs": CS_SOURCE, "en": EN_SOURCE}, FallbackConfig(default_locale="en"))
    result = resolve(view, "cs", "subtitle-owl")
    assert result.text == "Owl hooting"
    assert result.locale == "en"
    assert result.requested_locale == "cs"
    assert result.fallback_used is True


def test_not_found_carries_key_and_full_chain():
    fallback = FallbackConfig(default_locale="en", chains={"cs": ["sk"]})
    view = _snapshot({"cs": CS_SOURCE, "en": EN_SOURCE}, fallback)
    with pytest.raises(MessageNotFoundError) as exc_info:
        resolve(view, "cs", "subtitle-dragon")
    err = exc_info.value
    assert err.key == "subtitle-dragon"
    # 'sk' is not loaded but still counts as attempted
    assert err.attempted_chain == ("cs", "sk", "en")
    assert isinstance(err, LookupError)


def test_unloaded_requested_locale_falls_through_to_default():
    view = _snapshot({"en": EN_SOURCE}, FallbackConfig(default_locale="en"))
    result = resolve(view, "de", "subtitle-wolf")
    assert result.locale == "en"


def test_empty_text_resolves_and_stops_the_walk():
    view = _snapshot(
        {"cs": "subtitle-silence =\n", "en": "subtitle-silence = Silence\n"},
        FallbackConfig(default_locale="en"),
    )
    result = resolve(view, "cs", "subtitle-silence")
    assert result.text == ""
    assert result.locale == "cs"


def test_resolve_is_deterministic():
    view = _snapshot({"cs": CS_SOURCE, "en": EN_SOURCE}, FallbackConfig(default_locale="en"))
    results = {resolve(view, "cs", "subtitle-owl") for _ in range(20)}
    assert len(results) == 1


def test_resolve_accepts_a_registry():
    registry = CatalogRegistry.initialize({"cs": CS_SOURCE, "en": EN_SOURCE})
    result = resolve(registry, "cs", "subtitle-owl")
    assert (result.text, result.locale) == ("Owl hooting", "en")


def test_no_default_locale_means_requested_only():
    view = _snapshot({"cs": CS_SOURCE, "en": EN_SOURCE}, FallbackConfig(default_locale=None))
    with pytest.raises(MessageNotFoundError) as exc_info:
        resolve(view, "cs", "subtitle-owl")
    assert exc_info.value.attempted_chain == ("cs",)
