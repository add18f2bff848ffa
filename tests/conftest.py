from __future__ import annotations

import pytest

from subtitle_catalog.config.model import FallbackConfig
from subtitle_catalog.logging_config import error_aggregator
from subtitle_catalog.registry import CatalogRegistry
from tests.fixtures.sample_catalogs import CS_SOURCE, EN_SOURCE, SK_SOURCE


@pytest.fixture(autouse=True)
def _reset_error_aggregator():
    """Keep aggregated error counts from leaking between tests."""
    error_aggregator.clear()
    yield
    error_aggregator.clear()


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture
def sample_sources() -> dict[str, str]:
    return {"cs": CS_SOURCE, "en": EN_SOURCE, "sk": SK_SOURCE}


@pytest.fixture
def fallback_config() -> FallbackConfig:
    return FallbackConfig(default_locale="en", chains={"cs": ["sk"]})


@pytest.fixture
def registry(sample_sources, fallback_config):
    reg = CatalogRegistry.initialize(sample_sources, fallback_config)
    yield reg
    reg.teardown()


@pytest.fixture
def catalog_dir(tmp_path, sample_sources):
    root = tmp_path / "i18n"
    root.mkdir()
    for locale, text in sample_sources.items():
        (root / f"{locale}.ftl").write_text(text, encoding="utf-8")
    return root
