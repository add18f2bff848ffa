from __future__ import annotations

import pytest
from pydantic import ValidationError

from subtitle_catalog.config.model import CatalogSettings, FallbackConfig


def test_fallback_chain_appends_default_and_skips_requested():
    fb = FallbackConfig(default_locale="en", chains={"cs": ["sk", "cs", "en"]})
    assert fb.chain_for("cs") == ("sk", "en")
    assert fb.chain_for("en") == ()
    assert fb.chain_for("de") == ("en",)


def test_fallback_normalizes_tags_and_single_string_chain():
    fb = FallbackConfig.from_dict({"default_locale": " en ", "chains": {" pt-BR ": " pt "}})
    assert fb.default_locale == "en"
    assert fb.chains == {"pt-BR": ("pt",)}


def test_fallback_rejects_bad_chain_shapes():
    with pytest.raises(ValidationError):
        FallbackConfig(chains={"cs": 5})
    with pytest.raises(ValidationError):
        FallbackConfig(chains={"cs": ["", "en"]})
    with pytest.raises(ValidationError):
        FallbackConfig(chains=["cs"])


def test_fallback_is_frozen():
    fb = FallbackConfig()
    with pytest.raises(ValidationError):
        fb.default_locale = "cs"  # type: ignore[misc]


def test_settings_suffix_gets_leading_dot():
    settings = CatalogSettings.from_dict({"catalog_dir": "i18n", "suffix": "txt"})
    assert settings.suffix == ".txt"


def test_settings_require_some_source():
    with pytest.raises(ValidationError):
        CatalogSettings.from_dict({})
    with pytest.raises(ValidationError):
        CatalogSettings.from_dict({"catalog_dir": "   "})


def test_settings_remote_sources_must_be_http():
    settings = CatalogSettings.from_dict(
        {"remote_sources": {"cs": "https://cdn.example/cs.ftl"}}
    )
    assert settings.remote_sources == {"cs": "https://cdn.example/cs.ftl"}
    with pytest.raises(ValidationError):
        CatalogSettings.from_dict({"remote_sources": {"cs": "ftp://x/cs.ftl"}})


def test_effective_reference_locale():
    settings = CatalogSettings.from_dict(
        {"catalog_dir": "i18n", "fallback": {"default_locale": "de"}}
    )
    assert settings.effective_reference_locale == "de"
    explicit = CatalogSettings.from_dict(
        {"catalog_dir": "i18n", "reference_locale": "cs"}
    )
    assert explicit.effective_reference_locale == "cs"


def test_settings_to_dict_round_trip():
    data = {"catalog_dir": "i18n", "fallback": {"default_locale": "en", "chains": {"cs": ["sk"]}}}
    settings = CatalogSettings.from_dict(data)
    again = CatalogSettings.from_dict(settings.to_dict())
    assert again == settings
