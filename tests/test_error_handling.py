from __future__ import annotations

import logging

import aiohttp
import pytest

from subtitle_catalog.errors import (
    AggregateLoadError,
    CatalogError,
    ConfigurationError,
    DuplicateKeyError,
    MalformedLineError,
    MessageNotFoundError,
    SourceFetchError,
    UnknownLocaleError,
    classify_error,
    log_error,
    wrap_fetch_error,
)
from subtitle_catalog.logging_config import error_aggregator


@pytest.mark.parametrize(
    ("error", "category"),
    [
        (MalformedLineError(1, "x"), "parse"),
        (DuplicateKeyError("k", 1, 2), "parse"),
        (AggregateLoadError([("cs", MalformedLineError(1, "x"))]), "load"),
        (MessageNotFoundError("k", ["cs", "en"]), "lookup"),
        (UnknownLocaleError("xx"), "lookup"),
        (SourceFetchError("down"), "source"),
        (OSError("disk"), "source"),
        (ConfigurationError("bad"), "config"),
        (CatalogError("other"), "internal"),
        (RuntimeError("?"), "unknown"),
    ],
)
def test_classify_error(error, category):
    assert classify_error(error) == category


def test_log_error_merges_error_data(caplog):
    caplog.set_level(logging.ERROR)
    log_error("Catalog failed", DuplicateKeyError("subtitle-owl", 1, 3, locale="cs"))
    msg = caplog.records[-1].getMessage()
    assert msg.startswith("[PARSE] Catalog failed")
    assert "key=subtitle-owl" in msg
    assert "first_line=1" in msg
    assert error_aggregator.get_error_summary()["parse"]["total_count"] == 1


def test_aggregate_load_error_message_lists_each_failure():
    err = AggregateLoadError(
        [("de", MalformedLineError(4, "oops", locale="de")), ("cs", DuplicateKeyError("a", 1, 2))]
    )
    assert err.locales == ["cs", "de"]
    assert "2 catalog(s) failed" in str(err)
    assert "[de]" in str(err) and "[cs]" in str(err)


def test_message_not_found_is_lookup_error():
    err = MessageNotFoundError("subtitle-owl", ("cs", "en"))
    assert isinstance(err, LookupError)
    assert str(err) == "Message 'subtitle-owl' not found in any of: cs -> en"
    assert err.data["attempted_chain"] == ["cs", "en"]


def test_wrap_fetch_error():
    wrapped = wrap_fetch_error(aiohttp.ClientConnectionError("reset"), "https://x/cs.ftl")
    assert isinstance(wrapped, SourceFetchError)
    assert wrapped.data["url"] == "https://x/cs.ftl"
    timeout = wrap_fetch_error(TimeoutError(), "https://x/cs.ftl")
    assert "timed out" in str(timeout)
