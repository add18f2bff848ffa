"""Reload must never expose a half-swapped catalog to concurrent readers."""

from __future__ import annotations

import threading

from subtitle_catalog.config.model import FallbackConfig
from subtitle_catalog.errors import MessageNotFoundError
from subtitle_catalog.registry import CatalogRegistry

KEYS = [f"subtitle-{i}" for i in range(40)]


def _generation_source(generation: int) -> str:
    return "\n".join(f"{key} = gen{generation}" for key in KEYS)


def test_reload_is_atomic_under_concurrent_lookup():
    registry = CatalogRegistry.initialize(
        {"cs": _generation_source(0)}, FallbackConfig(default_locale=None)
    )
    stop = threading.Event()
    torn: list[set[str]] = []
    errors: list[BaseException] = []

    def reader() -> None:
        try:
            while not stop.is_set():
                # One snapshot per logical read, exactly as lookup uses it
                snapshot = registry.snapshot()
                store = snapshot.store_for("cs")
                seen = {store.get(key) for key in KEYS}
                if len(seen) != 1:
                    torn.append(seen)
        except BaseException as e:  # noqa: BLE001
            errors.append(e)

    def writer() -> None:
        for generation in range(1, 200):
            registry.reload("cs", _generation_source(generation))

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    writer_thread = threading.Thread(target=writer)
    writer_thread.start()
    writer_thread.join()
    stop.set()
    for t in readers:
        t.join()

    assert not errors
    assert not torn
    assert registry.version == 200
    assert registry.lookup("cs", "subtitle-0").text == "gen199"


def test_concurrent_lookups_during_reload_always_resolve():
    registry = CatalogRegistry.initialize(
        {"cs": _generation_source(0), "en": _generation_source(0)}
    )
    failures: list[BaseException] = []

    def reader() -> None:
        for _ in range(500):
            try:
                text = registry.lookup("cs", "subtitle-7").text
            except MessageNotFoundError as e:
                failures.append(e)
                continue
            if not text.startswith("gen"):
                failures.append(AssertionError(text))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for generation in range(1, 50):
        registry.reload("cs", _generation_source(generation))
    for t in threads:
        t.join()
    assert not failures


def test_concurrent_reloads_of_different_locales_keep_both():
    registry = CatalogRegistry.initialize({"cs": "a = 0\n", "en": "a = 0\n"})

    def reload_many(locale: str) -> None:
        for i in range(1, 101):
            registry.reload(locale, f"a = {i}\n")

    threads = [threading.Thread(target=reload_many, args=(loc,)) for loc in ("cs", "en")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert registry.catalog("cs")["a"] == "100"
    assert registry.catalog("en")["a"] == "100"
    assert registry.version == 201
