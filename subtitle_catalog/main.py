#!/usr/bin/env python3
"""
Command line entry point for the subtitle catalog engine

Commands:
  check      Load every catalog; exit 1 if any fails to parse.
  coverage   Report keys missing from each locale; exit 1 on any gap.
  lookup     Resolve one key for one locale through its fallback chain.
  watch      Load catalogs and reload them as their files change.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from .config.loader import build_registry, load_settings
from .config.model import CatalogSettings
from .config.watcher import create_catalog_watcher
from .errors.handling import log_error
from .errors.internal import (
    AggregateLoadError,
    CatalogError,
    MessageNotFoundError,
)
from .logging_config import LoggerConfigurator
from .logs.logger import logger
from .registry import CatalogRegistry


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="subtitle-catalog", description="Load, validate and query subtitle catalogs"
    )
    parser.add_argument("--config", help="Settings file (default: $SUBTITLE_CATALOG_CONF)")
    parser.add_argument(
        "--catalog-dir", help="Catalog directory, overrides the settings file"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="Parse every catalog and report load errors")

    coverage = sub.add_parser("coverage", help="Report translation coverage gaps")
    coverage.add_argument("--reference", help="Reference locale (default from settings)")
    coverage.add_argument(
        "--json-output", action="store_true", help="Emit the report as JSON"
    )

    lookup = sub.add_parser("lookup", help="Resolve one key")
    lookup.add_argument("locale")
    lookup.add_argument("key")

    sub.add_parser("watch", help="Serve catalogs and reload them on change")
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> CatalogSettings:
    """Settings from ``--config`` (or env), or built from ``--catalog-dir`` alone."""
    if args.catalog_dir and not args.config:
        return CatalogSettings.from_dict({"catalog_dir": args.catalog_dir})
    settings = load_settings(args.config)
    if args.catalog_dir:
        settings = settings.model_copy(update={"catalog_dir": args.catalog_dir})
    return settings


def emit_coverage(
    report: dict[str, frozenset[str]], reference: str, as_json: bool
) -> None:
    if as_json:
        print(
            json.dumps(
                {
                    "reference": reference,
                    "missing": {loc: sorted(keys) for loc, keys in report.items()},
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return
    print(f"Coverage against '{reference}'")
    print("=" * (len(reference) + 19))
    for locale, missing in report.items():
        if not missing:
            print(f"{locale}: complete")
            continue
        print(f"{locale}: {len(missing)} missing")
        for key in sorted(missing):
            print(f"  - {key}")


def run_check(registry: CatalogRegistry) -> int:
    for locale in registry.locales:
        print(f"{locale}: {len(registry.catalog(locale))} entries")
    return 0


def run_coverage(
    registry: CatalogRegistry, settings: CatalogSettings, args: argparse.Namespace
) -> int:
    reference = args.reference or settings.effective_reference_locale
    report = registry.coverage_report(reference)
    emit_coverage(report, reference, args.json_output)
    return 1 if any(report.values()) else 0


def run_lookup(registry: CatalogRegistry, args: argparse.Namespace) -> int:
    try:
        resolution = registry.lookup(args.locale, args.key)
    except MessageNotFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(resolution.text)
    if resolution.fallback_used:
        print(f"(resolved from '{resolution.locale}')", file=sys.stderr)
    return 0


async def run_watch(registry: CatalogRegistry, settings: CatalogSettings) -> int:
    if not settings.catalog_dir:
        print("watch needs a catalog directory", file=sys.stderr)
        return 2
    watcher = await create_catalog_watcher(registry, settings.catalog_dir, settings.suffix)
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        watcher.stop()


async def main(argv: list[str] | None = None) -> int:
    """Run one CLI command and return its exit code."""
    args = parse_args(argv)
    logger.log_event("app", "start", command=args.command)
    try:
        settings = resolve_settings(args)
        registry = await build_registry(settings)
    except AggregateLoadError as e:
        for locale, error in e.errors:
            print(f"[{locale}] {error}", file=sys.stderr)
        return 1
    except CatalogError as e:
        log_error("Catalog setup failed", e)
        return 2

    try:
        if args.command == "check":
            return run_check(registry)
        if args.command == "coverage":
            return run_coverage(registry, settings, args)
        if args.command == "lookup":
            return run_lookup(registry, args)
        return await run_watch(registry, settings)
    except CatalogError as e:
        log_error(f"Command '{args.command}' failed", e)
        return 2
    finally:
        registry.teardown()


def run(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the console script."""
    LoggerConfigurator().configure()
    try:
        code = asyncio.run(main(argv))
    except KeyboardInterrupt:
        code = 0
    logger.log_event("app", "shutdown", exit_code=code)
    sys.exit(code)


if __name__ == "__main__":
    run()
