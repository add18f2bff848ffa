"""
Catalog directory watcher for runtime catalog reloads
"""

import asyncio
import logging
import os
from typing import Any, Protocol, cast, runtime_checkable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer as _Observer

from ..errors.internal import CatalogError
from ..logs.logger import logger
from ..registry import CatalogRegistry
from .loader import locale_for_path, read_source_file


class CatalogFileHandler(FileSystemEventHandler):
    """File system event handler for ``<locale><suffix>`` files"""

    def __init__(self, watcher_instance: "CatalogWatcher"):
        super().__init__()
        self.watcher = watcher_instance
        self.last_modified: dict[str, float] = {}

    def _should_process(self, path: str) -> bool:
        """Check if the file's mtime advanced since it was last processed."""
        try:
            mtime = os.path.getmtime(path)
        except FileNotFoundError:
            return False
        # Debounce: only process when mtime increases
        if mtime <= self.last_modified.get(path, 0.0):
            return False
        self.last_modified[path] = mtime
        return True

    def _handle_event(self, src_path: str) -> None:
        path = os.path.abspath(src_path)
        if os.path.dirname(path) != self.watcher.catalog_dir:
            return
        locale = locale_for_path(path, self.watcher.suffix)
        if locale is None:
            return
        if self._should_process(path):
            self.watcher._on_catalog_changed(locale, path)  # noqa: SLF001

    def on_modified(self, event):
        self._handle_event(getattr(event, "src_path", ""))

    def on_created(self, event):
        self._handle_event(getattr(event, "src_path", ""))

    def on_moved(self, event):
        # Editors save via rename; prefer destination path
        dest = getattr(event, "dest_path", None) or getattr(event, "src_path", "")
        self._handle_event(dest)

    def on_deleted(self, event):
        path = os.path.abspath(getattr(event, "src_path", ""))
        locale = locale_for_path(path, self.watcher.suffix)
        if locale is not None and os.path.dirname(path) == self.watcher.catalog_dir:
            # Keep serving the last good catalog
            logger.log_event(
                "watch", "file_removed", level=logging.WARNING, locale=locale, path=path
            )


@runtime_checkable
class _ObserverLike(Protocol):  # minimal protocol for typing
    def schedule(
        self, handler: FileSystemEventHandler, path: str, recursive: bool = False
    ) -> None: ...  # noqa: D401,E701
    def start(self) -> None: ...  # noqa: D401,E701


class CatalogWatcher:
    """Watches a catalog directory and reloads locales whose file changed.

    A rejected reload leaves the previous catalog in service; the error is
    logged and watching continues.
    """

    observer: Any | None
    running: bool

    def __init__(self, registry: CatalogRegistry, catalog_dir: str, suffix: str):
        self.registry = registry
        self.catalog_dir = os.path.abspath(catalog_dir)
        self.suffix = suffix
        self.observer = None
        self.running = False

    def start(self) -> None:
        """Start watching the catalog directory"""
        if self.running:
            return

        if not os.path.isdir(self.catalog_dir):
            logger.log_event(
                "watch", "dir_missing", level=logging.WARNING, path=self.catalog_dir
            )
            return

        try:
            observer = cast(_ObserverLike, _Observer())
            observer.schedule(CatalogFileHandler(self), self.catalog_dir, recursive=False)
            observer.start()
            self.observer = observer
            self.running = True
            logger.log_event("watch", "start", path=self.catalog_dir)
        except OSError as e:
            self.observer = None
            logger.log_event("watch", "start_failed", level=logging.ERROR, error=str(e))

    def stop(self) -> None:
        """Stop watching the catalog directory"""
        obs = self.observer
        if self.running and obs is not None:
            try:
                obs.stop()
                obs.join()
            finally:
                self.running = False
                self.observer = None
                logger.log_event("watch", "stopped")

    def _on_catalog_changed(self, locale: str, path: str) -> None:
        """Reload one locale from its file"""
        logger.log_event("watch", "reload_triggered", locale=locale, path=path)
        try:
            text = read_source_file(path)
            self.registry.reload(locale, text)
        except CatalogError as e:
            # registry.reload has already logged parse details
            logger.log_event(
                "watch",
                "reload_rejected",
                level=logging.ERROR,
                locale=locale,
                error=str(e),
            )


async def create_catalog_watcher(
    registry: CatalogRegistry, catalog_dir: str, suffix: str
) -> CatalogWatcher:
    """Create and start a catalog directory watcher"""
    watcher = CatalogWatcher(registry, catalog_dir, suffix)

    # Start watcher in executor to avoid blocking
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, watcher.start)

    return watcher
