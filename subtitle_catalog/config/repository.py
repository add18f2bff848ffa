from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors.internal import ConfigurationError
from .model import CatalogSettings


class SettingsRepository:
    """Loads engine settings from a JSON file.

    The decoded settings are cached against the file's mtime and size, so
    repeated loads of an unchanged file skip the disk read.

    Relative ``catalog_dir`` values are resolved against the settings file's
    directory.
    """

    def __init__(self, path: str | os.PathLike[str]):
        """Initialize the SettingsRepository.

        Args:
            path: Path to the settings file.
        """
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self._file_mtime: float | None = None
        self._file_size: int | None = None
        self._cached: CatalogSettings | None = None

    def load_raw(self) -> dict[str, Any]:
        """Return the decoded JSON object.

        Raises:
            ConfigurationError: File missing, unreadable, or not a JSON object.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Settings file not found: {self.path}", data={"path": self.path}
            ) from e
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Settings file unreadable: {self.path}: {e}", data={"path": self.path}
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a JSON object: {self.path}",
                data={"path": self.path},
            )
        return data

    def load(self) -> CatalogSettings:
        """Load and validate settings.

        Raises:
            ConfigurationError: See ``load_raw``; also raised on validation failure.
        """
        try:
            st = os.stat(self.path)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Settings file not found: {self.path}", data={"path": self.path}
            ) from e
        if (
            self._cached is not None
            and self._file_mtime == st.st_mtime
            and self._file_size == st.st_size
        ):
            return self._cached

        data = self.load_raw()
        catalog_dir = data.get("catalog_dir")
        if isinstance(catalog_dir, str) and catalog_dir.strip():
            base = Path(self.path).resolve().parent
            data["catalog_dir"] = str((base / catalog_dir.strip()).resolve())
        try:
            settings = CatalogSettings.from_dict(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid settings in {self.path}: {e.error_count()} error(s)",
                data={"path": self.path, "errors": e.errors(include_url=False)},
            ) from e
        self._cached = settings
        self._file_mtime = st.st_mtime
        self._file_size = st.st_size
        return settings
