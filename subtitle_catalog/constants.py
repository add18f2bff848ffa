"""
Configuration constants for the subtitle catalog engine

This module contains all configurable constants used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Retrieve a non-empty string from an environment variable."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


# Catalog source format
COMMENT_MARKER = "#"  # Lines starting with this (after stripping) are ignored
ENTRY_SEPARATOR = "="  # Key/text separator; split happens on the first one
CATALOG_FILE_SUFFIX = _get_env_str(
    "SUBTITLE_CATALOG_SUFFIX", ".ftl"
)  # One file per locale: <locale><suffix>

# Locale defaults
DEFAULT_LOCALE = _get_env_str(
    "SUBTITLE_DEFAULT_LOCALE", "en"
)  # Appended last to every fallback chain
DEFAULT_REFERENCE_LOCALE = _get_env_str(
    "SUBTITLE_REFERENCE_LOCALE", DEFAULT_LOCALE
)  # Locale used as the complete key set for coverage reports

# Settings file
CONFIG_FILE_ENV = "SUBTITLE_CATALOG_CONF"  # Env var holding the settings file path
DEFAULT_CONFIG_FILE = "subtitle_catalog.json"

# Remote source fetching
SOURCE_FETCH_TIMEOUT_SECONDS = _get_env_int(
    "SOURCE_FETCH_TIMEOUT_SECONDS", 30
)  # Total timeout for one catalog download
SOURCE_FETCH_MAX_ATTEMPTS = _get_env_int(
    "SOURCE_FETCH_MAX_ATTEMPTS", 3
)  # Attempts before a transient fetch failure becomes fatal
RETRY_BACKOFF_MULTIPLIER = _get_env_int(
    "RETRY_BACKOFF_MULTIPLIER", 1
)  # Exponential backoff multiplier
RETRY_MAX_BACKOFF_SECONDS = _get_env_int(
    "RETRY_MAX_BACKOFF_SECONDS", 30
)  # Maximum backoff time in seconds

# Error aggregation
ERROR_HISTORY_LIMIT = _get_env_int(
    "ERROR_HISTORY_LIMIT", 1000
)  # Occurrences kept per error category
