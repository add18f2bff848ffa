from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import CATALOG_FILE_SUFFIX, DEFAULT_LOCALE, DEFAULT_REFERENCE_LOCALE


def normalize_locale(raw: Any) -> str:
    """Strip surrounding whitespace from a locale tag; tags are otherwise verbatim."""
    if not isinstance(raw, str):
        raise ValueError("locale must be a string")
    value = raw.strip()
    if not value:
        raise ValueError("locale must not be empty")
    return value


class FallbackConfig(BaseModel):
    """Fallback chains consulted when a key is absent in the requested locale.

    Attributes:
        default_locale: Appended to every chain; conventionally the complete
            locale. None disables the implicit tail.
        chains: Per-locale ordered fallbacks, e.g. ``{"cs": ["sk", "en"]}``.
    """

    model_config = ConfigDict(frozen=True)

    default_locale: str | None = DEFAULT_LOCALE
    chains: dict[str, tuple[str, ...]] = Field(default_factory=dict)

    @field_validator("default_locale", mode="before")
    @classmethod
    def validate_default_locale(cls, v: Any) -> str | None:
        if v is None:
            return None
        return normalize_locale(v)

    @field_validator("chains", mode="before")
    @classmethod
    def validate_chains(cls, v: Any) -> dict[str, tuple[str, ...]]:
        """Normalize locale tags and drop repeated entries within a chain."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("chains must be a mapping of locale -> list of locales")
        chains: dict[str, tuple[str, ...]] = {}
        for locale, chain in v.items():
            if isinstance(chain, str):
                chain = [chain]
            if not isinstance(chain, list | tuple):
                raise ValueError(f"fallback chain for {locale!r} must be a list")
            chains[normalize_locale(locale)] = tuple(
                dict.fromkeys(normalize_locale(c) for c in chain)
            )
        return chains

    def chain_for(self, locale: str) -> tuple[str, ...]:
        """Configured fallbacks for ``locale``, default locale last, requested locale excluded."""
        tail = (self.default_locale,) if self.default_locale else ()
        ordered = dict.fromkeys((*self.chains.get(locale, ()), *tail))
        ordered.pop(locale, None)
        return tuple(ordered)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> FallbackConfig:
        return cls.model_validate(dict(data or {}))


class CatalogSettings(BaseModel):
    """Where catalog sources come from and how they fall back.

    Attributes:
        catalog_dir: Directory holding one ``<locale><suffix>`` file per locale.
        suffix: Catalog file extension.
        remote_sources: Locale -> URL for catalogs fetched over HTTP; these
            take precedence over a file for the same locale.
        fallback: Fallback chain configuration.
        reference_locale: Locale used as the complete key set for coverage.
    """

    catalog_dir: str | None = None
    suffix: str = CATALOG_FILE_SUFFIX
    remote_sources: dict[str, str] = Field(default_factory=dict)
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)
    reference_locale: str | None = None

    @field_validator("suffix", mode="before")
    @classmethod
    def validate_suffix(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("suffix must be a non-empty string")
        v = v.strip()
        return v if v.startswith(".") else f".{v}"

    @field_validator("remote_sources", mode="before")
    @classmethod
    def validate_remote_sources(cls, v: Any) -> dict[str, str]:
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            raise ValueError("remote_sources must be a mapping of locale -> URL")
        sources: dict[str, str] = {}
        for locale, url in v.items():
            if not isinstance(url, str) or not url.startswith(("http://", "https://")):
                raise ValueError(f"remote source for {locale!r} must be an http(s) URL")
            sources[normalize_locale(locale)] = url
        return sources

    @field_validator("reference_locale", mode="before")
    @classmethod
    def validate_reference_locale(cls, v: Any) -> str | None:
        return None if v is None else normalize_locale(v)

    @model_validator(mode="after")
    def validate_has_sources(self) -> CatalogSettings:
        if not self.catalog_dir and not self.remote_sources:
            raise ValueError("settings need a catalog_dir or at least one remote source")
        return self

    @property
    def effective_reference_locale(self) -> str:
        return (
            self.reference_locale
            or self.fallback.default_locale
            or DEFAULT_REFERENCE_LOCALE
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CatalogSettings:
        """Create settings from a decoded JSON object.

        Args:
            data: Dictionary containing settings data.

        Returns:
            CatalogSettings instance.
        """
        norm_data = dict(data)
        if isinstance(norm_data.get("catalog_dir"), str):
            norm_data["catalog_dir"] = norm_data["catalog_dir"].strip() or None
        return cls.model_validate(norm_data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
