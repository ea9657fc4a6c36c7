"""Subpath resolution settings.

SubpathConfig is a frozen dataclass — immutable after creation, built
either directly or from the key-value form a settings store keeps.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from subpaths.errors import ConfigurationError

# Language negotiation sources
SOURCE_PATH_PREFIX = "path_prefix"
SOURCE_DOMAIN = "domain"


@dataclass(frozen=True, slots=True)
class LanguageNegotiationConfig:
    """How the active language is carried in URLs.

    Only the ``path_prefix`` source exposes a prefix table; with any
    other source, paths are never stripped of a language segment::

        LanguageNegotiationConfig(prefixes={"en": "", "fr": "fr"})
    """

    source: str = SOURCE_PATH_PREFIX
    prefixes: Mapping[str, str] = field(default_factory=dict)
    default_language: str = "en"

    def __post_init__(self) -> None:
        if not isinstance(self.prefixes, Mapping):
            msg = f"Language prefixes must be a mapping, got {type(self.prefixes).__name__}."
            raise ConfigurationError(msg)
        object.__setattr__(self, "prefixes", MappingProxyType(dict(self.prefixes)))

    def url_prefixes(self) -> Mapping[str, str]:
        """Return the prefix table, or an empty mapping when not prefix-based."""
        if self.source == SOURCE_PATH_PREFIX:
            return self.prefixes
        return {}


@dataclass(frozen=True, slots=True)
class SubpathConfig:
    """Subpath resolution settings. Immutable after creation.

    ``max_depth`` bounds how many trailing segments may be peeled off a
    path before giving up; ``0`` peels until one segment remains::

        config = SubpathConfig(max_depth=3)
    """

    max_depth: int = 0
    language: LanguageNegotiationConfig = field(default_factory=LanguageNegotiationConfig)

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            msg = f"max_depth must be an integer, got {self.max_depth!r}."
            raise ConfigurationError(msg)
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0 (0 means unbounded), got {self.max_depth}."
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> SubpathConfig:
        """Build a config from stored settings.

        Recognised keys::

            {
                "depth": 3,
                "language": {
                    "source": "path_prefix",
                    "prefixes": {"fr": "fr"},
                    "default": "en",
                },
            }

        Missing keys keep their defaults.
        """
        language_settings = settings.get("language") or {}
        if not isinstance(language_settings, Mapping):
            msg = "The 'language' setting must be a mapping."
            raise ConfigurationError(msg)

        language = LanguageNegotiationConfig(
            source=language_settings.get("source", SOURCE_PATH_PREFIX),
            prefixes=language_settings.get("prefixes", {}),
            default_language=language_settings.get("default", "en"),
        )
        return cls(max_depth=settings.get("depth", 0), language=language)
