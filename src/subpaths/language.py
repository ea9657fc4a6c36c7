"""Language prefixes in URL paths.

With path-prefix negotiation, ``/fr/blog/post-1`` is the French view of
``/blog/post-1``. This module knows how to find the active language,
strip its prefix from incoming paths and put it back on outgoing ones.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol
from urllib.parse import unquote

from subpaths.config import LanguageNegotiationConfig
from subpaths.http.request import Request
from subpaths.processing.protocol import OutboundOptions


def strip_locale_prefix(
    path_info: str,
    language_id: str | None = None,
    prefixes: Mapping[str, str] | None = None,
) -> str:
    """Remove the active language's prefix segment and normalise the path.

    The prefix is only removed when *prefixes* holds a non-empty entry
    for *language_id* and *path_info* starts with ``/<prefix>/``. The
    result is always URL-decoded with trailing slashes removed. Decoding
    follows path rules: ``%2B`` becomes ``+`` but a literal ``+`` stays a
    plus sign, it is not turned into a space as form decoding would::

        >>> strip_locale_prefix("/fr/blog/caf%C3%A9/", "fr", {"fr": "fr"})
        '/blog/café'
    """
    prefix = (prefixes or {}).get(language_id or "")
    if prefix:
        url_prefix = f"/{prefix}/"
        if path_info.startswith(url_prefix):
            path_info = "/" + path_info[len(url_prefix) :]
    return unquote(path_info).rstrip("/")


class LanguageManager(Protocol):
    """Reports the language a request is being served in."""

    def current_language(self, request: Request | None = None) -> str: ...


class StaticLanguageManager:
    """Always reports the same language."""

    __slots__ = ("language_id",)

    def __init__(self, language_id: str) -> None:
        self.language_id = language_id

    def current_language(self, request: Request | None = None) -> str:
        return self.language_id


class PrefixLanguageManager:
    """Detects the language from the first segment of the request path.

    A request with no matching prefix, or no request at all, is served
    in ``config.default_language``.
    """

    __slots__ = ("config",)

    def __init__(self, config: LanguageNegotiationConfig) -> None:
        self.config = config

    def current_language(self, request: Request | None = None) -> str:
        if request is None:
            return self.config.default_language
        first = request.path_info.lstrip("/").split("/", 1)[0]
        for language_id, prefix in self.config.url_prefixes().items():
            if prefix and prefix == first:
                return language_id
        return self.config.default_language


class LanguagePrefixProcessor:
    """Inbound and outbound processor for language path prefixes.

    Inbound, ``/fr/blog/post-1`` becomes ``/blog/post-1`` when French is
    active. Outbound, the active language's prefix is prepended unless
    ``options["prefix"]`` is ``False``; the language is recorded in
    ``options["language"]`` for processors further down the chain.
    """

    __slots__ = ("config", "languages")

    def __init__(
        self,
        config: LanguageNegotiationConfig,
        languages: LanguageManager | None = None,
    ) -> None:
        self.config = config
        self.languages = languages or PrefixLanguageManager(config)

    def _prefix(self, request: Request | None) -> str:
        language_id = self.languages.current_language(request)
        return self.config.url_prefixes().get(language_id, "")

    def process_inbound(self, path: str, request: Request) -> str:
        prefix = self._prefix(request)
        if not prefix:
            return path
        if path == f"/{prefix}":
            return "/"
        if path.startswith(f"/{prefix}/"):
            return path[len(prefix) + 1 :]
        return path

    def process_outbound(
        self,
        path: str,
        options: OutboundOptions,
        request: Request | None = None,
    ) -> str:
        options.setdefault("language", self.languages.current_language(request))
        if options.get("prefix") is False:
            return path
        prefix = self.config.url_prefixes().get(options["language"], "")
        if not prefix:
            return path
        if path == "/":
            return f"/{prefix}"
        return f"/{prefix}{path}"
