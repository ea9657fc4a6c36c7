"""Subpath resolution.

A subpath is an alias followed by segments the alias does not cover:
with ``/blog/post-1`` aliased to ``/node/5``, the request path
``/blog/post-1/comments/5`` should route to ``/node/5/comments/5``.

``SubpathProcessor`` finds the split point by peeling trailing segments
off the path, longest prefix first, and asking an alias processor to
translate what is left. The first prefix the alias processor changes
wins; there is no backtracking to shorter prefixes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from subpaths.config import SubpathConfig
from subpaths.context import ReentrancyGuard
from subpaths.errors import ConfigurationError
from subpaths.http.request import Request
from subpaths.language import LanguageManager, PrefixLanguageManager, strip_locale_prefix
from subpaths.processing.protocol import (
    InboundPathProcessor,
    OutboundOptions,
    OutboundPathProcessor,
    PathValidator,
)

logger = logging.getLogger("subpaths.processing")


class AliasProcessor(InboundPathProcessor, OutboundPathProcessor, Protocol):
    """An alias translator usable in both directions."""


def peel(path: str, translate: Callable[[str], str], max_depth: int = 0) -> str | None:
    """Translate the longest prefix of *path* that *translate* changes.

    Trailing segments are peeled one at a time, at most *max_depth*
    times (``0`` means until a single segment remains). For each shrunk
    prefix ``P``, ``translate(P)`` is called; on the first result that
    differs from ``P``, the translated prefix is returned with the peeled
    segments reattached in their original order. Returns ``None`` when no
    prefix was changed::

        >>> aliases = {"/blog/post-1": "/node/5"}
        >>> peel("/blog/post-1/comments", lambda p: aliases.get(p, p))
        '/node/5/comments'
    """
    segments = path.lstrip("/").split("/")
    depth = 0
    while max_depth == 0 or depth < max_depth:
        depth += 1
        split = len(segments) - depth
        # At least one segment has to stay in the prefix.
        if split < 1:
            return None
        prefix = "/" + "/".join(segments[:split])
        translated = translate(prefix)
        if translated != prefix:
            return translated + "/" + "/".join(segments[split:])
    return None


class SubpathProcessor:
    """Resolves aliases that carry extra trailing segments.

    Inbound, the candidate built from the first translated prefix is
    checked against *validator* before it is used; if it does not route,
    the original path is kept so later processors can try their luck.
    Outbound, the first translated prefix is trusted as is.

    The validator usually runs the whole inbound chain again, this
    processor included. Those nested calls see the re-entrancy guard and
    return their input untouched.

    Usage::

        subpaths = SubpathProcessor(aliases, SubpathConfig(max_depth=3))
        subpaths.set_path_validator(RouteValidator(router, manager))
        subpaths.process_inbound("/blog/post-1/comments", request)
    """

    __slots__ = ("_guard", "_validator", "aliases", "config", "languages")

    def __init__(
        self,
        aliases: AliasProcessor,
        config: SubpathConfig | None = None,
        *,
        validator: PathValidator | None = None,
        languages: LanguageManager | None = None,
    ) -> None:
        self.aliases = aliases
        self.config = config or SubpathConfig()
        self.languages = languages or PrefixLanguageManager(self.config.language)
        self._validator = validator
        self._guard = ReentrancyGuard("subpath")

    # -- Collaborators --

    def set_path_validator(self, validator: PathValidator) -> SubpathProcessor:
        """Set the validator after construction.

        The validator normally depends on the processor chain this
        processor is part of, so it often cannot exist yet when the
        processor is built.
        """
        self._validator = validator
        return self

    @property
    def validator(self) -> PathValidator:
        if self._validator is None:
            msg = (
                "SubpathProcessor has no path validator. Pass validator= or "
                "call set_path_validator() before processing requests."
            )
            raise ConfigurationError(msg)
        return self._validator

    @property
    def in_validation(self) -> bool:
        """True while a validity check of this processor is running."""
        return self._guard.active

    # -- Inbound --

    def process_inbound(self, path: str, request: Request) -> str:
        # Skip paths another processor already rewrote, and the nested
        # calls made while validating our own candidate.
        if self._guard.active or self._request_path(request) != path:
            return path

        def translate(prefix: str) -> str:
            return self.aliases.process_inbound(prefix, request)

        candidate = peel(path, translate, self.config.max_depth)
        if candidate is None:
            return path

        if self.is_valid(candidate):
            logger.debug("Subpath %r resolved to %r", path, candidate)
            return candidate

        logger.debug("Subpath candidate %r for %r does not route", candidate, path)
        return path

    def is_valid(self, path: str) -> bool:
        """Check that *path* routes, without access checks.

        Nested inbound processing triggered by the check is short-circuited
        until it returns or raises.
        """
        with self._guard:
            return self.validator.match_without_access_check(path) is not None

    def _request_path(self, request: Request) -> str:
        """The request's path info without language prefix, decoded and trimmed."""
        language_id = self.languages.current_language(request)
        return strip_locale_prefix(
            request.path_info,
            language_id,
            self.config.language.url_prefixes(),
        )

    # -- Outbound --

    def process_outbound(
        self,
        path: str,
        options: OutboundOptions | None = None,
        request: Request | None = None,
    ) -> str:
        if options is None:
            options = {}

        def translate(prefix: str) -> str:
            return self.aliases.process_outbound(prefix, options, request)

        candidate = peel(path, translate, self.config.max_depth)
        if candidate is None:
            return path
        logger.debug("Outbound subpath %r resolved to %r", path, candidate)
        return candidate
