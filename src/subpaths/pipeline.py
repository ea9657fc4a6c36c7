"""Assembles the standard path processing pipeline.

Inbound order: language prefix (300), aliases (100), subpaths (50).
Outbound order: aliases (300), subpaths (200), language prefix (100).
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote

from subpaths.aliases import AliasPathProcessor
from subpaths.config import SubpathConfig
from subpaths.http.request import Request
from subpaths.language import LanguageManager, LanguagePrefixProcessor, PrefixLanguageManager
from subpaths.processing.manager import PathProcessorManager
from subpaths.processing.subpath import SubpathProcessor
from subpaths.routing.router import Router
from subpaths.routing.validator import RouteValidator


@dataclass(frozen=True, slots=True)
class Pipeline:
    """A wired, frozen processor chain and the pieces it was built from."""

    processors: PathProcessorManager
    validator: RouteValidator
    subpaths: SubpathProcessor
    aliases: AliasPathProcessor
    config: SubpathConfig

    @classmethod
    def create(
        cls,
        router: Router,
        aliases: AliasPathProcessor,
        config: SubpathConfig | None = None,
        languages: LanguageManager | None = None,
    ) -> Pipeline:
        """Wire the standard processors around *router* and *aliases*.

        The router is compiled if it was not already.
        """
        config = config or SubpathConfig()
        languages = languages or PrefixLanguageManager(config.language)
        router.compile()

        manager = PathProcessorManager()
        validator = RouteValidator(router, manager)
        subpaths = SubpathProcessor(aliases, config, validator=validator, languages=languages)
        language_prefix = LanguagePrefixProcessor(config.language, languages)

        manager.add_inbound(language_prefix, priority=300)
        manager.add_inbound(aliases, priority=100)
        manager.add_inbound(subpaths, priority=50)
        manager.add_outbound(aliases, priority=300)
        manager.add_outbound(subpaths, priority=200)
        manager.add_outbound(language_prefix, priority=100)
        manager.freeze()

        return cls(
            processors=manager,
            validator=validator,
            subpaths=subpaths,
            aliases=aliases,
            config=config,
        )

    def resolve(self, request: Request) -> str:
        """The internal path *request* routes to."""
        return self.processors.process_inbound(initial_path(request), request)

    def url(self, path: str, request: Request | None = None, **options: object) -> str:
        """The public path for internal *path*."""
        return self.processors.process_outbound(path, dict(options), request)


def initial_path(request: Request) -> str:
    """Decoded path info without trailing slash, ``/`` for the root."""
    return unquote(request.path_info).rstrip("/") or "/"
