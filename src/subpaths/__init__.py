"""Subpaths — alias resolution for paths that run past their alias.

With ``/blog/post-1`` aliased to ``/node/5``, a request for
``/blog/post-1/comments`` routes to ``/node/5/comments``, and links to
``/node/5/comments`` come out as ``/blog/post-1/comments``.

Basic usage::

    from subpaths import AliasPathProcessor, Pipeline, Request, Route, Router, SubpathConfig

    router = Router()
    router.add(Route("/node/{id:int}"))
    router.add(Route("/node/{id:int}/comments"))

    aliases = AliasPathProcessor()
    aliases.add("/node/5", "/blog/post-1")

    pipeline = Pipeline.create(router, aliases, SubpathConfig(max_depth=3))
    pipeline.resolve(Request.for_path("/blog/post-1/comments"))  # "/node/5/comments"
    pipeline.url("/node/5/comments")                             # "/blog/post-1/comments"

ASGI (wrap any ASGI application)::

    from subpaths import SubpathMiddleware
    app = SubpathMiddleware(app, pipeline)
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AliasPathProcessor",
    "AliasRecord",
    "ConfigurationError",
    "InboundPathProcessor",
    "LanguageNegotiationConfig",
    "LanguagePrefixProcessor",
    "OutboundPathProcessor",
    "PathProcessorManager",
    "Pipeline",
    "PrefixLanguageManager",
    "ReentrancyGuard",
    "Request",
    "Route",
    "RouteMatch",
    "RouteValidator",
    "Router",
    "StaticLanguageManager",
    "SubpathConfig",
    "SubpathError",
    "SubpathMiddleware",
    "SubpathProcessor",
    "strip_locale_prefix",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "AliasPathProcessor": "subpaths.aliases",
    "AliasRecord": "subpaths.aliases",
    "ConfigurationError": "subpaths.errors",
    "InboundPathProcessor": "subpaths.processing.protocol",
    "LanguageNegotiationConfig": "subpaths.config",
    "LanguagePrefixProcessor": "subpaths.language",
    "OutboundPathProcessor": "subpaths.processing.protocol",
    "PathProcessorManager": "subpaths.processing.manager",
    "Pipeline": "subpaths.pipeline",
    "PrefixLanguageManager": "subpaths.language",
    "ReentrancyGuard": "subpaths.context",
    "Request": "subpaths.http.request",
    "Route": "subpaths.routing.route",
    "RouteMatch": "subpaths.routing.route",
    "RouteValidator": "subpaths.routing.validator",
    "Router": "subpaths.routing.router",
    "StaticLanguageManager": "subpaths.language",
    "SubpathConfig": "subpaths.config",
    "SubpathError": "subpaths.errors",
    "SubpathMiddleware": "subpaths.asgi",
    "SubpathProcessor": "subpaths.processing.subpath",
    "strip_locale_prefix": "subpaths.language",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import subpaths`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
