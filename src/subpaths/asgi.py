"""ASGI middleware that runs inbound path processing.

Wraps any ASGI application. HTTP requests reach the wrapped app with
``scope["path"]`` already rewritten to the internal path; the path the
client asked for stays available as ``scope["state"]["original_path"]``.
"""

import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias
from urllib.parse import quote

from subpaths.http.request import Request
from subpaths.pipeline import Pipeline, initial_path

logger = logging.getLogger("subpaths.asgi")

# Raw ASGI types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]


class SubpathMiddleware:
    """Rewrites request paths through a processing pipeline.

    Usage::

        pipeline = Pipeline.create(router, aliases, SubpathConfig(max_depth=3))
        app = SubpathMiddleware(app, pipeline)
    """

    __slots__ = ("app", "pipeline")

    def __init__(self, app: ASGIApp, pipeline: Pipeline) -> None:
        self.app = app
        self.pipeline = pipeline

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request.from_asgi(scope)
        path = self.pipeline.resolve(request)
        if path == initial_path(request):
            await self.app(scope, receive, send)
            return

        # Servers that report the mount point in "path" get it back.
        root = request.root_path.rstrip("/")
        original = scope["path"]
        if root and (original == root or original.startswith(root + "/")):
            path = root + path

        logger.debug("Rewrote %s %r to %r", request.method, original, path)
        state = dict(scope.get("state") or {})
        state["original_path"] = original
        scope = {
            **scope,
            "path": path,
            "raw_path": quote(path).encode("latin-1"),
            "state": state,
        }
        await self.app(scope, receive, send)
