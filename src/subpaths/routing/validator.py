"""Route-backed path validation.

``RouteValidator`` answers "does this path lead anywhere?" the way a
real request would find out: it runs the inbound processor chain on
the path, then looks the result up in the router.
"""

import logging

from subpaths.http.request import Request
from subpaths.processing.manager import PathProcessorManager
from subpaths.routing.route import RouteMatch
from subpaths.routing.router import Router

logger = logging.getLogger("subpaths.routing")


class RouteValidator:
    """Validity oracle backed by a router and an inbound processor chain.

    Running the chain means processors that call back into this validator
    (``SubpathProcessor`` does) are re-entered; they are expected to guard
    against that themselves.
    """

    __slots__ = ("processors", "router")

    def __init__(self, router: Router, processors: PathProcessorManager | None = None) -> None:
        self.router = router
        self.processors = processors

    def _match(self, path: str) -> tuple[RouteMatch | None, Request]:
        request = Request.for_path(path)
        if self.processors is not None:
            path = self.processors.process_inbound(path, request)
        return self.router.lookup(path), request

    def match_without_access_check(self, path: str) -> RouteMatch | None:
        """Return the route *path* leads to, ignoring access rules."""
        match, _ = self._match(path)
        return match

    def match(self, path: str) -> RouteMatch | None:
        """Return the route *path* leads to, if its access rule allows it."""
        match, request = self._match(path)
        if match is None:
            return None
        access = match.route.access
        if access is not None and not access(request):
            logger.debug("Access to %r denied", path)
            return None
        return match

    def is_valid(self, path: str, *, check_access: bool = True) -> bool:
        if check_access:
            return self.match(path) is not None
        return self.match_without_access_check(path) is not None
