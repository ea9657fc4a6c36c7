"""Trie-based route table.

Routes are added during setup, then the router is compiled and only
answers lookups. Matching walks one trie level per path segment and
prefers static segments over parameters over catch-alls.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from subpaths.errors import ConfigurationError
from subpaths.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("subpaths.routing")

# Segment pattern for each parameter type
PARAM_PATTERNS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/node"               -> [PathSegment("node")]
        "/node/{id:int}"      -> [PathSegment("node"), PathSegment("{id:int}", is_param=True)]
        "/files/{rest:path}"  -> [PathSegment("files"), PathSegment("{rest:path}", is_param=True, ...)]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue
        param_name, _, param_type = part[1:-1].partition(":")
        param_type = param_type or "str"
        if param_type not in PARAM_PATTERNS:
            msg = f"Unknown parameter type {param_type!r} in route {path!r}."
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(value=part, is_param=True, param_name=param_name, param_type=param_type)
        )
    return segments


@dataclass(slots=True)
class _Node:
    """A trie node. Mutable until the router is compiled."""

    children: dict[str, _Node] = field(default_factory=dict)
    params: list[tuple[str, re.Pattern[str], _Node]] = field(default_factory=list)
    catch_all: tuple[str, Route] | None = None
    route: Route | None = None


class Router:
    """Compiled route table.

    Usage::

        router = Router()
        router.add(Route("/node/{id:int}"))
        router.add(Route("/node/{id:int}/comments"))
        router.compile()
        router.lookup("/node/5/comments")   # RouteMatch(...)
        router.lookup("/node/5/nope")       # None
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _Node()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before compile().

        Raises ``ConfigurationError`` if the pattern is already taken.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.param_type == "path" and seg.is_param:
                # Catch-all consumes the rest of the path
                if node.catch_all is not None:
                    _duplicate(route)
                node.catch_all = (seg.param_name or "path", route)
                return
            if seg.is_param:
                node = self._param_child(node, seg)
            else:
                node = node.children.setdefault(seg.value, _Node())
        if node.route is not None:
            _duplicate(route)
        node.route = route

    @staticmethod
    def _param_child(node: _Node, seg: PathSegment) -> _Node:
        name = seg.param_name or ""
        pattern = f"^{PARAM_PATTERNS[seg.param_type]}$"
        for existing_name, regex, child in node.params:
            if existing_name == name and regex.pattern == pattern:
                return child
        child = _Node()
        node.params.append((name, re.compile(pattern), child))
        return child

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def lookup(self, path: str) -> RouteMatch | None:
        """Find the route *path* leads to, or ``None`` when nothing matches."""
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})
        if result is None:
            logger.debug("No route for %r", path)
            return None
        route, params = result
        return RouteMatch(route=route, path=path, path_params=params)

    def _match_node(
        self,
        node: _Node,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[Route, dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.route is not None:
                return node.route, params
            return None

        part = parts[index]

        # 1. Static child (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Parameter children, in registration order
        for name, regex, child in node.params:
            if regex.match(part):
                result = self._match_node(child, parts, index + 1, {**params, name: part})
                if result is not None:
                    return result

        # 3. Catch-all
        if node.catch_all is not None:
            name, route = node.catch_all
            return route, {**params, name: "/".join(parts[index:])}

        return None


def _duplicate(route: Route) -> None:
    msg = f"A route is already registered for {route.path!r}."
    raise ConfigurationError(msg)
