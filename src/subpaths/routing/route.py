"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass

from subpaths.http.request import Request


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Static:  ``/node``     (is_param=False)
    Param:   ``/{slug}``   (is_param=True, param_name="slug")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A routable destination.

    ``access`` is an optional predicate run by access-checked lookups;
    a route without one is open to everyone.
    """

    path: str
    name: str | None = None
    access: Callable[[Request], bool] | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    path: str
    path_params: dict[str, str]
