"""Path processor protocols.

A path processor is any object with the right method::

    def process_inbound(self, path: str, request: Request) -> str: ...
    def process_outbound(
        self, path: str, options: OutboundOptions, request: Request | None
    ) -> str: ...

No base class required. A processor that does not recognise a path
returns it unchanged; callers detect a rewrite by comparing strings.
"""

from typing import Any, Protocol, TypeAlias

from subpaths.http.request import Request

# Mutable options threaded through outbound processing. Processors may
# read flags from it and record what they did (e.g. the language used).
OutboundOptions: TypeAlias = dict[str, Any]


class InboundPathProcessor(Protocol):
    """Rewrites a public path into an internal one.

    Example::

        class Lowercase:
            def process_inbound(self, path: str, request: Request) -> str:
                return path.lower()
    """

    def process_inbound(self, path: str, request: Request) -> str: ...


class OutboundPathProcessor(Protocol):
    """Rewrites an internal path into the public one used in links."""

    def process_outbound(
        self,
        path: str,
        options: OutboundOptions,
        request: Request | None = None,
    ) -> str: ...


class PathValidator(Protocol):
    """Says whether a path leads to a real route.

    Returns the match (any truthy object) or ``None``. Access rules are
    not consulted; this only answers "does it route?".
    """

    def match_without_access_check(self, path: str) -> object | None: ...
