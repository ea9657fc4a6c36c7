"""Immutable HTTP request.

Path processors only look at where a request points, so the request
carries routing metadata and nothing else: no headers, no body.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable request, as seen by path processors.

    ``path`` is the decoded path the server reported; ``raw_path`` keeps
    the bytes as they arrived on the wire, percent-escapes intact.
    """

    method: str
    path: str
    raw_path: bytes
    root_path: str = ""

    @property
    def path_info(self) -> str:
        """The percent-encoded path below the application root.

        This is the string processors compare against, decoding it
        themselves where they need to.
        """
        path_info = self.raw_path.decode("latin-1")
        root = self.root_path.rstrip("/")
        if root and (path_info == root or path_info.startswith(root + "/")):
            path_info = path_info[len(root) :]
        return path_info or "/"

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope.

        Servers may omit ``raw_path``; it is rebuilt from ``path`` then.
        """
        path = scope["path"]
        raw_path = scope.get("raw_path") or quote(path).encode("latin-1")
        return cls(
            method=scope.get("method", "GET"),
            path=path,
            raw_path=raw_path,
            root_path=scope.get("root_path", ""),
        )

    @classmethod
    def for_path(cls, path: str, method: str = "GET") -> Request:
        """Create a synthetic request for *path*, used to look routes up."""
        return cls(method=method, path=path, raw_path=quote(path).encode("latin-1"))
