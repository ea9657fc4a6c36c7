"""In-memory path aliases.

An alias is the public face of an internal path: ``/blog/post-1`` for
``/node/5``. ``AliasPathProcessor`` keeps both directions of that table
and plugs into the processor chain like any other processor.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from subpaths.http.request import Request
from subpaths.processing.protocol import OutboundOptions


@dataclass(frozen=True, slots=True)
class AliasRecord:
    """One internal path and its public alias."""

    path: str
    alias: str


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


class AliasPathProcessor:
    """Translates between aliases and internal paths.

    Inbound, an alias becomes its internal path; outbound, an internal
    path becomes its alias. Anything not in the table is returned as is::

        aliases = AliasPathProcessor([AliasRecord("/node/5", "/blog/post-1")])
        aliases.process_inbound("/blog/post-1", request)   # "/node/5"
        aliases.process_outbound("/node/5", {})            # "/blog/post-1"
    """

    __slots__ = ("_by_alias", "_by_path")

    def __init__(self, records: Iterable[AliasRecord] = ()) -> None:
        self._by_path: dict[str, str] = {}
        self._by_alias: dict[str, str] = {}
        for record in records:
            self.add(record.path, record.alias)

    def add(self, path: str, alias: str) -> None:
        """Register *alias* for *path*.

        A path has at most one alias and an alias names at most one path;
        whichever earlier record clashes with the new one is dropped.
        """
        for value in (path, alias):
            if not value.startswith("/"):
                msg = f"Alias paths must be absolute, got {value!r}."
                raise ValueError(msg)
        path, alias = _normalize(path), _normalize(alias)

        previous = self._by_path.pop(path, None)
        if previous is not None:
            self._by_alias.pop(previous, None)
        owner = self._by_alias.pop(alias, None)
        if owner is not None:
            self._by_path.pop(owner, None)
        self._by_path[path] = alias
        self._by_alias[alias] = path

    def lookup_by_alias(self, alias: str) -> str | None:
        return self._by_alias.get(_normalize(alias))

    def lookup_by_path(self, path: str) -> str | None:
        return self._by_path.get(_normalize(path))

    def __iter__(self) -> Iterator[AliasRecord]:
        for path, alias in self._by_path.items():
            yield AliasRecord(path, alias)

    def __len__(self) -> int:
        return len(self._by_path)

    # -- Processor protocol --

    def process_inbound(self, path: str, request: Request) -> str:
        return self.lookup_by_alias(path) or path

    def process_outbound(
        self,
        path: str,
        options: OutboundOptions,
        request: Request | None = None,
    ) -> str:
        return self.lookup_by_path(path) or path
