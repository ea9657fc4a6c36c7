"""Priority-ordered chain of path processors.

Higher priority runs first. Processors with equal priority keep the
order they were added in. The chain is frozen before use, mirroring
how routes are compiled once at startup.
"""

from dataclasses import dataclass, field
from itertools import count
from typing import Generic, TypeVar

from subpaths.http.request import Request
from subpaths.processing.protocol import (
    InboundPathProcessor,
    OutboundOptions,
    OutboundPathProcessor,
)


P = TypeVar("P")


@dataclass(frozen=True, slots=True)
class _Entry(Generic[P]):
    priority: int
    order: int
    processor: P = field(compare=False)


def _run_order(entry: _Entry[object]) -> tuple[int, int]:
    return -entry.priority, entry.order


class PathProcessorManager:
    """Runs every registered processor over a path, in priority order.

    Usage::

        manager = PathProcessorManager()
        manager.add_inbound(LanguagePrefixProcessor(config), priority=300)
        manager.add_inbound(aliases, priority=100)
        manager.freeze()
        path = manager.process_inbound("/fr/blog/post-1", request)
    """

    __slots__ = ("_frozen", "_inbound", "_order", "_outbound")

    def __init__(self) -> None:
        self._inbound: list[_Entry[InboundPathProcessor]] = []
        self._outbound: list[_Entry[OutboundPathProcessor]] = []
        self._order = count()
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            msg = "Cannot add path processors after the chain is frozen."
            raise RuntimeError(msg)

    def add_inbound(self, processor: InboundPathProcessor, priority: int = 0) -> None:
        """Register an inbound processor. Must be called before freeze()."""
        self._check_mutable()
        self._inbound.append(_Entry(priority, next(self._order), processor))

    def add_outbound(self, processor: OutboundPathProcessor, priority: int = 0) -> None:
        """Register an outbound processor. Must be called before freeze()."""
        self._check_mutable()
        self._outbound.append(_Entry(priority, next(self._order), processor))

    def freeze(self) -> None:
        """Sort both chains and refuse further registrations."""
        self._inbound.sort(key=_run_order)
        self._outbound.sort(key=_run_order)
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def inbound(self) -> list[InboundPathProcessor]:
        """Inbound processors in the order they run."""
        entries = self._inbound if self._frozen else sorted(self._inbound, key=_run_order)
        return [e.processor for e in entries]

    @property
    def outbound(self) -> list[OutboundPathProcessor]:
        """Outbound processors in the order they run."""
        entries = self._outbound if self._frozen else sorted(self._outbound, key=_run_order)
        return [e.processor for e in entries]

    def process_inbound(self, path: str, request: Request) -> str:
        for processor in self.inbound:
            path = processor.process_inbound(path, request)
        return path

    def process_outbound(
        self,
        path: str,
        options: OutboundOptions | None = None,
        request: Request | None = None,
    ) -> str:
        if options is None:
            options = {}
        for processor in self.outbound:
            path = processor.process_outbound(path, options, request)
        return path
