"""Resolution-scoped state via ContextVar.

Provides ``ReentrancyGuard``: a marker that is set while a processor
calls back into the routing pipeline, so the nested invocation of the
same processor can recognise itself and step aside.

Thread safety:
    Each guard owns its ``ContextVar``, which is task-local under asyncio
    and thread-local under threads. One processor instance can serve
    concurrent requests without their markers leaking into each other.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from itertools import count

_ids = count()


class ReentrancyGuard:
    """A scoped "already inside" marker.

    Usage::

        guard = ReentrancyGuard("subpath")

        if guard.active:
            return path          # nested call, step aside
        with guard:
            validator.match(...)  # may re-enter the caller

    The marker is restored on every exit from the ``with`` block,
    exceptions included. Nesting is supported: the inner block restores
    the outer block's state, not ``False``.
    """

    __slots__ = ("_tokens", "_var")

    def __init__(self, name: str = "guard") -> None:
        self._var: ContextVar[bool] = ContextVar(f"subpaths_{name}_{next(_ids)}", default=False)
        self._tokens: ContextVar[tuple[Token[bool], ...]] = ContextVar(
            f"subpaths_{name}_tokens_{next(_ids)}", default=()
        )

    @property
    def active(self) -> bool:
        """True while some caller in this context is inside the guard."""
        return self._var.get()

    def __enter__(self) -> ReentrancyGuard:
        token = self._var.set(True)
        self._tokens.set((*self._tokens.get(), token))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        *rest, token = self._tokens.get()
        self._tokens.set(tuple(rest))
        self._var.reset(token)

    def __repr__(self) -> str:
        return f"<ReentrancyGuard {self._var.name} active={self.active}>"
