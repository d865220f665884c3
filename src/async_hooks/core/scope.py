# src/async_hooks/core/scope.py

from __future__ import annotations

import contextvars
import logging
from collections.abc import Callable
from contextvars import Token

logger = logging.getLogger(__name__)

_CURRENT_SCOPE: contextvars.ContextVar[Scope | None] = contextvars.ContextVar(
    "async_hooks_current_scope", default=None
)


class Scope:
    """
    Host lifecycle stand-in (a component, a widget, a request handler...).

    Teardown callbacks run once, newest first. Used as a context manager the
    scope becomes current_scope() inside the block and is disposed on exit.
    """

    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._callbacks: list[Callable[[], None]] = []
        self._disposed = False
        self._tokens: list[Token[Scope | None]] = []

    @property
    def disposed(self) -> bool:
        return self._disposed

    def on_teardown(self, callback: Callable[[], None]) -> None:
        if self._disposed:
            # Registered too late: the host is already gone.
            callback()
            return
        self._callbacks.append(callback)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        callbacks, self._callbacks = self._callbacks, []
        for cb in reversed(callbacks):
            try:
                cb()
            except Exception:
                logger.exception("teardown callback failed in %s", self.name)

    def __enter__(self) -> Scope:
        self._tokens.append(_CURRENT_SCOPE.set(self))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        _CURRENT_SCOPE.reset(self._tokens.pop())
        self.dispose()

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, disposed={self._disposed})"


def current_scope() -> Scope | None:
    return _CURRENT_SCOPE.get()
