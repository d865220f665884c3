# src/async_hooks/core/cancel.py

"""Cooperative cancellation: a signal handed to operations, and the controller that trips it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

AbortListener = Callable[[], None]


class AbortedError(asyncio.CancelledError):
    """Raised by CancellationSignal.raise_if_aborted()."""


class CancellationSignal:
    """
    Read side of a cancellation token.

    Operations may poll `aborted`, register listeners, or await `wait()`.
    Cancellation is advisory: nothing forces the operation to stop.
    """

    __slots__ = ("_aborted", "_listeners", "_waiters")

    def __init__(self) -> None:
        self._aborted = False
        self._listeners: list[AbortListener] = []
        self._waiters: list[asyncio.Future[None]] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    def add_listener(self, listener: AbortListener) -> None:
        """Register a listener. If already aborted, it is invoked immediately."""
        if self._aborted:
            _call_listener(listener)
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def raise_if_aborted(self) -> None:
        if self._aborted:
            raise AbortedError("Operation aborted")

    async def wait(self) -> None:
        """Suspend until the signal is aborted."""
        if self._aborted:
            return
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        finally:
            if fut in self._waiters:
                self._waiters.remove(fut)

    def _trip(self) -> bool:
        if self._aborted:
            return False
        self._aborted = True

        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            _call_listener(listener)

        for fut in self._waiters:
            if not fut.done():
                fut.set_result(None)
        return True

    def __repr__(self) -> str:
        return f"CancellationSignal(aborted={self._aborted})"


class CancellationController:
    """Write side: owns a signal and trips it once."""

    __slots__ = ("signal",)

    def __init__(self) -> None:
        self.signal = CancellationSignal()

    def abort(self) -> bool:
        """Trip the signal. Returns False if it was already aborted."""
        return self.signal._trip()


def _call_listener(listener: AbortListener) -> None:
    # One broken listener must not keep the others from hearing about the abort.
    try:
        listener()
    except Exception:
        logger.exception("abort listener failed: %r", listener)
