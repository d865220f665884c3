# src/async_hooks/tasks/controller.py

from __future__ import annotations

"""
Task controller.

Owns one async operation at a time and exposes it as AsyncState:
- start()        -> hard start: clear data/error, begin a new Attempt
- soft_restart() -> input-driven start: keep last data visible while loading
- retry()        -> hard start with the last operation/params
- abort()        -> drop the current Attempt, signal cancellation, stop loading

Every Attempt gets a generation id. Only the Attempt whose id matches the
controller's current generation may write state; anything that settles later
is discarded. Cancellation is advisory: the generation bump is what guarantees
that no stale result is ever shown.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from ..core.cancel import CancellationController, CancellationSignal
from ..core.ports import OperationFn, StateListener, Unsubscribe
from ..core.state import AsyncState
from ..errors import unwrap_rejection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True, eq=False)
class Attempt:
    """One run of the operation, tagged with the generation that started it."""

    generation: int
    cancel: CancellationController = field(default_factory=CancellationController)
    task: asyncio.Task[Any] | None = None

    @property
    def signal(self) -> CancellationSignal:
        return self.cancel.signal


async def _invoke(operation_fn: OperationFn, params: Any, signal: CancellationSignal) -> Any:
    # Runs eagerly: the operation's synchronous prefix executes inside start().
    result = operation_fn(params, signal)
    if inspect.isawaitable(result):
        return await result
    return result


class TaskController(Generic[T]):
    def __init__(
            self,
            operation_fn: OperationFn,
            params: Any = None,
            *,
            on_change: StateListener | None = None,
            start: bool = True,
    ) -> None:
        if not callable(operation_fn):
            raise TypeError(f"operation_fn must be callable, got {type(operation_fn).__name__}")

        self._operation_fn = operation_fn
        self._params = params
        self._listeners: list[StateListener] = [on_change] if on_change is not None else []

        self._state: AsyncState[T] = AsyncState()
        self._generation = 0
        self._attempt: Attempt | None = None
        self._inflight: set[asyncio.Task[Any]] = set()
        self._disposed = False

        if start:
            self.start(operation_fn, params)

    # ---- read side ----

    @property
    def state(self) -> AsyncState[T]:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Any | None:
        return self._state.error

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def operation_fn(self) -> OperationFn:
        return self._operation_fn

    @property
    def params(self) -> Any:
        return self._params

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def current_signal(self) -> CancellationSignal | None:
        return self._attempt.signal if self._attempt is not None else None

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        """Call listener(state) after every state change until unsubscribed."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return unsubscribe

    # ---- commands ----

    def start(self, operation_fn: OperationFn, params: Any = None) -> None:
        """Hard start: clear data and error, then run a new Attempt."""
        self._begin(operation_fn, params, keep_data=False)

    def soft_restart(self, operation_fn: OperationFn, params: Any) -> None:
        """Input-driven start: clear error only, keep the last data visible until settlement."""
        self._begin(operation_fn, params, keep_data=True)

    def retry(self) -> None:
        self._begin(self._operation_fn, self._params, keep_data=False)

    def abort(self) -> None:
        """Drop the current Attempt and signal cancellation. Never sets error."""
        self._generation += 1
        attempt, self._attempt = self._attempt, None

        self._state.is_loading = False
        self._notify()

        if attempt is not None:
            logger.debug("abort: generation=%s", attempt.generation)
            attempt.cancel.abort()

    def dispose(self) -> None:
        """Abort and permanently stop accepting starts. Idempotent."""
        if self._disposed:
            return
        self.abort()
        self._disposed = True
        self._listeners.clear()

    # ---- internals ----

    def _begin(self, operation_fn: OperationFn, params: Any, *, keep_data: bool) -> None:
        if self._disposed:
            logger.debug("ignoring start on a disposed controller")
            return
        if not callable(operation_fn):
            raise TypeError(f"operation_fn must be callable, got {type(operation_fn).__name__}")

        self._operation_fn = operation_fn
        self._params = params

        self._generation += 1
        previous, attempt = self._attempt, Attempt(generation=self._generation)
        self._attempt = attempt

        self._state.error = None
        if not keep_data:
            self._state.data = None
        self._state.is_loading = True

        if previous is not None:
            # Superseded work is no longer wanted; tell it so (best-effort).
            previous.cancel.abort()

        self._notify()
        if self._attempt is not attempt:
            # A listener restarted, aborted or disposed us; this attempt never runs.
            logger.debug("attempt superseded before launch: generation=%s", attempt.generation)
            return

        logger.debug(
            "%s start: generation=%s fn=%s",
            "soft" if keep_data else "hard",
            attempt.generation,
            getattr(operation_fn, "__name__", repr(operation_fn)),
        )

        loop = asyncio.get_running_loop()
        task = asyncio.Task(_invoke(operation_fn, params, attempt.signal), loop=loop, eager_start=True)
        attempt.task = task
        self._inflight.add(task)
        # Done callbacks are always scheduled with call_soon, so settlement never
        # happens inside start() even when the operation finished eagerly.
        task.add_done_callback(lambda t, a=attempt: self._settle(a, t))

    def _settle(self, attempt: Attempt, task: asyncio.Task[Any]) -> None:
        self._inflight.discard(task)

        if task.cancelled():
            outcome_error: Any = asyncio.CancelledError()
            failed = True
            result = None
        else:
            exc = task.exception()  # retrieve even when stale so asyncio does not warn
            failed = exc is not None
            outcome_error = unwrap_rejection(exc) if exc is not None else None
            result = None if failed else task.result()

        if attempt.generation != self._generation or self._disposed:
            logger.debug(
                "dropping stale settlement: generation=%s current=%s failed=%s",
                attempt.generation,
                self._generation,
                failed,
            )
            return

        self._attempt = None
        if failed:
            self._state.error = outcome_error
            self._state.data = None
        else:
            self._state.data = result
            self._state.error = None
        self._state.is_loading = False

        logger.debug("settled: generation=%s failed=%s", attempt.generation, failed)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("state listener failed: %r", listener)

    def __repr__(self) -> str:
        s = self._state
        return (
            f"TaskController(generation={self._generation}, is_loading={s.is_loading}, "
            f"error={s.error!r}, data={s.data!r})"
        )
