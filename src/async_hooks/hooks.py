# src/async_hooks/hooks.py

"""
Host-facing API.

use_async_task() wires the three pieces together:
- TaskController  (runs the operation, owns AsyncState)
- DependencyWatcher (soft restart when a Ref operation/params changes)
- LifecycleBinder (abort + detach when the host scope is torn down)

use_fetch_task() is the same thing with FetchAdapter as the operation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .core.ports import Fetch, StateListener, TeardownHost, Unsubscribe
from .core.reactive import Derived, derived, is_ref, unref
from .core.scope import current_scope
from .core.state import AsyncState
from .fetch.adapter import FetchAdapter, FetchRequest
from .tasks.controller import TaskController
from .tasks.lifecycle import LifecycleBinder
from .tasks.watcher import DependencyWatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncTaskHandle(Generic[T]):
    """What a host gets back: state to render, plus retry/abort/dispose."""

    def __init__(self, controller: TaskController[T], binder: LifecycleBinder) -> None:
        self._controller = controller
        self._binder = binder

    @property
    def controller(self) -> TaskController[T]:
        return self._controller

    @property
    def state(self) -> AsyncState[T]:
        return self._controller.state

    @property
    def is_loading(self) -> bool:
        return self._controller.is_loading

    @property
    def error(self) -> Any | None:
        return self._controller.error

    @property
    def data(self) -> T | None:
        return self._controller.data

    @property
    def disposed(self) -> bool:
        return self._binder.torn_down

    def retry(self) -> None:
        self._controller.retry()

    def abort(self) -> None:
        self._controller.abort()

    def dispose(self) -> None:
        self._binder.teardown()

    def on_teardown(self, callback: Callable[[], None]) -> None:
        """Run callback once when this handle is disposed (after the task is aborted)."""
        self._binder.on_teardown(callback)

    def subscribe(self, listener: StateListener) -> Unsubscribe:
        return self._controller.subscribe(listener)

    def __enter__(self) -> AsyncTaskHandle[T]:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        s = self.state
        return f"AsyncTaskHandle(is_loading={s.is_loading}, error={s.error!r}, data={s.data!r})"


def use_async_task(
        operation_fn: Any,
        params: Any = None,
        *,
        scope: TeardownHost | None = None,
        on_change: StateListener | None = None,
) -> AsyncTaskHandle[Any]:
    """
    Start operation_fn(params, signal) now and keep its result as observable state.

    operation_fn and params may be plain values or Refs; changing a Ref later
    soft-restarts the operation (previous data stays visible while loading).
    Teardown is bound to `scope`, or to the active `with Scope():` block if any;
    otherwise call handle.dispose() (or use the handle as a context manager).
    """
    fn = unref(operation_fn)
    if not callable(fn):
        raise TypeError(f"operation_fn must be callable, got {type(fn).__name__}")

    controller: TaskController[Any] = TaskController(fn, unref(params), on_change=on_change, start=False)
    watcher = DependencyWatcher(controller, operation_fn, params)
    binder = LifecycleBinder(controller, watcher)

    host = scope if scope is not None else current_scope()
    if host is not None:
        binder.bind(host)

    controller.start(fn, unref(params))
    return AsyncTaskHandle(controller, binder)


def use_fetch_task(
        request_info: Any,
        request_init: Any = None,
        *,
        fetch: Fetch | None = None,
        scope: TeardownHost | None = None,
        on_change: StateListener | None = None,
) -> AsyncTaskHandle[Any]:
    """
    Fetch request_info now; data is parsed JSON (Accept: *json*) or text.

    A non-ok response becomes `error` as-is. Either argument may be a Ref.
    """
    adapter = FetchAdapter(fetch)

    params: Any
    if is_ref(request_info) or is_ref(request_init):
        params = derived(lambda: FetchRequest(unref(request_info), unref(request_init)), request_info, request_init)
    else:
        params = FetchRequest(request_info, request_init)

    handle = use_async_task(adapter, params, scope=scope, on_change=on_change)
    if isinstance(params, Derived):
        handle.on_teardown(params.stop)
    return handle
