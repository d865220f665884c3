# src/async_hooks/tasks/watcher.py

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..core.ports import Unsubscribe
from ..core.reactive import is_ref, unref
from .controller import TaskController

logger = logging.getLogger(__name__)

_UNSET = object()


class DependencyWatcher:
    """
    Soft-restart a controller when its operation or params binding changes.

    Only Ref-like bindings are watched; static values never change. The initial
    values are taken as already running (the controller starts itself), so the
    watcher reacts to later changes only. Notifications arriving in the same
    loop turn are coalesced into a single restart.
    """

    def __init__(self, controller: TaskController[Any], operation_binding: Any, params_binding: Any) -> None:
        self._controller = controller
        self._operation_binding = operation_binding
        self._params_binding = params_binding

        self._last_fn: Any = unref(operation_binding)
        self._last_params: Any = unref(params_binding)

        self._handle: asyncio.Handle | None = None
        self._unsubscribers: list[Unsubscribe] = []
        self._disposed = False

        for binding in (operation_binding, params_binding):
            if is_ref(binding):
                self._unsubscribers.append(binding.subscribe(self._on_change))

    @property
    def watching(self) -> bool:
        return bool(self._unsubscribers)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _on_change(self, _new: Any = _UNSET, _old: Any = _UNSET) -> None:
        if self._disposed or self._handle is not None:
            return
        self._handle = asyncio.get_running_loop().call_soon(self._flush)

    def _flush(self) -> None:
        self._handle = None
        if self._disposed:
            return

        fn = unref(self._operation_binding)
        params = unref(self._params_binding)
        if fn is self._last_fn and params is self._last_params:
            # Changed and changed back within one turn.
            return

        self._last_fn, self._last_params = fn, params
        logger.debug("bindings changed; soft restart")
        self._controller.soft_restart(fn, params)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
