# src/async_hooks/tasks/lifecycle.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..core.ports import TeardownHost
from .controller import TaskController
from .watcher import DependencyWatcher

logger = logging.getLogger(__name__)


class LifecycleBinder:
    """Tie a controller (and its watcher) to the host's teardown. Runs once."""

    def __init__(self, controller: TaskController[Any], watcher: DependencyWatcher | None = None) -> None:
        self._controller = controller
        self._watcher = watcher
        self._torn_down = False
        self._cleanups: list[Callable[[], None]] = []

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def bind(self, host: TeardownHost) -> LifecycleBinder:
        host.on_teardown(self.teardown)
        return self

    def on_teardown(self, callback: Callable[[], None]) -> None:
        """Extra cleanup to run after the controller is disposed."""
        self._cleanups.append(callback)

    def teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True

        logger.debug("teardown: generation=%s", self._controller.generation)
        if self._watcher is not None:
            self._watcher.dispose()
        # dispose() aborts unconditionally, then refuses further starts.
        self._controller.dispose()

        for cb in self._cleanups:
            try:
                cb()
            except Exception:
                logger.exception("cleanup failed: %r", cb)
