# src/async_hooks/core/reactive.py

"""
Minimal reactive value containers.

Hosts with their own reactive system can skip this module: anything with a
`.value` and `subscribe(callback) -> unsubscribe` works as a binding.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from .ports import ChangeCallback, Subscribable, Unsubscribe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Ref(Generic[T]):
    """A value container that notifies subscribers when a different object is assigned."""

    __slots__ = ("_value", "_subscribers")

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: list[ChangeCallback] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new: T) -> None:
        old = self._value
        if new is old:
            return
        self._value = new
        for cb in list(self._subscribers):
            try:
                cb(new, old)
            except Exception:
                logger.exception("Ref subscriber failed: %r", cb)

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __repr__(self) -> str:
        return f"Ref({self._value!r})"


def is_ref(obj: Any) -> bool:
    return isinstance(obj, Subscribable)


def unref(obj: Any) -> Any:
    """Current value of a binding; plain values pass through."""
    return obj.value if is_ref(obj) else obj


class Derived(Ref[T]):
    """A Ref recomputed from a function of other refs. stop() detaches it from its sources."""

    __slots__ = ("_fn", "_stops")

    def __init__(self, fn: Callable[[], T], sources: tuple[Any, ...]) -> None:
        super().__init__(fn())
        self._fn = fn
        self._stops: list[Unsubscribe] = [src.subscribe(self._recompute) for src in sources if is_ref(src)]

    def _recompute(self, _new: Any, _old: Any) -> None:
        self.value = self._fn()

    def stop(self) -> None:
        stops, self._stops = self._stops, []
        for unsubscribe in stops:
            unsubscribe()


def derived(fn: Callable[[], T], *sources: Any) -> Derived[T]:
    """Ref holding fn(), recomputed whenever one of the source refs changes. Non-ref sources are ignored."""
    return Derived(fn, sources)
