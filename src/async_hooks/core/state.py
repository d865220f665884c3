# src/async_hooks/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")


class StateSnapshot(NamedTuple):
    is_loading: bool
    error: Any
    data: Any


@dataclass(slots=True)
class AsyncState(Generic[T]):
    """
    Observable loading / error / data triple.

    Only TaskController mutates it. Hosts read it (or a snapshot of it) to render.
    """

    is_loading: bool = False
    error: Any | None = None
    data: T | None = None

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(self.is_loading, self.error, self.data)
