# src/async_hooks/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of a concrete reactive framework,
component model or HTTP client. Anything shaped like these can be plugged in:
- Readable / Subscribable: a reactive value container (our Ref, or a host's own),
- TeardownHost: the host component's "run this on unmount" hook,
- Fetch / FetchResponse: a fetch-shaped network transport.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from .cancel import CancellationSignal

OperationFn = Callable[[Any, CancellationSignal], Any]
# operation(params, signal) -> awaitable result (a plain value counts as an immediate result).

StateListener = Callable[[Any], None]
Unsubscribe = Callable[[], None]
ChangeCallback = Callable[[Any, Any], None]
# callback(new_value, old_value)

RequestInit = Mapping[str, Any]


@runtime_checkable
class Readable(Protocol):
    """Reactive container: read the *current* value."""

    @property
    def value(self) -> Any: ...


@runtime_checkable
class Subscribable(Readable, Protocol):
    """Reactive container that reports changes of its value."""

    def subscribe(self, callback: ChangeCallback) -> Unsubscribe: ...


class TeardownHost(Protocol):
    """Host lifecycle: run cleanup exactly once when the host is destroyed."""

    def on_teardown(self, callback: Callable[[], None]) -> None: ...


class FetchResponse(Protocol):
    """What FetchAdapter needs from a network response."""

    @property
    def ok(self) -> bool: ...

    async def json(self) -> Any: ...
    async def text(self) -> str: ...


class Fetch(Protocol):
    """fetch(request_info, request_init) -> response. request_init carries "signal"."""

    def __call__(self, request_info: Any, request_init: RequestInit) -> Awaitable[FetchResponse]: ...
