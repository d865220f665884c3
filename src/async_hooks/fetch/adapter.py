# src/async_hooks/fetch/adapter.py

from __future__ import annotations

"""
Fetch operation for TaskController.

FetchAdapter is an ordinary operation function: it receives a FetchRequest as
params plus the controller's cancellation signal, and:
- calls fetch(info, init + signal) so aborting the controller aborts the request,
- fails with the response object itself when response.ok is false,
- parses JSON when the Accept header asks for it, text otherwise.
"""

import asyncio
import logging
import weakref
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.cancel import CancellationSignal
from ..core.ports import Fetch, RequestInit
from ..errors import Rejection
from .transport import HttpxFetch

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FetchRequest:
    info: Any
    init: RequestInit | None = None


def _header_items(headers: Any) -> Iterable[tuple[Any, Any]]:
    if isinstance(headers, Mapping):
        return headers.items()
    return headers


def wants_json(init: RequestInit | None) -> bool:
    """True when init["headers"] has an Accept entry mentioning json (both case-insensitive)."""
    if not init:
        return False
    headers = init.get("headers")
    if not headers:
        return False

    for name, value in _header_items(headers):
        if str(name).lower() == "accept" and "json" in str(value).lower():
            return True
    return False


# One default transport per event loop: an httpx connection pool cannot outlive its loop.
_default_fetches: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, HttpxFetch] = weakref.WeakKeyDictionary()


def default_fetch() -> HttpxFetch:
    """httpx-backed fetch shared by adapters running on the current event loop."""
    loop = asyncio.get_running_loop()
    fetch = _default_fetches.get(loop)
    if fetch is None:
        fetch = HttpxFetch()
        _default_fetches[loop] = fetch
    return fetch


async def aclose_default_fetch() -> None:
    """Close the current loop's default transport, if one was created."""
    fetch = _default_fetches.pop(asyncio.get_running_loop(), None)
    if fetch is not None:
        await fetch.aclose()


class FetchAdapter:
    def __init__(self, fetch: Fetch | None = None) -> None:
        self._fetch = fetch

    @property
    def fetch(self) -> Fetch:
        # Resolved per call so an adapter never carries a client across loops.
        if self._fetch is None:
            return default_fetch()
        return self._fetch

    async def __call__(self, request: FetchRequest, signal: CancellationSignal) -> Any:
        init: dict[str, Any] = dict(request.init or {})
        init["signal"] = signal

        response = await self.fetch(request.info, init)

        if not response.ok:
            logger.debug("fetch %s -> not ok (%s)", request.info, getattr(response, "status", "?"))
            raise Rejection(response)

        if wants_json(request.init):
            return await response.json()
        return await response.text()

    def __repr__(self) -> str:
        return f"FetchAdapter(fetch={self._fetch!r})"
