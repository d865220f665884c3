# src/async_hooks/fetch/transport.py

from __future__ import annotations

"""
httpx-backed implementation of the Fetch port.

HttpxFetch(info, init) understands these init keys:
- method (default GET), headers, params, timeout
- body / content (raw request body), json (encoded by httpx)
- signal: CancellationSignal; aborting it cancels the in-flight request
"""

import asyncio
import logging
from typing import Any

import httpx

from ..config import Settings, get_settings
from ..core.cancel import AbortedError, CancellationSignal
from ..core.ports import RequestInit

logger = logging.getLogger(__name__)


class HttpxResponse:
    """FetchResponse view over a fully-read httpx.Response."""

    __slots__ = ("raw",)

    def __init__(self, raw: httpx.Response) -> None:
        self.raw = raw

    @property
    def ok(self) -> bool:
        return self.raw.is_success

    @property
    def status(self) -> int:
        return self.raw.status_code

    @property
    def status_text(self) -> str:
        return self.raw.reason_phrase

    @property
    def headers(self) -> httpx.Headers:
        return self.raw.headers

    @property
    def url(self) -> str:
        return str(self.raw.url)

    async def json(self) -> Any:
        return self.raw.json()

    async def text(self) -> str:
        return self.raw.text

    def __repr__(self) -> str:
        return f"HttpxResponse(status={self.status}, url={self.url!r})"


def _make_timeout(settings: Settings) -> httpx.Timeout:
    return httpx.Timeout(
        settings.http_timeout_seconds,
        connect=settings.http_connect_timeout_seconds,
    )


def _request_kwargs(init: dict[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}

    if init.get("headers"):
        kwargs["headers"] = init["headers"]
    if init.get("params"):
        kwargs["params"] = init["params"]
    if "timeout" in init:
        kwargs["timeout"] = init["timeout"]

    body = init.get("content", init.get("body"))
    if body is not None:
        kwargs["content"] = body
    elif "json" in init:
        kwargs["json"] = init["json"]

    return kwargs


class HttpxFetch:
    def __init__(self, client: httpx.AsyncClient | None = None, *, settings: Settings | None = None) -> None:
        self._client = client
        self._owns_client = client is None
        self._settings = settings

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create the client so construction needs no running loop or settings."""
        if self._client is None:
            s = self._settings or get_settings()
            self._client = httpx.AsyncClient(
                timeout=_make_timeout(s),
                follow_redirects=s.http_follow_redirects,
                headers={"User-Agent": s.http_user_agent},
            )
        return self._client

    async def __call__(self, request_info: Any, request_init: RequestInit | None = None) -> HttpxResponse:
        init = dict(request_init or {})
        signal: CancellationSignal | None = init.pop("signal", None)
        method = str(init.pop("method", "GET") or "GET").upper()
        url = str(request_info)

        if signal is not None:
            signal.raise_if_aborted()

        request = self._get_client().request(method, url, **_request_kwargs(init))
        if signal is None:
            return HttpxResponse(await request)

        task = asyncio.ensure_future(request)

        def cancel_request() -> None:
            logger.debug("aborting %s %s", method, url)
            task.cancel()

        signal.add_listener(cancel_request)
        try:
            raw = await task
        except asyncio.CancelledError:
            if signal.aborted:
                raise AbortedError(f"{method} {url} aborted") from None
            raise
        finally:
            signal.remove_listener(cancel_request)

        return HttpxResponse(raw)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
