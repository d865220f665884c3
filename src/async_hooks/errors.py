# src/async_hooks/errors.py

from __future__ import annotations

import asyncio
from typing import Any

import httpx


class Rejection(Exception):
    """
    Fail an operation with an arbitrary value instead of an exception.

    The controller unwraps it, so `state.error` holds `reason` itself
    (e.g. the HTTP response object for a non-ok fetch).
    """

    def __init__(self, reason: Any) -> None:
        super().__init__(reason)
        self.reason = reason

    def __repr__(self) -> str:
        return f"Rejection({self.reason!r})"


def unwrap_rejection(exc: BaseException) -> Any:
    """Return the value a failed Attempt should expose as `error`."""
    if isinstance(exc, Rejection):
        return exc.reason
    return exc


def friendly_error_message(error: Any) -> str:
    """Render an AsyncState.error value as a short human-readable line."""
    if error is None:
        return ""

    # Fetch responses (HttpxResponse or any object shaped like one).
    status = getattr(error, "status", None)
    if isinstance(status, int) and hasattr(error, "ok"):
        reason = str(getattr(error, "status_text", "") or "").strip()
        return f"HTTP {status} {reason}".strip()

    if isinstance(error, asyncio.CancelledError):
        return "Cancelled."
    if isinstance(error, (TimeoutError, httpx.TimeoutException)):
        return "Request timed out. Try again later."
    if isinstance(error, httpx.ConnectError):
        return "Could not connect to the server."

    if isinstance(error, BaseException):
        msg = str(error).strip()
        return msg or error.__class__.__name__

    return str(error)
