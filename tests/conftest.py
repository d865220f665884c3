# tests/conftest.py

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from async_hooks.config import reset_settings
from async_hooks.core.scope import Scope

from .fakes import FakeFetch, GatedOperation


@pytest.fixture()
def gate() -> GatedOperation:
    return GatedOperation()


@pytest.fixture()
def fake_fetch() -> FakeFetch:
    return FakeFetch()


@pytest.fixture()
def scope() -> Iterator[Scope]:
    """Host scope torn down after the test, like an unmounted component."""
    s = Scope("test")
    yield s
    s.dispose()


@pytest.fixture()
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[pytest.MonkeyPatch]:
    """
    Isolate env-driven settings.

    We clear every ASYNC_HOOKS_* variable so the developer's shell or .env
    cannot leak into assertions, and drop the cached Settings before and after.
    """
    import os

    for name in list(os.environ):
        if name.startswith("ASYNC_HOOKS_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield monkeypatch
    reset_settings()


@pytest.fixture()
def restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        if h not in handlers:
            h.close()
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    logging.captureWarnings(False)
