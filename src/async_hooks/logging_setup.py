# src/async_hooks/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings, get_settings

LOG_FILE_NAME = "async_hooks.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable for hosts that render async state interactively:
    - allow all async_hooks logs
    - suppress HTTP client chatter (httpx/httpcore) unless WARNING+
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - suppress other third-party noise unless ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "async_hooks" or name.startswith("async_hooks."):
            return True

        # httpx logs every request at INFO.
        if name.startswith("httpx") or name.startswith("httpcore"):
            return record.levelno >= logging.WARNING

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def resolve_level(level: int | str) -> int:
    """Map "debug" / "INFO" / 20 to a logging level; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    *,
    log_dir: str | Path | None = None,
    console_level: int | str | None = None,
    file_level: int | str = logging.DEBUG,
    settings: Settings | None = None,
) -> Path:
    """
    Install the host's logging: a filtered console handler and a full debug file.

    Unset arguments come from Settings (ASYNC_HOOKS_LOG_DIR / ASYNC_HOOKS_LOG_LEVEL).
    Call once, early, from the host application; the library itself never calls it.
    Returns the log file path.
    """
    if log_dir is None or console_level is None:
        settings = settings or get_settings()
        if log_dir is None:
            log_dir = settings.log_dir
        if console_level is None:
            console_level = settings.log_level

    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(resolve_level(console_level))
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(resolve_level(file_level))

    for handler in (console, file_handler):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)
    logging.getLogger(__name__).debug("logging ready: console=%s file=%s", logging.getLevelName(console.level), log_file)
    return log_file
