# src/async_hooks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole library (normal "settings layer").
- Nothing is required at import time; every value has a default.
- Only ambient concerns live here (logging, default HTTP transport).
  Controllers themselves take no configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "ASYNC_HOOKS"

DEFAULT_USER_AGENT = "async-hooks/0.1.0"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Logging ----
    log_level: str
    log_dir: Path

    # ---- Default HTTP transport (HttpxFetch) ----
    http_timeout_seconds: float
    http_connect_timeout_seconds: float
    http_follow_redirects: bool
    http_user_agent: str

    @staticmethod
    def from_env() -> "Settings":
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_dir = _env_path(_k("LOG_DIR"), Path(".local/async_hooks"))

        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0)
        http_connect_timeout_seconds = _env_float(_k("HTTP_CONNECT_TIMEOUT_SECONDS"), 5.0)

        # keep the total timeout >= connect timeout as a sane baseline
        http_timeout_seconds = max(http_timeout_seconds, http_connect_timeout_seconds)

        http_follow_redirects = _env_bool(_k("HTTP_FOLLOW_REDIRECTS"), True)
        http_user_agent = _env(_k("HTTP_USER_AGENT"), DEFAULT_USER_AGENT).strip() or DEFAULT_USER_AGENT

        return Settings(
            log_level=log_level,
            log_dir=log_dir,
            http_timeout_seconds=http_timeout_seconds,
            http_connect_timeout_seconds=http_connect_timeout_seconds,
            http_follow_redirects=http_follow_redirects,
            http_user_agent=http_user_agent,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide Settings, reading .env and the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings() -> None:
    """Forget cached settings (next get_settings() re-reads the environment)."""
    global _SETTINGS
    _SETTINGS = None
