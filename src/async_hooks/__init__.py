# src/async_hooks/__init__.py

"""Observable async tasks: loading / error / data state with cancellation, retry and soft restarts."""

from .config import Settings, get_settings
from .core.cancel import AbortedError, CancellationController, CancellationSignal
from .core.reactive import Ref, derived, is_ref, unref
from .core.scope import Scope, current_scope
from .core.state import AsyncState
from .errors import Rejection, friendly_error_message
from .fetch.adapter import FetchAdapter, FetchRequest, aclose_default_fetch, default_fetch, wants_json
from .fetch.transport import HttpxFetch, HttpxResponse
from .hooks import AsyncTaskHandle, use_async_task, use_fetch_task
from .logging_setup import setup_logging
from .tasks.controller import TaskController
from .tasks.lifecycle import LifecycleBinder
from .tasks.watcher import DependencyWatcher

__version__ = "0.1.0"

__all__ = [
    "AbortedError",
    "AsyncState",
    "AsyncTaskHandle",
    "CancellationController",
    "CancellationSignal",
    "DependencyWatcher",
    "FetchAdapter",
    "FetchRequest",
    "HttpxFetch",
    "HttpxResponse",
    "LifecycleBinder",
    "Ref",
    "Rejection",
    "Scope",
    "Settings",
    "TaskController",
    "aclose_default_fetch",
    "current_scope",
    "default_fetch",
    "derived",
    "friendly_error_message",
    "get_settings",
    "is_ref",
    "setup_logging",
    "unref",
    "use_async_task",
    "use_fetch_task",
]
