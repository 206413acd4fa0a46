"""Timing for blocking backend calls.

Backend requests run on the UI thread, so a slow one freezes the screen.
When profiling is enabled each call is timed and slow ones are logged.
"""

import logging
import os
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

_PROFILING_ENABLED = os.getenv("PHYSNA_TUI_PROFILE", "").lower() in ("1", "true", "yes")

# Threshold for logging slow operations (in milliseconds)
_SLOW_OPERATION_THRESHOLD_MS = float(os.getenv("PHYSNA_TUI_PROFILE_THRESHOLD_MS", "500.0"))

_profiling_data: Dict[str, list[float]] = {}


def is_profiling_enabled() -> bool:
    return _PROFILING_ENABLED


def set_profiling_enabled(enabled: bool) -> None:
    global _PROFILING_ENABLED
    _PROFILING_ENABLED = enabled


def get_profiling_data() -> Dict[str, list[float]]:
    return _profiling_data.copy()


def clear_profiling_data() -> None:
    global _profiling_data
    _profiling_data = {}


@contextmanager
def profile_operation(name: str, threshold_ms: Optional[float] = None):
    """Context manager for timing an operation.

    Args:
        name: Name of the operation being profiled
        threshold_ms: Optional threshold in milliseconds for logging slow operations.
                      If None, uses the global threshold.

    Example:
        with profile_operation("list_folders"):
            client.list_folders()
    """
    if not _PROFILING_ENABLED:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000.0
        _profiling_data.setdefault(name, []).append(duration_ms)

        threshold = threshold_ms if threshold_ms is not None else _SLOW_OPERATION_THRESHOLD_MS
        if duration_ms > threshold:
            logger.warning("Slow operation: %s took %.2fms", name, duration_ms)


def profile_method(name: Optional[str] = None, threshold_ms: Optional[float] = None):
    """Decorator form of `profile_operation`; defaults to the qualified function name."""
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        operation_name = name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with profile_operation(operation_name, threshold_ms):
                return func(*args, **kwargs)

        return wrapper
    return decorator


def get_operation_stats(name: str) -> Optional[Dict[str, float]]:
    """
    Returns:
        Dictionary with stats (count, total_ms, avg_ms, min_ms, max_ms) or None if not found
    """
    durations = _profiling_data.get(name)
    if not durations:
        return None

    return {
        "count": len(durations),
        "total_ms": sum(durations),
        "avg_ms": sum(durations) / len(durations),
        "min_ms": min(durations),
        "max_ms": max(durations),
    }


__all__ = [
    "is_profiling_enabled",
    "set_profiling_enabled",
    "get_profiling_data",
    "clear_profiling_data",
    "profile_operation",
    "profile_method",
    "get_operation_stats",
]
