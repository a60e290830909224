"""A millisecond clock that is frozen between explicit updates."""

from __future__ import annotations

import time

__all__ = ["freeze_timestamp", "frozen_timestamp"]

_millis_cache: int | None = None


def freeze_timestamp() -> None:
    """Read the clock now and remember the value in milliseconds.

    A monotonic clock is preferred; wall-clock time is the last resort.
    """
    global _millis_cache
    try:
        nanos = time.monotonic_ns()
    except OSError:
        nanos = time.time_ns()
    _millis_cache = nanos // 1_000_000


def frozen_timestamp() -> int:
    """Return the remembered time in milliseconds, reading the clock on first use."""
    if _millis_cache is None:
        freeze_timestamp()
    return _millis_cache