"""Time-based identifiers and timestamps."""

from __future__ import annotations

import threading
import time

CONFIG_PREFIX = "cfg"
WIDGET_PREFIX = "wid"

_last_ns = 0
_lock = threading.Lock()


def new_id(prefix: str) -> str:
    """Return ``<prefix>_<unix nanoseconds>``, strictly increasing within the process."""
    global _last_ns

    with _lock:
        ns = time.time_ns()
        if ns <= _last_ns:
            ns = _last_ns + 1
        _last_ns = ns
    return f"{prefix}_{ns}"


def now() -> int:
    """Current unix time in seconds."""
    return int(time.time())
