"""
Quest ids: ``quest-<nanosecond stamp>-<ordinal>``.

The stamp is strictly increasing within the process, so two batches
built in the same clock tick still get different ids.
"""

from __future__ import annotations

import threading
import time

_lock = threading.Lock()
_last_stamp = 0


def _next_stamp() -> int:
    global _last_stamp
    with _lock:
        _last_stamp = max(time.time_ns(), _last_stamp + 1)
        return _last_stamp


def quest_ids(count: int) -> list[str]:
    """Return *count* ids sharing one stamp, ordinals starting at 1."""
    stamp = _next_stamp()
    return [f"quest-{stamp}-{ordinal}" for ordinal in range(1, count + 1)]
