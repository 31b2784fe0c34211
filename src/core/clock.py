"""Clock helpers for catalog timestamps.

Catalog timestamps are integer milliseconds since the Unix epoch.
"""

from __future__ import annotations

from datetime import datetime
import time
from typing import Callable

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    """Return the current wall-clock time in milliseconds."""
    return time.time_ns() // 1_000_000


def format_timestamp_ms(timestamp_ms: int) -> str:
    """Render a millisecond timestamp as a local ISO datetime."""
    return datetime.fromtimestamp(timestamp_ms // 1000).astimezone().isoformat(sep=" ")
