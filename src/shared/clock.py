"""Wall-clock helpers shared by the reconciliation components."""

import time
from typing import Callable

Clock = Callable[[], int]


def current_time_ms() -> int:
    """Return the current wall-clock time as epoch milliseconds."""
    return time.time_ns() // 1_000_000
