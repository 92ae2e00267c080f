import time
from typing import Callable

from .constants import MILLISECONDS_PER_SECOND


def measure(work: Callable[[], object]) -> float:
    """Run work synchronously and return the elapsed wall-clock time in milliseconds."""
    time_start = time.perf_counter()
    work()
    time_end = time.perf_counter()
    return max(time_end - time_start, 0.0) * MILLISECONDS_PER_SECOND
