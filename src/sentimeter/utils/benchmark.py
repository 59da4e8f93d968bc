"""Timing helper for provider calls made in debug mode."""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class Timing:
    """Elapsed time of one measured block."""

    def __init__(self, label: str):
        self.label = label
        self.elapsed_ms: float = 0.0


@contextmanager
def timed(label: str, enabled: bool = True, log: Optional[logging.Logger] = None) -> Iterator[Timing]:
    """Measure the wrapped block and log its duration.

    Purely informational: the block runs the same way whether or not timing is enabled.
    """
    timing = Timing(label)
    if not enabled:
        yield timing
        return

    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed_ms = (time.perf_counter() - start) * 1000.0
        (log or logger).info(f"{label}. Execution time is: {timing.elapsed_ms:.2f} ms")
