"""Wall-clock measurement for the scans performed around a dispatch.

Eliminates the repeated timing boilerplate around each scan:
    start_time = time.perf_counter()
    ...
    elapsed_ms += (time.perf_counter() - start_time) * 1000
"""

import time
from collections.abc import Generator
from contextlib import contextmanager


class TimeBudget:
    """Accumulates the duration of several measured blocks against a threshold.

    The threshold is advisory: exceeding it never interrupts the measured work,
    it only flips :attr:`exceeded` once the blocks have finished.

    Examples
    --------
    >>> budget = TimeBudget(warn_after_ms=32)
    >>> with budget.measure():
    ...     pass  # do work
    >>> budget.exceeded
    False
    """

    __slots__ = ("_elapsed_ms", "warn_after_ms")

    def __init__(self, warn_after_ms: float) -> None:
        self.warn_after_ms = warn_after_ms
        self._elapsed_ms = 0.0

    @contextmanager
    def measure(self) -> Generator[None, None, None]:
        """Add the duration of the enclosed block to the running total."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._elapsed_ms += (time.perf_counter() - start) * 1000

    @property
    def elapsed_ms(self) -> float:
        """Total measured milliseconds so far."""
        return self._elapsed_ms

    @property
    def elapsed_str(self) -> str:
        """Total measured time formatted with 2 decimal places."""
        return f"{self._elapsed_ms:.2f}"

    @property
    def exceeded(self) -> bool:
        """Whether the measured total is above the threshold."""
        return self._elapsed_ms > self.warn_after_ms
