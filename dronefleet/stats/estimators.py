"""Constant-memory estimators for wait and delivery times."""

from __future__ import annotations

from math import ceil

import numpy as np


class RunningMean:
    """Incremental arithmetic mean, ``mean += (x - mean) / n``.

    Example:
        >>> mean = RunningMean()
        >>> for x in (2.0, 4.0, 9.0):
        ...     mean.add(x)
        >>> mean.value
        5.0
    """

    __slots__ = ("count", "value")

    def __init__(self):
        self.count = 0
        self.value = 0.0

    def add(self, sample: float) -> None:
        self.count += 1
        self.value += (sample - self.value) / self.count

    def reset(self) -> None:
        self.count = 0
        self.value = 0.0


class RingBufferPercentile:
    """Percentile over the most recent ``capacity`` samples.

    Samples overwrite the buffer in arrival order at index
    ``count mod capacity``. A query sorts a copy of the valid part of the
    buffer, so it costs O(K log K) and should be throttled by the caller.
    The result tracks the recent window, not the lifetime distribution.

    Args:
        capacity: Window size K.

    Example:
        >>> est = RingBufferPercentile(2000)
        >>> for x in range(1, 2001):
        ...     est.add(float(x))
        >>> est.percentile(0.95)
        1900.0
    """

    def __init__(self, capacity: int = 2000):
        if capacity < 1:
            msg = f"capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self.capacity = capacity
        self._buffer = np.zeros(capacity, dtype=np.float64)
        self._count = 0

    @property
    def count(self) -> int:
        """Samples added since the last reset, including overwritten ones."""
        return self._count

    def __len__(self) -> int:
        return min(self._count, self.capacity)

    def add(self, sample: float) -> None:
        self._buffer[self._count % self.capacity] = sample
        self._count += 1

    def window(self) -> np.ndarray:
        """Copy of the valid samples, in buffer order."""
        return self._buffer[: len(self)].copy()

    def percentile(self, q: float) -> float:
        """Nearest-rank percentile of the window; 0.0 when empty.

        Returns element ``ceil(q * n) - 1`` of the sorted window, so the P95 of
        2000 samples is the one at index 1899. ``q * n`` is rounded to 9
        decimals first, so float noise cannot move an exact rank.
        """
        if not 0.0 <= q <= 1.0:
            msg = f"quantile must be within [0, 1], got {q}"
            raise ValueError(msg)
        n = len(self)
        if n == 0:
            return 0.0
        ordered = np.sort(self._buffer[:n])
        rank = ceil(round(q * n, 9))
        return float(ordered[min(max(rank - 1, 0), n - 1)])

    def reset(self) -> None:
        self._buffer.fill(0.0)
        self._count = 0
