"""Pending completions ordered by completion time.

Entries are ``(completed_at, sequence, order)`` tuples in a binary heap. The
sequence number comes from a per-tracker counter, so two orders finishing at
the same second leave in the order they were scheduled and the heap never
has to compare ``Order`` objects.
"""

from __future__ import annotations

import heapq
from collections.abc import Iterator
from itertools import count

from dronefleet.mission import Order


class CompletionTracker:
    """Min-heap of scheduled completions.

    Example:
        >>> tracker = CompletionTracker()
        >>> tracker.push(order_a, 120.0)
        >>> tracker.push(order_b, 60.0)
        >>> [o.id for o in tracker.drain(100.0)] == [order_b.id]
        True
    """

    def __init__(self):
        self._heap: list[tuple[float, int, Order]] = []
        self._sequence = count()

    def push(self, order: Order, completed_at: float) -> None:
        heapq.heappush(self._heap, (completed_at, next(self._sequence), order))

    def peek(self) -> tuple[float, Order] | None:
        """Earliest completion without removing it, or None when empty."""
        if not self._heap:
            return None
        completed_at, _, order = self._heap[0]
        return completed_at, order

    def pop(self) -> tuple[float, Order]:
        """Remove and return the earliest completion.

        Raises:
            IndexError: If the tracker is empty.
        """
        completed_at, _, order = heapq.heappop(self._heap)
        return completed_at, order

    def drain(self, now: float) -> Iterator[Order]:
        """Complete and yield every order due at or before ``now``.

        Orders come out in ascending completion time, ties in push order.
        Each yielded order has already transitioned to COMPLETED.
        """
        heap = self._heap
        while heap and heap[0][0] <= now:
            _, _, order = heapq.heappop(heap)
            order.complete()
            yield order

    def __len__(self) -> int:
        return len(self._heap)

    def clear(self) -> None:
        self._heap.clear()
        self._sequence = count()
