"""Streaming statistics fed by the completion tracker.

Only drained completions update the means and the percentile window; the
render loop never writes here. The P95 is cached and recomputed only by
:meth:`StreamingStatistics.refresh_p95`, which the live runner calls on a
wall-time cadence and batch runs call once before reading a snapshot.
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from typing import Any

from dronefleet.config import HISTORY_CAPACITY, P95_WINDOW
from dronefleet.mission import CompletedOrderRecord, Order

from .estimators import RingBufferPercentile, RunningMean

P95 = 0.95


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Read-only view of a simulation's metrics at one instant.

    Attributes:
        average_wait: Mean of ``assigned_at - created_at`` over completed orders.
        average_delivery: Mean of ``completed_at - created_at``.
        p95_wait: 95th percentile wait over the recent window, as of the
            last refresh.
        completed: Orders drained so far.
        created: Orders that passed the range check.
        attempted: Orders sampled, including range rejections.
        queue_size: Created but not yet assigned orders.
        active_vehicles: Drones whose next availability lies after ``now``.
        actual_rate_per_hour: ``created`` per elapsed simulated hour.
        now: Simulation clock in seconds.
    """

    average_wait: float
    average_delivery: float
    p95_wait: float
    completed: int
    created: int
    attempted: int
    queue_size: int
    active_vehicles: int
    actual_rate_per_hour: float
    now: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class StreamingStatistics:
    """Bounded-memory accumulators over completed orders.

    Attributes:
        wait (RunningMean): Running mean of wait seconds.
        total (RunningMean): Running mean of creation-to-completion seconds.
        window (RingBufferPercentile): Recent wait samples for the P95.
        completed (int): Orders recorded since the last reset.
        history (deque[CompletedOrderRecord]): The most recent records, at
            most ``history_capacity`` of them; older ones are discarded.
    """

    def __init__(self, window: int = P95_WINDOW, history_capacity: int = HISTORY_CAPACITY):
        if history_capacity < 0:
            msg = f"history capacity must be non-negative, got {history_capacity}"
            raise ValueError(msg)
        self.wait = RunningMean()
        self.total = RunningMean()
        self.window = RingBufferPercentile(window)
        self.history: deque[CompletedOrderRecord] = deque(maxlen=history_capacity)
        self.completed = 0
        self._p95 = 0.0

    def record(self, order: Order) -> None:
        """Account for one completed order.

        Raises:
            ValueError: If the order is not completed.
        """
        if not order.done:
            msg = f"order {order.id} is {order.current_state.name}, not COMPLETED"
            raise ValueError(msg)
        self.wait.add(order.wait_seconds)
        self.total.add(order.total_seconds)
        self.window.add(order.wait_seconds)
        self.completed += 1
        self.history.append(order.to_record())

    @property
    def p95(self) -> float:
        """Cached P95 wait from the last :meth:`refresh_p95`."""
        return self._p95

    def refresh_p95(self) -> float:
        self._p95 = self.window.percentile(P95)
        return self._p95

    def reset(self) -> None:
        self.wait.reset()
        self.total.reset()
        self.window.reset()
        self.history.clear()
        self.completed = 0
        self._p95 = 0.0
