"""Delivery drones and the flight segments they publish.

A drone in this model has no continuous kinematics. Its whole schedule is
known at assignment time, so the only mutable scheduling state is
``next_available``: the simulation second at which the drone is back at the
depot and ready. Busy spans of a drone never overlap and ``next_available``
never decreases.

Each job also produces two :class:`FlightSegment` values (outbound and
return) that a renderer may read to animate the fleet. Segments are frozen;
the scheduler appends them and the renderer pops the finished ones, and
neither side can alter a segment in place.

Job timeline for a delivery at distance ``d`` with speed ``v``::

    start | load | outbound d/v | service | return d/v | turnaround | completion
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto

from dronefleet.geo import GeoPoint


class SegmentKind(Enum):
    OUTBOUND = auto()
    RETURN = auto()


@dataclass(frozen=True, slots=True)
class FlightSegment:
    """One straight flight leg of a job.

    Attributes:
        order_id: Order the leg belongs to.
        kind: OUTBOUND (depot to target) or RETURN (target to depot).
        origin: Where the leg starts.
        destination: Where the leg ends.
        start: Simulation second of take-off.
        end: Simulation second of landing.
    """

    order_id: int
    kind: SegmentKind
    origin: GeoPoint
    destination: GeoPoint
    start: float
    end: float

    def active(self, now: float) -> bool:
        return self.start <= now < self.end

    def progress(self, now: float) -> float:
        """Fraction of the leg flown at ``now``, clamped to [0, 1]."""
        if self.end <= self.start:
            return 1.0 if now >= self.end else 0.0
        return min(1.0, max(0.0, (now - self.start) / (self.end - self.start)))


class Drone:
    """A homogeneous fleet member based at the depot.

    Attributes:
        id (int): Fleet index, also the scheduler's tie-breaker.
        home (GeoPoint): Depot the drone starts from and returns to.
    """

    __slots__ = ("id", "home", "_next_available", "_segments", "jobs")

    def __init__(self, id: int, home: GeoPoint):
        self.id = id
        self.home = home
        self._next_available = 0.0
        self._segments: deque[FlightSegment] = deque()
        self.jobs = 0

    @property
    def next_available(self) -> float:
        return self._next_available

    def is_busy(self, now: float) -> bool:
        return self._next_available > now

    def occupy(self, start: float, end: float) -> None:
        """Book the busy span ``[start, end]``.

        Raises:
            ValueError: If the span starts before the drone is free or ends
                before it starts.
        """
        if start < self._next_available:
            msg = f"drone {self.id} is busy until {self._next_available}, cannot start at {start}"
            raise ValueError(msg)
        if end < start:
            msg = f"drone {self.id}: busy span [{start}, {end}] is reversed"
            raise ValueError(msg)
        self._next_available = end
        self.jobs += 1

    # ------------------------------------------------------------------ segments
    def push_segment(self, segment: FlightSegment) -> None:
        self._segments.append(segment)

    @property
    def segments(self) -> tuple[FlightSegment, ...]:
        """Recorded legs in take-off order, as a read-only snapshot."""
        return tuple(self._segments)

    def pop_finished_segments(self, now: float) -> list[FlightSegment]:
        """Drop and return the legs that landed at or before ``now``."""
        finished = []
        while self._segments and self._segments[0].end <= now:
            finished.append(self._segments.popleft())
        return finished

    def current_segment(self, now: float) -> FlightSegment | None:
        for segment in self._segments:
            if segment.active(now):
                return segment
            if segment.start > now:
                break
        return None

    def __repr__(self) -> str:
        return f"Drone(id={self.id}, next_available={self._next_available:.1f})"
