"""Greedy earliest-available assignment.

Every order is assigned the moment it is created, to the drone that frees up
first (lowest id on ties). Assignment never fails: a saturated fleet simply
hands out later start times, which shows up as growing waits.

The choice of drone goes through a :class:`VehicleSelector`, so the linear
scan can be swapped for an indexed structure without touching the
scheduler::

    scheduler = FleetScheduler(drones, tracker, config, HeapSelector())
"""

from __future__ import annotations

import heapq
from abc import ABC, abstractmethod
from collections.abc import Sequence

from dronefleet.config import FleetConfig
from dronefleet.mission import Order
from dronefleet.vehicles import Drone, FlightSegment, SegmentKind

from .tracker import CompletionTracker


class VehicleSelector(ABC):
    """Picks the drone with the minimum ``next_available``."""

    @abstractmethod
    def reset(self, drones: Sequence[Drone]) -> None:
        """Start tracking a fresh fleet."""
        pass

    @abstractmethod
    def select(self) -> Drone:
        """Return the earliest-available drone, lowest id on ties."""
        pass

    @abstractmethod
    def update(self, drone: Drone) -> None:
        """Notify that ``drone`` (the last selected one) was rebooked."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the name of the selector."""
        pass


class LinearScanSelector(VehicleSelector):
    """O(n) scan over the fleet on every selection."""

    def __init__(self):
        self._drones: Sequence[Drone] = ()

    def get_name(self) -> str:
        return "Linear Scan"

    def reset(self, drones: Sequence[Drone]) -> None:
        if not drones:
            raise ValueError("cannot select from an empty fleet")
        self._drones = drones

    def select(self) -> Drone:
        best = self._drones[0]
        for drone in self._drones[1:]:
            if drone.next_available < best.next_available or (
                drone.next_available == best.next_available and drone.id < best.id
            ):
                best = drone
        return best

    def update(self, drone: Drone) -> None:
        # availability is read straight from the drones
        pass


class HeapSelector(VehicleSelector):
    """Min-heap keyed by ``(next_available, id)``; O(log n) per assignment.

    Only the drone returned by :meth:`select` may be rebooked before the
    next :meth:`update`, which is how the scheduler uses it.
    """

    def __init__(self):
        self._heap: list[tuple[float, int, Drone]] = []

    def get_name(self) -> str:
        return "Heap"

    def reset(self, drones: Sequence[Drone]) -> None:
        if not drones:
            raise ValueError("cannot select from an empty fleet")
        self._heap = [(d.next_available, d.id, d) for d in drones]
        heapq.heapify(self._heap)

    def select(self) -> Drone:
        return self._heap[0][2]

    def update(self, drone: Drone) -> None:
        top = self._heap[0][2]
        if top is not drone:
            msg = f"drone {drone.id} was not the selected drone {top.id}"
            raise ValueError(msg)
        heapq.heapreplace(self._heap, (drone.next_available, drone.id, drone))


class FleetScheduler:
    """Books orders on drones and registers their completions.

    Args:
        drones: The fleet, indexed by id.
        tracker: Receives one pending completion per assignment.
        config: Speed and fixed job durations; may be replaced between calls.
        selector: Earliest-available policy, linear scan by default.
        record_segments: Publish flight segments on the drones. Offline
            runs turn this off since nothing renders them.
    """

    def __init__(
        self,
        drones: Sequence[Drone],
        tracker: CompletionTracker,
        config: FleetConfig,
        selector: VehicleSelector | None = None,
        record_segments: bool = True,
    ):
        self.drones = drones
        self.tracker = tracker
        self.config = config
        self.selector = selector if selector is not None else LinearScanSelector()
        self.record_segments = record_segments
        self.selector.reset(drones)

    def flight_seconds(self, distance_km: float) -> float:
        """One-way flight time at the configured speed."""
        return distance_km / self.config.speed_kmh * 3600.0

    def busy_seconds(self, distance_km: float) -> float:
        """Load, both legs, service and turnaround."""
        return self.config.fixed_seconds + 2.0 * self.flight_seconds(distance_km)

    def assign(self, order: Order, now: float) -> Drone:
        """Assign ``order`` to the earliest-available drone.

        Returns:
            Drone: The drone now booked for the order.

        Raises:
            ValueError: If the order is created in the future or was already
                assigned.
        """
        if order.created_at > now:
            msg = f"order {order.id} created at {order.created_at}, after now={now}"
            raise ValueError(msg)

        config = self.config
        drone = self.selector.select()
        start = max(order.created_at, drone.next_available)
        flight = self.flight_seconds(order.distance_km)
        completion = start + config.fixed_seconds + 2.0 * flight

        order.assign(drone.id, start, completion)
        drone.occupy(start, completion)
        self.selector.update(drone)

        if self.record_segments:
            takeoff = start + config.load_seconds
            landing = completion - config.turnaround_seconds
            drone.push_segment(
                FlightSegment(
                    order.id, SegmentKind.OUTBOUND, drone.home, order.location,
                    takeoff, takeoff + flight,
                )
            )
            drone.push_segment(
                FlightSegment(
                    order.id, SegmentKind.RETURN, order.location, drone.home,
                    landing - flight, landing,
                )
            )

        self.tracker.push(order, completion)
        return drone
