"""Delivery orders and their lifecycle.

An order is created by the generator with a validated delivery target, then
assigned by the scheduler in the same logical step, and finally completed
when the completion tracker drains it. Each step is a state machine
transition::

    CREATED --assign--> ASSIGNED --complete--> COMPLETED

The assignment fields (``assigned_at``, ``completed_at``, ``vehicle_id``) are
written exactly once by the ``assign`` transition; a second assignment is an
illegal transition and raises ``ValueError``.

Once completed, an order is summarised into a :class:`CompletedOrderRecord`,
an immutable row that the statistics engine keeps in its recent history and
that export paths serialise.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import IntEnum, auto
from typing import Any

from dronefleet.geo import GeoPoint
from dronefleet.state import Action, StateMachine


class OrderState(IntEnum):
    """Lifecycle of an order, in progression order."""

    CREATED = auto()
    ASSIGNED = auto()
    COMPLETED = auto()


@dataclass(frozen=True, slots=True)
class CompletedOrderRecord:
    """Export row for one completed order.

    Attributes:
        id: Sequential order identifier.
        created_at: Simulation second the order was created.
        assigned_at: Simulation second the drone started the job.
        completed_at: Simulation second the drone was back and ready.
        wait_seconds: ``assigned_at - created_at``.
        total_seconds: ``completed_at - created_at``.
        distance_km: Depot to target distance.
        vehicle_id: Drone that served the order.
        latitude: Target latitude in degrees.
        longitude: Target longitude in degrees.
    """

    id: int
    created_at: float
    assigned_at: float
    completed_at: float
    wait_seconds: float
    total_seconds: float
    distance_km: float
    vehicle_id: int
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _stamp_assignment(
    order: Order, vehicle_id: int, assigned_at: float, completed_at: float
) -> None:
    order._vehicle_id = vehicle_id
    order._assigned_at = assigned_at
    order._completed_at = completed_at


_ORDER_GRAPH = {
    OrderState.CREATED: frozenset({Action(OrderState.ASSIGNED, _stamp_assignment)}),
    OrderState.ASSIGNED: frozenset({Action(OrderState.COMPLETED)}),
}


class Order:
    """A single delivery request.

    Attributes:
        id (int): Unique, monotonically assigned identifier.
        location (GeoPoint): Delivery target.
        created_at (float): Simulation seconds at creation.
        distance_km (float): Planar distance from the depot, never above the
            operating range in force when the order was sampled.
    """

    __slots__ = (
        "id",
        "location",
        "created_at",
        "distance_km",
        "_assigned_at",
        "_completed_at",
        "_vehicle_id",
        "_state_machine",
    )

    def __init__(self, id: int, location: GeoPoint, created_at: float, distance_km: float):
        self.id = id
        self.location = location
        self.created_at = float(created_at)
        self.distance_km = float(distance_km)
        self._assigned_at: float | None = None
        self._completed_at: float | None = None
        self._vehicle_id: int | None = None
        self._state_machine = StateMachine(OrderState.CREATED, _ORDER_GRAPH)

    # ------------------------------------------------------------------ lifecycle
    def assign(self, vehicle_id: int, assigned_at: float, completed_at: float) -> None:
        """Fix the order's timeline.

        Raises:
            ValueError: If the order was already assigned, or the timestamps
                violate ``created_at <= assigned_at <= completed_at``.
        """
        if self.current_state is not OrderState.CREATED:
            msg = f"order {self.id} is already {self.current_state.name}"
            raise ValueError(msg)
        # validate before the state machine commits the transition
        _check_order_times(self, assigned_at, completed_at)
        self._state_machine.request_transition(
            OrderState.ASSIGNED, self, vehicle_id, float(assigned_at), float(completed_at)
        )

    def complete(self) -> None:
        """Mark the order delivered and its drone back at the depot."""
        self._state_machine.request_transition(OrderState.COMPLETED)

    @property
    def current_state(self) -> OrderState:
        return self._state_machine.current

    @property
    def done(self) -> bool:
        return self.current_state is OrderState.COMPLETED

    @property
    def scheduled(self) -> bool:
        return self.current_state is not OrderState.CREATED

    # ------------------------------------------------------------------ timeline
    @property
    def assigned_at(self) -> float | None:
        return self._assigned_at

    @property
    def completed_at(self) -> float | None:
        return self._completed_at

    @property
    def vehicle_id(self) -> int | None:
        return self._vehicle_id

    @property
    def wait_seconds(self) -> float | None:
        if self._assigned_at is None:
            return None
        return self._assigned_at - self.created_at

    @property
    def total_seconds(self) -> float | None:
        if self._completed_at is None:
            return None
        return self._completed_at - self.created_at

    def to_record(self) -> CompletedOrderRecord:
        """Freeze a scheduled order into an export row.

        Raises:
            ValueError: If the order has not been assigned yet.
        """
        if not self.scheduled:
            msg = f"order {self.id} has no timeline yet"
            raise ValueError(msg)
        return CompletedOrderRecord(
            id=self.id,
            created_at=self.created_at,
            assigned_at=self._assigned_at,
            completed_at=self._completed_at,
            wait_seconds=self.wait_seconds,
            total_seconds=self.total_seconds,
            distance_km=self.distance_km,
            vehicle_id=self._vehicle_id,
            latitude=self.location.lat_deg,
            longitude=self.location.lon_deg,
        )

    def __repr__(self) -> str:
        return f"Order(id={self.id}, {self.current_state.name}, {self.distance_km:.2f} km)"


def _check_order_times(order: Order, assigned_at: float, completed_at: float) -> None:
    if assigned_at < order.created_at:
        msg = f"order {order.id}: assigned at {assigned_at} before creation {order.created_at}"
        raise ValueError(msg)
    if completed_at < assigned_at:
        msg = f"order {order.id}: completion {completed_at} precedes assignment {assigned_at}"
        raise ValueError(msg)
