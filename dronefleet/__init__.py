"""Discrete-event simulation of a single-depot delivery drone fleet.

dronefleet models homogeneous drones serving orders that arrive at a
configured hourly rate around one depot. Targets beyond the operating range
are rejected when sampled; every accepted order is assigned at once to the
drone that frees up first, and its whole timeline (wait, flight, service,
turnaround) is fixed at that moment. Completions are drained from a heap as
the clock passes them and feed constant-memory statistics.

Framework Components:
    Simulation Context (dronefleet.simulator):
        • FleetSimulation: configure / reset / tick / run_to_horizon / close
        • LiveRunner: wall-clock driver with a rich live panel
        • find_minimum_fleet_size: binary search over offline runs
        • sweep_fleet_sizes: parallel offline runs on a thread pool

    Domain (dronefleet.mission, dronefleet.vehicles):
        • Order: state-machine validated lifecycle CREATED -> ASSIGNED -> COMPLETED
        • OrderGenerator: fractional-accumulator arrivals
        • Drone / FlightSegment: availability and immutable flight legs

    Utilities:
        • dronefleet.unit: type-safe lengths, times, speeds and angles
        • dronefleet.geo: GeoPoint, planar distance, disk sampling
        • dronefleet.stats: running means and the sliding-window P95

Usage Examples:
    Offline run:
        >>> from dronefleet import FleetSimulation
        >>> from dronefleet.unit import Hour, KilometersPerHour
        >>> sim = FleetSimulation(seed=1)
        >>> config = sim.configure(fleet_size=8, speed_kmh=KilometersPerHour(72))
        >>> snapshot = sim.run_to_horizon(Hour(4))
        >>> snapshot.completed <= snapshot.created
        True

    Fleet sizing:
        >>> from dronefleet import find_minimum_fleet_size
        >>> find_minimum_fleet_size(target_p95=300, horizon=Hour(4), high=64)

Command line:
    python -m dronefleet live --duration 60 --time-scale 30
    python -m dronefleet batch --horizon 28800 --export orders.csv
    python -m dronefleet search --target-p95 300
"""

from .config import FleetConfig
from .errors import ConfigurationError
from .geo import GeoPoint
from .mission import CompletedOrderRecord, Order, OrderGenerator, OrderState
from .simulator import (
    CompletionTracker,
    FleetScheduler,
    FleetSimulation,
    HeapSelector,
    LinearScanSelector,
    LiveRunner,
    VehicleSelector,
    find_minimum_fleet_size,
    sweep_fleet_sizes,
)
from .stats import MetricsSnapshot
from .vehicles import Drone, FlightSegment, SegmentKind

__version__ = "0.1.0"

__all__ = [
    # Simulation
    "FleetSimulation",
    "FleetConfig",
    "ConfigurationError",
    "MetricsSnapshot",
    "LiveRunner",
    "find_minimum_fleet_size",
    "sweep_fleet_sizes",
    # Engine
    "FleetScheduler",
    "VehicleSelector",
    "LinearScanSelector",
    "HeapSelector",
    "CompletionTracker",
    # Domain
    "Order",
    "OrderState",
    "OrderGenerator",
    "CompletedOrderRecord",
    "Drone",
    "FlightSegment",
    "SegmentKind",
    "GeoPoint",
]
