"""The simulation context: one fleet, one clock, one set of statistics.

All mutable state of a run lives on a :class:`FleetSimulation` instance, so
independent instances can run side by side (the fleet-size search runs one
per probe). A tick always follows the same three steps:

    1. generate orders stamped with the current clock and assign each one
    2. advance the clock by ``delta``
    3. drain completions due at or before the new clock into the statistics

Drones freed in step 3 serve orders of later ticks only, which keeps every
run replayable from its seed.

Example:
    >>> from dronefleet import FleetSimulation
    >>> from dronefleet.unit import Hour
    >>> with FleetSimulation(seed=42) as sim:
    ...     config = sim.configure(fleet_size=5, orders_per_hour=30)
    ...     snapshot = sim.run_to_horizon(Hour(2))
    >>> snapshot.now
    7200.0
"""

from __future__ import annotations

from collections.abc import Callable
from math import isfinite
from os import PathLike
from typing import Any

import numpy as np
import pandas as pd

from dronefleet.config import DT, HISTORY_CAPACITY, P95_WINDOW, FleetConfig
from dronefleet.geo import sample_uniform_in_disk
from dronefleet.mission import CompletedOrderRecord, OrderGenerator, Sampler
from dronefleet.stats import MetricsSnapshot, StreamingStatistics
from dronefleet.unit import Time
from dronefleet.vehicles import Drone, FlightSegment

from .scheduler import FleetScheduler, LinearScanSelector, VehicleSelector
from .tracker import CompletionTracker

RECORD_COLUMNS = [
    "id",
    "created_at",
    "assigned_at",
    "completed_at",
    "wait_seconds",
    "total_seconds",
    "distance_km",
    "vehicle_id",
    "latitude",
    "longitude",
]


class FleetSimulation:
    """Discrete-event simulation of a single-depot drone fleet.

    Args:
        config: Initial options; defaults to :class:`FleetConfig` defaults.
        seed: Seed of the order generator's random stream. Every reset
            restarts the stream from it, so a seed fully determines a run.
        selector_factory: Builds the earliest-available selector for each
            fresh fleet.
        sampler: Delivery target sampler.
        record_segments: Publish flight segments for a renderer.
        p95_window: Size of the recent-wait window behind the P95.
        history_capacity: Completed order records kept for export.
    """

    def __init__(
        self,
        config: FleetConfig | None = None,
        *,
        seed: int | None = None,
        selector_factory: Callable[[], VehicleSelector] = LinearScanSelector,
        sampler: Sampler = sample_uniform_in_disk,
        record_segments: bool = True,
        p95_window: int = P95_WINDOW,
        history_capacity: int = HISTORY_CAPACITY,
    ):
        self._config = config if config is not None else FleetConfig()
        self.seed = seed
        self._selector_factory = selector_factory
        self.record_segments = record_segments
        self.stats = StreamingStatistics(p95_window, history_capacity)
        self._tracker = CompletionTracker()
        self._generator = OrderGenerator(self._config, np.random.default_rng(seed), sampler)
        self._closed = False
        self.reset()

    # ------------------------------------------------------------------ lifecycle
    def reset(self) -> None:
        """Discard every order, drone and statistic; start again at t = 0."""
        self._check_open()
        config = self._config
        self._now = 0.0
        self._generator.config = config
        self._generator.reset(np.random.default_rng(self.seed))
        self._tracker.clear()
        self.stats.reset()
        self._drones = [Drone(i, config.depot) for i in range(config.fleet_size)]
        self._scheduler = FleetScheduler(
            self._drones,
            self._tracker,
            config,
            self._selector_factory(),
            self.record_segments,
        )

    def close(self) -> None:
        """Release the fleet and pending state; the instance is unusable after."""
        if self._closed:
            return
        self._tracker.clear()
        self.stats.reset()
        self._drones = []
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> FleetSimulation:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------ configuration
    @property
    def config(self) -> FleetConfig:
        return self._config

    def configure(self, **options: Any) -> FleetConfig:
        """Apply new options.

        A different ``fleet_size`` or ``depot`` resets the run, since both
        are fixed for the lifetime of a fleet. Every other option applies
        from the next tick on.

        Raises:
            ConfigurationError: If an option is unknown or out of range.
                Nothing is changed in that case.
        """
        self._check_open()
        new = self._config.replace(**options)
        old = self._config
        self._config = new
        if new.fleet_size != old.fleet_size or new.depot != old.depot:
            self.reset()
        else:
            self._generator.config = new
            self._scheduler.config = new
        return new

    # ------------------------------------------------------------------ clock
    @property
    def now(self) -> float:
        return self._now

    def tick(self, delta: Time | float) -> None:
        """Advance the simulation by ``delta`` simulated seconds.

        Raises:
            ValueError: If ``delta`` is negative or not finite.
        """
        delta = float(delta)
        if delta < 0 or not isfinite(delta):
            msg = f"tick delta must be a finite non-negative number, got {delta}"
            raise ValueError(msg)
        self._step(delta, self._now + delta)

    def run_to_horizon(self, horizon: Time | float, step: Time | float = DT) -> MetricsSnapshot:
        """Tick with a fixed ``step`` until the clock reads ``horizon``.

        The last step is shortened so the clock lands exactly on the
        horizon. A horizon at or before the current clock does nothing.

        Returns:
            MetricsSnapshot: Metrics at the horizon, P95 refreshed.

        Raises:
            ValueError: If ``step`` is not positive.
        """
        target = float(horizon)
        step = float(step)
        if not step > 0 or not isfinite(step):
            msg = f"step must be a finite positive number, got {step}"
            raise ValueError(msg)
        if not isfinite(target):
            msg = f"horizon must be finite, got {target}"
            raise ValueError(msg)
        while self._now < target:
            next_now = min(self._now + step, target)
            self._step(next_now - self._now, next_now)
        return self.snapshot_metrics()

    def _step(self, delta: float, next_now: float) -> None:
        self._check_open()
        config = self._config
        now = self._now
        for order in self._generator.advance(delta, config.orders_per_hour, now):
            self._scheduler.assign(order, now)
        self._now = next_now
        for order in self._tracker.drain(next_now):
            self.stats.record(order)

    # ------------------------------------------------------------------ read views
    @property
    def vehicles(self) -> tuple[Drone, ...]:
        self._check_open()
        return tuple(self._drones)

    @property
    def pending_completions(self) -> int:
        self._check_open()
        return len(self._tracker)

    @property
    def attempted(self) -> int:
        self._check_open()
        return self._generator.attempted

    @property
    def created(self) -> int:
        self._check_open()
        return self._generator.created

    def active_segments(self) -> list[FlightSegment]:
        """Legs in the air right now; landed legs are discarded on the way."""
        self._check_open()
        now = self._now
        active = []
        for drone in self._drones:
            drone.pop_finished_segments(now)
            segment = drone.current_segment(now)
            if segment is not None:
                active.append(segment)
        return active

    def refresh_p95(self) -> float:
        self._check_open()
        return self.stats.refresh_p95()

    def snapshot_metrics(self, refresh: bool = True) -> MetricsSnapshot:
        """Publish the current metrics.

        Args:
            refresh: Recompute the P95 first. Live rendering passes False
                and refreshes on its own cadence instead.

        Raises:
            RuntimeError: If the simulation is closed.
        """
        self._check_open()
        if refresh:
            self.stats.refresh_p95()
        now = self._now
        created = self._generator.created
        hours = now / 3600.0
        return MetricsSnapshot(
            average_wait=self.stats.wait.value,
            average_delivery=self.stats.total.value,
            p95_wait=self.stats.p95,
            completed=self.stats.completed,
            created=created,
            attempted=self._generator.attempted,
            # assignment is synchronous with creation
            queue_size=0,
            active_vehicles=sum(1 for d in self._drones if d.is_busy(now)),
            actual_rate_per_hour=created / hours if hours > 0 else 0.0,
            now=now,
        )

    # ------------------------------------------------------------------ export
    def export_completed_orders(self) -> list[CompletedOrderRecord]:
        """The most recent completed orders, oldest first.

        At most ``history_capacity`` records are retained; older ones are
        dropped as new orders complete.
        """
        self._check_open()
        return list(self.stats.history)

    def completed_orders_frame(self) -> pd.DataFrame:
        self._check_open()
        records = [record.to_dict() for record in self.stats.history]
        return pd.DataFrame.from_records(records, columns=RECORD_COLUMNS)

    def export_completed_orders_csv(self, path: str | PathLike) -> int:
        """Write the retained history to ``path``; returns the row count."""
        frame = self.completed_orders_frame()
        frame.to_csv(path, index=False)
        return len(frame)

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("simulation is closed")

    def __repr__(self) -> str:
        return (
            f"FleetSimulation(fleet_size={self._config.fleet_size}, "
            f"now={self._now:.1f}, completed={self.stats.completed})"
        )
