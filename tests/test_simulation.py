"""
Tests for the simulation context.
"""

import os
import tempfile
import unittest

import pandas as pd

from dronefleet import ConfigurationError, FleetConfig, FleetSimulation
from dronefleet.simulator import RECORD_COLUMNS
from dronefleet.unit import Hour, Kilometer, KilometersPerHour, Minute


def fixed_sampler(distance_km):
    def sample(center, average_radius, max_radius, rng):
        return center, Kilometer(distance_km)

    return sample


def state_of(sim):
    snapshot = sim.snapshot_metrics()
    return (
        snapshot,
        sim.pending_completions,
        [d.next_available for d in sim.vehicles],
        [d.segments for d in sim.vehicles],
        sim.export_completed_orders(),
    )


class TestConfigure(unittest.TestCase):
    """Test configure()."""

    def setUp(self):
        self.sim = FleetSimulation(seed=1)

    def tearDown(self):
        self.sim.close()

    def test_accepts_units(self):
        """Unit values are converted into the field's unit."""
        config = self.sim.configure(
            speed_kmh=KilometersPerHour(72), load_seconds=Minute(2), max_range_km=Kilometer(5)
        )
        self.assertEqual(config.speed_kmh, 72.0)
        self.assertEqual(config.load_seconds, 120.0)
        self.assertEqual(config.max_range_km, 5.0)
        self.assertIs(self.sim.config, config)

    def test_invalid_values_leave_state_untouched(self):
        """Rejected options raise ConfigurationError and change nothing."""
        self.sim.run_to_horizon(Hour(1))
        before = state_of(self.sim)
        config = self.sim.config
        for options in (
            {"fleet_size": 0},
            {"fleet_size": 1001},
            {"speed_kmh": 0},
            {"load_seconds": -1},
            {"average_radius_km": 0},
            {"max_range_km": -2},
            {"max_range_km": 80},
            {"orders_per_hour": -5},
            {"time_scale": 0},
            {"speed_kmh": Minute(1)},
            {"warp_drive": True},
        ):
            with self.subTest(options=options):
                with self.assertRaises(ConfigurationError):
                    self.sim.configure(**options)
                self.assertIs(self.sim.config, config)
        self.assertEqual(state_of(self.sim), before)

    def test_error_names_the_field(self):
        with self.assertRaises(ConfigurationError) as ctx:
            self.sim.configure(speed_kmh=-1)
        self.assertEqual(ctx.exception.field, "speed_kmh")
        self.assertIsInstance(ctx.exception, ValueError)

    def test_fleet_size_change_resets(self):
        """A new fleet size rebuilds the fleet at t = 0."""
        self.sim.run_to_horizon(600)
        self.sim.configure(fleet_size=4)
        self.assertEqual(self.sim.now, 0.0)
        self.assertEqual(len(self.sim.vehicles), 4)

    def test_other_changes_keep_running(self):
        """Changing the rate keeps the clock and applies from the next tick."""
        self.sim.run_to_horizon(600)
        self.sim.configure(orders_per_hour=0)
        created = self.sim.created
        self.sim.run_to_horizon(1200)
        self.assertEqual(self.sim.now, 1200.0)
        self.assertEqual(self.sim.created, created)


class TestTick(unittest.TestCase):
    """Test the tick contract."""

    def test_negative_delta_rejected(self):
        with FleetSimulation() as sim:
            with self.assertRaises(ValueError):
                sim.tick(-1.0)

    def test_completions_drained_at_new_clock(self):
        """A completion due at the advanced clock is drained in the same tick."""
        config = FleetConfig(
            fleet_size=1, load_seconds=10.0, service_seconds=0.0,
            turnaround_seconds=0.0, orders_per_hour=3600.0,
        )
        with FleetSimulation(config, sampler=fixed_sampler(0.0)) as sim:
            # one order stamped t=0, busy until t=10
            sim.tick(1.0)
            self.assertEqual(sim.vehicles[0].next_available, 10.0)
            sim.configure(orders_per_hour=0.0)
            sim.tick(8.0)
            self.assertEqual(sim.snapshot_metrics().completed, 0)

            # second order stamped t=9 queues behind the first
            sim.configure(orders_per_hour=3600.0)
            sim.tick(1.0)
            snapshot = sim.snapshot_metrics()
            self.assertEqual(snapshot.now, 10.0)
            self.assertEqual(snapshot.created, 2)
            self.assertEqual(snapshot.completed, 1)
            self.assertEqual(snapshot.active_vehicles, 1)
            self.assertEqual(sim.vehicles[0].next_available, 20.0)

    def test_run_to_horizon_lands_exactly(self):
        """The last step is shortened to land on the horizon."""
        with FleetSimulation(record_segments=False) as sim:
            snapshot = sim.run_to_horizon(10.5, step=4.0)
            self.assertEqual(snapshot.now, 10.5)
            self.assertEqual(sim.run_to_horizon(5.0).now, 10.5)
            with self.assertRaises(ValueError):
                sim.run_to_horizon(20.0, step=0.0)

    def test_invariants_over_a_busy_run(self):
        """All completed orders respect the timeline and range invariants."""
        config = FleetConfig(fleet_size=3, orders_per_hour=40.0)
        with FleetSimulation(config, seed=5) as sim:
            snapshot = sim.run_to_horizon(Hour(6))
            records = sim.export_completed_orders()
        self.assertGreater(len(records), 0)
        self.assertEqual(snapshot.completed, len(records))
        self.assertLessEqual(snapshot.completed, snapshot.created)
        self.assertLessEqual(snapshot.created, snapshot.attempted)
        self.assertEqual(snapshot.queue_size, 0)
        ids = [r.id for r in records]
        self.assertEqual(len(set(ids)), len(ids))
        for r in records:
            self.assertGreaterEqual(r.wait_seconds, 0.0)
            self.assertGreaterEqual(r.assigned_at, r.created_at)
            self.assertGreater(r.completed_at, r.assigned_at)
            self.assertLessEqual(r.completed_at, snapshot.now)
            self.assertLessEqual(r.distance_km, config.max_range_km)


class TestMetrics(unittest.TestCase):
    """Test snapshots and exports."""

    def test_initial_snapshot(self):
        """At t = 0 every metric is zero, including the actual rate."""
        with FleetSimulation() as sim:
            snapshot = sim.snapshot_metrics()
        self.assertEqual(snapshot.now, 0.0)
        self.assertEqual(snapshot.actual_rate_per_hour, 0.0)
        self.assertEqual(snapshot.completed, 0)
        self.assertEqual(snapshot.active_vehicles, 0)

    def test_actual_rate_shortfall(self):
        """A range far below the average radius lowers the created rate."""
        base = FleetConfig(fleet_size=50, orders_per_hour=600.0, average_radius_km=3.0)
        with FleetSimulation(base, seed=3, record_segments=False) as sim:
            full = sim.run_to_horizon(Hour(2))
        with FleetSimulation(base.replace(max_range_km=0.5), seed=3,
                             record_segments=False) as sim:
            short = sim.run_to_horizon(Hour(2))
        self.assertEqual(full.attempted, short.attempted)
        self.assertAlmostEqual(short.created / short.attempted, (0.5 / 0.75) ** 2, delta=0.08)
        self.assertLess(short.actual_rate_per_hour, 0.6 * full.actual_rate_per_hour)

    def test_same_seed_same_run(self):
        """Two contexts with the same seed produce the same metrics."""
        snapshots = []
        for _ in range(2):
            with FleetSimulation(FleetConfig(fleet_size=4), seed=8) as sim:
                snapshots.append(sim.run_to_horizon(Hour(2)))
        self.assertEqual(snapshots[0], snapshots[1])

    def test_frame_and_csv_export(self):
        """Completed orders export to a DataFrame and to CSV."""
        with FleetSimulation(FleetConfig(fleet_size=5), seed=2) as sim:
            self.assertEqual(list(sim.completed_orders_frame().columns), RECORD_COLUMNS)
            sim.run_to_horizon(Hour(2))
            frame = sim.completed_orders_frame()
            self.assertEqual(len(frame), sim.snapshot_metrics().completed)
            with tempfile.TemporaryDirectory() as tmp:
                path = os.path.join(tmp, "orders.csv")
                rows = sim.export_completed_orders_csv(path)
                read_back = pd.read_csv(path)
        self.assertEqual(rows, len(frame))
        self.assertEqual(list(read_back.columns), RECORD_COLUMNS)

    def test_history_is_capped(self):
        """Only the most recent records are retained."""
        config = FleetConfig(fleet_size=20, orders_per_hour=300.0)
        with FleetSimulation(config, seed=4, history_capacity=25,
                             record_segments=False) as sim:
            snapshot = sim.run_to_horizon(Hour(1))
            records = sim.export_completed_orders()
        self.assertGreater(snapshot.completed, 25)
        self.assertEqual(len(records), 25)


class TestLifecycle(unittest.TestCase):
    """Test reset and close."""

    def test_reset_is_idempotent(self):
        """Resetting twice equals resetting once."""
        with FleetSimulation(FleetConfig(fleet_size=3), seed=6) as sim:
            sim.run_to_horizon(Hour(1))
            sim.reset()
            once = state_of(sim)
            sim.reset()
            twice = state_of(sim)
        self.assertEqual(once, twice)
        snapshot = once[0]
        self.assertEqual((snapshot.now, snapshot.created, snapshot.completed), (0.0, 0, 0))
        self.assertEqual(once[1], 0)

    def test_reset_replays_the_run(self):
        """After a reset the same seed reproduces the same run."""
        with FleetSimulation(FleetConfig(fleet_size=3), seed=6) as sim:
            first = sim.run_to_horizon(Hour(1))
            sim.reset()
            second = sim.run_to_horizon(Hour(1))
        self.assertEqual(first, second)

    def test_closed_context_rejects_use(self):
        sim = FleetSimulation()
        sim.close()
        self.assertTrue(sim.closed)
        with self.assertRaises(RuntimeError):
            sim.tick(1.0)

    def test_closed_context_rejects_reads(self):
        """Metrics and exports of a closed context raise instead of reading empty."""
        with FleetSimulation(FleetConfig(fleet_size=2), seed=1) as sim:
            sim.run_to_horizon(600)
        reads = {
            "snapshot_metrics": sim.snapshot_metrics,
            "refresh_p95": sim.refresh_p95,
            "active_segments": sim.active_segments,
            "export_completed_orders": sim.export_completed_orders,
            "completed_orders_frame": sim.completed_orders_frame,
            "vehicles": lambda: sim.vehicles,
            "pending_completions": lambda: sim.pending_completions,
            "created": lambda: sim.created,
            "attempted": lambda: sim.attempted,
        }
        for name, read in reads.items():
            with self.subTest(read=name):
                with self.assertRaises(RuntimeError):
                    read()


if __name__ == "__main__":
    unittest.main()
