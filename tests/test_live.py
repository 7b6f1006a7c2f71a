"""
Tests for the wall-clock runner and the countdown timer.
"""

import io
import unittest

from rich.console import Console
from rich.panel import Panel

from dronefleet import FleetConfig, FleetSimulation, LiveRunner
from dronefleet.timer import Timer
from dronefleet.unit import Second


class FakeClock:
    """Deterministic wall clock advanced only by ``sleep``."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


def make_runner(config=None, refresh_interval=Second(0.25)):
    clock = FakeClock()
    sim = FleetSimulation(config or FleetConfig(time_scale=60.0), seed=0)
    runner = LiveRunner(
        sim,
        console=Console(file=io.StringIO()),
        refresh_interval=refresh_interval,
        frame_interval=Second(0.25),
        clock=clock,
        sleep=clock.sleep,
    )
    return runner, sim


class TestTimer(unittest.TestCase):
    """Test Timer class."""

    def test_countdown(self):
        timer = Timer(Second(1))
        timer.advance(Second(0.4))
        self.assertFalse(timer.done)
        timer.advance(Second(0.6))
        self.assertTrue(timer.done)

    def test_rearm_keeps_overshoot(self):
        """Re-arming subtracts the overshoot from the next period."""
        timer = Timer(Second(1))
        timer.advance(Second(1.25))
        timer.rearm()
        self.assertAlmostEqual(float(timer.duration), 0.75)

    def test_rearm_after_stall(self):
        """A stall longer than a period restarts the full period."""
        timer = Timer(Second(1))
        timer.advance(Second(5))
        timer.rearm()
        self.assertAlmostEqual(float(timer.duration), 1.0)

    def test_negative_period_rejected(self):
        with self.assertRaises(ValueError):
            Timer(Second(-1))


class TestLiveRunner(unittest.TestCase):
    """Test LiveRunner class."""

    def test_frame_scales_wall_time(self):
        """One wall second at time scale 60 is one simulated minute."""
        runner, sim = make_runner()
        snapshot = runner.frame(1.0)
        self.assertEqual(snapshot.now, 60.0)

    def test_time_scale_applies_next_frame(self):
        """A new time scale is read at the next tick boundary."""
        runner, sim = make_runner()
        runner.frame(1.0)
        runner.set_time_scale(10.0)
        self.assertEqual(runner.frame(1.0).now, 70.0)

    def test_p95_refresh_is_throttled(self):
        """The P95 is recomputed only when the refresh interval has elapsed."""
        runner, sim = make_runner(refresh_interval=Second(10))
        calls = []
        refresh = sim.refresh_p95

        def counting_refresh():
            calls.append(sim.now)
            return refresh()

        sim.refresh_p95 = counting_refresh
        for _ in range(25):
            snapshot = runner.frame(1.0)
            self.assertEqual(snapshot.p95_wait, sim.stats.p95)
        # wall seconds 10 and 20
        self.assertEqual(calls, [600.0, 1200.0])

    def test_run_for_duration(self):
        """run() stops after the requested wall time."""
        runner, sim = make_runner()
        snapshot = runner.run(duration=1.0)
        self.assertFalse(runner.running)
        self.assertAlmostEqual(snapshot.now, 60.0, places=6)

    def test_reset_stops_and_clears(self):
        """reset() stops the loop and zeroes the simulation."""
        runner, sim = make_runner()
        runner.frame(5.0)
        runner.reset()
        self.assertFalse(runner.running)
        self.assertEqual(sim.now, 0.0)
        self.assertEqual(sim.snapshot_metrics().created, 0)

    def test_reset_while_running(self):
        """A reset issued while the loop sleeps leaves the simulation at t = 0."""
        clock = FakeClock()
        sim = FleetSimulation(FleetConfig(time_scale=60.0, orders_per_hour=3600.0), seed=0)
        sleeps = []

        def sleep(seconds):
            clock.sleep(seconds)
            sleeps.append(seconds)
            if len(sleeps) == 3:
                runner.reset()

        runner = LiveRunner(
            sim,
            console=Console(file=io.StringIO()),
            frame_interval=Second(0.25),
            clock=clock,
            sleep=sleep,
        )
        snapshot = runner.run(duration=10.0)
        self.assertFalse(runner.running)
        self.assertEqual(len(sleeps), 3)
        self.assertEqual(sim.now, 0.0)
        self.assertEqual(sim.created, 0)
        self.assertEqual(sim.pending_completions, 0)
        self.assertEqual(snapshot.now, 0.0)

    def test_render(self):
        """The panel renders without errors."""
        runner, sim = make_runner()
        panel = runner.render(runner.frame(1.0))
        self.assertIsInstance(panel, Panel)
        runner.console.print(panel)
        self.assertIn("P95 Wait", runner.console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
