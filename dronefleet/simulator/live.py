"""Wall-clock driver with a rich live panel.

Each frame measures the wall time since the previous one, scales it by the
configured time scale and ticks the simulation once. The time scale is read
at every tick boundary, so a change made between frames takes effect on the
next tick only.

The P95 sort is throttled to :data:`P95_REFRESH_INTERVAL` of wall time; the
means and counters shown in between are always current.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table

from dronefleet.config import P95_REFRESH_INTERVAL
from dronefleet.stats import MetricsSnapshot
from dronefleet.timer import Timer
from dronefleet.unit import ClockTime, Second, Time

from .simulation import FleetSimulation

CONSOLE = Console()
FRAME_INTERVAL = Second(1 / 30)


class LiveRunner:
    """Runs a simulation against the wall clock.

    ``stop`` and ``reset`` may be called from another thread; ``reset``
    stops the loop first and then resets under the frame lock, so a frame
    never sees a half-reset simulation.

    Args:
        simulation: The context to drive.
        console: Where the live panel is drawn.
        refresh_interval: Wall time between P95 refreshes.
        frame_interval: Wall time slept between frames.
        clock: Monotonic wall clock in seconds.
        sleep: Sleep function, paired with ``clock``.
    """

    def __init__(
        self,
        simulation: FleetSimulation,
        console: Console = CONSOLE,
        refresh_interval: Time = P95_REFRESH_INTERVAL,
        frame_interval: Time = FRAME_INTERVAL,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.simulation = simulation
        self.console = console
        self.frame_interval = float(frame_interval)
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._p95_timer = Timer(Second.coerce(refresh_interval))

    @property
    def running(self) -> bool:
        return not self._stop.is_set()

    def frame(self, wall_delta: float) -> MetricsSnapshot:
        """Advance by ``wall_delta`` wall seconds and publish the metrics."""
        with self._lock:
            return self._advance(wall_delta)

    def _advance(self, wall_delta: float) -> MetricsSnapshot:
        # caller holds the frame lock
        sim = self.simulation
        sim.tick(wall_delta * sim.config.time_scale)
        self._p95_timer.advance(Second(wall_delta))
        if self._p95_timer.done:
            sim.refresh_p95()
            self._p95_timer.rearm()
        return sim.snapshot_metrics(refresh=False)

    def run(self, duration: Time | float | None = None) -> MetricsSnapshot:
        """Drive the simulation until :meth:`stop` or ``duration`` wall seconds.

        The stop flag is checked under the frame lock right before each
        tick, so a :meth:`reset` issued while the loop sleeps is never
        followed by a tick of the fresh simulation.

        Returns:
            MetricsSnapshot: Metrics of the simulation when the loop ended.
        """
        self._stop.clear()
        started = last = self._clock()
        limit = None if duration is None else float(duration)
        snapshot = self.simulation.snapshot_metrics(refresh=False)

        with Live(self.render(snapshot), console=self.console, auto_refresh=False) as live:
            while not self._stop.is_set():
                self._sleep(self.frame_interval)
                now = self._clock()
                with self._lock:
                    if self._stop.is_set():
                        break
                    snapshot = self._advance(now - last)
                last = now
                live.update(self.render(snapshot), refresh=True)
                if limit is not None and now - started >= limit:
                    break
        self._stop.set()
        with self._lock:
            return self.simulation.snapshot_metrics(refresh=False)

    def stop(self) -> None:
        self._stop.set()

    def reset(self) -> None:
        """Stop the loop, then reset the simulation and the P95 cadence."""
        self.stop()
        with self._lock:
            self.simulation.reset()
            self._p95_timer.reset()

    def set_time_scale(self, time_scale: float) -> None:
        with self._lock:
            self.simulation.configure(time_scale=time_scale)

    def render(self, snapshot: MetricsSnapshot) -> Panel:
        config = self.simulation.config
        t = Table.grid(padding=(0, 2))
        t.add_row("[b]Clock[/b]: ", str(ClockTime(snapshot.now)))
        t.add_row("[b]Time Scale[/b]: ", f"x{config.time_scale:g}")
        t.add_row(
            "[b]Active Drones[/b]: ", f"{snapshot.active_vehicles} / {config.fleet_size}"
        )

        t.add_section()
        t.add_row("[b]Average Wait[/b]: ", f"{snapshot.average_wait:.1f} s")
        t.add_row("[b]P95 Wait[/b]: ", f"{snapshot.p95_wait:.1f} s")
        t.add_row("[b]Average Delivery Time[/b]: ", f"{snapshot.average_delivery:.1f} s")

        t.add_section()
        t.add_row("[b]Created Orders[/b]: ", str(snapshot.created))
        t.add_row("[b]Rejected Out Of Range[/b]: ", str(snapshot.attempted - snapshot.created))
        t.add_row("[b]Completed Orders[/b]: ", str(snapshot.completed))
        t.add_row("[b]Queue Size[/b]: ", str(snapshot.queue_size))
        t.add_row(
            "[b]Actual Rate[/b]: ",
            f"{snapshot.actual_rate_per_hour:.1f} / {config.orders_per_hour:g} per hour",
        )

        return Panel(t, title="Fleet State", padding=(1, 2))
