"""Offline evaluation of fleet sizes.

Every probe is an independent :class:`FleetSimulation` run to a fixed
horizon with segment recording off and the same seed, so two probes differ
only in fleet size. Probes share nothing, which lets :func:`sweep_fleet_sizes`
run them on a thread pool.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from rich.progress import Progress

from dronefleet.config import DT, MAX_FLEET_SIZE, SEARCH_HORIZON, FleetConfig
from dronefleet.errors import ConfigurationError
from dronefleet.stats import MetricsSnapshot
from dronefleet.unit import Time

from .scheduler import HeapSelector
from .simulation import FleetSimulation


def evaluate_fleet_size(
    fleet_size: int,
    horizon: Time | float = SEARCH_HORIZON,
    config: FleetConfig | None = None,
    step: Time | float = DT,
    seed: int | None = 0,
) -> MetricsSnapshot:
    """Run one offline simulation and return its final metrics."""
    base = config if config is not None else FleetConfig()
    with FleetSimulation(
        base.replace(fleet_size=fleet_size),
        seed=seed,
        selector_factory=HeapSelector,
        record_segments=False,
    ) as sim:
        return sim.run_to_horizon(horizon, step)


def find_minimum_fleet_size(
    target_p95: Time | float,
    horizon: Time | float = SEARCH_HORIZON,
    config: FleetConfig | None = None,
    low: int = 1,
    high: int = MAX_FLEET_SIZE,
    step: Time | float = DT,
    seed: int | None = 0,
    progress: Progress | None = None,
) -> int:
    """Smallest fleet in ``[low, high]`` whose P95 wait is below the target.

    Binary search assuming the P95 does not grow with the fleet. A size
    meets the target when its P95 is strictly below ``target_p95``; if no
    probe does, the ceiling ``high`` is returned. A target of zero is
    therefore always answered with ``high``.

    Args:
        target_p95: Wait time to beat, in seconds.
        horizon: Simulated length of every probe.
        config: Options shared by all probes; ``fleet_size`` is overridden.
        low: Search floor.
        high: Search ceiling.
        step: Tick length of the offline runs.
        seed: Seed shared by all probes.
        progress: Rich progress to report probes to.

    Raises:
        ConfigurationError: If the bounds are outside 1..MAX_FLEET_SIZE or
            reversed.
    """
    if not 1 <= low <= high <= MAX_FLEET_SIZE:
        raise ConfigurationError(
            "fleet_size", f"search bounds {low}..{high} must lie within 1..{MAX_FLEET_SIZE}"
        )
    target = float(target_p95)

    task = None
    probes = (high - low).bit_length()
    if progress is not None:
        task = progress.add_task(
            f"[green]Searching fleet size for P95 < {target:g} s...", total=probes
        )

    lo, hi = low, high
    while lo < hi:
        mid = (lo + hi) // 2
        snapshot = evaluate_fleet_size(mid, horizon, config, step, seed)
        if snapshot.p95_wait < target:
            hi = mid
        else:
            lo = mid + 1
        if progress is not None:
            progress.advance(task)
            progress.update(task, description=f"[green]Fleet {mid}: P95 {snapshot.p95_wait:.1f} s")

    if progress is not None:
        progress.update(task, completed=probes)
    return lo


def sweep_fleet_sizes(
    sizes: Iterable[int],
    horizon: Time | float = SEARCH_HORIZON,
    config: FleetConfig | None = None,
    j: int = 1,
    step: Time | float = DT,
    seed: int | None = 0,
) -> dict[int, MetricsSnapshot]:
    """Evaluate several fleet sizes, ``j`` at a time.

    Returns:
        dict[int, MetricsSnapshot]: Final metrics keyed by fleet size, in the
        order the sizes were given.
    """
    sizes = list(dict.fromkeys(sizes))
    if j == 1:
        return {size: evaluate_fleet_size(size, horizon, config, step, seed) for size in sizes}
    with ThreadPoolExecutor(j, "FleetSweepWorker") as executor:
        futures = {
            size: executor.submit(evaluate_fleet_size, size, horizon, config, step, seed)
            for size in sizes
        }
        return {size: future.result() for size, future in futures.items()}
