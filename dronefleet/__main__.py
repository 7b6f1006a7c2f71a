"""Command line entry point: ``python -m dronefleet {live,batch,search}``."""

from __future__ import annotations

import argparse
import sys

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from dronefleet.config import (
    DEPOT,
    MAX_FLEET_SIZE,
    SEARCH_HORIZON,
    FleetConfig,
)
from dronefleet.errors import ConfigurationError
from dronefleet.geo import GeoPoint
from dronefleet.simulator import (
    CONSOLE,
    FleetSimulation,
    LiveRunner,
    evaluate_fleet_size,
    find_minimum_fleet_size,
)
from dronefleet.stats import MetricsSnapshot

_OPTION_FIELDS = (
    "fleet_size",
    "speed_kmh",
    "load_seconds",
    "service_seconds",
    "turnaround_seconds",
    "average_radius_km",
    "max_range_km",
    "orders_per_hour",
    "time_scale",
)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    group = common.add_argument_group("fleet options")
    group.add_argument("--fleet-size", type=int, help="number of drones (1..%d)" % MAX_FLEET_SIZE)
    group.add_argument("--speed-kmh", type=float, help="cruise speed in km/h")
    group.add_argument("--load-seconds", type=float, help="loading time at the depot")
    group.add_argument("--service-seconds", type=float, help="hand-over time at the target")
    group.add_argument("--turnaround-seconds", type=float, help="ground time after landing")
    group.add_argument("--average-radius-km", type=float, help="mean delivery distance")
    group.add_argument("--max-range-km", type=float, help="operating range")
    group.add_argument("--orders-per-hour", type=float, help="target arrival rate")
    group.add_argument("--time-scale", type=float, help="simulated seconds per wall second")
    group.add_argument(
        "--depot", nargs=2, type=float, metavar=("LAT", "LON"),
        help="depot position in degrees (default %.4f %.4f)" % (DEPOT.lat_deg, DEPOT.lon_deg),
    )
    group.add_argument("--seed", type=int, default=0, help="random seed (default 0)")

    parser = argparse.ArgumentParser(
        prog="dronefleet", description="Single-depot drone fleet simulator"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    live = sub.add_parser("live", parents=[common], help="run against the wall clock")
    live.add_argument("--duration", type=float, default=None, help="wall seconds to run")

    batch = sub.add_parser("batch", parents=[common], help="offline run to a horizon")
    batch.add_argument(
        "--horizon", type=float, default=float(SEARCH_HORIZON), help="simulated seconds"
    )
    batch.add_argument("--step", type=float, default=1.0, help="tick length in seconds")
    batch.add_argument("--export", metavar="PATH", help="write completed orders to CSV")

    search = sub.add_parser("search", parents=[common], help="minimum fleet size for a P95")
    search.add_argument("--target-p95", type=float, required=True, help="P95 wait to beat")
    search.add_argument(
        "--horizon", type=float, default=float(SEARCH_HORIZON), help="simulated seconds"
    )
    search.add_argument("--step", type=float, default=1.0, help="tick length in seconds")
    search.add_argument("--low", type=int, default=1)
    search.add_argument("--high", type=int, default=MAX_FLEET_SIZE)
    return parser


def config_from_args(args: argparse.Namespace) -> FleetConfig:
    options = {
        name: getattr(args, name) for name in _OPTION_FIELDS if getattr(args, name) is not None
    }
    if args.depot is not None:
        options["depot"] = GeoPoint.from_deg(*args.depot)
    return FleetConfig().replace(**options)


def metrics_table(snapshot: MetricsSnapshot, title: str = "Metrics") -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Simulated time", f"{snapshot.now:.0f} s")
    table.add_row("Average wait", f"{snapshot.average_wait:.1f} s")
    table.add_row("P95 wait", f"{snapshot.p95_wait:.1f} s")
    table.add_row("Average delivery", f"{snapshot.average_delivery:.1f} s")
    table.add_row("Attempted", str(snapshot.attempted))
    table.add_row("Created", str(snapshot.created))
    table.add_row("Completed", str(snapshot.completed))
    table.add_row("Active drones", str(snapshot.active_vehicles))
    table.add_row("Actual rate", f"{snapshot.actual_rate_per_hour:.2f} / h")
    return table


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        CONSOLE.print(f"[red]Invalid option[/red] {exc}")
        return 2

    if args.command == "live":
        with FleetSimulation(config, seed=args.seed) as sim:
            runner = LiveRunner(sim)
            try:
                snapshot = runner.run(args.duration)
            except KeyboardInterrupt:
                runner.stop()
                snapshot = sim.snapshot_metrics()
        CONSOLE.print(metrics_table(snapshot, "Live Run"))
        return 0

    if args.command == "batch":
        with FleetSimulation(config, seed=args.seed, record_segments=False) as sim:
            with CONSOLE.status("[green]Running simulation..."):
                snapshot = sim.run_to_horizon(args.horizon, args.step)
            CONSOLE.print(metrics_table(snapshot, "Batch Run"))
            if args.export:
                rows = sim.export_completed_orders_csv(args.export)
                CONSOLE.print(f"[green]Exported[/green] {rows} orders to {args.export}")
        return 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=40),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=CONSOLE,
    ) as progress:
        try:
            size = find_minimum_fleet_size(
                args.target_p95, args.horizon, config,
                low=args.low, high=args.high, step=args.step, seed=args.seed,
                progress=progress,
            )
        except ConfigurationError as exc:
            CONSOLE.print(f"[red]Invalid option[/red] {exc}")
            return 2
    note = ""
    if size == args.high:
        # the search never probes its ceiling
        ceiling = evaluate_fleet_size(size, args.horizon, config, args.step, args.seed)
        met = ceiling.p95_wait < args.target_p95
        note = " (search ceiling, target met)" if met else " (search ceiling, target not met)"
    CONSOLE.print(
        f"Minimum fleet size for P95 < {args.target_p95:g} s: [bold]{size}[/bold]{note}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
