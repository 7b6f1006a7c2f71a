"""Simulation engine: scheduling, completions, the run context and its drivers.

Components:
    FleetSimulation: Explicit simulation context (configure / reset / tick / close)
    FleetScheduler: Greedy earliest-available assignment
    VehicleSelector: Earliest-available policy (LinearScanSelector, HeapSelector)
    CompletionTracker: Min-heap of pending completions
    LiveRunner: Wall-clock driver with a rich live panel
    find_minimum_fleet_size / sweep_fleet_sizes: Offline fleet-size evaluation

The plotting helpers live in :mod:`dronefleet.simulator.analyze` and are not
imported here, so the engine does not pull in matplotlib.
"""

from .live import CONSOLE, LiveRunner
from .scheduler import FleetScheduler, HeapSelector, LinearScanSelector, VehicleSelector
from .search import evaluate_fleet_size, find_minimum_fleet_size, sweep_fleet_sizes
from .simulation import RECORD_COLUMNS, FleetSimulation
from .tracker import CompletionTracker

__all__ = [
    "FleetSimulation",
    "FleetScheduler",
    "VehicleSelector",
    "LinearScanSelector",
    "HeapSelector",
    "CompletionTracker",
    "LiveRunner",
    "CONSOLE",
    "evaluate_fleet_size",
    "find_minimum_fleet_size",
    "sweep_fleet_sizes",
    "RECORD_COLUMNS",
]
