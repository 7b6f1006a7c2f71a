"""Operating constants and the validated fleet configuration.

The module-level constants are the defaults of a fresh simulation, written
with the unit system so their scale is explicit. :class:`FleetConfig` carries
the same values as plain floats in the units the engine computes with
(seconds, kilometres, km/h) and validates every field on construction.

Example:
    >>> from dronefleet.config import FleetConfig
    >>> from dronefleet.unit import Minute
    >>> config = FleetConfig().replace(fleet_size=25, load_seconds=Minute(2))
    >>> config.load_seconds
    120.0
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from math import isfinite
from numbers import Integral
from typing import Any

from dronefleet.errors import ConfigurationError
from dronefleet.geo import GeoPoint
from dronefleet.unit import Hour, Kilometer, KilometersPerHour, Second, UnitFloat

# Depot
DEPOT = GeoPoint.from_deg(37.5665, 126.9780)

# Fleet Configuration
FLEET_SIZE = 10
MAX_FLEET_SIZE = 1000
DRONE_VELOCITY = KilometersPerHour(60)

# Job durations
LOAD_TIME = Second(60)
SERVICE_TIME = Second(30)
TURNAROUND_TIME = Second(120)

# Demand
AVERAGE_RADIUS = Kilometer(3)
MAX_RANGE = Kilometer(8)
PLANAR_LIMIT = Kilometer(50)
ORDERS_PER_HOUR = 60.0

# Clock
TIME_SCALE = 1.0
DT = Second(1)
SEARCH_HORIZON = Hour(8)

# Statistics
P95_WINDOW = 2000
HISTORY_CAPACITY = 10_000
P95_REFRESH_INTERVAL = Second(0.25)


_FIELD_UNITS: dict[str, type[UnitFloat]] = {
    "speed_kmh": KilometersPerHour,
    "load_seconds": Second,
    "service_seconds": Second,
    "turnaround_seconds": Second,
    "average_radius_km": Kilometer,
    "max_range_km": Kilometer,
}


def _in(value: UnitFloat, unit: type[UnitFloat]) -> float:
    # drop float noise from scale round-trips such as km/h -> m/s -> km/h
    return round(value.to(unit), 9)


@dataclass(frozen=True)
class FleetConfig:
    """Validated simulation options.

    Attributes:
        fleet_size: Number of drones, 1..MAX_FLEET_SIZE.
        speed_kmh: Cruise speed, > 0.
        load_seconds: Loading time at the depot, >= 0.
        service_seconds: Hand-over time at the target, >= 0.
        turnaround_seconds: Ground time after landing back, >= 0.
        average_radius_km: Mean delivery distance, > 0.
        max_range_km: Operating range; targets beyond it are rejected, > 0.
        orders_per_hour: Target arrival rate, >= 0.
        time_scale: Simulated seconds per wall second in live mode, > 0.
        depot: Position of the single depot.

    Raises:
        ConfigurationError: On construction with an invalid field.
    """

    fleet_size: int = FLEET_SIZE
    speed_kmh: float = _in(DRONE_VELOCITY, KilometersPerHour)
    load_seconds: float = float(LOAD_TIME)
    service_seconds: float = float(SERVICE_TIME)
    turnaround_seconds: float = float(TURNAROUND_TIME)
    average_radius_km: float = _in(AVERAGE_RADIUS, Kilometer)
    max_range_km: float = _in(MAX_RANGE, Kilometer)
    orders_per_hour: float = ORDERS_PER_HOUR
    time_scale: float = TIME_SCALE
    depot: GeoPoint = DEPOT

    def __post_init__(self):
        for name in _FIELD_UNITS:
            value = getattr(self, name)
            if isinstance(value, UnitFloat):
                object.__setattr__(self, name, _normalize(name, value))

        fleet_size = self.fleet_size
        if isinstance(fleet_size, bool) or not isinstance(fleet_size, int):
            raise ConfigurationError("fleet_size", f"expected an integer, got {fleet_size!r}")
        if not 1 <= fleet_size <= MAX_FLEET_SIZE:
            raise ConfigurationError("fleet_size", f"must be within 1..{MAX_FLEET_SIZE}")
        if not isinstance(self.depot, GeoPoint):
            raise ConfigurationError("depot", "expected a GeoPoint")

        _check_number("speed_kmh", self.speed_kmh, positive=True)
        _check_number("load_seconds", self.load_seconds, positive=False)
        _check_number("service_seconds", self.service_seconds, positive=False)
        _check_number("turnaround_seconds", self.turnaround_seconds, positive=False)
        _check_number("average_radius_km", self.average_radius_km, positive=True)
        _check_number("max_range_km", self.max_range_km, positive=True)
        _check_number("orders_per_hour", self.orders_per_hour, positive=False)
        _check_number("time_scale", self.time_scale, positive=True)
        if self.max_range_km > PLANAR_LIMIT.to(Kilometer):
            raise ConfigurationError(
                "max_range_km", f"planar distances are only valid up to {PLANAR_LIMIT}"
            )

    @property
    def fixed_seconds(self) -> float:
        """Load, service and turnaround time of every job."""
        return self.load_seconds + self.service_seconds + self.turnaround_seconds

    def replace(self, **options: Any) -> FleetConfig:
        """Return a copy with ``options`` applied.

        Durations, distances and speeds accept unit values (``Minute(2)``,
        ``Kilometer(5)``, ``MeterPerSecond(15)``) as well as plain numbers in
        the field's own unit.

        Raises:
            ConfigurationError: For unknown options or invalid values. The
                receiver is never modified.
        """
        known = {f.name for f in fields(self)}
        changes = {}
        for name, value in options.items():
            if name not in known:
                raise ConfigurationError(name, "unknown option")
            changes[name] = _normalize(name, value)
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _normalize(name: str, value: Any) -> Any:
    if name == "fleet_size" and isinstance(value, Integral) and not isinstance(value, bool):
        return int(value)
    unit = _FIELD_UNITS.get(name)
    if unit is not None and isinstance(value, UnitFloat):
        try:
            return _in(value, unit)
        except TypeError as exc:
            raise ConfigurationError(name, str(exc)) from exc
    if name in ("orders_per_hour", "time_scale") or unit is not None:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ConfigurationError(name, f"expected a number, got {value!r}")
        return float(value)
    return value


def _check_number(name: str, value: float, *, positive: bool) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float) or not isfinite(value):
        raise ConfigurationError(name, f"expected a finite number, got {value!r}")
    if positive and value <= 0:
        raise ConfigurationError(name, "must be > 0")
    if not positive and value < 0:
        raise ConfigurationError(name, "must be >= 0")
