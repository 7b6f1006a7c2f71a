"""Velocity units.

Cruise speed is configured in km/h; the flight-time formula of the scheduler
works on the km/h value directly (``distance_km / speed_kmh * 3600``).
"""

from __future__ import annotations

from .unit_float import UnitFloat


class MeterPerSecond(UnitFloat):
    """Velocity in m/s (SI root of the velocity family)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "m/s"


class KilometersPerHour(MeterPerSecond):
    """Velocity in km/h."""

    SCALE_TO_SI = 1000.0 / 3600.0
    SYMBOL = "km/h"


Velocity = MeterPerSecond | KilometersPerHour
