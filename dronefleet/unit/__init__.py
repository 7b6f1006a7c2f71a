"""Type-safe physical units for fleet configuration and reporting.

Values are floats stored in SI, tagged with a unit family so that lengths,
durations, velocities and angles cannot be mixed by accident.

Families:
    - Length: Meter (root), Kilometer
    - Time: Second (root), Minute, Hour, ClockTime
    - Velocity: MeterPerSecond (root), KilometersPerHour
    - Angle: Radian (root), Degree

Example:
    >>> from dronefleet.unit import Kilometer, KilometersPerHour, Second
    >>> radius = Kilometer(3)
    >>> speed = KilometersPerHour(60)
    >>> one_way = Second(radius.to(Kilometer) / speed.to(KilometersPerHour) * 3600)
    >>> str(one_way)
    '180 s'
"""

from .unit_angle import Angle, Degree, Radian
from .unit_base import Unit
from .unit_distance import Kilometer, Length, Meter
from .unit_float import UnitFloat
from .unit_time import ClockTime, Hour, Minute, Second, Time
from .unit_velocity import KilometersPerHour, MeterPerSecond, Velocity

__all__ = [
    # Base classes
    "Unit",
    "UnitFloat",
    # Angular units
    "Radian",
    "Degree",
    "Angle",
    # Distance units
    "Meter",
    "Kilometer",
    "Length",
    # Time units
    "Second",
    "Minute",
    "Hour",
    "ClockTime",
    "Time",
    # Velocity units
    "MeterPerSecond",
    "KilometersPerHour",
    "Velocity",
]
