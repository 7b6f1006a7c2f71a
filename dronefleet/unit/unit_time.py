"""Time units for durations and the simulation clock.

``Second`` is the SI root. ``ClockTime`` is a second count rendered as
``HH:MM:SS.mmm``, which is how the live panel shows the simulation clock.

Example:
    >>> Minute(2) + Second(30)
    Minute(2.5)
    >>> str(ClockTime(3725.5))
    '01:02:05.500'
"""

from __future__ import annotations

from math import isfinite

from .unit_float import UnitFloat


class Second(UnitFloat):
    """Duration in seconds (SI root of the time family)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "s"


class Minute(Second):
    """Duration in minutes."""

    SCALE_TO_SI = 60.0
    SYMBOL = "min"


class Hour(Second):
    """Duration in hours."""

    SCALE_TO_SI = 3600.0
    SYMBOL = "h"


class ClockTime(Second):
    """Simulation clock reading, displayed as elapsed ``HH:MM:SS.mmm``."""

    SCALE_TO_SI = 1.0

    @classmethod
    def from_str(cls, time_str: str) -> ClockTime:
        """Parse an ``HH:MM:SS`` string."""
        h, m, s = map(float, time_str.split(":"))
        return cls(h * 3600 + m * 60 + s)

    def __str__(self) -> str:
        if not isfinite(float(self)):
            return "--:--:--"
        h, r = divmod(float(self), 3600)
        m, s = divmod(r, 60)
        return f"{int(h):02d}:{int(m):02d}:{s:06.3f}"

    def __repr__(self) -> str:
        return f"ClockTime({str(self)})"


Time = Second | Minute | Hour | ClockTime
