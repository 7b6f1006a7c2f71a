"""Length units.

Delivery radii and the operating range are configured in kilometres while the
SI value (metres) is what ``float()`` returns.

Example:
    >>> max_range = Kilometer(8)
    >>> float(max_range)
    8000.0
    >>> max_range.to(Kilometer)
    8.0
"""

from __future__ import annotations

from .unit_float import UnitFloat


class Meter(UnitFloat):
    """Length in metres (SI root of the length family)."""

    IS_FAMILY_ROOT = True
    SCALE_TO_SI = 1.0
    SYMBOL = "m"


class Kilometer(Meter):
    """Length in kilometres."""

    SCALE_TO_SI = 1000.0
    SYMBOL = "km"


Length = Meter | Kilometer
