"""Float-backed units stored in SI.

``UnitFloat`` subclasses ``float`` so unit values drop straight into ``math``
and ``numpy`` calls. The constructor takes the value in the unit's own scale
and stores it in SI: ``float(Kilometer(8))`` is ``8000.0``.

Arithmetic stays inside one family; a bare number on the other side of an
addition or comparison is read as an SI value, which lets simulation code mix
``Second`` values with plain float clocks.
"""

from __future__ import annotations

from typing import ClassVar

from .unit_base import Number, Unit


class UnitFloat(float, Unit):
    """A float value carrying its unit family.

    Attributes:
        SCALE_TO_SI (ClassVar[float]): Factor from the unit's scale to SI.
    """

    SCALE_TO_SI: ClassVar[float] = 1.0
    IS_FAMILY_ROOT: ClassVar[bool] = True

    def __new__(cls, value: Number):
        return float.__new__(cls, float(value) * cls.SCALE_TO_SI)

    @classmethod
    def from_si(cls, si_value: float) -> UnitFloat:
        """Build an instance from a value that is already in SI."""
        return float.__new__(cls, si_value)

    @classmethod
    def coerce(cls, value: UnitFloat | Number) -> UnitFloat:
        """Return ``value`` as an instance of ``cls``.

        Unit values are converted within their family; bare numbers are taken
        in ``cls``'s own scale, so ``Kilometer.coerce(8)`` is eight kilometres.

        Raises:
            TypeError: If ``value`` belongs to another unit family.
        """
        if isinstance(value, UnitFloat):
            return value.as_unit(cls)
        return cls(value)

    def to(self, unit_type: type[UnitFloat]) -> float:
        """Value expressed in ``unit_type``'s scale, as a plain float."""
        self._check_family(unit_type)
        return float(self) / unit_type.SCALE_TO_SI

    def as_unit(self, unit_type: type[UnitFloat]) -> UnitFloat:
        """Same quantity, re-typed as ``unit_type``."""
        self._check_family(unit_type)
        return unit_type.from_si(float(self))

    # ------------------------------------------------------------------ arithmetic
    def __add__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(self) + float(other))

    __radd__ = __add__

    def __sub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(self) - float(other))

    def __rsub__(self, other: UnitFloat | Number) -> UnitFloat:
        self._check_same_root(other)
        return type(self).from_si(float(other) - float(self))

    def __mul__(self, k: Number) -> UnitFloat:
        if isinstance(k, Unit) or not isinstance(k, Number):
            raise TypeError(f"{type(self).__name__} can only be scaled by a number")
        return type(self).from_si(float(self) * float(k))

    __rmul__ = __mul__

    def __truediv__(self, k: UnitFloat | Number) -> UnitFloat | float:
        """Divide by a scalar, or by a same-family unit to get a plain ratio."""
        if isinstance(k, Unit):
            self._check_same_root(k)
            return float(self) / float(k)
        if not isinstance(k, Number):
            raise TypeError(f"{type(self).__name__} can only be divided by a number")
        return type(self).from_si(float(self) / float(k))

    def __neg__(self) -> UnitFloat:
        return type(self).from_si(-float(self))

    # ------------------------------------------------------------------ comparison
    def __lt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) < float(other)

    def __le__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) <= float(other)

    def __gt__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) > float(other)

    def __ge__(self, other: UnitFloat | Number) -> bool:
        self._check_same_root(other)
        return float(self) >= float(other)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unit) and type(self).ROOT is not other.ROOT:
            return False
        if not isinstance(other, Number):
            return NotImplemented
        return float(self) == float(other)

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = float.__hash__

    def __str__(self) -> str:
        return f"{self.to(type(self)):g} {type(self).SYMBOL}".strip()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to(type(self)):g})"
