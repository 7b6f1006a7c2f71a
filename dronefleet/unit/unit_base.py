"""Unit family bookkeeping shared by every physical quantity in dronefleet.

Each quantity (length, time, velocity, angle) forms a *family* whose root
class is flagged with ``IS_FAMILY_ROOT``. Subclasses inherit the root through
``__init_subclass__`` so a ``Kilometer`` and a ``Meter`` can be added together
while a ``Kilometer`` and a ``Second`` cannot.

Example:
    >>> class Meter(Unit):
    ...     IS_FAMILY_ROOT = True
    >>> class Kilometer(Meter):
    ...     pass
    >>> Kilometer.ROOT is Meter
    True
"""

from __future__ import annotations

from typing import ClassVar

Number = int | float


class Unit:
    """Base class that resolves the family root of every unit subclass.

    Attributes:
        ROOT (ClassVar[type[Unit]]): Root class of the unit family.
        SYMBOL (ClassVar[str]): Display symbol.
        IS_FAMILY_ROOT (ClassVar[bool]): Marks the base unit of a family.
    """

    __slots__ = ()

    ROOT: ClassVar[type[Unit]]
    SYMBOL: ClassVar[str] = ""
    IS_FAMILY_ROOT: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("IS_FAMILY_ROOT", False):
            cls.ROOT = cls
            return

        for base in cls.mro()[1:]:
            if base.__dict__.get("IS_FAMILY_ROOT", False):
                cls.ROOT = base
                return

        cls.ROOT = cls

    @classmethod
    def _check_family(cls, unit_type: type[Unit]) -> None:
        """Raise ``TypeError`` unless ``unit_type`` shares this unit's family."""
        if cls.ROOT is not unit_type.ROOT:
            msg = f"cannot convert {cls.ROOT.__name__} to {unit_type.ROOT.__name__}"
            raise TypeError(msg)

    @classmethod
    def _check_same_root(cls, other: object) -> None:
        """Reject operations that would mix two unit families.

        Bare numbers are accepted and read as SI values of this family.

        Raises:
            TypeError: If ``other`` is a unit of a different family.
        """
        if isinstance(other, Unit):
            if cls.ROOT is not other.ROOT:
                msg = f"cannot combine {cls.ROOT.__name__} with {other.ROOT.__name__}"
                raise TypeError(msg)
            return
        if not isinstance(other, Number):
            msg = f"unsupported operand {type(other).__name__} for {cls.__name__}"
            raise TypeError(msg)
