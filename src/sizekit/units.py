"""
Core Size Value Objects

Defines the unit vocabulary and the immutable (value, unit) pair every
other layer of the engine works with.

ARCHITECTURAL RULE:
    SizeValue is immutable.
    Conversion, scaling and parsing always return a NEW SizeValue.
    Nothing in the engine mutates one in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Union


class SizeUnit(Enum):
    """
    CSS length units understood by the engine.

    Absolute units (px, rem, em, pt) convert through a pixel basis.
    Relative units (%, vw, vh, vmin, vmax) need layout context the
    engine does not have, so conversions touching them pass the
    numeric value through unchanged.
    """

    PX = "px"
    REM = "rem"
    EM = "em"
    VW = "vw"
    VH = "vh"
    PERCENT = "%"
    PT = "pt"
    VMIN = "vmin"
    VMAX = "vmax"

    def __str__(self) -> str:
        return self.value

    @property
    def is_absolute(self) -> bool:
        return self in ABSOLUTE_UNITS


ABSOLUTE_UNITS: FrozenSet[SizeUnit] = frozenset(
    {SizeUnit.PX, SizeUnit.REM, SizeUnit.EM, SizeUnit.PT}
)

RELATIVE_UNITS: FrozenSet[SizeUnit] = frozenset(
    {SizeUnit.PERCENT, SizeUnit.VW, SizeUnit.VH, SizeUnit.VMIN, SizeUnit.VMAX}
)


@dataclass(frozen=True)
class SizeValue:
    """
    Immutable numeric size with its unit.

    Examples:
        SizeValue(16, SizeUnit.PX)   -> 16px
        SizeValue(1.5, "rem")        -> 1.5rem (unit string is coerced)

    Properties:
        value: Numeric magnitude (may be NaN/inf; never validated here)
        unit: SizeUnit

    IMPORTANT:
        Validity is the caller's concern.
        Use conversion.is_valid_size() or Size.is_valid() when it matters.
    """

    value: float
    unit: SizeUnit = SizeUnit.PX

    def __post_init__(self) -> None:
        if not isinstance(self.unit, SizeUnit):
            object.__setattr__(self, "unit", SizeUnit(self.unit))


# Anything parse_size_input() accepts
SizeInput = Union[int, float, str, SizeValue]

ZERO_PX = SizeValue(0, SizeUnit.PX)
ONE_PX = SizeValue(1, SizeUnit.PX)
