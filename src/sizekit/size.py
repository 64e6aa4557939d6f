"""
Size — arithmetic and comparison facade over SizeValue.

A Size wraps one SizeValue, the root font size used for rem/em math and
a handful of memoized derived values. Every operation returns a NEW Size;
the receiver is never modified (pool reset aside).

POOLING:
    A Size drawn from a SizePool is "pool-managed". Its transient operands
    (add/subtract/equals) are borrowed from the same pool and returned
    immediately, and its results are pool-managed too. Call dispose()
    when done with a pool-managed Size; using it afterwards is a bug.

ERROR POLICY:
    divide(0) raises DivisionByZeroError.
    Every other operation is total and returns a defined Size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from sizekit.constants import DEFAULT_ROOT_FONT_SIZE, PERFORMANCE_CONFIG
from sizekit.conversion import (
    add_sizes,
    clamp_size,
    convert_size,
    format_size,
    parse_size_input,
    round_size,
    scale_size,
    subtract_sizes,
)
from sizekit.errors import DivisionByZeroError
from sizekit.units import SizeUnit, SizeValue

if TYPE_CHECKING:
    from sizekit.context import SizeContext

EPSILON = PERFORMANCE_CONFIG["EPSILON"]


@dataclass
class SizeFlags:
    """
    Bookkeeping state of one Size instance.

    Properties:
        pooled: Instance is managed by a SizePool
        pixels_cached: `pixels` has been computed since the last reset
        rem_cached: `rem` has been computed since the last reset
        in_pool: Instance currently sits in the pool's free list
    """

    pooled: bool = False
    pixels_cached: bool = False
    rem_cached: bool = False
    in_pool: bool = False


class Size:
    """
    CSS size with unit-aware arithmetic.

    Example:
        ctx = SizeContext()
        Size(16, ctx).to_rem()           -> SizeValue(1.0, rem)
        Size("1rem", ctx).add("8px")     -> 1.5rem
    """

    __slots__ = ("_value", "_root_font_size", "_context", "_flags",
                 "_cached_pixels", "_cached_rem")

    def __init__(
        self,
        raw: Any = 0,
        context: Optional[SizeContext] = None,
        root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
    ) -> None:
        if context is None:
            from sizekit.context import SizeContext
            context = SizeContext()
        self._context = context
        self._flags = SizeFlags()
        self._cached_pixels: Optional[float] = None
        self._cached_rem: Optional[float] = None
        self._value = self._parse(raw)
        self._root_font_size = root_font_size

    def reset(self, raw: Any = 0, root_font_size: float = DEFAULT_ROOT_FONT_SIZE) -> None:
        """Re-initialize in place. Only the pool calls this."""
        self._value = self._parse(raw)
        self._root_font_size = root_font_size
        self._flags = SizeFlags(pooled=True)
        self._cached_pixels = None
        self._cached_rem = None

    def _prepare_for_pool(self) -> None:
        self._value = SizeValue(0, SizeUnit.PX)
        self._root_font_size = DEFAULT_ROOT_FONT_SIZE
        self._flags = SizeFlags(pooled=True)
        self._cached_pixels = None
        self._cached_rem = None

    def _parse(self, raw: Any) -> SizeValue:
        if isinstance(raw, Size):
            return raw._value
        return parse_size_input(raw, self._context.parse_cache)

    def _new(self, value: SizeValue) -> Size:
        return Size(value, self._context, self._root_font_size)

    def _borrow(self, raw: Any) -> Size:
        return self._context.pool.acquire(self._parse(raw), self._root_font_size)

    def _result(self, value: SizeValue) -> Size:
        if self._flags.pooled:
            return self._context.pool.acquire(value, self._root_font_size)
        return self._new(value)

    def _convert(self, value: SizeValue, unit: SizeUnit) -> SizeValue:
        return convert_size(value, unit, self._root_font_size, self._context.conversion_cache)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def value(self) -> float:
        return self._value.value

    @property
    def unit(self) -> SizeUnit:
        return self._value.unit

    @property
    def size_value(self) -> SizeValue:
        return self._value

    @property
    def root_font_size(self) -> float:
        return self._root_font_size

    @property
    def context(self) -> SizeContext:
        return self._context

    @property
    def flags(self) -> SizeFlags:
        return self._flags

    @property
    def is_pooled(self) -> bool:
        return self._flags.pooled

    @property
    def pixels(self) -> float:
        if not self._flags.pixels_cached:
            self._cached_pixels = self.to_pixels().value
            self._flags.pixels_cached = True
        return self._cached_pixels

    @property
    def rem(self) -> float:
        if not self._flags.rem_cached:
            self._cached_rem = self.to_rem().value
            self._flags.rem_cached = True
        return self._cached_rem

    @property
    def em(self) -> float:
        return self.to_em().value

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def to(self, unit: SizeUnit) -> SizeValue:
        return self._convert(self._value, SizeUnit(unit))

    def to_pixels(self) -> SizeValue:
        return self.to(SizeUnit.PX)

    def to_rem(self) -> SizeValue:
        return self.to(SizeUnit.REM)

    def to_em(self) -> SizeValue:
        return self.to(SizeUnit.EM)

    def to_viewport_width(self) -> SizeValue:
        return self.to(SizeUnit.VW)

    def to_viewport_height(self) -> SizeValue:
        return self.to(SizeUnit.VH)

    def to_percentage(self) -> SizeValue:
        return self.to(SizeUnit.PERCENT)

    def value_of(self, unit: Optional[SizeUnit] = None) -> float:
        """Numeric value, optionally in another unit."""
        if unit is None or SizeUnit(unit) == self.unit:
            return self.value
        return self.to(unit).value

    def to_css(self) -> str:
        return format_size(self._value, self._context.format_cache)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "unit": self.unit.value,
            "pixels": self.pixels,
            "rem": self.rem,
            "string": self.to_css(),
        }

    def __str__(self) -> str:
        return self.to_css()

    def __repr__(self) -> str:
        return f"Size({self.value!r}, unit={self.unit.value!r})"

    # =========================================================================
    # ARITHMETIC
    # =========================================================================

    def scale(self, factor: float) -> Size:
        return self._new(scale_size(self._value, factor))

    def increase(self, percentage: float) -> Size:
        return self.scale(1 + percentage / 100)

    def decrease(self, percentage: float) -> Size:
        return self.scale(1 - percentage / 100)

    def add(self, other: Any) -> Size:
        """Add another size, expressed in this size's unit."""
        if self._flags.pooled:
            operand = self._borrow(other)
            result = add_sizes(self._value, operand.size_value,
                               self._root_font_size, self._context.conversion_cache)
            operand.dispose()
        else:
            result = add_sizes(self._value, self._parse(other),
                               self._root_font_size, self._context.conversion_cache)
        return self._result(result)

    def subtract(self, other: Any) -> Size:
        """Subtract another size, expressed in this size's unit."""
        if self._flags.pooled:
            operand = self._borrow(other)
            result = subtract_sizes(self._value, operand.size_value,
                                    self._root_font_size, self._context.conversion_cache)
            operand.dispose()
        else:
            result = subtract_sizes(self._value, self._parse(other),
                                    self._root_font_size, self._context.conversion_cache)
        return self._result(result)

    def multiply(self, factor: float) -> Size:
        return self.scale(factor)

    def divide(self, divisor: float) -> Size:
        """
        Divide by a number.

        Raises:
            DivisionByZeroError: If divisor is zero
        """
        if divisor == 0:
            raise DivisionByZeroError("Cannot divide a size by zero")
        return self.scale(1 / divisor)

    def negate(self) -> Size:
        return self.scale(-1)

    def abs(self) -> Size:
        if self.value < 0:
            return self.negate()
        return self.clone()

    def round(self, precision: int = PERFORMANCE_CONFIG["DECIMAL_PRECISION"]) -> Size:
        return self._new(round_size(self._value, precision))

    def clamp(self, minimum: Any = None, maximum: Any = None) -> Size:
        low = None if minimum is None else self._parse(minimum)
        high = None if maximum is None else self._parse(maximum)
        return self._new(clamp_size(self._value, low, high,
                                    self._root_font_size, self._context.conversion_cache))

    def calculate(
        self,
        precision: Optional[int] = None,
        unit: Optional[SizeUnit] = None,
        minimum: Any = None,
        maximum: Any = None,
    ) -> Size:
        """Apply rounding, then unit conversion, then clamping."""
        result = self.clone()
        if precision is not None:
            result = result.round(precision)
        if unit is not None:
            result = self._new(result.to(unit))
        if minimum is not None or maximum is not None:
            result = result.clamp(minimum, maximum)
        return result

    def interpolate(self, to: Any, factor: float) -> Size:
        """
        Linear interpolation towards `to`.

        Always computed in pixels, then expressed in this size's unit,
        so repeated calls against the same base stay unit-stable.
        """
        target_px = self._convert(self._parse(to), SizeUnit.PX).value
        start_px = self.to_pixels().value
        blended = SizeValue(start_px + (target_px - start_px) * factor, SizeUnit.PX)
        return self._new(self._convert(blended, self.unit))

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def _pixels_of(self, other: Any) -> float:
        return self._convert(self._parse(other), SizeUnit.PX).value

    def equals(self, other: Any) -> bool:
        """Equal within 0.001, compared directly when units match, else in pixels."""
        other_value = self._parse(other)
        if other_value.unit == self.unit:
            return abs(other_value.value - self.value) < EPSILON

        operand = self._borrow(other_value)
        try:
            return abs(self.pixels - operand.pixels) < EPSILON
        finally:
            operand.dispose()

    def greater_than(self, other: Any) -> bool:
        return self.pixels > self._pixels_of(other)

    def greater_than_or_equal(self, other: Any) -> bool:
        return self.greater_than(other) or self.equals(other)

    def less_than(self, other: Any) -> bool:
        return self.pixels < self._pixels_of(other)

    def less_than_or_equal(self, other: Any) -> bool:
        return self.less_than(other) or self.equals(other)

    def compare(self, other: Any) -> int:
        """-1, 0 or 1, treating sizes within 0.001 as equal."""
        if self.equals(other):
            return 0
        return -1 if self.less_than(other) else 1

    def min(self, other: Any) -> Size:
        if self.less_than(other):
            return self.clone()
        return self._new(self._parse(other))

    def max(self, other: Any) -> Size:
        if self.greater_than(other):
            return self.clone()
        return self._new(self._parse(other))

    # =========================================================================
    # LIFECYCLE & PREDICATES
    # =========================================================================

    def clone(self) -> Size:
        if self._flags.pooled:
            return self._context.pool.acquire(self._value, self._root_font_size)
        return self._new(self._value)

    def dispose(self) -> None:
        """Hand a pool-managed instance back to its pool."""
        if self._flags.pooled:
            self._context.pool.release(self)

    def is_zero(self) -> bool:
        return abs(self.value) < EPSILON

    def is_positive(self) -> bool:
        return self.value > 0

    def is_negative(self) -> bool:
        return self.value < 0

    def is_valid(self) -> bool:
        return math.isfinite(self.value)

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def __add__(self, other: Any) -> Size:
        return self.add(other)

    def __sub__(self, other: Any) -> Size:
        return self.subtract(other)

    def __mul__(self, factor: Any) -> Size:
        if isinstance(factor, (int, float)) and not isinstance(factor, bool):
            return self.multiply(factor)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, divisor: Any) -> Size:
        if isinstance(divisor, (int, float)) and not isinstance(divisor, bool):
            return self.divide(divisor)
        return NotImplemented

    def __neg__(self) -> Size:
        return self.negate()

    def __abs__(self) -> Size:
        return self.abs()

    def __lt__(self, other: Any) -> bool:
        return self.less_than(other)

    def __le__(self, other: Any) -> bool:
        return self.less_than_or_equal(other)

    def __gt__(self, other: Any) -> bool:
        return self.greater_than(other)

    def __ge__(self, other: Any) -> bool:
        return self.greater_than_or_equal(other)

    # =========================================================================
    # CSS EXPRESSIONS
    # =========================================================================

    @staticmethod
    def css_calc(expression: str) -> str:
        return f"calc({expression})"

    @staticmethod
    def css_min(*sizes: Any) -> str:
        return f"min({', '.join(format_size(parse_size_input(s)) for s in sizes)})"

    @staticmethod
    def css_max(*sizes: Any) -> str:
        return f"max({', '.join(format_size(parse_size_input(s)) for s in sizes)})"

    @staticmethod
    def css_clamp(minimum: Any, preferred: Any, maximum: Any) -> str:
        parts = (format_size(parse_size_input(s)) for s in (minimum, preferred, maximum))
        return f"clamp({', '.join(parts)})"
