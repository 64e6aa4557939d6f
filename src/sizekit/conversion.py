"""
Parsing, formatting and unit conversion for SizeValue.

All functions here are pure apart from the optional cache argument.
The SizeContext passes its own caches in; a caller without a context
may omit them and simply pay for recomputation.

ERROR POLICY:
    Nothing in this module raises on bad input.
    Unparseable input becomes 0px, relative units pass through,
    NaN/inf propagate into the output strings.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, List, Optional

from sizekit.cache import BoundedCache
from sizekit.constants import DEFAULT_ROOT_FONT_SIZE, PT_TO_PX, PX_TO_PT
from sizekit.units import SizeInput, SizeUnit, SizeValue, ZERO_PX


_SIZE_PATTERN = re.compile(r"(-?(?:\d+(?:\.\d+)?|\.\d+))(px|rem|em|vw|vh|%|pt|vmin|vmax)?")
_CAMEL_BOUNDARY = re.compile(r"([A-Z])")
_FIXED_CONTEXT = Context(prec=64)


# =========================================================================
# NUMBER FORMATTING
# =========================================================================

def format_number(value: float) -> str:
    """
    Shortest CSS-safe text for a number.

    16.0 -> "16", 1.5 -> "1.5", nan -> "NaN", inf -> "Infinity"
    """
    if value != value:
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if float(value).is_integer():
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        # positional notation keeps the output parseable as a CSS number
        text = format(Decimal(text), "f")
    return text


def to_fixed(value: float, digits: int) -> str:
    """
    Fixed-point formatting with NaN/Infinity spelled out.

    Ties on the exact binary value round away from zero, so
    0.0625 -> "0.063" and -0.0625 -> "-0.063".
    """
    if value != value or math.isinf(value) or abs(value) >= 1e21:
        return format_number(value)
    if value == 0:
        value = 0.0
    quantum = Decimal(1).scaleb(-digits)
    fixed = Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT)
    return format(fixed, "f")


def round_half_up(value: float, precision: int = 2) -> float:
    """Round halves towards +inf (CSS tooling convention, not banker's rounding)."""
    if value != value or math.isinf(value):
        return value
    factor = 10 ** precision
    return math.floor(value * factor + 0.5) / factor


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide without raising: x/0 is +-inf and 0/0 is NaN."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or numerator != numerator:
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


# =========================================================================
# PARSING & FORMATTING
# =========================================================================

def _is_number(raw: Any) -> bool:
    return isinstance(raw, (int, float)) and not isinstance(raw, bool)


def parse_size_input(
    raw: Any,
    cache: Optional[BoundedCache[str, SizeValue]] = None,
) -> SizeValue:
    """
    Normalize any accepted size input into a SizeValue.

    Accepts:
        16            -> 16px
        SizeValue     -> returned unchanged
        "1.5rem"      -> 1.5rem
        "-4"          -> -4px (unit defaults to px)

    Anything else (None, "abc", "12 px", True) silently becomes 0px.

    Args:
        raw: Input to parse
        cache: Optional parse cache keyed by the literal input string

    Returns:
        SizeValue (never raises)
    """
    if _is_number(raw):
        return SizeValue(raw, SizeUnit.PX)

    if isinstance(raw, SizeValue):
        return raw

    if isinstance(raw, str):
        if cache is not None:
            cached = cache.get(raw)
            if cached is not None:
                return cached

        match = _SIZE_PATTERN.fullmatch(raw)
        if match:
            result = SizeValue(float(match.group(1)), SizeUnit(match.group(2) or "px"))
            if cache is not None:
                cache.put(raw, result)
            return result

    return ZERO_PX


def format_size(
    size: SizeValue,
    cache: Optional[BoundedCache[str, str]] = None,
) -> str:
    """
    Format a SizeValue as CSS text.

    Zero is always the bare literal "0" (no unit suffix).
    """
    if size.value == 0:
        return "0"

    cache_key = f"{size.value!r}:{size.unit.value}"
    if cache is not None:
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

    result = f"{format_number(size.value)}{size.unit.value}"
    if cache is not None:
        cache.put(cache_key, result)
    return result


def is_valid_size(raw: Any) -> bool:
    """Check whether input is a finite number, a parseable string or a SizeValue."""
    if _is_number(raw):
        return math.isfinite(raw)
    if isinstance(raw, str):
        return _SIZE_PATTERN.fullmatch(raw) is not None
    if isinstance(raw, SizeValue):
        return _is_number(raw.value) and math.isfinite(raw.value)
    return False


# =========================================================================
# CONVERSION
# =========================================================================

def _to_pixels(size: SizeValue, root_font_size: float) -> float:
    if size.unit in (SizeUnit.REM, SizeUnit.EM):
        return size.value * root_font_size
    if size.unit == SizeUnit.PT:
        return size.value * PT_TO_PX
    return size.value


def _from_pixels(px: float, target: SizeUnit, root_font_size: float) -> float:
    if target in (SizeUnit.REM, SizeUnit.EM):
        return ieee_divide(px, root_font_size)
    if target == SizeUnit.PT:
        return px * PX_TO_PT
    return px


def convert_size(
    size: SizeValue,
    target_unit: SizeUnit,
    root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
    cache: Optional[BoundedCache[str, SizeValue]] = None,
) -> SizeValue:
    """
    Convert a SizeValue to another unit.

    Absolute units go through pixels:
        rem/em: value * root_font_size
        pt:     value * 96/72

    Any conversion with a relative unit on either side (%, vw, vh, vmin,
    vmax) keeps the numeric value and only swaps the unit. There is no
    viewport or container to convert against here.

    Args:
        size: Source value
        target_unit: Desired unit (SizeUnit or its string)
        root_font_size: Pixels per rem/em
        cache: Optional conversion cache

    Returns:
        SizeValue in target_unit (the same object when units already match)
    """
    target_unit = SizeUnit(target_unit)
    if size.unit == target_unit:
        return size

    cache_key = f"{size.value!r}:{size.unit.value}:{target_unit.value}:{root_font_size!r}"
    if cache is not None:
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

    if size.unit.is_absolute and target_unit.is_absolute:
        px = _to_pixels(size, root_font_size)
        result = SizeValue(_from_pixels(px, target_unit, root_font_size), target_unit)
    else:
        result = SizeValue(size.value, target_unit)

    if cache is not None:
        cache.put(cache_key, result)
    return result


# =========================================================================
# ARITHMETIC HELPERS
# =========================================================================

def scale_size(size: SizeValue, factor: float) -> SizeValue:
    return SizeValue(size.value * factor, size.unit)


def add_sizes(
    a: SizeValue,
    b: SizeValue,
    root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
    cache: Optional[BoundedCache[str, SizeValue]] = None,
) -> SizeValue:
    """Add b to a, in a's unit."""
    if a.unit == b.unit:
        return SizeValue(a.value + b.value, a.unit)
    converted = convert_size(b, a.unit, root_font_size, cache)
    return SizeValue(a.value + converted.value, a.unit)


def subtract_sizes(
    a: SizeValue,
    b: SizeValue,
    root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
    cache: Optional[BoundedCache[str, SizeValue]] = None,
) -> SizeValue:
    """Subtract b from a, in a's unit."""
    if a.unit == b.unit:
        return SizeValue(a.value - b.value, a.unit)
    converted = convert_size(b, a.unit, root_font_size, cache)
    return SizeValue(a.value - converted.value, a.unit)


def clamp_size(
    size: SizeValue,
    minimum: Optional[SizeInput] = None,
    maximum: Optional[SizeInput] = None,
    root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
    cache: Optional[BoundedCache[str, SizeValue]] = None,
) -> SizeValue:
    """Clamp size between optional bounds, comparing in size's unit."""
    value = size.value
    if minimum is not None:
        low = convert_size(parse_size_input(minimum), size.unit, root_font_size, cache)
        value = max(value, low.value)
    if maximum is not None:
        high = convert_size(parse_size_input(maximum), size.unit, root_font_size, cache)
        value = min(value, high.value)
    return SizeValue(value, size.unit)


def round_size(size: SizeValue, precision: int = 2) -> SizeValue:
    return SizeValue(round_half_up(size.value, precision), size.unit)


def generate_size_scale(
    base: float,
    ratio: float,
    steps: int,
    unit: SizeUnit = SizeUnit.PX,
) -> List[SizeValue]:
    """
    Geometric scale around base: steps values below, base, steps above.

    Each derived value is rounded to 2 decimals; base is kept exact.
    """
    unit = SizeUnit(unit)
    below = [
        SizeValue(round_half_up(ieee_divide(base, ratio ** i), 2), unit)
        for i in range(steps, 0, -1)
    ]
    above = [
        SizeValue(round_half_up(base * ratio ** i, 2), unit)
        for i in range(1, steps + 1)
    ]
    return below + [SizeValue(base, unit)] + above


# =========================================================================
# CSS CUSTOM PROPERTY NAMES
# =========================================================================

def css_var_name(
    name: str,
    prefix: str = "size",
    cache: Optional[BoundedCache[str, str]] = None,
) -> str:
    """
    Build a custom property name: ("fontSize", "size") -> "--size-font-size".
    """
    cache_key = f"{prefix}:{name}"
    if cache is not None:
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

    kebab = _CAMEL_BOUNDARY.sub(r"-\1", name).lower()
    result = f"--{prefix}-{kebab}"
    if cache is not None:
        cache.put(cache_key, result)
    return result


def css_var(name: str, fallback: Optional[str] = None) -> str:
    """Reference a custom property, optionally with a fallback."""
    return f"var({name}, {fallback})" if fallback else f"var({name})"
