"""
Fluid sizing — clamp()/calc() expressions that scale with the viewport.

A fluid size grows linearly from `min` at `viewport_min` pixels wide to
`max` at `viewport_max` pixels wide:

    slope     = (max - min) / (viewport_max - viewport_min)
    preferred = calc(<intercept>rem + <slope * 100>vw)
    result    = clamp(min, preferred, max)

IMPORTANT:
    Inputs are NOT validated. NaN or infinite values (including a zero
    viewport range) end up verbatim in the output string.
    Validation is the caller's responsibility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Union

from sizekit.cache import BoundedCache, CacheStats
from sizekit.constants import DEFAULT_ROOT_FONT_SIZE, PERFORMANCE_CONFIG
from sizekit.context import SizeContext
from sizekit.conversion import format_number, ieee_divide, round_half_up, to_fixed
from sizekit.units import SizeInput, SizeUnit, SizeValue

logger = logging.getLogger(__name__)


class DeviceClass(Enum):
    """Coarse device buckets reported by the viewport collaborator."""
    MOBILE = "mobile"          # < 768px
    TABLET = "tablet"          # 768px - 1024px
    LAPTOP = "laptop"          # 1024px - 1440px
    DESKTOP = "desktop"        # 1440px - 1920px
    WIDESCREEN = "widescreen"  # > 1920px
    TV = "tv"                  # > 2560px


@dataclass(frozen=True)
class Viewport:
    """Last known viewport dimensions in CSS pixels."""
    width: float
    height: float
    device: DeviceClass = DeviceClass.DESKTOP


DEFAULT_VIEWPORT = Viewport(width=1920, height=1080, device=DeviceClass.DESKTOP)

ViewportListener = Callable[[Viewport], None]


class ViewportSource(Protocol):
    """Device-detection collaborator."""

    def get_viewport(self) -> Viewport:
        ...

    def on_change(self, callback: ViewportListener) -> Callable[[], None]:
        """Register a callback; returns the function that unregisters it."""
        ...


class StaticViewportSource:
    """
    In-process ViewportSource whose viewport is pushed in by the host.

    Useful for server-side rendering, tests, and hosts that already run
    their own resize detection.
    """

    def __init__(self, viewport: Viewport = DEFAULT_VIEWPORT) -> None:
        self._viewport = viewport
        self._listeners: List[ViewportListener] = []

    def get_viewport(self) -> Viewport:
        return self._viewport

    def on_change(self, callback: ViewportListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def update(self, viewport: Viewport) -> None:
        """Publish a viewport to every listener, changed or not."""
        self._viewport = viewport
        for listener in list(self._listeners):
            listener(viewport)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


@dataclass(frozen=True)
class FluidSize:
    """
    Fluid size definition.

    Properties:
        min: Size at viewport_min
        max: Size at viewport_max
        viewport_min: Viewport width (px) where scaling starts
        viewport_max: Viewport width (px) where scaling stops
        clamp: Wrap in clamp(min, preferred, max); False returns calc() only
    """

    min: SizeValue
    max: SizeValue
    viewport_min: float = 320
    viewport_max: float = 1920
    clamp: bool = True


@dataclass(frozen=True)
class ResponsiveSize:
    """Breakpoint values keyed by device bucket, with an optional fluid override."""
    base: SizeInput
    xs: Optional[SizeInput] = None
    sm: Optional[SizeInput] = None
    md: Optional[SizeInput] = None
    lg: Optional[SizeInput] = None
    xl: Optional[SizeInput] = None
    xxl: Optional[SizeInput] = None
    fluid: Optional[FluidSize] = None


def _rem_range(low: float, high: float) -> FluidSize:
    return FluidSize(min=SizeValue(low, SizeUnit.REM), max=SizeValue(high, SizeUnit.REM))


FLUID_TYPOGRAPHY_PRESETS: Dict[str, FluidSize] = {
    # Headings
    "h1": _rem_range(2, 4),
    "h2": _rem_range(1.75, 3),
    "h3": _rem_range(1.5, 2.25),
    "h4": _rem_range(1.25, 1.75),
    "h5": _rem_range(1.125, 1.5),
    "h6": _rem_range(1, 1.25),
    # Body text
    "body": _rem_range(1, 1.125),
    "small": _rem_range(0.875, 1),
    "tiny": _rem_range(0.75, 0.875),
}

MODULAR_SCALE_RATIOS: Dict[str, float] = {
    "minor_second": 1.067,
    "major_second": 1.125,
    "minor_third": 1.2,
    "major_third": 1.25,
    "perfect_fourth": 1.333,
    "augmented_fourth": 1.414,
    "perfect_fifth": 1.5,
    "golden_ratio": 1.618,
    "major_sixth": 1.667,
    "minor_seventh": 1.778,
    "major_seventh": 1.875,
    "octave": 2,
    "major_tenth": 2.5,
    "major_eleventh": 2.667,
    "major_twelfth": 3,
    "double_octave": 4,
}


def resolve_ratio(ratio: Union[str, float]) -> float:
    """
    Accept a ratio number or a MODULAR_SCALE_RATIOS name.

    Raises:
        KeyError: If the name is unknown
    """
    if isinstance(ratio, str):
        return MODULAR_SCALE_RATIOS[ratio]
    return ratio


def _power(ratio: float, exponent: int) -> float:
    try:
        return ratio ** exponent
    except ZeroDivisionError:
        return float("inf")


def _first_defined(*values: Optional[SizeInput]) -> Optional[SizeInput]:
    for value in values:
        if value is not None:
            return value
    return None


class FluidSizeCalculator:
    """
    Builds fluid CSS expressions and modular scales, with caching.

    Args:
        viewport_source: Optional device-detection collaborator; without
            one the calculator assumes DEFAULT_VIEWPORT and never updates
        context: SizeContext used for parsing and formatting sizes
    """

    def __init__(
        self,
        viewport_source: Optional[ViewportSource] = None,
        context: Optional[SizeContext] = None,
    ) -> None:
        self._context = context if context is not None else SizeContext()
        self._calculation_cache: BoundedCache[str, str] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_FLUID_CACHE"], name="fluid")
        self._slope_cache: BoundedCache[str, float] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_SLOPE_CACHE"], name="slope")
        self._scale_cache: BoundedCache[str, tuple] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_MODULAR_SCALE_CACHE"], name="modular_scale")
        self._destroyed = False
        self._unsubscribe: Optional[Callable[[], None]] = None

        if viewport_source is not None:
            self._viewport = viewport_source.get_viewport()
            self._unsubscribe = viewport_source.on_change(self._on_viewport_change)
        else:
            self._viewport = DEFAULT_VIEWPORT

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    # =========================================================================
    # VIEWPORT TRACKING
    # =========================================================================

    def _on_viewport_change(self, viewport: Viewport) -> None:
        if self._destroyed:
            return
        if viewport == self._viewport:
            return
        logger.debug("Viewport changed from %s to %s", self._viewport, viewport)
        self._viewport = viewport
        self._partial_cache_clear()

    def _partial_cache_clear(self) -> None:
        retain = PERFORMANCE_CONFIG["FLUID_CACHE_RETAIN"]
        if len(self._calculation_cache) > retain:
            self._calculation_cache.retain_first(retain)

    # =========================================================================
    # FLUID EXPRESSIONS
    # =========================================================================

    def _slope(self, config: FluidSize) -> float:
        key = (f"{config.min.value!r}:{config.max.value!r}:"
               f"{config.viewport_min!r}:{config.viewport_max!r}")
        slope = self._slope_cache.get(key)
        if slope is None:
            slope = ieee_divide(config.max.value - config.min.value,
                                config.viewport_max - config.viewport_min)
            self._slope_cache.put(key, slope)
        return slope

    def _fluid_calc(self, minimum: SizeValue, slope: float, viewport_min: float) -> str:
        # Value at a zero-width viewport, expressed in rem
        intercept = minimum.value - slope * viewport_min
        if minimum.unit != SizeUnit.REM:
            intercept = ieee_divide(intercept, DEFAULT_ROOT_FONT_SIZE)
        base = format_number(round_half_up(intercept, 4))
        return f"calc({base}rem + {to_fixed(slope * 100, 4)}vw)"

    def create_fluid_size(self, config: FluidSize) -> str:
        """
        Build the CSS expression for a fluid size.

        Returns:
            "clamp(min, calc(...), max)" or just "calc(...)" when
            config.clamp is False
        """
        cache_key = "|".join([
            repr(config.min.value), config.min.unit.value,
            repr(config.max.value), config.max.unit.value,
            repr(config.viewport_min), repr(config.viewport_max),
            "1" if config.clamp else "0",
        ])
        cached = self._calculation_cache.get(cache_key)
        if cached is not None:
            return cached

        slope = self._slope(config)
        preferred = self._fluid_calc(config.min, slope, config.viewport_min)

        if config.clamp:
            minimum = self._context.format(config.min)
            maximum = self._context.format(config.max)
            result = f"clamp({minimum}, {preferred}, {maximum})"
        else:
            result = preferred

        self._calculation_cache.put(cache_key, result)
        return result

    def fluid_size(self, minimum: float, maximum: float, unit: SizeUnit = SizeUnit.REM) -> str:
        """Shorthand for a clamped fluid size over the default viewport range."""
        unit = SizeUnit(unit)
        return self.create_fluid_size(FluidSize(
            min=SizeValue(minimum, unit),
            max=SizeValue(maximum, unit),
        ))

    def fluid_text(self, preset: str) -> str:
        """Fluid size for a FLUID_TYPOGRAPHY_PRESETS entry (KeyError if unknown)."""
        return self.create_fluid_size(FLUID_TYPOGRAPHY_PRESETS[preset])

    def create_responsive_size(self, config: ResponsiveSize) -> str:
        """Pick the breakpoint value for the current device bucket."""
        if config.fluid is not None:
            return self.create_fluid_size(config.fluid)

        device = self._viewport.device
        if device == DeviceClass.MOBILE:
            selected = _first_defined(config.xs, config.sm, config.base)
        elif device == DeviceClass.TABLET:
            selected = _first_defined(config.md, config.base)
        elif device == DeviceClass.LAPTOP:
            selected = _first_defined(config.lg, config.base)
        elif device == DeviceClass.DESKTOP:
            selected = _first_defined(config.xl, config.base)
        else:
            selected = _first_defined(config.xxl, config.xl, config.base)

        return self._context.format(self._context.parse(selected))

    # =========================================================================
    # MODULAR SCALES
    # =========================================================================

    def generate_modular_scale(
        self,
        base: float,
        ratio: float,
        steps: int,
        unit: SizeUnit = SizeUnit.REM,
    ) -> List[str]:
        """
        Geometric scale base * ratio**i for i in [-steps, steps].

        Returns:
            2*steps+1 strings, each with 3 decimals and the unit suffix
        """
        unit = SizeUnit(unit)
        cache_key = f"scale-{base!r}-{ratio!r}-{steps}-{unit.value}"
        cached = self._scale_cache.get(cache_key)
        if cached is not None:
            return list(cached)

        powers: Dict[int, float] = {}
        sizes = []
        for exponent in range(-steps, steps + 1):
            if exponent not in powers:
                powers[exponent] = _power(ratio, exponent)
            sizes.append(f"{to_fixed(base * powers[exponent], 3)}{unit.value}")

        self._scale_cache.put(cache_key, tuple(sizes))
        return sizes

    def modular_scale(self, base: float, ratio: Union[str, float], steps: int = 5) -> List[str]:
        return self.generate_modular_scale(base, resolve_ratio(ratio), steps)

    def create_fluid_modular_scale(
        self,
        base_min: float,
        base_max: float,
        ratio: Union[str, float],
        steps: int = 5,
    ) -> List[str]:
        """Modular scale where every step is itself a fluid rem size."""
        ratio = resolve_ratio(ratio)
        scale = []
        for exponent in range(-steps, steps + 1):
            power = _power(ratio, exponent)
            scale.append(self.create_fluid_size(_rem_range(base_min * power, base_max * power)))
        return scale

    # =========================================================================
    # TYPOGRAPHY & SPACING HELPERS
    # =========================================================================

    @staticmethod
    def get_optimal_line_height(font_size: float, unit: SizeUnit = SizeUnit.PX) -> float:
        """Smaller text gets looser leading; thresholds scale with the unit."""
        thresholds = (12, 16, 20, 32, 48) if SizeUnit(unit) == SizeUnit.PX else (0.75, 1, 1.25, 2, 3)
        for limit, line_height in zip(thresholds, (1.8, 1.6, 1.5, 1.4, 1.3)):
            if font_size < limit:
                return line_height
        return 1.2

    @staticmethod
    def calculate_responsive_spacing(base: float, device: DeviceClass, kind: str) -> str:
        """
        Scale a pixel spacing for a device bucket and return it in rem.

        Args:
            base: Spacing in pixels
            device: Target device bucket
            kind: "padding", "margin" or "gap"
        """
        is_padding = kind == "padding"
        if device == DeviceClass.MOBILE:
            multiplier = 0.75 if is_padding else 0.5
        elif device == DeviceClass.TABLET:
            multiplier = 0.875 if is_padding else 0.75
        elif device in (DeviceClass.WIDESCREEN, DeviceClass.TV):
            multiplier = 1.25 if is_padding else 1.5
        else:
            multiplier = 1
        return f"{to_fixed(base * multiplier / DEFAULT_ROOT_FONT_SIZE, 3)}rem"

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def cache_stats(self) -> Dict[str, CacheStats]:
        return {
            "fluid": self._calculation_cache.stats(),
            "slope": self._slope_cache.stats(),
            "modular_scale": self._scale_cache.stats(),
        }

    def caches(self) -> Dict[str, BoundedCache]:
        return {
            "fluid": self._calculation_cache,
            "slope": self._slope_cache,
            "modular_scale": self._scale_cache,
        }

    def destroy(self) -> None:
        """Unsubscribe from viewport changes and drop every cache."""
        if self._destroyed:
            return
        self._destroyed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for cache in self.caches().values():
            cache.clear()
