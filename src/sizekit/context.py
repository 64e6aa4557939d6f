"""
SizeContext — the explicit home of all shared engine state.

One context owns the parse, format, conversion and CSS-variable caches
and one SizePool. Every Size remembers the context it was created in and
routes its conversions and transient allocations through it.

ARCHITECTURAL RULE:
    There is no module-level pool or cache anywhere in sizekit.
    Two contexts never share state; pass the one you want explicitly.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional

from sizekit.cache import BoundedCache, CacheStats
from sizekit.constants import DEFAULT_ROOT_FONT_SIZE, PERFORMANCE_CONFIG
from sizekit.conversion import convert_size, css_var_name, format_size, parse_size_input
from sizekit.pool import SizePool
from sizekit.size import Size
from sizekit.units import SizeUnit, SizeValue

# Numbers in this range are served from the pool by SizeContext.size()
_POOLED_RANGE = (0, 100)


class SizeContext:
    """
    Caches, pool and factories for one consumer of the engine.

    Args:
        root_font_size: Default pixels per rem for sizes built here
        pool_capacity: Idle instances the pool may keep
        clock: Monotonic time source for pool cleanup
    """

    def __init__(
        self,
        root_font_size: float = DEFAULT_ROOT_FONT_SIZE,
        pool_capacity: int = PERFORMANCE_CONFIG["MAX_SIZE_POOL"],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root_font_size = root_font_size
        self.parse_cache: BoundedCache[str, SizeValue] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_PARSE_CACHE"], name="parse")
        self.format_cache: BoundedCache[str, str] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_FORMAT_CACHE"], name="format")
        self.conversion_cache: BoundedCache[str, SizeValue] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_CONVERSION_CACHE"], name="conversion")
        self.css_var_cache: BoundedCache[str, str] = BoundedCache(
            PERFORMANCE_CONFIG["MAX_CSS_VAR_CACHE"], name="css_var")
        self.pool = SizePool(self, capacity=pool_capacity, clock=clock)

    # =========================================================================
    # CACHED PRIMITIVES
    # =========================================================================

    def parse(self, raw: Any) -> SizeValue:
        return parse_size_input(raw, self.parse_cache)

    def format(self, value: SizeValue) -> str:
        return format_size(value, self.format_cache)

    def convert(self, value: SizeValue, unit: SizeUnit, root_font_size: Optional[float] = None) -> SizeValue:
        if root_font_size is None:
            root_font_size = self.root_font_size
        return convert_size(value, unit, root_font_size, self.conversion_cache)

    def css_var_name(self, name: str, prefix: str = "size") -> str:
        return css_var_name(name, prefix, self.css_var_cache)

    # =========================================================================
    # FACTORIES
    # =========================================================================

    def size(self, raw: Any = 0, root_font_size: Optional[float] = None) -> Size:
        """
        Build a Size.

        Plain numbers between 0 and 100 come from the pool (dispose() them
        when done); everything else is a regular instance.
        """
        if root_font_size is None:
            root_font_size = self.root_font_size
        if (isinstance(raw, (int, float)) and not isinstance(raw, bool)
                and _POOLED_RANGE[0] <= raw <= _POOLED_RANGE[1]):
            return self.pool.acquire(raw, root_font_size)
        return Size(raw, self, root_font_size)

    def px(self, value: float) -> Size:
        return Size(SizeValue(value, SizeUnit.PX), self, self.root_font_size)

    def rem(self, value: float, root_font_size: Optional[float] = None) -> Size:
        return Size(SizeValue(value, SizeUnit.REM), self, root_font_size or self.root_font_size)

    def em(self, value: float, root_font_size: Optional[float] = None) -> Size:
        return Size(SizeValue(value, SizeUnit.EM), self, root_font_size or self.root_font_size)

    def vw(self, value: float) -> Size:
        return Size(SizeValue(value, SizeUnit.VW), self, self.root_font_size)

    def vh(self, value: float) -> Size:
        return Size(SizeValue(value, SizeUnit.VH), self, self.root_font_size)

    def percent(self, value: float) -> Size:
        return Size(SizeValue(value, SizeUnit.PERCENT), self, self.root_font_size)

    # =========================================================================
    # HOUSEKEEPING
    # =========================================================================

    def caches(self) -> Dict[str, BoundedCache]:
        return {
            "parse": self.parse_cache,
            "format": self.format_cache,
            "conversion": self.conversion_cache,
            "css_var": self.css_var_cache,
        }

    def cache_stats(self) -> Dict[str, CacheStats]:
        return {name: cache.stats() for name, cache in self.caches().items()}

    def clear(self) -> None:
        """Empty every cache and the pool."""
        for cache in self.caches().values():
            cache.clear()
            cache.reset_stats()
        self.pool.clear()
