"""
Performance and capacity configuration.

Every cache bound, time threshold and batch size used by the engine lives
here, so tuning happens in one place.
"""

from typing import Any, Dict

# Default root font size in pixels (1rem)
DEFAULT_ROOT_FONT_SIZE = 16

# Fixed point/pixel ratios (CSS reference pixel: 96 per inch, 72 points per inch)
PT_TO_PX = 96 / 72
PX_TO_PT = 72 / 96

PERFORMANCE_CONFIG: Dict[str, Any] = {
    # Cache capacities
    "MAX_SIZE_POOL": 200,
    "MAX_PARSE_CACHE": 200,
    "MAX_FORMAT_CACHE": 200,
    "MAX_CONVERSION_CACHE": 500,
    "MAX_CSS_CACHE_SIZE": 50,
    "MAX_CSS_VAR_CACHE": 100,
    "MAX_FLUID_CACHE": 500,
    "MAX_SLOPE_CACHE": 100,
    "MAX_MODULAR_SCALE_CACHE": 500,
    # Entries kept by a partial fluid-cache clear on viewport change
    "FLUID_CACHE_RETAIN": 50,
    # Seconds between pool trims
    "CLEANUP_INTERVAL": 60.0,
    # Listener delivery
    "LISTENER_BATCH_SIZE": 10,
    # Precision
    "EPSILON": 0.001,
    "DECIMAL_PRECISION": 2,
    # Diagnostics
    "CACHE_HIT_RATE_WARNING": 0.7,
    "MIN_LOOKUPS_FOR_HIT_RATE": 20,
}


def get_performance_config(key: str) -> Any:
    """
    Look up one performance setting.

    Raises:
        KeyError: If the key is unknown
    """
    return PERFORMANCE_CONFIG[key]
