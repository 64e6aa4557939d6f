"""
Exceptions raised by the engine.

Only configuration entry points (SizeManager.set_config, add_preset)
and Size.divide raise on purpose. Parsing and
conversion never raise; they fall back to a defined value instead.
"""


class SizeKitError(Exception):
    """Base class for all sizekit errors."""
    pass


class InvalidConfigurationError(SizeKitError, ValueError):
    """Raised when a configuration value is outside its accepted range."""
    pass


class DivisionByZeroError(SizeKitError, ZeroDivisionError):
    """Raised when a Size is divided by zero."""
    pass


__all__ = ["SizeKitError", "InvalidConfigurationError", "DivisionByZeroError"]
