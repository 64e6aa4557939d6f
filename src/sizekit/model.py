"""
Size Manager Model Objects

Plain data structures shared by the SizeManager and the serialization
layer:
    - SizeConfig (the active configuration)
    - SizePreset (a named base size)
    - SizeManagerOptions (manager wiring and limits)
    - SizeStorage / StyleTarget (host collaborators)

ARCHITECTURAL RULE:
    These objects:
        - Hold no behavior beyond trivial helpers
        - Know nothing about CSS generation or notification
        - Are fully serializable (see sizekit.serialization)
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol

from sizekit.constants import PERFORMANCE_CONFIG

DEFAULT_STORAGE_KEY = "ldesign-size-scheme"
DEFAULT_PRESET_NAME = "default"
DEFAULT_BASE_SIZE = 16


@dataclass(frozen=True)
class SizeConfig:
    """
    Active size configuration.

    Properties:
        base_size: Base font size in pixels, 0 < base_size <= 100
    """

    base_size: float = DEFAULT_BASE_SIZE


@dataclass
class SizePreset:
    """
    Named base size selectable through SizeManager.apply_preset.

    Properties:
        name: Registry key (e.g., "compact")
        base_size: Base font size in pixels
        label: Display label
        description: Human-readable description
        category: Grouping used by pickers (e.g., "density")
    """

    name: str
    base_size: float
    label: str = ""
    description: str = ""
    category: Optional[str] = None


DEFAULT_PRESETS: List[SizePreset] = [
    SizePreset(
        name="compact",
        label="Compact",
        description="High density for maximum content",
        base_size=14,
        category="density",
    ),
    SizePreset(
        name="comfortable",
        label="Comfortable",
        description="Balanced spacing for everyday use",
        base_size=16,
        category="density",
    ),
    SizePreset(
        name="default",
        label="Default",
        description="Standard size settings",
        base_size=16,
        category="density",
    ),
    SizePreset(
        name="spacious",
        label="Spacious",
        description="Lower density for better readability",
        base_size=18,
        category="density",
    ),
]


@dataclass
class SizeManagerOptions:
    """
    SizeManager wiring.

    Properties:
        storage_key: Key of the persisted blob in SizeStorage
        presets: Extra presets, registered after (and overriding) the defaults
        listener_batch_size: Listeners invoked per scheduled task
        css_cache_size: Generated sheets kept per manager
        css_prefix: Custom-property prefix ("size" -> --size-*)
    """

    storage_key: str = DEFAULT_STORAGE_KEY
    presets: List[SizePreset] = field(default_factory=list)
    listener_batch_size: int = PERFORMANCE_CONFIG["LISTENER_BATCH_SIZE"]
    css_cache_size: int = PERFORMANCE_CONFIG["MAX_CSS_CACHE_SIZE"]
    css_prefix: str = "size"


class SizeStorage(Protocol):
    """Key/value string store (localStorage, a file, a database row...)."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class StyleTarget(Protocol):
    """Where the generated sheet is injected (a <style> element, a file...)."""

    def current_css(self) -> Optional[str]:
        ...

    def inject(self, css: str) -> None:
        ...

    def remove(self) -> None:
        ...


class MemoryStorage:
    """Dict-backed SizeStorage."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class MemoryStyleTarget:
    """StyleTarget that keeps the injected sheet in memory and counts writes."""

    def __init__(self) -> None:
        self.css: Optional[str] = None
        self.inject_count = 0

    def current_css(self) -> Optional[str]:
        return self.css

    def inject(self, css: str) -> None:
        self.css = css
        self.inject_count += 1

    def remove(self) -> None:
        self.css = None


ConfigListener = Callable[[SizeConfig], None]
Scheduler = Callable[[Callable[[], None]], None]
