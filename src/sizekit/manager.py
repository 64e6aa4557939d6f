"""
SizeManager — one active base size, its presets, and the generated sheet.

Responsibilities:
    - Validate and hold the active SizeConfig
    - Keep a named preset registry
    - Generate (and cache) the custom-property sheet for the base size
    - Inject the sheet into a StyleTarget, skipping identical re-injection
    - Persist {config, presetName} through a SizeStorage
    - Notify listeners asynchronously, coalesced and batched

NOTIFICATION RULES:
    Several set_config() calls before the first delivery runs collapse
    into ONE delivery per listener, carrying the config current at
    delivery time. Listeners run in subscription order, in batches of
    listener_batch_size, each batch a separately scheduled task.
    A failing listener is logged and never stops the others.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from sizekit.cache import BoundedCache
from sizekit.conversion import format_number
from sizekit.css import render_size_sheet
from sizekit.errors import InvalidConfigurationError
from sizekit.model import (
    DEFAULT_PRESET_NAME,
    DEFAULT_PRESETS,
    ConfigListener,
    Scheduler,
    SizeConfig,
    SizeManagerOptions,
    SizePreset,
    SizeStorage,
    StyleTarget,
)
from sizekit.serialization import state_from_blob, state_to_blob

logger = logging.getLogger(__name__)

MAX_BASE_SIZE = 100


def validate_base_size(base_size: object) -> float:
    """
    Check a base size candidate.

    Raises:
        InvalidConfigurationError: Unless base_size is a number in (0, 100]
    """
    if (not isinstance(base_size, (int, float)) or isinstance(base_size, bool)
            or math.isnan(base_size) or not 0 < base_size <= MAX_BASE_SIZE):
        raise InvalidConfigurationError(
            f"Invalid base_size {base_size!r}: must be a number greater than 0 "
            f"and at most {MAX_BASE_SIZE}"
        )
    return base_size


class SizeManager:
    """
    Args:
        options: Wiring and limits (SizeManagerOptions defaults if omitted)
        storage: Where the state blob is persisted; None disables persistence
        style_target: Where the sheet is injected; None disables injection
        scheduler: Runs deferred notification tasks; defaults to the
            running asyncio loop, or the flush_notifications() queue
    """

    def __init__(
        self,
        options: Optional[SizeManagerOptions] = None,
        *,
        storage: Optional[SizeStorage] = None,
        style_target: Optional[StyleTarget] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._options = options if options is not None else SizeManagerOptions()
        self._storage = storage
        self._style_target = style_target
        self._scheduler = scheduler

        self._config = SizeConfig()
        self._current_preset = DEFAULT_PRESET_NAME
        self._presets: Dict[str, SizePreset] = {}
        self._listeners: List[ConfigListener] = []
        self._css_cache: BoundedCache[str, str] = BoundedCache(
            self._options.css_cache_size, name="css")
        self._last_css = ""
        self._destroyed = False

        self._notification_scheduled = False
        self._tasks_in_flight = 0
        self._deferred: Deque[Callable[[], None]] = deque()

        for preset in DEFAULT_PRESETS:
            self._presets[preset.name] = preset
        for preset in self._options.presets:
            self.add_preset(preset)

        self.load_from_storage()
        self.apply_size()

    @property
    def storage_key(self) -> str:
        return self._options.storage_key

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    @property
    def css_cache(self) -> BoundedCache[str, str]:
        return self._css_cache

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def get_config(self) -> SizeConfig:
        return self._config

    def set_config(self, *, base_size: Optional[float] = None) -> None:
        """
        Replace the active configuration.

        On success the sheet is re-applied, the state persisted and a
        listener notification scheduled.

        Raises:
            InvalidConfigurationError: Bad base_size; nothing is changed
        """
        if base_size is not None:
            validate_base_size(base_size)
            self._config = SizeConfig(base_size=base_size)

        self.apply_size()
        self.save_to_storage()
        self._notify_listeners()

    def set_base_size(self, base_size: float) -> None:
        self.set_config(base_size=base_size)

    # =========================================================================
    # PRESETS
    # =========================================================================

    def apply_preset(self, name: str) -> bool:
        """
        Switch to a registered preset.

        Returns:
            False (with a warning logged) if no preset has that name

        Raises:
            InvalidConfigurationError: Preset base size is invalid; nothing is changed
        """
        preset = self._presets.get(name)
        if preset is None:
            logger.warning("Preset %r not found, available presets: %s",
                           name, ", ".join(self._presets))
            return False

        validate_base_size(preset.base_size)
        logger.info("Applying size preset %s (base size %spx)", name,
                    format_number(preset.base_size))
        self._current_preset = name
        self._last_css = ""
        self.set_config(base_size=preset.base_size)
        return True

    def get_current_preset(self) -> str:
        return self._current_preset

    def get_presets(self) -> List[SizePreset]:
        return list(self._presets.values())

    def get_preset_names(self) -> List[str]:
        return list(self._presets)

    def add_preset(self, preset: SizePreset) -> None:
        """Register or replace a preset; its base size is validated."""
        validate_base_size(preset.base_size)
        self._presets[preset.name] = preset

    # =========================================================================
    # CSS
    # =========================================================================

    def generate_css(self) -> str:
        """Custom-property sheet for the current base size (cached per base/preset)."""
        cache_key = f"{format_number(self._config.base_size)}:{self._current_preset}"
        css = self._css_cache.get(cache_key)
        if css is None:
            css = render_size_sheet(self._config.base_size, prefix=self._options.css_prefix)
            self._css_cache.put(cache_key, css)
        return css

    def apply_size(self) -> None:
        """Inject the current sheet unless the target already shows it."""
        if self._style_target is None:
            return

        css = self.generate_css()
        if css == self._last_css and self._style_target.current_css() == css:
            return
        self._style_target.inject(css)
        self._last_css = css

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def load_from_storage(self) -> None:
        """Restore config and preset name; failures are logged and ignored."""
        if self._storage is None:
            return
        try:
            blob = self._storage.get_item(self.storage_key)
            if not blob:
                return
            base_size, preset_name = state_from_blob(blob)
        except Exception:
            logger.exception("Failed to load size config from storage key %r", self.storage_key)
            return

        if base_size is not None:
            try:
                self._config = SizeConfig(base_size=validate_base_size(base_size))
            except InvalidConfigurationError:
                logger.warning("Ignoring stored base size %r", base_size)
        if preset_name is not None:
            self._current_preset = preset_name

    def save_to_storage(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(self.storage_key, state_to_blob(self._config, self._current_preset))
        except Exception:
            logger.exception("Failed to save size config to storage key %r", self.storage_key)

    # =========================================================================
    # LISTENERS
    # =========================================================================

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """
        Register a listener for config changes.

        Returns:
            Callable removing the listener (a no-op after destroy())
        """
        if self._destroyed:
            logger.warning("subscribe() called on a destroyed SizeManager")
            return lambda: None

        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if not self._destroyed and listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on_change(self, listener: ConfigListener) -> Callable[[], None]:
        return self.subscribe(listener)

    def _schedule(self, task: Callable[[], None]) -> None:
        self._tasks_in_flight += 1

        def run() -> None:
            self._tasks_in_flight -= 1
            task()

        if self._scheduler is not None:
            self._scheduler(run)
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred.append(run)
        else:
            loop.call_soon(run)

    def _notify_listeners(self) -> None:
        if self._notification_scheduled:
            return
        pending = list(self._listeners)
        if not pending:
            return
        self._notification_scheduled = True
        self._schedule(lambda: self._deliver(pending))

    def _deliver(self, listeners: List[ConfigListener]) -> None:
        self._notification_scheduled = False
        self._deliver_batch(listeners, 0)

    def _deliver_batch(self, listeners: List[ConfigListener], start: int) -> None:
        if self._destroyed:
            return
        end = min(start + self._options.listener_batch_size, len(listeners))
        for listener in listeners[start:end]:
            try:
                listener(self._config)
            except Exception:
                logger.exception("Size listener %r failed", listener)
        if end < len(listeners):
            self._schedule(lambda: self._deliver_batch(listeners, end))

    def flush_notifications(self) -> None:
        """Run deferred notification tasks queued while no event loop was running."""
        while self._deferred:
            self._deferred.popleft()()

    async def drain(self) -> None:
        """Wait until every scheduled notification batch has run."""
        self.flush_notifications()
        while self._tasks_in_flight > 0 and not self._destroyed:
            await asyncio.sleep(0)
            self.flush_notifications()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def destroy(self) -> None:
        """Remove the injected sheet and drop listeners, presets and caches."""
        if self._destroyed:
            return
        if self._style_target is not None:
            self._style_target.remove()
        self._listeners.clear()
        self._deferred.clear()
        self._notification_scheduled = False
        self._presets.clear()
        self._css_cache.clear()
        self._last_css = ""
        self._destroyed = True
