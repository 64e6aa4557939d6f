"""
SizePool — reuse store for Size instances.

Transient Size objects (operands of add/subtract/equals, pooled results)
are drawn from and handed back to a bounded free list instead of being
discarded, which keeps allocation churn low on hot paths.

OWNERSHIP RULE:
    release() is a hand-off, not a copy.
    After releasing a Size the caller must not touch it again:
    the next acquire() may hand the same object to someone else.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from sizekit.constants import DEFAULT_ROOT_FONT_SIZE, PERFORMANCE_CONFIG
from sizekit.size import Size

if TYPE_CHECKING:
    from sizekit.context import SizeContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolStats:
    """Point-in-time pool counters."""
    pool_size: int
    hits: int
    misses: int
    created: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class SizePool:
    """
    Bounded free list of pool-managed Size instances.

    Properties:
        capacity: Maximum number of idle instances kept
        cleanup_interval: Minimum seconds between trims of the free list
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        context: SizeContext,
        capacity: int = PERFORMANCE_CONFIG["MAX_SIZE_POOL"],
        cleanup_interval: float = PERFORMANCE_CONFIG["CLEANUP_INTERVAL"],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._context = context
        self._capacity = capacity
        self._cleanup_interval = cleanup_interval
        self._clock = clock
        self._lock = Lock()
        self._free: List[Size] = []
        self._hits = 0
        self._misses = 0
        self._created = 0
        self._last_cleanup = clock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def _cleanup(self) -> None:
        # Caller holds the lock
        now = self._clock()
        if now - self._last_cleanup > self._cleanup_interval:
            keep = self._capacity // 2
            if len(self._free) > keep:
                logger.debug("Trimming size pool from %d to %d", len(self._free), keep)
                del self._free[keep:]
            self._last_cleanup = now

    def acquire(self, raw: Any = 0, root_font_size: float = DEFAULT_ROOT_FONT_SIZE) -> Size:
        """
        Get a pool-managed Size holding `raw`.

        Reuses an idle instance when one is available, otherwise creates one.
        """
        reused: Optional[Size] = None
        with self._lock:
            self._cleanup()
            if self._free:
                self._hits += 1
                reused = self._free.pop()
            else:
                self._misses += 1
                self._created += 1

        if reused is not None:
            reused.reset(raw, root_font_size)
            return reused

        size = Size(raw, self._context, root_font_size)
        size.flags.pooled = True
        return size

    def release(self, size: Size) -> None:
        """
        Take back a pool-managed Size.

        The instance is zeroed (0px, caches and flags cleared) and kept if
        the free list has room, otherwise dropped. Instances that were never
        pool-managed, or are already idle in the pool, are ignored.
        """
        with self._lock:
            if not size.flags.pooled or size.flags.in_pool:
                return
            size._prepare_for_pool()
            if len(self._free) < self._capacity:
                size.flags.in_pool = True
                self._free.append(size)

    def clear(self) -> None:
        """Drop every idle instance and reset the counters."""
        with self._lock:
            for size in self._free:
                size.flags.in_pool = False
            self._free.clear()
            self._hits = 0
            self._misses = 0
            self._created = 0

    def stats(self) -> PoolStats:
        with self._lock:
            return PoolStats(
                pool_size=len(self._free),
                hits=self._hits,
                misses=self._misses,
                created=self._created,
            )

    def __len__(self) -> int:
        return len(self._free)
