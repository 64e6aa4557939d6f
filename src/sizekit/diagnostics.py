"""
Engine diagnostics — cache, pool and listener health at a glance.

This module inspects a SizeContext (and optionally a FluidSizeCalculator
and a SizeManager) and reports:
    - Per-cache occupancy and hit rates
    - Pool reuse statistics
    - Listener and generated-sheet counts
    - Warning flags for low hit rates and saturated caches

IMPORTANT: This is read-only. It never clears, resizes or resets anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sizekit.cache import CacheStats
from sizekit.constants import PERFORMANCE_CONFIG
from sizekit.context import SizeContext
from sizekit.fluid import FluidSizeCalculator
from sizekit.manager import SizeManager
from sizekit.pool import PoolStats


@dataclass
class PerformanceReport:
    """Point-in-time health report."""

    caches: Dict[str, CacheStats] = field(default_factory=dict)
    pool: Optional[PoolStats] = None
    pool_capacity: int = 0

    # Manager side
    listener_count: int = 0
    css_sheets_cached: int = 0

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def overall_hit_rate(self) -> float:
        hits = sum(s.hits for s in self.caches.values())
        lookups = sum(s.lookups for s in self.caches.values())
        return hits / lookups if lookups else 0.0


def analyze_context(
    context: SizeContext,
    calculator: Optional[FluidSizeCalculator] = None,
    manager: Optional[SizeManager] = None,
) -> PerformanceReport:
    """
    Collect statistics and flag caches that are not paying off.

    A cache is flagged when it has seen at least MIN_LOOKUPS_FOR_HIT_RATE
    lookups and its hit rate is below CACHE_HIT_RATE_WARNING, or when it
    is full (further inserts evict entries).
    """
    report = PerformanceReport()

    # =========================================================================
    # 1. CACHES
    # =========================================================================

    report.caches.update(context.cache_stats())
    if calculator is not None:
        report.caches.update(calculator.cache_stats())
    if manager is not None:
        report.caches["css"] = manager.css_cache.stats()

    min_lookups = PERFORMANCE_CONFIG["MIN_LOOKUPS_FOR_HIT_RATE"]
    threshold = PERFORMANCE_CONFIG["CACHE_HIT_RATE_WARNING"]
    for name, stats in report.caches.items():
        if stats.lookups >= min_lookups and stats.hit_rate < threshold:
            report.add_warning(
                f"Cache '{name}' hit rate {stats.hit_rate:.0%} is below {threshold:.0%} "
                f"over {stats.lookups} lookups"
            )
        if stats.size >= stats.capacity:
            report.add_warning(f"Cache '{name}' is full ({stats.size}/{stats.capacity}); entries are being evicted")

    # =========================================================================
    # 2. POOL
    # =========================================================================

    report.pool = context.pool.stats()
    report.pool_capacity = context.pool.capacity
    if report.pool.created >= report.pool_capacity and report.pool.hit_rate < threshold:
        report.add_warning(
            f"Size pool created {report.pool.created} instances with a "
            f"{report.pool.hit_rate:.0%} reuse rate; pooled sizes may not be disposed"
        )

    # =========================================================================
    # 3. MANAGER
    # =========================================================================

    if manager is not None:
        report.listener_count = manager.listener_count
        report.css_sheets_cached = len(manager.css_cache)

    return report


def format_report(report: PerformanceReport) -> str:
    """Human-readable multi-line rendering of a report."""
    lines = ["Performance Report", "Caches:"]
    for name, stats in report.caches.items():
        lines.append(
            f"  {name:<14} {stats.size:>4}/{stats.capacity:<4} "
            f"hits={stats.hits} misses={stats.misses} rate={stats.hit_rate:.0%}"
        )
    if report.pool is not None:
        lines.append(
            f"Pool: {report.pool.pool_size}/{report.pool_capacity} idle, "
            f"created={report.pool.created} reuse={report.pool.hit_rate:.0%}"
        )
    lines.append(f"Listeners: {report.listener_count}  Cached sheets: {report.css_sheets_cached}")
    for warning in report.warnings:
        lines.append(f"WARNING: {warning}")
    return "\n".join(lines)
