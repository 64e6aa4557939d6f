"""
Tests for engine diagnostics.

Tests verify that analyze_context correctly:
    - Collects cache and pool statistics
    - Flags low hit rates and saturated caches
    - Stays read-only
"""

from sizekit.context import SizeContext
from sizekit.diagnostics import analyze_context, format_report
from sizekit.fluid import FluidSizeCalculator
from sizekit.manager import SizeManager
from sizekit.model import SizeManagerOptions


def test_fresh_context_is_healthy():
    """A brand-new context has no warnings."""
    report = analyze_context(SizeContext())
    assert report.warnings == []
    assert set(report.caches) == {"parse", "format", "conversion", "css_var"}
    assert report.pool.pool_size == 0
    assert report.overall_hit_rate == 0.0


def test_low_hit_rate_is_flagged():
    """Many distinct lookups with no reuse produce a warning."""
    context = SizeContext()
    for i in range(30):
        context.parse(f"{i}px")

    report = analyze_context(context)
    assert any("'parse' hit rate" in w for w in report.warnings)


def test_good_hit_rate_is_not_flagged():
    """Repeated lookups keep the hit rate above the threshold."""
    context = SizeContext()
    for _ in range(30):
        context.parse("1rem")

    report = analyze_context(context)
    assert report.caches["parse"].hit_rate > 0.9
    assert report.warnings == []


def test_saturated_cache_is_flagged():
    """A full cache is reported."""
    manager = SizeManager(SizeManagerOptions(css_cache_size=1))
    manager.generate_css()

    report = analyze_context(SizeContext(), manager=manager)
    assert any("'css' is full" in w for w in report.warnings)
    assert report.css_sheets_cached == 1


def test_undisposed_pool_is_flagged():
    """A pool that only creates instances is reported."""
    context = SizeContext(pool_capacity=2)
    for i in range(3):
        context.size(i)

    report = analyze_context(context)
    assert report.pool.created == 3
    assert any("Size pool" in w for w in report.warnings)


def test_calculator_and_manager_are_included():
    """Fluid caches and manager counts appear in the report."""
    calc = FluidSizeCalculator()
    calc.fluid_size(1, 2)
    manager = SizeManager()
    manager.subscribe(lambda config: None)

    report = analyze_context(SizeContext(), calculator=calc, manager=manager)
    assert {"fluid", "slope", "modular_scale", "css"} <= set(report.caches)
    assert report.listener_count == 1


def test_analysis_is_read_only():
    """Analyzing does not reset any counter."""
    context = SizeContext()
    context.parse("1rem")
    context.parse("1rem")
    analyze_context(context)
    assert context.parse_cache.stats().hits == 1


def test_format_report():
    """The text rendering lists caches and warnings."""
    context = SizeContext()
    for i in range(30):
        context.parse(f"{i}px")
    text = format_report(analyze_context(context))
    assert text.startswith("Performance Report")
    assert "parse" in text
    assert "WARNING:" in text
