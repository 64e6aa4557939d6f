"""
Tests for FluidSizeCalculator.

Fluid sizes follow:
    slope     = (max - min) / (viewport_max - viewport_min)
    preferred = calc(<intercept>rem + <slope * 100>vw)
"""

import pytest

from sizekit.fluid import (
    DeviceClass,
    FLUID_TYPOGRAPHY_PRESETS,
    FluidSize,
    FluidSizeCalculator,
    ResponsiveSize,
    StaticViewportSource,
    Viewport,
)
from sizekit.units import SizeUnit, SizeValue


def px_range(low, high, **kwargs):
    return FluidSize(min=SizeValue(low, SizeUnit.PX), max=SizeValue(high, SizeUnit.PX), **kwargs)


def rem_range(low, high, **kwargs):
    return FluidSize(min=SizeValue(low, SizeUnit.REM), max=SizeValue(high, SizeUnit.REM), **kwargs)


class TestCreateFluidSize:
    """clamp()/calc() output."""

    def test_pixel_range(self):
        """Should grow 16px -> 32px over 320..1920 at 1vw."""
        calc = FluidSizeCalculator()
        assert calc.create_fluid_size(px_range(16, 32)) == "clamp(16px, calc(0.8rem + 1.0000vw), 32px)"

    def test_without_clamp(self):
        """Should return only the calc() expression."""
        calc = FluidSizeCalculator()
        assert calc.create_fluid_size(px_range(16, 32, clamp=False)) == "calc(0.8rem + 1.0000vw)"

    def test_rem_range(self):
        """Should keep a rem intercept as is."""
        calc = FluidSizeCalculator()
        assert calc.create_fluid_size(rem_range(1, 2)) == "clamp(1rem, calc(0.8rem + 0.0625vw), 2rem)"

    def test_typography_preset(self):
        """Should expose the h1 preset as a fluid size."""
        calc = FluidSizeCalculator()
        assert calc.fluid_text("h1") == "clamp(2rem, calc(1.6rem + 0.1250vw), 4rem)"

    def test_unknown_preset(self):
        """Should raise KeyError for an unknown preset name."""
        with pytest.raises(KeyError):
            FluidSizeCalculator().fluid_text("h9")

    def test_empty_viewport_range_propagates_infinity(self):
        """Should not raise when viewport_min equals viewport_max."""
        calc = FluidSizeCalculator()
        result = calc.create_fluid_size(px_range(16, 32, viewport_min=320, viewport_max=320))
        assert "Infinityvw" in result

    def test_results_are_cached(self):
        """Should serve repeated configurations from the cache."""
        calc = FluidSizeCalculator()
        calc.create_fluid_size(px_range(16, 32))
        calc.create_fluid_size(px_range(16, 32))
        stats = calc.cache_stats()
        assert stats["fluid"].hits == 1
        assert stats["slope"].misses == 1

    def test_fluid_size_shorthand(self):
        """Should build a rem range over the default viewports."""
        calc = FluidSizeCalculator()
        assert calc.fluid_size(1, 2) == calc.create_fluid_size(rem_range(1, 2))


class TestModularScale:
    """Geometric scales."""

    def test_scale_values(self):
        """Should produce 2*steps+1 values around the base."""
        calc = FluidSizeCalculator()
        assert calc.generate_modular_scale(16, 1.25, 2, SizeUnit.PX) == [
            "10.240px", "12.800px", "16.000px", "20.000px", "25.000px",
        ]

    def test_default_unit_is_rem(self):
        """Should default to rem with three decimals."""
        calc = FluidSizeCalculator()
        assert calc.modular_scale(1, "major_third", 1) == ["0.800rem", "1.000rem", "1.250rem"]

    def test_cached_result_is_a_copy(self):
        """Should not let callers corrupt the cached scale."""
        calc = FluidSizeCalculator()
        first = calc.generate_modular_scale(1, 2, 1)
        first.append("bogus")
        assert calc.generate_modular_scale(1, 2, 1) == ["0.500rem", "1.000rem", "2.000rem"]
        assert calc.cache_stats()["modular_scale"].hits == 1

    def test_zero_ratio(self):
        """Should yield Infinity instead of raising for 0 ** -n."""
        calc = FluidSizeCalculator()
        assert calc.generate_modular_scale(1, 0, 1)[0] == "Infinityrem"

    def test_tie_rounds_up(self):
        """Should round an exact half step away from zero."""
        calc = FluidSizeCalculator()
        assert calc.generate_modular_scale(1, 2, 4)[0] == "0.063rem"

    def test_fluid_modular_scale(self):
        """Should turn every step into a fluid size."""
        calc = FluidSizeCalculator()
        scale = calc.create_fluid_modular_scale(1, 2, 2, steps=1)
        assert len(scale) == 3
        assert scale[1] == calc.create_fluid_size(rem_range(1, 2))


class TestViewportTracking:
    """Reaction to viewport changes."""

    def fill(self, calc, count):
        for i in range(count):
            calc.create_fluid_size(px_range(i, i + 10))

    def test_partial_clear_on_change(self):
        """Should keep only the 50 oldest entries on a real change."""
        source = StaticViewportSource()
        calc = FluidSizeCalculator(source)
        self.fill(calc, 60)
        assert len(calc.caches()["fluid"]) == 60

        source.update(Viewport(375, 667, DeviceClass.MOBILE))
        assert len(calc.caches()["fluid"]) == 50
        assert calc.viewport.device == DeviceClass.MOBILE

    def test_same_viewport_keeps_cache(self):
        """Should ignore an update that changes nothing."""
        source = StaticViewportSource()
        calc = FluidSizeCalculator(source)
        self.fill(calc, 60)
        source.update(source.get_viewport())
        assert len(calc.caches()["fluid"]) == 60

    def test_small_cache_untouched(self):
        """Should leave a cache at or below the retain size alone."""
        source = StaticViewportSource()
        calc = FluidSizeCalculator(source)
        self.fill(calc, 20)
        source.update(Viewport(800, 600, DeviceClass.TABLET))
        assert len(calc.caches()["fluid"]) == 20

    def test_destroy_unsubscribes(self):
        """Should detach from the source and drop caches."""
        source = StaticViewportSource()
        calc = FluidSizeCalculator(source)
        self.fill(calc, 5)
        assert source.listener_count == 1

        calc.destroy()
        calc.destroy()
        assert source.listener_count == 0
        assert calc.is_destroyed
        assert all(stats.size == 0 for stats in calc.cache_stats().values())


class TestResponsive:
    """Device-based selection and helpers."""

    def at(self, device):
        return FluidSizeCalculator(StaticViewportSource(Viewport(1000, 800, device)))

    def test_mobile_prefers_xs(self):
        """Should pick xs on mobile."""
        assert self.at(DeviceClass.MOBILE).create_responsive_size(ResponsiveSize(base=16, xs=12)) == "12px"

    def test_falls_back_to_base(self):
        """Should fall back to base when the breakpoint is unset."""
        assert self.at(DeviceClass.TABLET).create_responsive_size(ResponsiveSize(base="1rem", xs=12)) == "1rem"

    def test_widescreen_prefers_xxl_then_xl(self):
        """Should try xxl, then xl, then base."""
        calc = self.at(DeviceClass.WIDESCREEN)
        assert calc.create_responsive_size(ResponsiveSize(base=16, xl=20)) == "20px"
        assert calc.create_responsive_size(ResponsiveSize(base=16, xl=20, xxl=24)) == "24px"

    def test_zero_breakpoint_is_used(self):
        """Should treat an explicit 0 as set."""
        assert self.at(DeviceClass.DESKTOP).create_responsive_size(ResponsiveSize(base=16, xl=0)) == "0"

    def test_fluid_override(self):
        """Should use the fluid definition when present."""
        calc = self.at(DeviceClass.MOBILE)
        fluid = px_range(16, 32)
        assert calc.create_responsive_size(ResponsiveSize(base=16, xs=12, fluid=fluid)) == \
            calc.create_fluid_size(fluid)

    def test_line_height(self):
        """Should loosen leading for small text."""
        assert FluidSizeCalculator.get_optimal_line_height(14) == 1.6
        assert FluidSizeCalculator.get_optimal_line_height(60) == 1.2
        assert FluidSizeCalculator.get_optimal_line_height(0.9, SizeUnit.REM) == 1.6

    def test_responsive_spacing(self):
        """Should shrink padding on mobile and express it in rem."""
        assert FluidSizeCalculator.calculate_responsive_spacing(16, DeviceClass.MOBILE, "padding") == "0.750rem"
        assert FluidSizeCalculator.calculate_responsive_spacing(16, DeviceClass.DESKTOP, "margin") == "1.000rem"
        assert FluidSizeCalculator.calculate_responsive_spacing(16, DeviceClass.TV, "gap") == "1.500rem"
        assert FluidSizeCalculator.calculate_responsive_spacing(1, DeviceClass.DESKTOP, "gap") == "0.063rem"

    def test_presets_are_rem(self):
        """Should define every typography preset in rem."""
        assert all(p.min.unit == SizeUnit.REM for p in FLUID_TYPOGRAPHY_PRESETS.values())
