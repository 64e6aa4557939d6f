"""
Tests for serialization of presets, manager options, fluid sizes and the
persisted state blob.

These tests ensure JSON/YAML round-trip using the explicit
serialization functions in `sizekit.serialization`.
"""

import json

import pytest

from sizekit.fluid import FluidSize, FluidSizeCalculator
from sizekit.manager import SizeManager
from sizekit.model import SizeConfig, SizeManagerOptions, SizePreset
from sizekit.serialization import (
    fluid_presets_from_yaml,
    fluid_size_from_dict,
    fluid_size_to_dict,
    options_from_json,
    options_from_yaml,
    options_to_json,
    options_to_yaml,
    presets_from_yaml,
    presets_to_yaml,
    state_from_blob,
    state_to_blob,
)
from sizekit.units import SizeUnit, SizeValue


def build_sample_options() -> SizeManagerOptions:
    return SizeManagerOptions(
        storage_key="app-size",
        presets=[
            SizePreset(name="tiny", base_size=12, label="Tiny", category="density"),
            SizePreset(name="presentation", base_size=24, description="Large screens"),
        ],
        listener_batch_size=5,
        css_cache_size=10,
        css_prefix="app",
    )


class TestOptions:
    """Manager options round-trip."""

    def test_json_round_trip(self):
        """Should restore identical options from JSON."""
        options = build_sample_options()
        assert options_from_json(options_to_json(options)) == options

    def test_yaml_round_trip(self):
        """Should restore identical options from YAML."""
        options = build_sample_options()
        assert options_from_yaml(options_to_yaml(options)) == options

    def test_partial_yaml_uses_defaults(self):
        """Should fill unspecified fields with defaults."""
        options = options_from_yaml("storage_key: custom\n")
        assert options.storage_key == "custom"
        assert options.listener_batch_size == 10
        assert options.presets == []

    def test_empty_yaml(self):
        """Should accept an empty document."""
        assert options_from_yaml("") == SizeManagerOptions()

    def test_loaded_options_drive_a_manager(self):
        """Should produce options a SizeManager accepts as is."""
        manager = SizeManager(options_from_yaml(options_to_yaml(build_sample_options())))
        assert manager.apply_preset("presentation")
        assert "--app-base: 24px;" in manager.generate_css()


class TestPresetFiles:
    """Preset lists in YAML."""

    def test_presets_from_yaml(self):
        """Should read a list of preset mappings."""
        presets = presets_from_yaml(
            "- name: kiosk\n"
            "  base_size: 20\n"
            "  label: Kiosk\n"
            "- name: dense\n"
            "  base_size: 13\n"
        )
        assert [p.name for p in presets] == ["kiosk", "dense"]
        assert presets[0].label == "Kiosk"
        assert presets[1].category is None

    def test_presets_round_trip(self):
        """Should write what it reads."""
        presets = build_sample_options().presets
        assert presets_from_yaml(presets_to_yaml(presets)) == presets


class TestFluidSizes:
    """Fluid size definitions."""

    def test_round_trip(self):
        """Should keep units and viewport range."""
        fluid = FluidSize(min=SizeValue(1, SizeUnit.REM), max=SizeValue(40, SizeUnit.PX),
                          viewport_min=375, viewport_max=1440, clamp=False)
        assert fluid_size_from_dict(fluid_size_to_dict(fluid)) == fluid

    def test_fluid_presets_from_yaml(self):
        """Should load named fluid sizes with defaults for missing fields."""
        presets = fluid_presets_from_yaml(
            "hero:\n"
            "  min: {value: 32, unit: px}\n"
            "  max: {value: 64, unit: px}\n"
        )
        hero = presets["hero"]
        assert hero.viewport_min == 320
        assert hero.clamp
        assert FluidSizeCalculator().create_fluid_size(hero).startswith("clamp(32px, ")


class TestStateBlob:
    """Persisted {config, presetName} layout."""

    def test_layout(self):
        """Should use the camelCase storage layout."""
        blob = state_to_blob(SizeConfig(base_size=14), "compact")
        assert json.loads(blob) == {"config": {"baseSize": 14}, "presetName": "compact"}

    def test_round_trip(self):
        """Should read back base size and preset name."""
        assert state_from_blob(state_to_blob(SizeConfig(base_size=18), "spacious")) == (18, "spacious")

    def test_missing_fields(self):
        """Should return None for absent parts."""
        assert state_from_blob("{}") == (None, None)
        assert state_from_blob('{"presetName": ""}') == (None, None)

    @pytest.mark.parametrize("blob", ["{oops", "[1, 2]", "42"])
    def test_malformed(self, blob):
        """Should raise ValueError for non-object or invalid JSON."""
        with pytest.raises(ValueError):
            state_from_blob(blob)
