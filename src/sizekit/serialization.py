"""
Serialization helpers for sizekit objects (presets, manager options,
fluid sizes and the persisted manager state).

Provides JSON/YAML round-trip via intermediate dict representation.
The persisted state blob keeps the camelCase layout shared with other
consumers of the same storage key:

    {"config": {"baseSize": 16}, "presetName": "default"}
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import yaml

from sizekit.fluid import FluidSize
from sizekit.model import SizeConfig, SizeManagerOptions, SizePreset
from sizekit.units import SizeUnit, SizeValue


def preset_to_dict(p: SizePreset) -> Dict[str, Any]:
    return {
        "name": p.name,
        "label": p.label,
        "description": p.description,
        "base_size": p.base_size,
        "category": p.category,
    }


def preset_from_dict(d: Dict[str, Any]) -> SizePreset:
    return SizePreset(
        name=d["name"],
        base_size=d["base_size"],
        label=d.get("label", ""),
        description=d.get("description", ""),
        category=d.get("category"),
    )


def options_to_dict(o: SizeManagerOptions) -> Dict[str, Any]:
    return {
        "storage_key": o.storage_key,
        "presets": [preset_to_dict(p) for p in o.presets],
        "listener_batch_size": o.listener_batch_size,
        "css_cache_size": o.css_cache_size,
        "css_prefix": o.css_prefix,
    }


def options_from_dict(d: Optional[Dict[str, Any]]) -> SizeManagerOptions:
    d = d or {}
    defaults = SizeManagerOptions()
    return SizeManagerOptions(
        storage_key=d.get("storage_key", defaults.storage_key),
        presets=[preset_from_dict(p) for p in d.get("presets", [])],
        listener_batch_size=d.get("listener_batch_size", defaults.listener_batch_size),
        css_cache_size=d.get("css_cache_size", defaults.css_cache_size),
        css_prefix=d.get("css_prefix", defaults.css_prefix),
    )


def options_to_json(o: SizeManagerOptions) -> str:
    return json.dumps(options_to_dict(o), sort_keys=True)


def options_from_json(s: str) -> SizeManagerOptions:
    return options_from_dict(json.loads(s))


def options_to_yaml(o: SizeManagerOptions) -> str:
    return yaml.safe_dump(options_to_dict(o))


def options_from_yaml(s: str) -> SizeManagerOptions:
    return options_from_dict(yaml.safe_load(s))


def presets_from_yaml(s: str) -> List[SizePreset]:
    """Load a preset file: a YAML list of preset mappings."""
    return [preset_from_dict(p) for p in yaml.safe_load(s) or []]


def presets_to_yaml(presets: List[SizePreset]) -> str:
    return yaml.safe_dump([preset_to_dict(p) for p in presets])


def size_value_to_dict(v: SizeValue) -> Dict[str, Any]:
    return {"value": v.value, "unit": v.unit.value}


def size_value_from_dict(d: Dict[str, Any]) -> SizeValue:
    return SizeValue(d["value"], SizeUnit(d.get("unit", "px")))


def fluid_size_to_dict(f: FluidSize) -> Dict[str, Any]:
    return {
        "min": size_value_to_dict(f.min),
        "max": size_value_to_dict(f.max),
        "viewport_min": f.viewport_min,
        "viewport_max": f.viewport_max,
        "clamp": f.clamp,
    }


def fluid_size_from_dict(d: Dict[str, Any]) -> FluidSize:
    defaults = FluidSize(min=SizeValue(0), max=SizeValue(0))
    return FluidSize(
        min=size_value_from_dict(d["min"]),
        max=size_value_from_dict(d["max"]),
        viewport_min=d.get("viewport_min", defaults.viewport_min),
        viewport_max=d.get("viewport_max", defaults.viewport_max),
        clamp=d.get("clamp", defaults.clamp),
    )


def fluid_presets_from_yaml(s: str) -> Dict[str, FluidSize]:
    """Load named fluid sizes: a YAML mapping of name -> fluid size mapping."""
    return {name: fluid_size_from_dict(d) for name, d in (yaml.safe_load(s) or {}).items()}


def state_to_blob(config: SizeConfig, preset_name: str) -> str:
    return json.dumps({"config": {"baseSize": config.base_size}, "presetName": preset_name})


def state_from_blob(s: str) -> Tuple[Optional[float], Optional[str]]:
    """
    Parse a persisted state blob.

    Returns:
        (base_size, preset_name); either is None when absent. The base
        size is returned unvalidated.

    Raises:
        ValueError: If the blob is not JSON or not a JSON object
    """
    d = json.loads(s)
    if not isinstance(d, dict):
        raise ValueError(f"Expected a JSON object, got {type(d).__name__}")

    base_size = None
    config = d.get("config")
    if isinstance(config, dict):
        base_size = config.get("baseSize")

    preset_name = d.get("presetName")
    if not isinstance(preset_name, str) or not preset_name:
        preset_name = None
    return base_size, preset_name
