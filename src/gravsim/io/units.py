"""Units presets and conversions for scenario I/O.

Scenario files give positions in the preset's length unit, velocities in
length unit per time unit, masses in the preset's mass unit and the
gravitational constant in SI (metres, kilograms, seconds). Runtime states keep
positions in the preset length unit and record ``length_unit`` (metres per
position unit) so the force kernel can correct distances; velocities are
converted to position units per second and the gravitational constant is
rescaled to the preset mass unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True, slots=True)
class UnitPreset:
    name: str
    L: float
    M: float
    T: float
    length_label: str
    mass_label: str
    time_label: str


@dataclass(frozen=True, slots=True)
class UnitsConfig:
    preset: str
    enabled: bool = True


PRESETS: dict[str, UnitPreset] = {
    "SI": UnitPreset("SI", 1.0, 1.0, 1.0, "m", "kg", "s"),
    "KM": UnitPreset("KM", 1000.0, 1.0, 1.0, "km", "kg", "s"),
    "PLANETARY": UnitPreset("PLANETARY", 1000.0, 1e24, 1.0, "km", "1e24 kg", "s"),
    "ASTRO": UnitPreset(
        "ASTRO",
        149_597_870_700.0,
        1.98847e30,
        86_400.0,
        "AU",
        "Msun",
        "day",
    ),
}


def get_preset(name: str) -> UnitPreset:
    if name not in PRESETS:
        raise ValueError(f"unknown units preset: {name}")
    return PRESETS[name]


def default_config() -> UnitsConfig:
    return UnitsConfig(preset="SI", enabled=True)


def config_from_defn(defn: dict[str, Any]) -> UnitsConfig:
    units = defn.get("units", {})
    if not isinstance(units, dict):
        return default_config()
    preset = str(units.get("preset", "SI")).upper()
    enabled = bool(units.get("enabled", True))
    if preset not in PRESETS:
        preset = "SI"
    return UnitsConfig(preset=preset, enabled=enabled)


def label_for(kind: str, cfg: UnitsConfig) -> str:
    """Display label for a runtime quantity.

    Runtime states count time in seconds whatever the preset; only
    ``scenario_velocity`` (velocities as written in scenario files) uses the
    preset's time unit.
    """
    preset = effective_preset(cfg)
    l = preset.length_label
    m = preset.mass_label
    labels = {
        "length": l,
        "mass": m,
        "velocity": f"{l}/s",
        "momentum": f"{m} {l}/s",
        "energy": f"{m} {l}^2/s^2",
        "scenario_velocity": f"{l}/{preset.time_label}",
    }
    if kind not in labels:
        raise ValueError(f"unsupported unit kind: {kind}")
    return labels[kind]


def length_unit(cfg: UnitsConfig) -> float:
    """Metres per position unit for states built under ``cfg``."""
    return effective_preset(cfg).L


def velocity_to_state(value: Any, cfg: UnitsConfig) -> Any:
    """Convert length/time-unit velocities to position units per second."""
    return _apply_scale(value, 1.0 / effective_preset(cfg).T)


def grav_const_to_state(grav_const: float, cfg: UnitsConfig) -> float:
    """Rescale an SI gravitational constant to the preset's mass unit."""
    return float(grav_const) * effective_preset(cfg).M


def effective_preset(cfg: UnitsConfig) -> UnitPreset:
    return get_preset(cfg.preset if cfg.enabled else "SI")


def _apply_scale(value: Any, scale: float) -> Any:
    if isinstance(value, (list, tuple, np.ndarray)):
        arr = np.asarray(value, dtype=np.float64)
        return (arr * scale).astype(np.float64)
    return float(value) * scale
