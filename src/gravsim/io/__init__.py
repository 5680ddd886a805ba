"""Scenario I/O namespace."""

from .presets import build_preset, preset_names  # noqa: F401
from .scenario import load_scenario, save_scenario, scenario_to_runtime  # noqa: F401
