"""Scenario I/O and adapters."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np

from ..core.driver import DriverConfig
from ..core.state import Body, SimState
from .units import (
    PRESETS,
    config_from_defn,
    grav_const_to_state,
    length_unit,
    velocity_to_state,
)


logger = logging.getLogger(__name__)

ScenarioDefinition = dict[str, Any]

_DRIVER_KEYS = (
    "max_step",
    "frame_interval",
    "every_n",
    "channel_capacity",
    "overflow",
    "idle_sleep",
)


def load_scenario(path: str | Path) -> ScenarioDefinition:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    defn = validate_scenario(data)
    logger.debug("loaded scenario %s with %d bodies", path, len(defn["bodies"]))
    return defn


def save_scenario(path: str | Path, defn: ScenarioDefinition) -> None:
    Path(path).write_text(
        json.dumps(defn, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def scenario_to_runtime(defn: ScenarioDefinition) -> tuple[SimState, DriverConfig]:
    defn = validate_scenario(defn)
    units_cfg = config_from_defn(defn)
    sim = defn.get("simulation", {})

    state = SimState(
        grav_const=grav_const_to_state(sim.get("grav_const", 1.0), units_cfg),
        exponent=float(sim.get("exponent", -2.0)),
        time_scale=float(sim.get("time_scale", 1.0)),
        length_unit=length_unit(units_cfg),
        min_separation=float(sim.get("min_separation", 0.0)),
    )
    for entry in defn["bodies"]:
        state.add_body(
            Body(
                mass=float(entry["mass"]),
                pos=np.asarray(entry["pos"], dtype=np.float64),
                vel=velocity_to_state(entry["vel"], units_cfg),
                name=entry.get("name"),
            )
        )
    for name1, name2 in defn.get("suppress", []):
        state.suppress_by_name(name1, name2)
    if sim.get("adjust_momentum", False):
        state.adjust_for_total_momentum()

    driver_block = defn.get("driver", {})
    config = DriverConfig(
        **{key: driver_block[key] for key in _DRIVER_KEYS if key in driver_block}
    )
    return state, config


def _require(obj: dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"missing required field: {ctx}.{key}")
    return obj[key]


def _validate_vec2(value: Any, ctx: str) -> None:
    a = np.asarray(value, dtype=np.float64)
    if a.shape != (2,):
        raise ValueError(f"{ctx} must be an array of length 2")
    if not np.all(np.isfinite(a)):
        raise ValueError(f"{ctx} must be finite")


def _validate_number(value: Any, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{ctx} must be a number")
    if not np.isfinite(value):
        raise ValueError(f"{ctx} must be finite")
    return float(value)


def validate_scenario(data: Any) -> ScenarioDefinition:
    if not isinstance(data, dict):
        raise ValueError("scenario must be a JSON object")
    if data.get("schema_version") != 1:
        raise ValueError("schema_version must be 1")

    if "units" in data:
        units = data["units"]
        if not isinstance(units, dict):
            raise ValueError("units must be an object")
        preset = str(units.get("preset", "SI")).upper()
        if preset not in PRESETS:
            raise ValueError("units.preset is not supported")
        if "enabled" in units and not isinstance(units["enabled"], bool):
            raise ValueError("units.enabled must be boolean")

    sim = data.get("simulation", {})
    if not isinstance(sim, dict):
        raise ValueError("simulation must be an object")
    for key in ("grav_const", "exponent", "time_scale", "min_separation"):
        if key in sim:
            _validate_number(sim[key], f"simulation.{key}")
    if sim.get("min_separation", 0.0) < 0:
        raise ValueError("simulation.min_separation must be >= 0")
    if "adjust_momentum" in sim and not isinstance(sim["adjust_momentum"], bool):
        raise ValueError("simulation.adjust_momentum must be boolean")

    driver = data.get("driver", {})
    if not isinstance(driver, dict):
        raise ValueError("driver must be an object")
    unknown = set(driver) - set(_DRIVER_KEYS)
    if unknown:
        raise ValueError(f"unknown driver fields: {sorted(unknown)}")
    for key, value in driver.items():
        ctx = f"driver.{key}"
        if key == "overflow":
            if not isinstance(value, str):
                raise ValueError(f"{ctx} must be a string")
        elif key in ("every_n", "channel_capacity"):
            if key == "every_n" and value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{ctx} must be an integer")
        else:
            _validate_number(value, ctx)

    bodies = _require(data, "bodies", "scenario")
    if not isinstance(bodies, list):
        raise ValueError("bodies must be a list")
    names: set[str] = set()
    for idx, entry in enumerate(bodies):
        ctx = f"bodies[{idx}]"
        if not isinstance(entry, dict):
            raise ValueError(f"{ctx} must be an object")
        mass = _validate_number(_require(entry, "mass", ctx), f"{ctx}.mass")
        if mass <= 0:
            raise ValueError(f"{ctx}.mass must be > 0")
        _validate_vec2(_require(entry, "pos", ctx), f"{ctx}.pos")
        _validate_vec2(_require(entry, "vel", ctx), f"{ctx}.vel")
        name = entry.get("name")
        if name is not None:
            if not isinstance(name, str) or not name:
                raise ValueError(f"{ctx}.name must be a non-empty string")
            if name in names:
                raise ValueError(f"duplicate body name: {name}")
            names.add(name)
        if "radius" in entry and _validate_number(entry["radius"], f"{ctx}.radius") <= 0:
            raise ValueError(f"{ctx}.radius must be > 0")
        if "color" in entry:
            color = entry["color"]
            if (
                not isinstance(color, list)
                or len(color) != 3
                or any(isinstance(c, bool) or not isinstance(c, (int, float)) for c in color)
            ):
                raise ValueError(f"{ctx}.color must be a list of 3 numbers")

    suppress = data.get("suppress", [])
    if not isinstance(suppress, list):
        raise ValueError("suppress must be a list")
    for idx, pair in enumerate(suppress):
        ctx = f"suppress[{idx}]"
        if (
            not isinstance(pair, list)
            or len(pair) != 2
            or not all(isinstance(name, str) for name in pair)
        ):
            raise ValueError(f"{ctx} must be a pair of body names")
        for name in pair:
            if name not in names:
                raise ValueError(f"{ctx} references unknown body: {name}")
        if pair[0] == pair[1]:
            raise ValueError(f"{ctx} must name two different bodies")

    return data
