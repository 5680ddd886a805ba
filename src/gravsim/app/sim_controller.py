"""Headless consumer of simulation snapshots."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ..core.diagnostics import (
    angular_momentum,
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    total_energy,
)
from ..core.driver import Clock, DriverConfig, SimulationDriver
from ..core.math import norm
from ..core.state import SimState
from ..io.presets import build_preset, preset_units
from ..io.scenario import load_scenario, scenario_to_runtime
from ..io.units import UnitsConfig, config_from_defn, default_config


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SimulationRuntime:
    driver: SimulationDriver
    config: DriverConfig
    initial_state: SimState


class SimulationController:
    """Owns a driver and keeps the newest snapshot it produced.

    ``poll()`` never blocks; it is meant to be called from an event loop or
    timer tick on the consumer side.
    """

    def __init__(self, clock: Clock = time.perf_counter) -> None:
        self.scenario_path: Path | None = None
        self.scenario_def: dict[str, Any] | None = None
        self.runtime: SimulationRuntime | None = None
        self.latest: SimState | None = None
        self.units: UnitsConfig = default_config()
        self.snapshots_received = 0
        self._clock = clock

    def load_scenario(self, path: str | Path) -> None:
        scenario_path = Path(path)
        defn = load_scenario(scenario_path)
        self.load_definition(defn)
        self.scenario_path = scenario_path

    def load_definition(self, defn: dict[str, Any]) -> None:
        state, config = scenario_to_runtime(defn)
        self.load_state(state, config)
        self.scenario_def = defn
        self.units = config_from_defn(defn)

    def load_preset(self, name: str, config: DriverConfig | None = None) -> None:
        self.load_state(build_preset(name), config)
        self.units = preset_units(name)

    def load_state(self, state: SimState, config: DriverConfig | None = None) -> None:
        if self.running:
            raise RuntimeError("stop the running simulation before loading another")
        config = config if config is not None else DriverConfig()
        self.runtime = SimulationRuntime(
            driver=SimulationDriver.from_config(state.clone(), config, clock=self._clock),
            config=config,
            initial_state=state.clone(),
        )
        self.latest = state.clone()
        self.snapshots_received = 0
        logger.debug("loaded state with %d bodies", len(state))

    @property
    def running(self) -> bool:
        return self.runtime is not None and self.runtime.driver.running

    def start(self) -> None:
        if self.runtime is None:
            raise RuntimeError("no simulation loaded")
        self.runtime.driver.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        if self.runtime is None:
            return
        driver = self.runtime.driver
        if driver.running or driver.error is not None:
            driver.stop(timeout=timeout)
        self.poll()

    def reset(self) -> bool:
        """Rebuild a fresh, stopped driver from the initial state."""
        if self.runtime is None:
            return False
        self.stop()
        self.load_state(self.runtime.initial_state, self.runtime.config)
        return True

    def poll(self) -> SimState | None:
        """Take pending snapshots, keep the newest and return it if any."""
        if self.runtime is None:
            return None
        items = self.runtime.driver.channel.drain()
        if not items:
            return None
        self.snapshots_received += len(items)
        self.latest = items[-1]
        return self.latest

    def body_positions(self) -> np.ndarray:
        if self.latest is None:
            return np.zeros((0, 2), dtype=np.float64)
        return self.latest.positions

    def body_names(self) -> list[str | None]:
        if self.latest is None:
            return []
        return self.latest.names

    def diagnostics(self) -> dict[str, float | int]:
        if self.latest is None:
            return {"snapshots": 0}
        state = self.latest
        p = linear_momentum(state)
        info: dict[str, float | int] = {
            "snapshots": self.snapshots_received,
            "bodies": len(state),
            "kinetic_energy": kinetic_energy(state),
            "energy": total_energy(state),
            "momentum": float(norm(p)),
            "angular_momentum": angular_momentum(state),
        }
        if len(state):
            offsets = state.positions - center_of_mass(state)
            info["extent"] = float(np.max(norm(offsets)))
        if self.runtime is not None:
            info["iterations"] = self.runtime.driver.iterations
            info["dropped"] = self.runtime.driver.channel.dropped
        return info
