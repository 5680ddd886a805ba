from __future__ import annotations

import time
from pathlib import Path

import numpy as np
import pytest

from gravsim.app.sim_controller import SimulationController
from gravsim.core.driver import DriverConfig


def _scenario_path() -> Path:
    return Path(__file__).resolve().parents[1] / "examples" / "scenarios" / "two_body_orbit_v1.json"


def _poll_until_snapshot(controller: SimulationController, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if controller.poll() is not None:
            return True
        time.sleep(0.005)
    return False


def test_load_scenario_builds_runtime() -> None:
    controller = SimulationController()
    controller.load_scenario(_scenario_path())
    assert controller.runtime is not None
    assert controller.scenario_path == _scenario_path()
    assert controller.body_names() == ["primary", "secondary"]
    assert controller.body_positions().shape == (2, 2)
    assert not controller.running


def test_start_poll_stop() -> None:
    controller = SimulationController()
    controller.load_scenario(_scenario_path())
    initial = controller.body_positions()
    controller.start()
    try:
        assert _poll_until_snapshot(controller)
    finally:
        controller.stop()
    assert not controller.running
    assert controller.snapshots_received >= 1
    assert not np.array_equal(controller.body_positions(), initial)

    info = controller.diagnostics()
    assert info["bodies"] == 2
    assert info["iterations"] > 0
    assert info["energy"] < 0.0


def test_reset_restores_initial_positions() -> None:
    controller = SimulationController()
    controller.load_preset("two_body", DriverConfig(frame_interval=0.001))
    initial = controller.body_positions()
    controller.start()
    assert _poll_until_snapshot(controller)
    assert controller.reset()
    assert not controller.running
    assert np.array_equal(controller.body_positions(), initial)
    assert controller.snapshots_received == 0


def test_controller_without_simulation() -> None:
    controller = SimulationController()
    assert controller.poll() is None
    assert controller.diagnostics() == {"snapshots": 0}
    assert not controller.reset()
    assert controller.body_positions().shape == (0, 2)
    with pytest.raises(RuntimeError, match="no simulation loaded"):
        controller.start()


def test_cannot_load_while_running() -> None:
    controller = SimulationController()
    controller.load_preset("two_body")
    controller.start()
    try:
        with pytest.raises(RuntimeError, match="stop the running simulation"):
            controller.load_preset("two_body")
    finally:
        controller.stop()


def test_units_follow_loaded_source() -> None:
    controller = SimulationController()
    assert controller.units.preset == "SI"
    controller.load_preset("solar_system")
    assert controller.units.preset == "PLANETARY"
    scenario = _scenario_path().parent / "fixed_background_v1.json"
    controller.load_scenario(scenario)
    assert controller.units.preset == "KM"


def test_diagnostics_report_extent_from_center_of_mass() -> None:
    controller = SimulationController()
    controller.load_preset("two_body")
    info = controller.diagnostics()
    # the secondary sits 10/11 of the separation from the centre of mass
    assert info["extent"] == pytest.approx(10.0 * 10.0 / 11.0)
