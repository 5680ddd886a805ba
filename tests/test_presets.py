from __future__ import annotations

import numpy as np
import pytest

from gravsim.analysis.orbits import circular_speed, pericenter, vis_viva_speed
from gravsim.core.diagnostics import linear_momentum, total_mass
from gravsim.io.presets import (
    build_preset,
    preset_names,
    preset_units,
    solar_system,
    two_body_circular,
)


def test_two_body_preset_is_momentum_free() -> None:
    state = two_body_circular()
    assert len(state) == 2
    assert np.allclose(linear_momentum(state), 0.0, atol=1e-12)

    raw = two_body_circular(adjust_momentum=False)
    assert np.allclose(raw.get_body(0).vel, 0.0)
    assert np.isclose(raw.get_body(1).vel[1], np.sqrt(1.1))


def test_solar_system_preset() -> None:
    state = solar_system()
    assert state.names == ["Sun", "Earth", "Moon", "Test body"]
    assert state.length_unit == 1000.0
    sun = state.get_body(state.body_by_name("Sun"))
    earth = state.get_body(state.body_by_name("Earth"))

    assert earth.distance_from(sun) == pytest.approx(pericenter(1.496e8, 0.0167))
    mu_sun = state.grav_const * sun.mass / state.length_unit**3
    rel_speed = np.linalg.norm(earth.vel - sun.vel)
    assert rel_speed == pytest.approx(
        vis_viva_speed(mu_sun, 1.496e8, pericenter(1.496e8, 0.0167)), rel=1e-3
    )
    assert rel_speed == pytest.approx(30.29, rel=1e-2)
    p = np.linalg.norm(linear_momentum(state))
    assert p / total_mass(state) < 1e-12


def test_solar_system_test_body_is_circular() -> None:
    state = solar_system()
    sun = state.get_body(state.body_by_name("Sun"))
    test_body = state.get_body(state.body_by_name("Test body"))
    assert test_body.mass == 0.01
    r = test_body.distance_from(sun)
    mu_sun = state.grav_const * sun.mass / state.length_unit**3
    rel_speed = np.linalg.norm(test_body.vel - sun.vel)
    assert rel_speed == pytest.approx(circular_speed(mu_sun, r), rel=1e-6)


def test_build_preset() -> None:
    assert set(preset_names()) == {"two_body", "solar_system"}
    assert len(build_preset("two_body")) == 2
    with pytest.raises(ValueError, match="unknown preset"):
        build_preset("nope")


def test_preset_units() -> None:
    assert preset_units("two_body").preset == "SI"
    assert preset_units("solar_system").preset == "PLANETARY"
    with pytest.raises(ValueError, match="unknown preset"):
        preset_units("nope")
