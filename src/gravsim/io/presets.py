"""Built-in scenarios constructed directly as runtime states."""

from __future__ import annotations

from typing import Callable

from ..analysis.orbits import (
    circular_period,
    circular_speed,
    pericenter,
    power_law_circular_speed,
    vis_viva_speed,
)
from ..core.state import Body, SimState
from .units import UnitsConfig, default_config, grav_const_to_state, length_unit


G_SI = 6.67430e-11

SOLAR_SYSTEM_UNITS = UnitsConfig(preset="PLANETARY")


def two_body_circular(
    m1: float = 10.0,
    m2: float = 1.0,
    separation: float = 10.0,
    grav_const: float = 1.0,
    exponent: float = -2.0,
    time_scale: float = 1.0,
    adjust_momentum: bool = True,
) -> SimState:
    """Heavy body at the origin, light body on a circular relative orbit.

    The light body starts at ``(separation, 0)`` moving along +y with the
    relative circular speed for the combined mass.
    """
    v = power_law_circular_speed(grav_const, m1 + m2, separation, exponent)
    state = SimState(grav_const=grav_const, exponent=exponent, time_scale=time_scale)
    state.add_body(Body(mass=m1, pos=(0.0, 0.0), vel=(0.0, 0.0), name="primary"))
    state.add_body(Body(mass=m2, pos=(separation, 0.0), vel=(0.0, v), name="secondary"))
    if adjust_momentum:
        state.adjust_for_total_momentum()
    return state


def two_body_period(
    m1: float = 10.0,
    m2: float = 1.0,
    separation: float = 10.0,
    grav_const: float = 1.0,
    exponent: float = -2.0,
) -> float:
    """Period in simulated seconds of the orbit built by ``two_body_circular``."""
    v = power_law_circular_speed(grav_const, m1 + m2, separation, exponent)
    return circular_period(separation, v)


def solar_system(time_scale: float = 86_400.0) -> SimState:
    """Sun, Earth and Moon starting at their pericenters, plus a light test
    body on a circular orbit at a third of Earth's distance.

    Positions are in km and masses in 1e24 kg; by default one wall-clock
    second advances one simulated day.
    """
    cfg = SOLAR_SYSTEM_UNITS
    L = length_unit(cfg)
    G = grav_const_to_state(G_SI, cfg)

    m_sun = 1.989e6
    m_earth = 5.972
    m_moon = 0.07342
    m_test = 0.01

    a_earth = 1.496e8
    ecc_earth = 0.0167
    a_moon = 384_400.0
    ecc_moon = 0.0549
    r_test = 5.0e7

    # mu in km^3/s^2
    mu_sun = G * m_sun / L**3
    mu_earth = G * m_earth / L**3

    p_earth = pericenter(a_earth, ecc_earth)
    p_moon = pericenter(a_moon, ecc_moon)
    v_earth = vis_viva_speed(mu_sun, a_earth, p_earth)
    v_moon = vis_viva_speed(mu_earth, a_moon, p_moon)
    v_test = circular_speed(mu_sun, r_test)

    state = SimState(grav_const=G, exponent=-2.0, time_scale=time_scale, length_unit=L)
    state.add_body(Body(mass=m_sun, pos=(0.0, 0.0), vel=(0.0, 0.0), name="Sun"))
    state.add_body(
        Body(mass=m_earth, pos=(p_earth, 0.0), vel=(0.0, v_earth), name="Earth")
    )
    state.add_body(
        Body(
            mass=m_moon,
            pos=(p_earth + p_moon, 0.0),
            vel=(0.0, v_earth + v_moon),
            name="Moon",
        )
    )
    state.add_body(
        Body(mass=m_test, pos=(r_test, 0.0), vel=(0.0, v_test), name="Test body")
    )
    state.adjust_for_total_momentum()
    return state


PRESETS: dict[str, Callable[[], SimState]] = {
    "two_body": two_body_circular,
    "solar_system": solar_system,
}


_PRESET_UNITS: dict[str, UnitsConfig] = {
    "solar_system": SOLAR_SYSTEM_UNITS,
}


def preset_names() -> list[str]:
    return list(PRESETS.keys())


def build_preset(name: str) -> SimState:
    if name not in PRESETS:
        raise ValueError(f"unknown preset: {name}")
    return PRESETS[name]()


def preset_units(name: str) -> UnitsConfig:
    """Units a preset's positions and masses are expressed in."""
    if name not in PRESETS:
        raise ValueError(f"unknown preset: {name}")
    return _PRESET_UNITS.get(name, default_config())
