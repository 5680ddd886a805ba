"""Closed-form two-body orbit helpers used to build initial conditions.

``mu`` is the gravitational parameter G * M in the same length unit as the
radii; speeds come out in that length unit per second.
"""

from __future__ import annotations

from math import pi, sqrt


def pericenter(a: float, ecc: float) -> float:
    """Closest-approach distance a(1 - e).

    Not the semi-latus rectum a(1 - e^2), which overstates the pericenter
    distance for eccentric orbits.
    """
    if not 0.0 <= ecc < 1.0:
        raise ValueError("ecc must be in [0, 1)")
    return a * (1.0 - ecc)


def vis_viva_speed(mu: float, a: float, r: float) -> float:
    """Orbital speed at radius r on an ellipse of semi-major axis a."""
    return sqrt(mu * (2.0 / r - 1.0 / a))


def circular_speed(mu: float, r: float) -> float:
    return sqrt(mu / r)


def power_law_circular_speed(
    grav_const: float,
    central_mass: float,
    r: float,
    exponent: float = -2.0,
    length_unit: float = 1.0,
) -> float:
    """Circular speed for an arbitrary power-law attraction.

    ``r`` is in position units and the result in position units per second,
    using the same unit correction as the force kernel.
    """
    accel = grav_const * central_mass * (r * length_unit) ** exponent / length_unit
    return sqrt(accel * r)


def circular_period(r: float, speed: float) -> float:
    return 2.0 * pi * r / speed
