"""Conserved-quantity diagnostics for a ``SimState``.

Quantities are measured in simulated time (``time_scale`` is not applied) and
position units, so energies are in mass units * (position units / s)^2.
"""

from __future__ import annotations

import numpy as np

from ..state.sim_state import SimState


def total_mass(state: SimState) -> float:
    if len(state) == 0:
        return 0.0
    return float(np.sum(state.masses))


def center_of_mass(state: SimState) -> np.ndarray:
    if len(state) == 0:
        raise ValueError("cannot compute center of mass for empty body set")
    m = state.masses
    total = np.sum(m)
    if total == 0.0:
        raise ValueError("cannot compute center of mass with zero total mass")
    return np.sum(state.positions * m[:, np.newaxis], axis=0) / total


def linear_momentum(state: SimState) -> np.ndarray:
    if len(state) == 0:
        return np.zeros(2, dtype=np.float64)
    return np.sum(state.velocities * state.masses[:, np.newaxis], axis=0)


def angular_momentum(state: SimState, origin: np.ndarray | None = None) -> float:
    """Return the z component of total angular momentum about ``origin``."""
    if len(state) == 0:
        return 0.0
    pos = state.positions
    if origin is not None:
        pos = pos - np.asarray(origin, dtype=np.float64)
    vel = state.velocities
    lz = pos[:, 0] * vel[:, 1] - pos[:, 1] * vel[:, 0]
    return float(np.sum(state.masses * lz))


def kinetic_energy(state: SimState) -> float:
    if len(state) == 0:
        return 0.0
    v2 = np.sum(state.velocities**2, axis=1)
    return float(0.5 * np.sum(state.masses * v2))


def potential_energy(state: SimState) -> float:
    """Potential energy of the power-law interaction, in position units.

    For exponent p the pair potential is G m_i m_j L^(p-1) r^(p+1) / (p+1),
    or G m_i m_j ln(r) / L^2 for p = -1. Suppressed pairs are excluded.
    """
    n = len(state)
    if n < 2:
        return 0.0
    pos = state.positions
    mass = state.masses
    p = state.exponent
    L = state.length_unit

    iu = np.triu_indices(n, k=1)
    keep = np.array(
        [not state.is_suppressed(int(i), int(j)) for i, j in zip(*iu)],
        dtype=bool,
    )
    i_idx = iu[0][keep]
    j_idx = iu[1][keep]
    if i_idx.size == 0:
        return 0.0
    delta = pos[j_idx] - pos[i_idx]
    dist = np.sqrt(np.sum(delta * delta, axis=-1))
    dist = np.maximum(dist, state.min_separation)
    mprod = mass[i_idx] * mass[j_idx]
    if np.isclose(p, -1.0):
        pair = np.log(dist) / (L * L)
    else:
        pair = L ** (p - 1.0) * dist ** (p + 1.0) / (p + 1.0)
    return float(state.grav_const * np.sum(mprod * pair))


def total_energy(state: SimState) -> float:
    return kinetic_energy(state) + potential_energy(state)
