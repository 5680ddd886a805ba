"""Pairwise power-law attraction for point masses in 2D.

The acceleration of body i due to body j is

    a_ij = G * m_j * (r_ij * L) ** p * u_ij / L

where r_ij is the separation in position units, L the number of metres per
position unit, p the force exponent (-2 for Newtonian gravity) and u_ij the
unit vector from i towards j. G and p are calibrated in metres, so the result
is converted back to position units per second squared.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..math.vector import DIM, norm, unit


def suppression_mask(n: int, pairs: Iterable[tuple[int, int]]) -> np.ndarray:
    """Return a symmetric (N, N) boolean mask of suppressed pairs."""
    mask = np.zeros((n, n), dtype=bool)
    for i, j in pairs:
        mask[i, j] = True
        mask[j, i] = True
    return mask


def power_law_accel(
    pos: np.ndarray,
    mass: np.ndarray,
    G: float,
    exponent: float,
    length_unit: float = 1.0,
    min_separation: float = 0.0,
    suppressed: np.ndarray | None = None,
) -> np.ndarray:
    """Return accelerations (N, 2) in position units / s^2.

    Coincident pairs contribute nothing. Separations below ``min_separation``
    are clamped for the magnitude term only.
    """
    n = pos.shape[0]
    if n == 0:
        return np.zeros((0, DIM), dtype=np.float64)

    delta = pos[None, :, :] - pos[:, None, :]
    dist = norm(delta)
    active = dist > 0.0
    np.fill_diagonal(active, False)
    if suppressed is not None:
        active &= ~suppressed

    eff = np.where(active, np.maximum(dist, min_separation), 1.0)
    mag = np.where(active, G * (eff * length_unit) ** exponent, 0.0)
    direction = unit(delta)
    acc = np.sum(
        direction * (mag * mass[None, :])[..., np.newaxis],
        axis=1,
    )
    return acc / length_unit
