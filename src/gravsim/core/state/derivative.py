"""Per-body derivative records with vector-space algebra.

A ``SimDerivative`` holds, for every body, the rate of change of its position
(``vel``) and of its velocity (``acc``). Both are stored as (N, 2) arrays so
the whole collection can be added, scaled and measured as a single vector,
which is all a generic integrator needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from ..math.vector import DIM, ArrayF


@dataclass(frozen=True, slots=True)
class BodyDerivative:
    velocity: ArrayF
    acceleration: ArrayF


class SimDerivative:
    __slots__ = ("vel", "acc")

    def __init__(self, vel: ArrayF, acc: ArrayF) -> None:
        self.vel = np.ascontiguousarray(vel, dtype=np.float64)
        self.acc = np.ascontiguousarray(acc, dtype=np.float64)
        if self.vel.ndim != 2 or self.vel.shape[1] != DIM:
            raise ValueError(f"vel must have shape (N, {DIM})")
        if self.acc.shape != self.vel.shape:
            raise ValueError(f"acc must have shape (N, {DIM})")

    @classmethod
    def zeros(cls, n: int) -> "SimDerivative":
        return cls(np.zeros((n, DIM)), np.zeros((n, DIM)))

    @classmethod
    def from_flat(cls, flat: ArrayF) -> "SimDerivative":
        """Build from the flat layout [v_0, a_0, v_1, a_1, ...]."""
        flat = np.asarray(flat, dtype=np.float64)
        if flat.ndim != 1 or flat.shape[0] % (2 * DIM) != 0:
            raise ValueError(f"flat derivative length must be a multiple of {2 * DIM}")
        blocks = flat.reshape(-1, 2, DIM)
        return cls(blocks[:, 0, :].copy(), blocks[:, 1, :].copy())

    def as_flat(self) -> ArrayF:
        """Return the flat layout of length 2 * DIM * N.

        For body i, ``[i*2*DIM, i*2*DIM + DIM)`` is the velocity contribution
        and ``[i*2*DIM + DIM, (i + 1)*2*DIM)`` the acceleration contribution.
        """
        return np.stack([self.vel, self.acc], axis=1).reshape(-1)

    def __len__(self) -> int:
        return self.vel.shape[0]

    def __getitem__(self, index: int) -> BodyDerivative:
        return BodyDerivative(
            velocity=self.vel[index].copy(),
            acceleration=self.acc[index].copy(),
        )

    def __iter__(self) -> Iterator[BodyDerivative]:
        for i in range(len(self)):
            yield self[i]

    def _check_compatible(self, other: "SimDerivative") -> None:
        if self.vel.shape != other.vel.shape:
            raise ValueError("derivatives describe different numbers of bodies")

    def __add__(self, other: object) -> "SimDerivative":
        if not isinstance(other, SimDerivative):
            return NotImplemented
        self._check_compatible(other)
        return SimDerivative(self.vel + other.vel, self.acc + other.acc)

    def __sub__(self, other: object) -> "SimDerivative":
        if not isinstance(other, SimDerivative):
            return NotImplemented
        self._check_compatible(other)
        return SimDerivative(self.vel - other.vel, self.acc - other.acc)

    def __mul__(self, scalar: float) -> "SimDerivative":
        if not isinstance(scalar, (int, float, np.floating, np.integer)):
            return NotImplemented
        return SimDerivative(self.vel * scalar, self.acc * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "SimDerivative":
        if not isinstance(scalar, (int, float, np.floating, np.integer)):
            return NotImplemented
        return SimDerivative(self.vel / scalar, self.acc / scalar)

    def __neg__(self) -> "SimDerivative":
        return SimDerivative(-self.vel, -self.acc)

    def __abs__(self) -> float:
        return float(np.sqrt(np.sum(self.vel**2) + np.sum(self.acc**2)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SimDerivative):
            return NotImplemented
        return np.array_equal(self.vel, other.vel) and np.array_equal(
            self.acc, other.acc
        )

    def __repr__(self) -> str:
        return f"SimDerivative(n_bodies={len(self)})"
