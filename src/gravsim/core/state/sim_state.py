"""Simulation state: bodies, physical constants and the derivative rule."""

from __future__ import annotations

from typing import Iterator

import numpy as np

from ..forces.power_law import power_law_accel, suppression_mask
from ..math.vector import DIM, ArrayF
from .body import Body
from .derivative import SimDerivative


class SimState:
    """Aggregate of bodies evolving under a power-law pairwise attraction.

    Units: positions are in position units, velocities in position units per
    second, and ``length_unit`` gives metres per position unit. ``grav_const``
    and ``exponent`` are calibrated in metres. ``time_scale`` multiplies the
    whole derivative, so one wall-clock second advances ``time_scale``
    simulated seconds.

    Body indices are assigned on insertion and never change.
    """

    __slots__ = (
        "grav_const",
        "exponent",
        "time_scale",
        "length_unit",
        "min_separation",
        "_pos",
        "_vel",
        "_mass",
        "_names",
        "_suppressed",
    )

    def __init__(
        self,
        grav_const: float = 1.0,
        exponent: float = -2.0,
        time_scale: float = 1.0,
        length_unit: float = 1.0,
        min_separation: float = 0.0,
    ) -> None:
        self.grav_const = float(grav_const)
        self.exponent = float(exponent)
        self.time_scale = float(time_scale)
        self.length_unit = float(length_unit)
        self.min_separation = float(min_separation)
        self._pos = np.zeros((0, DIM), dtype=np.float64)
        self._vel = np.zeros((0, DIM), dtype=np.float64)
        self._mass = np.zeros(0, dtype=np.float64)
        self._names: list[str | None] = []
        self._suppressed: set[tuple[int, int]] = set()
        self.validate()

    def validate(self) -> None:
        for name in ("grav_const", "exponent", "time_scale"):
            if not np.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")
        if not np.isfinite(self.length_unit) or self.length_unit <= 0.0:
            raise ValueError("length_unit must be finite and > 0")
        if not np.isfinite(self.min_separation) or self.min_separation < 0.0:
            raise ValueError("min_separation must be finite and >= 0")

    @classmethod
    def from_bodies(cls, bodies: list[Body], **params: float) -> "SimState":
        state = cls(**params)
        for body in bodies:
            state.add_body(body)
        return state

    def add_body(self, body: Body) -> int:
        body.validate()
        if body.name is not None and self.body_by_name(body.name) is not None:
            raise ValueError(f"duplicate body name: {body.name}")
        self._pos = np.vstack([self._pos, body.pos[np.newaxis, :]])
        self._vel = np.vstack([self._vel, body.vel[np.newaxis, :]])
        self._mass = np.append(self._mass, body.mass)
        self._names.append(body.name)
        return len(self._names) - 1

    def __len__(self) -> int:
        return self._mass.shape[0]

    # Read-only access

    def bodies(self) -> Iterator[Body]:
        for i in range(len(self)):
            yield self.get_body(i)

    def get_body(self, index: int) -> Body:
        if not 0 <= index < len(self):
            raise IndexError(f"body index out of range: {index}")
        return Body(
            mass=self._mass[index],
            pos=self._pos[index],
            vel=self._vel[index],
            name=self._names[index],
        )

    def body_by_name(self, name: str) -> int | None:
        for idx, body_name in enumerate(self._names):
            if body_name == name:
                return idx
        return None

    @property
    def names(self) -> list[str | None]:
        return list(self._names)

    @property
    def positions(self) -> ArrayF:
        return self._pos.copy()

    @property
    def velocities(self) -> ArrayF:
        return self._vel.copy()

    @property
    def masses(self) -> ArrayF:
        return self._mass.copy()

    # Pair suppression

    def suppress(self, i: int, j: int) -> None:
        n = len(self)
        if not (0 <= i < n and 0 <= j < n):
            raise ValueError(f"body index out of range: ({i}, {j})")
        if i == j:
            raise ValueError("cannot suppress a body's interaction with itself")
        self._suppressed.add((min(i, j), max(i, j)))

    def suppress_by_name(self, name1: str, name2: str) -> None:
        i = self.body_by_name(name1)
        j = self.body_by_name(name2)
        if i is None:
            raise ValueError(f"unknown body: {name1}")
        if j is None:
            raise ValueError(f"unknown body: {name2}")
        self.suppress(i, j)

    def is_suppressed(self, i: int, j: int) -> bool:
        return (i, j) in self._suppressed or (j, i) in self._suppressed

    @property
    def suppressed_pairs(self) -> frozenset[tuple[int, int]]:
        return frozenset(self._suppressed)

    # Dynamics

    def accelerations(self) -> ArrayF:
        """Return per-body accelerations (N, 2), before time scaling."""
        mask = (
            suppression_mask(len(self), self._suppressed)
            if self._suppressed
            else None
        )
        return power_law_accel(
            self._pos,
            self._mass,
            self.grav_const,
            self.exponent,
            length_unit=self.length_unit,
            min_separation=self.min_separation,
            suppressed=mask,
        )

    def derivative(self) -> SimDerivative:
        return SimDerivative(
            vel=self._vel * self.time_scale,
            acc=self.accelerations() * self.time_scale,
        )

    def shift_in_place(self, derivative: SimDerivative, amount: float) -> None:
        if len(derivative) != len(self):
            raise ValueError("derivative does not match number of bodies")
        self._pos += derivative.vel * amount
        self._vel += derivative.acc * amount

    def adjust_for_total_momentum(self) -> None:
        """Remove the velocity of the centre of mass from every body."""
        if len(self) == 0:
            return
        total_mass = float(np.sum(self._mass))
        if total_mass == 0.0:
            raise ValueError("cannot adjust momentum with zero total mass")
        total_mom = np.sum(self._vel * self._mass[:, np.newaxis], axis=0)
        self._vel -= total_mom / total_mass

    def clone(self) -> "SimState":
        other = SimState(
            grav_const=self.grav_const,
            exponent=self.exponent,
            time_scale=self.time_scale,
            length_unit=self.length_unit,
            min_separation=self.min_separation,
        )
        other._pos = self._pos.copy()
        other._vel = self._vel.copy()
        other._mass = self._mass.copy()
        other._names = list(self._names)
        other._suppressed = set(self._suppressed)
        return other

    def __repr__(self) -> str:
        lines = [
            f"SimState(n_bodies={len(self)}, grav_const={self.grav_const}, "
            f"exponent={self.exponent}, time_scale={self.time_scale})"
        ]
        for i, body in enumerate(self.bodies()):
            label = body.name or f"body {i}"
            lines.append(
                f"  {i + 1}. {label}: m={body.mass:g} "
                f"pos=({body.pos[0]:.6g}, {body.pos[1]:.6g}) "
                f"vel=({body.vel[0]:.6g}, {body.vel[1]:.6g})"
            )
        return "\n".join(lines)
