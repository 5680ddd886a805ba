"""Point-mass body record."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..math.vector import ArrayF, as_vec2, norm


@dataclass(slots=True)
class Body:
    mass: float
    pos: ArrayF
    vel: ArrayF
    name: str | None = None

    def __post_init__(self) -> None:
        self.mass = float(self.mass)
        self.pos = as_vec2(self.pos, "pos")
        self.vel = as_vec2(self.vel, "vel")

    def validate(self) -> None:
        """Check the physical invariants required to join a state."""
        if not np.isfinite(self.mass) or self.mass <= 0.0:
            raise ValueError("mass must be finite and > 0")
        if not np.all(np.isfinite(self.pos)):
            raise ValueError("pos must be finite")
        if not np.all(np.isfinite(self.vel)):
            raise ValueError("vel must be finite")

    def distance_from(self, other: "Body") -> float:
        return float(norm(self.pos - other.pos))

    def copy(self) -> "Body":
        return Body(
            mass=self.mass,
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            name=self.name,
        )
