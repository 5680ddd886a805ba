"""Two-body orbit integrated with fixed steps, with conservation diagnostics."""

from __future__ import annotations

import numpy as np

from gravsim.core.diagnostics import angular_momentum, linear_momentum, total_energy
from gravsim.core.integrators import RK4Integrator
from gravsim.core.state import SimState
from gravsim.io.presets import two_body_circular, two_body_period


if __name__ == "__main__":
    state = two_body_circular()
    period = two_body_period()
    integrator = RK4Integrator(max_step=0.05)

    steps = 40
    dt = period / steps

    e0 = total_energy(state)
    l0 = angular_momentum(state)
    for step in range(1, steps + 1):
        integrator.propagate_in_place(state, SimState.derivative, dt)
        if step % 5 == 0:
            p = linear_momentum(state)
            secondary = state.get_body(1)
            print(
                f"step {step:3d} | pos=({secondary.pos[0]:+.6f}, {secondary.pos[1]:+.6f}) | "
                f"|p|={np.linalg.norm(p):.3e} | dE={total_energy(state) - e0:.3e} | "
                f"dL={angular_momentum(state) - l0:.3e}"
            )
