from __future__ import annotations

import math

import numpy as np
import pytest

from gravsim.core.diagnostics import angular_momentum, total_energy
from gravsim.core.integrators import RK4Integrator
from gravsim.core.state import Body, SimDerivative, SimState
from gravsim.io.presets import two_body_circular, two_body_period


class ScalarDerivative:
    def __init__(self, value: float) -> None:
        self.value = float(value)

    def __add__(self, other: "ScalarDerivative") -> "ScalarDerivative":
        return ScalarDerivative(self.value + other.value)

    def __sub__(self, other: "ScalarDerivative") -> "ScalarDerivative":
        return ScalarDerivative(self.value - other.value)

    def __mul__(self, scalar: float) -> "ScalarDerivative":
        return ScalarDerivative(self.value * scalar)

    def __truediv__(self, scalar: float) -> "ScalarDerivative":
        return ScalarDerivative(self.value / scalar)

    def __neg__(self) -> "ScalarDerivative":
        return ScalarDerivative(-self.value)

    def __abs__(self) -> float:
        return abs(self.value)


class DecayState:
    def __init__(self, y: float) -> None:
        self.y = y

    def shift_in_place(self, derivative: ScalarDerivative, amount: float) -> None:
        self.y += derivative.value * amount

    def clone(self) -> "DecayState":
        return DecayState(self.y)


def _two_bodies() -> SimState:
    return SimState.from_bodies(
        [
            Body(mass=1.0, pos=(0.0, 0.0), vel=(1.0, 0.0)),
            Body(mass=2.0, pos=(5.0, 1.0), vel=(0.0, -1.0)),
        ]
    )


def test_constant_derivative_is_exact_for_any_substepping() -> None:
    fixed = SimDerivative(
        vel=np.array([[1.0, 2.0], [3.0, -1.0]]),
        acc=np.array([[0.5, 0.0], [0.0, -0.25]]),
    )
    h = 0.7
    for max_step in (1.0, 0.1, 0.03):
        state = _two_bodies()
        pos0 = state.positions
        vel0 = state.velocities
        RK4Integrator(max_step=max_step).propagate_in_place(state, lambda _: fixed, h)
        assert np.allclose(state.positions, pos0 + fixed.vel * h, atol=1e-12)
        assert np.allclose(state.velocities, vel0 + fixed.acc * h, atol=1e-12)


def test_substep_count() -> None:
    integrator = RK4Integrator(max_step=0.1)
    assert integrator.steps_for(0.05) == 1
    assert integrator.steps_for(0.1) == 1
    assert integrator.steps_for(0.25) == 3
    state = DecayState(1.0)
    assert integrator.propagate_in_place(state, lambda s: ScalarDerivative(-s.y), 0.25) == 3
    assert integrator.propagate_in_place(state, lambda s: ScalarDerivative(-s.y)) == 1


def test_zero_step_is_noop_and_bad_steps_rejected() -> None:
    integrator = RK4Integrator(max_step=0.1)
    state = DecayState(1.0)
    assert integrator.propagate_in_place(state, lambda s: ScalarDerivative(-s.y), 0.0) == 0
    assert state.y == 1.0
    with pytest.raises(ValueError, match="step must be finite"):
        integrator.propagate_in_place(state, lambda s: ScalarDerivative(-s.y), -0.1)
    with pytest.raises(ValueError, match="step must be finite"):
        integrator.propagate_in_place(state, lambda s: ScalarDerivative(-s.y), math.inf)
    with pytest.raises(ValueError, match="max_step"):
        RK4Integrator(max_step=0.0)


def test_generic_state_exponential_decay() -> None:
    state = DecayState(1.0)
    RK4Integrator(max_step=0.01).propagate_in_place(
        state, lambda s: ScalarDerivative(-s.y), 1.0
    )
    assert state.y == pytest.approx(math.exp(-1.0), rel=1e-10)


def test_fourth_order_convergence() -> None:
    errors = []
    for max_step in (0.2, 0.1):
        state = DecayState(1.0)
        RK4Integrator(max_step=max_step).propagate_in_place(
            state, lambda s: ScalarDerivative(-s.y), 2.0
        )
        errors.append(abs(state.y - math.exp(-2.0)))
    ratio = errors[0] / errors[1]
    assert 12.0 < ratio < 20.0


def test_circular_orbit_returns_after_one_period() -> None:
    state = two_body_circular(m1=10.0, m2=1.0, separation=10.0)
    assert np.allclose(state.get_body(1).pos, [10.0, 0.0])
    period = two_body_period(m1=10.0, m2=1.0, separation=10.0)

    RK4Integrator(max_step=0.1).propagate_in_place(state, SimState.derivative, period)

    assert np.allclose(state.get_body(1).pos, [10.0, 0.0], atol=1e-4)
    assert np.allclose(state.get_body(0).pos, [0.0, 0.0], atol=1e-4)


def test_energy_and_angular_momentum_conserved_over_one_orbit() -> None:
    state = two_body_circular()
    period = two_body_period()
    e0 = total_energy(state)
    l0 = angular_momentum(state)

    integrator = RK4Integrator(max_step=0.1)
    for _ in range(100):
        integrator.propagate_in_place(state, SimState.derivative, period / 100)

    assert abs((total_energy(state) - e0) / e0) < 1e-3
    assert abs((angular_momentum(state) - l0) / l0) < 1e-3


def test_time_scale_speeds_up_simulated_time() -> None:
    slow = two_body_circular(time_scale=1.0)
    fast = two_body_circular(time_scale=4.0)
    integrator = RK4Integrator(max_step=0.01)
    integrator.propagate_in_place(slow, SimState.derivative, 2.0)
    integrator.propagate_in_place(fast, SimState.derivative, 0.5)
    assert np.allclose(slow.positions, fast.positions, atol=1e-8)
