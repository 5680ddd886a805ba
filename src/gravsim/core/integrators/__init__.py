"""Integrator interfaces and implementations.

Integrators here know nothing about bodies or forces. They only rely on the
``State`` / ``Derivative`` capability pair below.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil, isfinite
from typing import Callable, Protocol, TypeVar


class Derivative(Protocol):
    def __add__(self: "D", other: "D") -> "D": ...

    def __sub__(self: "D", other: "D") -> "D": ...

    def __mul__(self: "D", scalar: float) -> "D": ...

    def __truediv__(self: "D", scalar: float) -> "D": ...

    def __neg__(self: "D") -> "D": ...

    def __abs__(self) -> float: ...


D = TypeVar("D", bound=Derivative)


class State(Protocol[D]):
    def shift_in_place(self, derivative: D, amount: float) -> None:
        """Move the state along ``derivative`` by ``amount`` (mutating)."""

    def clone(self) -> "State[D]":
        """Return an independent working copy."""


S = TypeVar("S", bound=State)


class Integrator(Protocol):
    def propagate_in_place(
        self,
        state: S,
        derivative_fn: Callable[[S], D],
        step: float | None = None,
    ) -> int:
        """Advance state by ``step`` (mutating); return sub-steps taken."""


@dataclass(slots=True)
class RK4Integrator:
    """Classic fixed-order 4th order Runge-Kutta with uniform sub-stepping.

    A requested step is split into ``ceil(step / max_step)`` equal sub-steps.
    Intermediate stages are evaluated on working copies; only the final
    combination is applied to the caller's state.
    """

    max_step: float = 0.1

    def __post_init__(self) -> None:
        self.max_step = float(self.max_step)
        if not isfinite(self.max_step) or self.max_step <= 0.0:
            raise ValueError("max_step must be finite and > 0")

    def steps_for(self, step: float) -> int:
        return max(1, ceil(step / self.max_step))

    def propagate_in_place(
        self,
        state: S,
        derivative_fn: Callable[[S], D],
        step: float | None = None,
    ) -> int:
        if step is None:
            step = self.max_step
        step = float(step)
        if not isfinite(step) or step < 0.0:
            raise ValueError("step must be finite and >= 0")
        if step == 0.0:
            return 0

        n = self.steps_for(step)
        h = step / n
        for _ in range(n):
            self._rk4_step(state, derivative_fn, h)
        return n

    @staticmethod
    def _rk4_step(state: S, derivative_fn: Callable[[S], D], h: float) -> None:
        k1 = derivative_fn(state)

        work = state.clone()
        work.shift_in_place(k1, h / 2.0)
        k2 = derivative_fn(work)

        work = state.clone()
        work.shift_in_place(k2, h / 2.0)
        k3 = derivative_fn(work)

        work = state.clone()
        work.shift_in_place(k3, h)
        k4 = derivative_fn(work)

        state.shift_in_place(k1 + k2 * 2.0 + k3 * 2.0 + k4, h / 6.0)
