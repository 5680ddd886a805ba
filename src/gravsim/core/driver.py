"""Real-time simulation driver running on its own thread.

Each loop iteration measures the wall-clock time elapsed since the previous
one, integrates the owned state by exactly that amount and, when the throttle
allows it, sends an independent copy of the state to the snapshot channel.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from .channel import OVERFLOW_POLICIES, SnapshotChannel
from .integrators import Integrator, RK4Integrator
from .state.sim_state import SimState


logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class DriverConfig:
    max_step: float = 0.1
    frame_interval: float = 0.016
    every_n: int | None = None
    channel_capacity: int = 1
    overflow: str = "drop_oldest"
    idle_sleep: float = 0.001

    def __post_init__(self) -> None:
        if self.max_step <= 0.0:
            raise ValueError("driver.max_step must be > 0")
        if self.frame_interval < 0.0:
            raise ValueError("driver.frame_interval must be >= 0")
        if self.every_n is not None and not (_is_int(self.every_n) and self.every_n > 0):
            raise ValueError("driver.every_n must be a positive integer")
        if not (_is_int(self.channel_capacity) and self.channel_capacity >= 1):
            raise ValueError("driver.channel_capacity must be an integer >= 1")
        if self.overflow not in OVERFLOW_POLICIES:
            raise ValueError("driver.overflow invalid")
        if self.idle_sleep < 0.0:
            raise ValueError("driver.idle_sleep must be >= 0")

    def make_throttle(self) -> "Throttle":
        if self.every_n is not None:
            return IterationThrottle(self.every_n)
        return FrameIntervalThrottle(self.frame_interval)

    def make_channel(self) -> SnapshotChannel[SimState]:
        return SnapshotChannel(capacity=self.channel_capacity, overflow=self.overflow)


class Throttle(Protocol):
    def should_emit(self, now: float) -> bool:
        """Return True if a snapshot should be sent at time ``now``."""


class FrameIntervalThrottle:
    """Emit on the first call, then whenever ``interval`` seconds have passed."""

    def __init__(self, interval: float = 0.016) -> None:
        self.interval = float(interval)
        self._last: float | None = None

    def should_emit(self, now: float) -> bool:
        if self._last is None or now - self._last > self.interval:
            self._last = now
            return True
        return False


class IterationThrottle:
    """Emit on every ``every``-th iteration."""

    def __init__(self, every: int = 10) -> None:
        if not (_is_int(every) and every > 0):
            raise ValueError("every must be a positive integer")
        self.every = every
        self._count = 0

    def should_emit(self, now: float) -> bool:
        self._count += 1
        if self._count == self.every:
            self._count = 0
            return True
        return False


class SimulationDriver:
    """Owns a ``SimState`` and advances it on a dedicated thread.

    The state is only touched by the driver thread once ``start()`` has been
    called; consumers see it exclusively through snapshots on ``channel``.
    """

    def __init__(
        self,
        state: SimState,
        channel: SnapshotChannel[SimState] | None = None,
        integrator: Integrator | None = None,
        throttle: Throttle | None = None,
        clock: Clock = time.perf_counter,
        idle_sleep: float = 0.0,
    ) -> None:
        self._state = state
        self.channel = channel if channel is not None else SnapshotChannel()
        self.integrator = integrator if integrator is not None else RK4Integrator()
        self.throttle = throttle if throttle is not None else FrameIntervalThrottle()
        self._clock = clock
        self.idle_sleep = float(idle_sleep)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None
        self._closed_logged = False
        self.iterations = 0
        self.emitted = 0
        self.sim_time = 0.0

    @classmethod
    def from_config(
        cls, state: SimState, config: DriverConfig, clock: Clock = time.perf_counter
    ) -> "SimulationDriver":
        return cls(
            state,
            channel=config.make_channel(),
            integrator=RK4Integrator(max_step=config.max_step),
            throttle=config.make_throttle(),
            clock=clock,
            idle_sleep=config.idle_sleep,
        )

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def error(self) -> BaseException | None:
        return self._error

    def snapshot(self) -> SimState:
        """Return an independent copy of the owned state."""
        return self._state.clone()

    def step(self, dt: float, now: float | None = None) -> bool:
        """Run one loop body: integrate by ``dt`` and maybe emit a snapshot.

        Returns True if a snapshot was handed to the channel.
        """
        self.integrator.propagate_in_place(self._state, SimState.derivative, dt)
        self.iterations += 1
        self.sim_time += dt * self._state.time_scale
        if now is None:
            now = self._clock()
        if not self.throttle.should_emit(now):
            return False
        return self._emit()

    def _emit(self) -> bool:
        delivered = self.channel.send(self._state.clone())
        if delivered:
            self.emitted += 1
        elif self.channel.closed and not self._closed_logged:
            logger.debug("snapshot channel closed; dropping further snapshots")
            self._closed_logged = True
        return delivered

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("driver already started")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="gravsim-driver", daemon=True
        )
        self._thread.start()
        logger.info("driver started with %d bodies", len(self._state))

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to stop, join the thread and close the channel."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                raise RuntimeError("driver thread did not stop in time")
        self.channel.close()
        logger.info(
            "driver stopped after %d iterations (%d snapshots, %.6g s simulated)",
            self.iterations,
            self.emitted,
            self.sim_time,
        )
        if self._error is not None:
            raise self._error

    def _run(self) -> None:
        prev = self._clock()
        try:
            while not self._stop_event.is_set():
                now = self._clock()
                dt = now - prev
                prev = now
                self.step(dt, now)
                if self.idle_sleep > 0.0:
                    self._stop_event.wait(self.idle_sleep)
        except Exception as exc:
            logger.exception("driver loop failed")
            self._error = exc
