"""Simulation drivers: fixed-length batch run and a stoppable frame loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .integrators import DEFAULT_DT
from .state.context import SimulationContext
from .step import SimulationStep


logger = logging.getLogger(__name__)

FrameCallback = Callable[[SimulationContext, int], None]


@dataclass(slots=True)
class RunResult:
    final_state: SimulationContext
    time: np.ndarray | None = None
    particles_pos: np.ndarray | None = None
    particles_vel: np.ndarray | None = None
    collisions: np.ndarray | None = None


def run(
    context: SimulationContext,
    dt: float,
    steps: int,
    stepper: SimulationStep | None = None,
    sample_every: int | None = None,
    callback: FrameCallback | None = None,
) -> RunResult:
    if steps < 0:
        raise ValueError("steps must be >= 0")
    if sample_every is not None and sample_every <= 0:
        raise ValueError("sample_every must be > 0")
    if stepper is None:
        stepper = SimulationStep()

    times: list[float] = []
    p_pos: list[np.ndarray] = []
    p_vel: list[np.ndarray] = []
    counts: list[int] = []

    def sample(step: int, n_pairs: int) -> None:
        times.append(step * dt)
        p_pos.append(context.state.pos.copy())
        p_vel.append(context.state.vel.copy())
        counts.append(n_pairs)

    if sample_every is not None:
        sample(0, 0)

    for step in range(1, steps + 1):
        pairs = stepper.step(context, dt)
        if callback is not None:
            callback(context, step)
        if sample_every is not None and step % sample_every == 0:
            sample(step, len(pairs))

    if sample_every is None:
        return RunResult(final_state=context)

    return RunResult(
        final_state=context,
        time=np.asarray(times, dtype=np.float64),
        particles_pos=np.asarray(p_pos, dtype=np.float64),
        particles_vel=np.asarray(p_vel, dtype=np.float64),
        collisions=np.asarray(counts, dtype=np.int64),
    )


class FrameLoop:
    """Repeatedly step a context and hand it to a frame callback.

    The stop flag is checked before each step is scheduled, so ``stop()``
    called from ``on_frame`` ends the loop once the current frame is done.
    A ``stop()`` issued before ``start()`` cancels that start: it returns
    without running a frame and clears the request.
    """

    def __init__(
        self,
        context: SimulationContext,
        stepper: SimulationStep | None = None,
        dt: float = DEFAULT_DT,
        on_frame: FrameCallback | None = None,
    ) -> None:
        if dt <= 0.0:
            raise ValueError("dt must be > 0")
        self.context = context
        self.stepper = stepper if stepper is not None else SimulationStep()
        self.dt = dt
        self.on_frame = on_frame
        self.frame = 0
        self._running = False
        self._stop_requested = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self._stop_requested = True

    def start(self, max_frames: int | None = None) -> int:
        """Run until stopped or ``max_frames`` frames have run. Returns frames run."""
        if self._running:
            raise RuntimeError("frame loop is already running")
        if max_frames is not None and max_frames < 0:
            raise ValueError("max_frames must be >= 0")

        self.context.validate()
        self._running = True
        logger.info("frame loop started at frame %d", self.frame)
        ran = 0
        try:
            while not self._stop_requested and (max_frames is None or ran < max_frames):
                self.stepper.step(self.context, self.dt)
                self.frame += 1
                ran += 1
                if self.on_frame is not None:
                    self.on_frame(self.context, self.frame)
        finally:
            self._running = False
            self._stop_requested = False
        logger.info("frame loop stopped at frame %d after %d frames", self.frame, ran)
        return ran
