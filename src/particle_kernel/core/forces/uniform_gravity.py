"""Uniform gravity model for particles."""

from __future__ import annotations

import numpy as np

from ..state.context import SimulationContext


DEFAULT_GRAVITY = np.array([0.0, -9.81, 0.0], dtype=np.float64)
DEFAULT_GRAVITY.flags.writeable = False


class UniformGravity:
    def __init__(self, g=DEFAULT_GRAVITY) -> None:
        self.g = np.asarray(g, dtype=np.float64)
        if self.g.shape != (3,):
            raise ValueError("g must have shape (3,)")

    def acc_particles(self, context: SimulationContext) -> np.ndarray:
        n = len(context)
        if n == 0:
            return np.zeros((0, 3), dtype=np.float64)
        return np.broadcast_to(self.g, (n, 3)).copy()

    def __repr__(self) -> str:
        return f"UniformGravity(g={self.g.tolist()})"
