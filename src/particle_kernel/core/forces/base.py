"""Force/model interfaces."""

from __future__ import annotations

from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from ..state.context import SimulationContext


ArrayF = NDArray[np.float64]


class ParticleModel(Protocol):
    def acc_particles(self, context: SimulationContext) -> ArrayF:
        """Return particle accelerations as (N, 3)."""
