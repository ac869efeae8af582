"""Pairwise sphere overlap detection.

Each particle is treated as a sphere of radius sqrt(mass). All unordered
pairs are tested (O(n^2)); there is no broad phase.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..state.context import SimulationContext


CollisionPair = tuple[int, int]


def collision_radius(mass: ArrayLike) -> np.ndarray | np.float64:
    """Radius proxy sqrt(mass), for a scalar or an array of masses."""
    return np.sqrt(mass)


def pair_geometry(
    pos: NDArray[np.float64], mass: NDArray[np.float64]
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Return (i, j, dist2, radius_sum) for every pair i < j in row-major order."""
    n = pos.shape[0]
    i, j = np.triu_indices(n, k=1)
    delta = pos[j] - pos[i]
    dist2 = np.sum(delta * delta, axis=-1)
    radius = collision_radius(mass)
    return i, j, dist2, radius[i] + radius[j]


def detect(
    context: SimulationContext, exclude_intra_body: bool = False
) -> list[CollisionPair]:
    """Return colliding index pairs (i, j), i < j, in ascending order.

    A pair collides when the squared distance between centers is strictly
    less than the squared radius sum. Coincident particles are reported; the
    resolver handles the undefined normal. With ``exclude_intra_body`` set,
    pairs sharing membership of any body are skipped.
    """
    state = context.state
    i, j, dist2, radius_sum = pair_geometry(state.pos, state.mass)
    hit = dist2 < radius_sum * radius_sum
    if exclude_intra_body and context.bodies:
        shared = _shared_body_matrix(context)
        hit &= ~shared[i, j]
    return list(zip(i[hit].tolist(), j[hit].tolist()))


def _shared_body_matrix(context: SimulationContext) -> np.ndarray:
    members = np.zeros((len(context), len(context.bodies)), dtype=np.int64)
    for body_idx, body in enumerate(context.bodies):
        members[list(body.indices), body_idx] = 1
    return (members @ members.T) > 0
