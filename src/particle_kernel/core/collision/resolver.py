"""Positional correction and velocity response for overlapping pairs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

import numpy as np

from ..state.context import SimulationContext
from ..state.particles import ParticlesState
from .detector import collision_radius


logger = logging.getLogger(__name__)

DEGENERATE_DISTANCE_SQ = 1e-24
DEGENERATE_NORMAL = np.array([1.0, 0.0, 0.0], dtype=np.float64)
DEGENERATE_NORMAL.flags.writeable = False


class ResolutionPolicy(Protocol):
    def respond(self, state: ParticlesState, i: int, j: int, normal: np.ndarray) -> None:
        """Update velocities of rows i and j given the unit normal from i to j."""


@dataclass(slots=True)
class WallReflection:
    """Reflect each particle's own velocity about the contact plane.

    The two particles are handled independently: relative velocity is not
    used and pair momentum is not conserved.
    """

    def respond(self, state: ParticlesState, i: int, j: int, normal: np.ndarray) -> None:
        vel = state.vel
        vel[i] -= normal * (2.0 * np.dot(vel[i], normal))
        vel[j] -= normal * (2.0 * np.dot(vel[j], normal))


@dataclass(slots=True)
class ElasticImpulse:
    """Mass-coupled impulse along the normal with a restitution coefficient."""

    restitution: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.restitution <= 1.0:
            raise ValueError("restitution must be in [0, 1]")

    def respond(self, state: ParticlesState, i: int, j: int, normal: np.ndarray) -> None:
        vel = state.vel
        vn = float(np.dot(vel[j] - vel[i], normal))
        if vn >= 0.0:
            return
        inv_i = 1.0 / state.mass[i]
        inv_j = 1.0 / state.mass[j]
        impulse = normal * (-(1.0 + self.restitution) * vn / (inv_i + inv_j))
        vel[i] -= impulse * inv_i
        vel[j] += impulse * inv_j


def resolve(
    context: SimulationContext,
    pairs: Iterable[tuple[int, int]],
    policy: ResolutionPolicy | None = None,
) -> int:
    """Resolve pairs in order, mutating particle state immediately.

    Later pairs see the corrections applied by earlier ones. A pair that an
    earlier correction already separated is skipped. Returns the number of
    pairs resolved.
    """
    if policy is None:
        policy = WallReflection()
    state = context.state
    radius = collision_radius(state.mass)
    resolved = 0
    for i, j in pairs:
        if _resolve_pair(state, radius, i, j, policy):
            resolved += 1
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug("pair (%d, %d) already separated, skipped", i, j)
    return resolved


def _resolve_pair(
    state: ParticlesState,
    radius: np.ndarray,
    i: int,
    j: int,
    policy: ResolutionPolicy,
) -> bool:
    pos = state.pos
    delta = pos[j] - pos[i]
    dist_sq = float(np.dot(delta, delta))
    if dist_sq <= DEGENERATE_DISTANCE_SQ:
        logger.debug("coincident particles %d and %d, using fallback normal", i, j)
        normal = DEGENERATE_NORMAL
        dist = 0.0
    else:
        dist = float(np.sqrt(dist_sq))
        normal = delta / dist

    overlap = radius[i] + radius[j] - dist
    if overlap <= 0.0:
        return False

    m_i, m_j = state.mass[i], state.mass[j]
    total = m_i + m_j
    pos[i] -= normal * (overlap * (m_j / total))
    pos[j] += normal * (overlap * (m_i / total))

    policy.respond(state, i, j, normal)
    return True
