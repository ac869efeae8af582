"""Particle diagnostics."""

from __future__ import annotations

import numpy as np

from ..collision.detector import pair_geometry
from ..state.context import SimulationContext


def total_mass(context: SimulationContext) -> float:
    return float(np.sum(context.state.mass))


def center_of_mass(context: SimulationContext) -> np.ndarray:
    p = context.state
    if len(p) == 0:
        raise ValueError("cannot compute center of mass for empty particle set")
    return np.sum(p.pos * p.mass[:, np.newaxis], axis=0) / np.sum(p.mass)


def linear_momentum(context: SimulationContext) -> np.ndarray:
    p = context.state
    return np.sum(p.vel * p.mass[:, np.newaxis], axis=0)


def kinetic_energy(context: SimulationContext) -> float:
    p = context.state
    v2 = np.sum(p.vel**2, axis=1)
    return float(0.5 * np.sum(p.mass * v2))


def max_overlap(context: SimulationContext) -> float:
    """Largest penetration depth among all particle pairs, 0.0 if none overlap."""
    p = context.state
    if len(p) < 2:
        return 0.0
    _, _, dist2, radius_sum = pair_geometry(p.pos, p.mass)
    return float(max(0.0, np.max(radius_sum - np.sqrt(dist2))))
