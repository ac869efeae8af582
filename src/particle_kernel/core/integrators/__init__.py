"""Integrator interfaces and implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..forces.base import ParticleModel
from ..forces.uniform_gravity import DEFAULT_GRAVITY, UniformGravity
from ..state.context import SimulationContext


DEFAULT_DT = 1.0 / 60.0


class Integrator(Protocol):
    def step(self, context: SimulationContext, model: ParticleModel, dt: float) -> None:
        """Advance every particle by one fixed step (mutating)."""


@dataclass(slots=True)
class SymplecticEuler:
    def step(self, context: SimulationContext, model: ParticleModel, dt: float) -> None:
        p = context.state
        a = model.acc_particles(context)
        # Acceleration is replaced, not accumulated.
        p.acc[:] = a
        p.vel += a * dt
        p.pos += p.vel * dt


def integrate(context: SimulationContext, dt: float, gravity=DEFAULT_GRAVITY) -> None:
    SymplecticEuler().step(context, UniformGravity(gravity), dt)
