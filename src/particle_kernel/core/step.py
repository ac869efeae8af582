"""Single simulation step: integrate, detect, resolve."""

from __future__ import annotations

from dataclasses import dataclass, field

from .collision.detector import CollisionPair, detect
from .collision.resolver import ResolutionPolicy, WallReflection, resolve
from .forces.base import ParticleModel
from .forces.uniform_gravity import UniformGravity
from .integrators import DEFAULT_DT, Integrator, SymplecticEuler
from .state.context import SimulationContext


@dataclass(slots=True)
class SimulationStep:
    model: ParticleModel = field(default_factory=UniformGravity)
    integrator: Integrator = field(default_factory=SymplecticEuler)
    policy: ResolutionPolicy = field(default_factory=WallReflection)
    exclude_intra_body: bool = False

    def step(self, context: SimulationContext, dt: float) -> list[CollisionPair]:
        """Advance one frame. Returns the pairs detected after integration."""
        self.integrator.step(context, self.model, dt)
        pairs = detect(context, exclude_intra_body=self.exclude_intra_body)
        resolve(context, pairs, self.policy)
        return pairs

    def __call__(self, context: SimulationContext, dt: float) -> list[CollisionPair]:
        return self.step(context, dt)


def step(context: SimulationContext, dt: float = DEFAULT_DT) -> list[CollisionPair]:
    return SimulationStep().step(context, dt)
