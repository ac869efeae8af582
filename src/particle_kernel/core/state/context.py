"""Simulation context owning all particles and bodies."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from .bodies import Body
from .particles import Particle, ParticlesState


logger = logging.getLogger(__name__)


class SimulationContext:
    """Particle arrays plus body groupings for one independent simulation.

    ``state`` holds the (N, 3) arrays the kernel operates on; ``particles``
    exposes one Particle view per row, in insertion order.
    """

    def __init__(
        self,
        state: ParticlesState | None = None,
        bodies: Iterable[Body] | None = None,
    ) -> None:
        self.state = state if state is not None else ParticlesState.empty()
        self._particles = [Particle._view(self.state, i) for i in range(len(self.state))]
        self.bodies: list[Body] = []
        for body in bodies or []:
            self._check_body(body)
            self.bodies.append(body)

    def __len__(self) -> int:
        return len(self.state)

    @property
    def particles(self) -> tuple[Particle, ...]:
        return tuple(self._particles)

    def add_particle(self, particle: Particle) -> int:
        if particle._bound:
            raise ValueError("particle already belongs to a context")
        particle.validate()
        src, i = particle._state, particle._index
        idx = self.state.append(src.pos[i], src.vel[i], float(src.mass[i]), src.acc[i])
        particle._bind(self.state, idx)
        self._particles.append(particle)
        return idx

    def add_body(self, indices: Iterable[int], name: str | None = None) -> Body:
        body = Body(indices=tuple(indices), name=name)
        self._check_body(body)
        self.bodies.append(body)
        return body

    def remove_particle(self, index: int) -> Particle:
        """Remove a particle and remap body references past it."""
        n = len(self.state)
        if index < 0 or index >= n:
            raise IndexError(f"particle index out of range: {index}")
        removed = self._particles.pop(index)
        removed._detach()
        self.state.remove(index)
        for view in self._particles[index:]:
            view._index -= 1
        remapped = []
        for body in self.bodies:
            kept = tuple(i - 1 if i > index else i for i in body.indices if i != index)
            remapped.append(Body(indices=kept, name=body.name))
        self.bodies = remapped
        logger.debug("removed particle %d, %d remaining", index, len(self.state))
        return removed

    def validate(self) -> None:
        self.state.validate()
        for idx, particle in enumerate(self._particles):
            try:
                particle.validate()
            except ValueError as exc:
                raise ValueError(f"particles[{idx}]: {exc}") from exc
        for body in self.bodies:
            self._check_body(body)

    def clone(self) -> "SimulationContext":
        return SimulationContext(state=self.state.copy(), bodies=self.bodies)

    def positions(self) -> np.ndarray:
        """Flat float32 coordinates, one triple per particle."""
        return self.state.pos.astype(np.float32).ravel()

    def body_positions(self, body_index: int) -> np.ndarray:
        """Flat float32 coordinates of a body's members in reference order."""
        idx = np.asarray(self.bodies[body_index].indices, dtype=np.int64)
        return self.state.pos[idx].astype(np.float32).ravel()

    def _check_body(self, body: Body) -> None:
        n = len(self.state)
        for idx in body.indices:
            if idx < 0 or idx >= n:
                label = body.name if body.name is not None else "<unnamed>"
                raise ValueError(
                    f"body {label} references missing particle index {idx}"
                )
