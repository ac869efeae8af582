"""Body groupings of particle references."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from .particles import Particle

if TYPE_CHECKING:
    from .context import SimulationContext


@dataclass(slots=True, frozen=True)
class Body:
    """Ordered indices into a context's particle collection.

    A body has no physical effect; it only tells the renderer which particles
    to join as segments. It never holds particle state of its own.
    """

    indices: tuple[int, ...]
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "indices", tuple(int(i) for i in self.indices))

    def __len__(self) -> int:
        return len(self.indices)

    def particles(self, context: "SimulationContext") -> Iterator[Particle]:
        views = context.particles
        for idx in self.indices:
            yield views[idx]
