"""State namespace."""

from .bodies import Body  # noqa: F401
from .context import SimulationContext  # noqa: F401
from .particles import Particle, ParticlesState  # noqa: F401
