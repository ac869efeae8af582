"""Forces and model utilities."""

from .base import ParticleModel  # noqa: F401
from .uniform_gravity import DEFAULT_GRAVITY, UniformGravity  # noqa: F401
