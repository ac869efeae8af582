"""Collision detection and resolution."""

from .detector import CollisionPair, collision_radius, detect, pair_geometry  # noqa: F401
from .resolver import (  # noqa: F401
    DEGENERATE_NORMAL,
    ElasticImpulse,
    ResolutionPolicy,
    WallReflection,
    resolve,
)
