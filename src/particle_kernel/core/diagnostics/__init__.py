"""Diagnostics namespace."""

from .particles import (  # noqa: F401
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    max_overlap,
    total_mass,
)
