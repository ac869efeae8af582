"""Math utilities namespace."""

from .vector import ZERO, Vector3  # noqa: F401
