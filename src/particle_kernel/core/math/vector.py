"""Vector value type over NumPy.

Vector3 wraps a read-only float64 array of shape (3,); arithmetic always
returns a new instance.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np
from numpy.typing import NDArray


ArrayF = NDArray[np.float64]


class Vector3:
    __slots__ = ("_v",)

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self._v = _frozen(np.array([x, y, z], dtype=np.float64))

    @classmethod
    def from_iterable(cls, values: Iterable[float] | ArrayF) -> "Vector3":
        """Build a vector from any 3-element sequence or array."""
        arr = np.array(list(values) if not isinstance(values, np.ndarray) else values, dtype=np.float64)
        if arr.shape != (3,):
            raise ValueError("vector must have exactly 3 components")
        return cls._wrap(arr)

    @classmethod
    def _wrap(cls, arr: ArrayF) -> "Vector3":
        vec = cls.__new__(cls)
        vec._v = _frozen(np.array(arr, dtype=np.float64))
        return vec

    @property
    def x(self) -> float:
        return float(self._v[0])

    @property
    def y(self) -> float:
        return float(self._v[1])

    @property
    def z(self) -> float:
        return float(self._v[2])

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3._wrap(self._v + other._v)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3._wrap(self._v - other._v)

    def __neg__(self) -> "Vector3":
        return Vector3._wrap(-self._v)

    def __mul__(self, s: float) -> "Vector3":
        return Vector3._wrap(self._v * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> "Vector3":
        return Vector3._wrap(self._v / s)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __hash__(self) -> int:
        return hash(tuple(self._v.tolist()))

    def __iter__(self):
        return iter(self._v.tolist())

    def __array__(self, dtype=None, copy=None) -> ArrayF:
        if copy or (dtype is not None and np.dtype(dtype) != self._v.dtype):
            return np.array(self._v, dtype=dtype)
        return self._v

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def dot(self, other: "Vector3") -> float:
        return float(np.dot(self._v, other._v))

    def magnitude_squared(self) -> float:
        return self.dot(self)

    def magnitude(self) -> float:
        return float(np.linalg.norm(self._v))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._v)))

    def to_array(self) -> ArrayF:
        return self._v.copy()


def _frozen(arr: ArrayF) -> ArrayF:
    arr.flags.writeable = False
    return arr


ZERO = Vector3(0.0, 0.0, 0.0)
