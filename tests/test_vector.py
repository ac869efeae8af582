from __future__ import annotations

import math

import numpy as np
import pytest

from particle_kernel.core.math import ZERO, Vector3


def test_vector_arithmetic() -> None:
    a = Vector3(1.0, 2.0, 3.0)
    b = Vector3(-1.0, 0.5, 2.0)

    assert a + b == Vector3(0.0, 2.5, 5.0)
    assert a - b == Vector3(2.0, 1.5, 1.0)
    assert -a == Vector3(-1.0, -2.0, -3.0)
    assert a * 2.0 == Vector3(2.0, 4.0, 6.0)
    assert 2.0 * a == a * 2.0
    assert a / 2.0 == Vector3(0.5, 1.0, 1.5)


def test_vector_dot_and_magnitude() -> None:
    a = Vector3(3.0, 4.0, 0.0)
    assert a.dot(Vector3(1.0, 1.0, 1.0)) == 7.0
    assert a.magnitude_squared() == 25.0
    assert a.magnitude() == 5.0
    assert ZERO.magnitude() == 0.0


def test_vector_is_immutable() -> None:
    v = Vector3(1.0, 2.0, 3.0)
    with pytest.raises(AttributeError):
        v.x = 5.0  # type: ignore[misc]


def test_vector_array_conversion() -> None:
    v = Vector3.from_iterable(np.array([1.0, -2.0, 0.25]))
    assert v == Vector3(1.0, -2.0, 0.25)
    assert np.array_equal(v.to_array(), np.array([1.0, -2.0, 0.25]))
    assert list(v) == [1.0, -2.0, 0.25]

    with pytest.raises(ValueError, match="3 components"):
        Vector3.from_iterable([1.0, 2.0])


def test_vector_finiteness() -> None:
    assert Vector3(1.0, 2.0, 3.0).is_finite()
    assert not Vector3(math.nan, 0.0, 0.0).is_finite()
    assert not Vector3(0.0, math.inf, 0.0).is_finite()


def test_vector_converts_to_numpy() -> None:
    v = Vector3(1.0, 2.0, 3.0)
    arr = np.asarray(v)
    assert arr.dtype == np.float64
    assert np.array_equal(arr, [1.0, 2.0, 3.0])
    assert not arr.flags.writeable

    copied = v.to_array()
    copied[0] = 9.0
    assert v.x == 1.0
