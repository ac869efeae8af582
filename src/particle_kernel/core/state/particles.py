"""Particle state containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

import numpy as np
from numpy.typing import NDArray

from ..math.vector import Vector3


ArrayF = NDArray[np.float64]
VectorLike = Union[Vector3, Iterable[float]]


def _row(value: VectorLike) -> ArrayF:
    return Vector3.from_iterable(value).to_array()


@dataclass(slots=True)
class ParticlesState:
    pos: ArrayF
    vel: ArrayF
    mass: ArrayF
    acc: ArrayF = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float64))

    def __post_init__(self) -> None:
        self.pos = np.ascontiguousarray(self.pos, dtype=np.float64).reshape(-1, 3)
        self.vel = np.ascontiguousarray(self.vel, dtype=np.float64).reshape(-1, 3)
        self.mass = np.ascontiguousarray(self.mass, dtype=np.float64).reshape(-1)
        self.acc = np.ascontiguousarray(self.acc, dtype=np.float64).reshape(-1, 3)
        if self.acc.shape[0] == 0 and self.pos.shape[0] != 0:
            self.acc = np.zeros_like(self.pos)
        self.validate()

    @classmethod
    def empty(cls) -> "ParticlesState":
        return cls(
            pos=np.zeros((0, 3), dtype=np.float64),
            vel=np.zeros((0, 3), dtype=np.float64),
            mass=np.zeros(0, dtype=np.float64),
        )

    def __len__(self) -> int:
        return self.pos.shape[0]

    def validate(self) -> None:
        if self.pos.ndim != 2 or self.pos.shape[1] != 3:
            raise ValueError("pos must have shape (N, 3)")
        if self.vel.shape != self.pos.shape:
            raise ValueError("vel must have shape (N, 3)")
        if self.acc.shape != self.pos.shape:
            raise ValueError("acc must have shape (N, 3)")
        if self.mass.ndim != 1 or self.mass.shape[0] != self.pos.shape[0]:
            raise ValueError("mass must have shape (N,)")

    def copy(self) -> "ParticlesState":
        return ParticlesState(
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            mass=self.mass.copy(),
            acc=self.acc.copy(),
        )

    def append(self, pos: ArrayF, vel: ArrayF, mass: float, acc: ArrayF) -> int:
        self.pos = np.vstack([self.pos, pos[np.newaxis, :]])
        self.vel = np.vstack([self.vel, vel[np.newaxis, :]])
        self.acc = np.vstack([self.acc, acc[np.newaxis, :]])
        self.mass = np.append(self.mass, mass)
        return self.pos.shape[0] - 1

    def remove(self, index: int) -> None:
        self.pos = np.delete(self.pos, index, axis=0)
        self.vel = np.delete(self.vel, index, axis=0)
        self.acc = np.delete(self.acc, index, axis=0)
        self.mass = np.delete(self.mass, index)


class Particle:
    """One point mass: a view onto a row of a ParticlesState.

    A newly constructed particle owns a single-row state. Adding it to a
    SimulationContext rebinds it to the context's arrays, so the context
    remains the single source of truth and reads/writes go straight through.
    """

    __slots__ = ("_state", "_index", "_bound")

    def __init__(
        self,
        mass: float,
        position: VectorLike = (0.0, 0.0, 0.0),
        velocity: VectorLike = (0.0, 0.0, 0.0),
        acceleration: VectorLike = (0.0, 0.0, 0.0),
    ) -> None:
        m = float(mass)
        if not np.isfinite(m) or m <= 0.0:
            raise ValueError(f"particle mass must be finite and > 0, got {m}")
        self._state = ParticlesState(
            pos=_row(position),
            vel=_row(velocity),
            mass=np.array([m]),
            acc=_row(acceleration),
        )
        self._index = 0
        self._bound = False

    @classmethod
    def _view(cls, state: ParticlesState, index: int) -> "Particle":
        particle = cls.__new__(cls)
        particle._state = state
        particle._index = index
        particle._bound = True
        return particle

    def _bind(self, state: ParticlesState, index: int) -> None:
        self._state = state
        self._index = index
        self._bound = True

    def _detach(self) -> None:
        """Move this particle's row into a private single-row state."""
        i = self._index
        self._state = ParticlesState(
            pos=self._state.pos[i].copy(),
            vel=self._state.vel[i].copy(),
            mass=self._state.mass[i : i + 1].copy(),
            acc=self._state.acc[i].copy(),
        )
        self._index = 0
        self._bound = False

    @property
    def mass(self) -> float:
        return float(self._state.mass[self._index])

    @property
    def position(self) -> Vector3:
        return Vector3.from_iterable(self._state.pos[self._index])

    @position.setter
    def position(self, value: VectorLike) -> None:
        self._state.pos[self._index] = _row(value)

    @property
    def velocity(self) -> Vector3:
        return Vector3.from_iterable(self._state.vel[self._index])

    @velocity.setter
    def velocity(self, value: VectorLike) -> None:
        self._state.vel[self._index] = _row(value)

    @property
    def acceleration(self) -> Vector3:
        return Vector3.from_iterable(self._state.acc[self._index])

    @acceleration.setter
    def acceleration(self, value: VectorLike) -> None:
        self._state.acc[self._index] = _row(value)

    def validate(self) -> None:
        i = self._index
        m = self._state.mass[i]
        if not np.isfinite(m) or m <= 0.0:
            raise ValueError("mass must be finite and > 0")
        if not np.all(np.isfinite(self._state.pos[i])):
            raise ValueError("position must be finite")
        if not np.all(np.isfinite(self._state.vel[i])):
            raise ValueError("velocity must be finite")
        if not np.all(np.isfinite(self._state.acc[i])):
            raise ValueError("acceleration must be finite")

    def copy(self) -> "Particle":
        return Particle(
            mass=self.mass,
            position=self._state.pos[self._index],
            velocity=self._state.vel[self._index],
            acceleration=self._state.acc[self._index],
        )

    def __repr__(self) -> str:
        return (
            f"Particle(mass={self.mass!r}, position={self.position!r}, "
            f"velocity={self.velocity!r})"
        )
