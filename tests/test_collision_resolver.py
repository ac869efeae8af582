from __future__ import annotations

import math

import numpy as np
import pytest

from particle_kernel.core.collision import (
    DEGENERATE_NORMAL,
    ElasticImpulse,
    WallReflection,
    collision_radius,
    detect,
    resolve,
)
from particle_kernel.core.diagnostics import kinetic_energy, linear_momentum
from particle_kernel.core.math import Vector3
from particle_kernel.core.state import Particle, SimulationContext


def _pair(
    ma: float,
    pa: tuple[float, float, float],
    mb: float,
    pb: tuple[float, float, float],
    va: tuple[float, float, float] = (0.0, 0.0, 0.0),
    vb: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> SimulationContext:
    context = SimulationContext()
    context.add_particle(Particle(mass=ma, position=pa, velocity=va))
    context.add_particle(Particle(mass=mb, position=pb, velocity=vb))
    return context


def _detect_resolve(context: SimulationContext, policy=None) -> int:
    return resolve(context, detect(context), policy)


def test_mass_weighted_correction_literal_case() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0))
    overlap = 3.0 - 0.5

    assert _detect_resolve(context) == 1

    a, b = context.particles
    assert np.allclose(a.position.to_array(), [-overlap * 4.0 / 5.0, 0.0, 0.0])
    assert np.allclose(b.position.to_array(), [0.5 + overlap * 1.0 / 5.0, 0.0, 0.0])
    assert math.isclose((b.position - a.position).magnitude(), 3.0)


def test_separation_restores_radius_sum() -> None:
    pa0 = Vector3(0.0, 0.0, 0.0)
    pb0 = Vector3(1.0, 1.0, 0.5)
    context = _pair(2.0, tuple(pa0), 3.0, tuple(pb0))

    _detect_resolve(context)

    a, b = context.particles
    radius_sum = collision_radius(2.0) + collision_radius(3.0)
    assert math.isclose((b.position - a.position).magnitude(), radius_sum)

    shift_a = (a.position - pa0).magnitude()
    shift_b = (b.position - pb0).magnitude()
    assert shift_a > shift_b
    assert math.isclose(shift_a / shift_b, 3.0 / 2.0)


def test_detector_and_resolver_share_contact_distance() -> None:
    radius_sum = collision_radius(2.0) + collision_radius(3.0)

    inside = _pair(2.0, (0.0, 0.0, 0.0), 3.0, (radius_sum * (1.0 - 1e-9), 0.0, 0.0))
    assert detect(inside) == [(0, 1)]
    assert resolve(inside, [(0, 1)]) == 1

    apart = _pair(2.0, (0.0, 0.0, 0.0), 3.0, (radius_sum * (1.0 + 1e-9), 0.0, 0.0))
    assert detect(apart) == []
    assert resolve(apart, [(0, 1)]) == 0
    assert apart.particles[1].position.x == radius_sum * (1.0 + 1e-9)


def test_no_spurious_collision() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (3.0, 0.0, 0.0), va=(1.0, 0.0, 0.0))
    before = context.clone()

    assert _detect_resolve(context) == 0

    for p, q in zip(context.particles, before.particles):
        assert p.position == q.position
        assert p.velocity == q.velocity


def test_separated_state_is_a_fixed_point() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0))
    _detect_resolve(context)
    settled = context.clone()

    assert detect(context) == []
    _detect_resolve(context)

    assert np.allclose(context.positions(), settled.positions())


def test_pair_already_separated_is_skipped() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0), va=(1.0, 0.0, 0.0))
    assert resolve(context, [(0, 1), (0, 1)]) == 1
    assert np.allclose(context.particles[0].velocity.to_array(), [-1.0, 0.0, 0.0])


def test_wall_reflection_is_per_particle() -> None:
    context = _pair(
        1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0), va=(1.0, 0.0, 0.0), vb=(-1.0, 2.0, 0.0)
    )
    _detect_resolve(context, WallReflection())

    a, b = context.particles
    assert np.allclose(a.velocity.to_array(), [-1.0, 0.0, 0.0])
    assert np.allclose(b.velocity.to_array(), [1.0, 2.0, 0.0])


def test_wall_reflection_does_not_conserve_pair_momentum() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0), va=(1.0, 0.0, 0.0))
    _detect_resolve(context)
    assert np.allclose(linear_momentum(context), [-1.0, 0.0, 0.0])


def test_elastic_impulse_conserves_momentum_and_energy() -> None:
    context = _pair(1.0, (0.0, 0.0, 0.0), 4.0, (0.5, 0.0, 0.0), va=(2.0, 0.0, 0.0))
    p0 = linear_momentum(context)
    ke0 = kinetic_energy(context)

    _detect_resolve(context, ElasticImpulse())

    a, b = context.particles
    assert np.allclose(a.velocity.to_array(), [-1.2, 0.0, 0.0])
    assert np.allclose(b.velocity.to_array(), [0.8, 0.0, 0.0])
    assert np.allclose(linear_momentum(context), p0)
    assert math.isclose(kinetic_energy(context), ke0)


def test_elastic_impulse_ignores_separating_pair() -> None:
    context = _pair(
        1.0, (0.0, 0.0, 0.0), 1.0, (0.5, 0.0, 0.0), va=(-1.0, 0.0, 0.0), vb=(1.0, 0.0, 0.0)
    )
    _detect_resolve(context, ElasticImpulse(restitution=0.5))

    a, b = context.particles
    assert a.velocity == Vector3(-1.0, 0.0, 0.0)
    assert b.velocity == Vector3(1.0, 0.0, 0.0)


def test_elastic_impulse_rejects_bad_restitution() -> None:
    with pytest.raises(ValueError, match="restitution"):
        ElasticImpulse(restitution=1.5)


def test_coincident_particles_stay_finite() -> None:
    context = _pair(1.0, (1.0, 1.0, 1.0), 1.0, (1.0, 1.0, 1.0), va=(0.5, -1.0, 0.0))

    assert _detect_resolve(context) == 1

    a, b = context.particles
    for p in (a, b):
        assert p.position.is_finite()
        assert p.velocity.is_finite()
    assert np.allclose(a.position.to_array(), [0.0, 1.0, 1.0])
    assert np.allclose(b.position.to_array(), [2.0, 1.0, 1.0])
    assert np.array_equal(DEGENERATE_NORMAL, [1.0, 0.0, 0.0])
    assert np.allclose(a.velocity.to_array(), [-0.5, -1.0, 0.0])


def test_resolution_order_matters() -> None:
    def chain() -> SimulationContext:
        context = SimulationContext()
        for x in (0.0, 1.5, 3.2):
            context.add_particle(Particle(mass=1.0, position=(x, 0.0, 0.0)))
        return context

    forward = chain()
    assert detect(forward) == [(0, 1), (1, 2)]
    resolve(forward, [(0, 1), (1, 2)])
    xs = [p.position.x for p in forward.particles]
    assert np.allclose(xs, [-0.25, 1.475, 3.475])

    backward = chain()
    resolve(backward, [(1, 2), (0, 1)])
    xs = [p.position.x for p in backward.particles]
    assert np.allclose(xs, [-0.325, 1.675, 3.35])
