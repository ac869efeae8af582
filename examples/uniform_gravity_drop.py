"""Two particles dropped onto each other under uniform gravity."""

from __future__ import annotations

from particle_kernel.core.diagnostics import (
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    total_mass,
)
from particle_kernel.core.integrators import DEFAULT_DT
from particle_kernel.core.state import Particle, SimulationContext
from particle_kernel.core.step import SimulationStep


if __name__ == "__main__":
    context = SimulationContext()
    context.add_particle(Particle(mass=1.0, position=(0.0, 5.0, 0.0)))
    context.add_particle(Particle(mass=4.0, position=(0.0, 0.0, 0.0), velocity=(0.0, 6.0, 0.0)))
    context.add_body([0, 1], name="pair")

    stepper = SimulationStep()
    steps = 120
    hits = 0
    for _ in range(steps):
        hits += len(stepper.step(context, DEFAULT_DT))

    for idx, particle in enumerate(context.particles):
        print(f"particle {idx} pos:", particle.position)
        print(f"particle {idx} vel:", particle.velocity)
    print("collisions:", hits)
    print("total mass:", total_mass(context))
    print("center of mass:", center_of_mass(context))
    print("linear momentum:", linear_momentum(context))
    print("kinetic energy:", kinetic_energy(context))
