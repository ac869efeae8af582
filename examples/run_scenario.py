"""Run a scenario JSON and optionally save sampled data."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from particle_kernel.core.diagnostics import (
    kinetic_energy,
    linear_momentum,
    max_overlap,
    total_mass,
)
from particle_kernel.core.run import run
from particle_kernel.io import load_scenario, scenario_to_runtime


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("scenario", type=Path)
    parser.add_argument("--out", type=Path, default=None)
    args = parser.parse_args()

    defn = load_scenario(args.scenario)
    context, stepper, dt, steps = scenario_to_runtime(defn)
    sample_every = defn.get("sampling", {}).get("every")

    result = run(context, dt, steps, stepper=stepper, sample_every=sample_every)
    final = result.final_state

    print("steps:", steps)
    print("dt:", dt)
    print("sim time:", dt * steps)
    print("particles total mass:", total_mass(final))
    print("particles momentum:", linear_momentum(final))
    print("particles KE:", kinetic_energy(final))
    print("max overlap:", max_overlap(final))

    if args.out is not None and result.time is not None:
        np.savez_compressed(
            args.out,
            time=result.time,
            particles_pos=result.particles_pos,
            particles_vel=result.particles_vel,
            collisions=result.collisions,
        )
        print("saved samples to:", args.out)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
