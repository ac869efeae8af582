"""CLI entrypoint: run a scenario headless and print the final state."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .core.diagnostics import kinetic_energy, linear_momentum, max_overlap, total_mass
from .core.run import run
from .io import demo_scenario, load_scenario, scenario_to_runtime


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="particle_kernel")
    parser.add_argument("scenario", type=Path, nargs="?", default=None)
    parser.add_argument("--steps", type=int, default=None)
    parser.add_argument("--dt", type=float, default=None)
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    defn = load_scenario(args.scenario) if args.scenario is not None else demo_scenario()
    if args.steps is not None:
        defn["simulation"]["steps"] = args.steps
    if args.dt is not None:
        defn["simulation"]["dt"] = args.dt
    context, stepper, dt, steps = scenario_to_runtime(defn)

    result = run(context, dt, steps, stepper=stepper)
    final = result.final_state

    print(f"particle_kernel v{__version__}")
    print("steps:", steps)
    print("dt:", dt)
    print("sim time:", dt * steps)
    for idx, particle in enumerate(final.particles):
        p = particle.position
        print(f"particle {idx}: pos=({p.x:.6f}, {p.y:.6f}, {p.z:.6f})")
    print("total mass:", total_mass(final))
    print("momentum:", linear_momentum(final))
    print("KE:", kinetic_energy(final))
    print("max overlap:", max_overlap(final))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
