"""Headless simulation controller feeding a renderer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np

from ..core.diagnostics.particles import kinetic_energy, max_overlap
from ..core.state.context import SimulationContext
from ..core.step import SimulationStep
from ..io.scenario import load_scenario, scenario_to_runtime


@dataclass(slots=True)
class SimulationRuntime:
    context: SimulationContext
    stepper: SimulationStep
    dt: float
    steps: int
    last_pairs: int = 0


class SimulationController:
    def __init__(self) -> None:
        self.scenario_path: Path | None = None
        self.scenario_def: dict[str, Any] | None = None
        self.initial_context: SimulationContext | None = None
        self.runtime: SimulationRuntime | None = None
        self.current_step = 0

    def load_scenario(self, path: str | Path) -> None:
        scenario_path = Path(path)
        defn = load_scenario(scenario_path)
        self.load_definition(defn)
        self.scenario_path = scenario_path

    def load_definition(self, defn: dict[str, Any]) -> None:
        context, stepper, dt, steps = scenario_to_runtime(defn)
        self.scenario_def = defn
        self.runtime = SimulationRuntime(
            context=context,
            stepper=stepper,
            dt=dt,
            steps=steps,
        )
        self.initial_context = context.clone()
        self.current_step = 0

    def reset(self) -> bool:
        if self.runtime is None or self.initial_context is None:
            return False
        self.runtime.context = self.initial_context.clone()
        self.runtime.last_pairs = 0
        self.current_step = 0
        return True

    def can_step(self) -> bool:
        if self.runtime is None:
            return False
        return self.current_step < self.runtime.steps

    def step_once(self) -> bool:
        if not self.can_step():
            return False
        runtime = self.runtime
        assert runtime is not None
        pairs = runtime.stepper.step(runtime.context, runtime.dt)
        runtime.last_pairs = len(pairs)
        self.current_step += 1
        return True

    def diagnostics(self) -> dict[str, float | int]:
        if self.runtime is None:
            return {"step": 0, "time": 0.0}
        runtime = self.runtime
        return {
            "step": self.current_step,
            "time": self.current_step * runtime.dt,
            "collisions": runtime.last_pairs,
            "kinetic_energy": kinetic_energy(runtime.context),
            "max_overlap": max_overlap(runtime.context),
        }

    def particle_positions(self) -> np.ndarray:
        if self.runtime is None:
            return np.zeros(0, dtype=np.float32)
        return self.runtime.context.positions()

    def body_positions(self) -> list[np.ndarray]:
        if self.runtime is None:
            return []
        context = self.runtime.context
        return [context.body_positions(i) for i in range(len(context.bodies))]
