"""Scenario I/O and adapters."""

from __future__ import annotations

import copy
import json
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np

from ..core.collision.resolver import ElasticImpulse, ResolutionPolicy, WallReflection
from ..core.forces import DEFAULT_GRAVITY, UniformGravity
from ..core.integrators import DEFAULT_DT, SymplecticEuler
from ..core.state import ParticlesState, SimulationContext
from ..core.step import SimulationStep


logger = logging.getLogger(__name__)

ScenarioDefinition = dict[str, Any]

RESOLUTION_POLICIES = {"wall_reflection", "elastic_impulse"}

_DEMO_SCENARIO: ScenarioDefinition = {
    "schema_version": 1,
    "metadata": {
        "name": "Demo",
        "description": "Four particles joined into two bodies, falling under gravity.",
    },
    "simulation": {
        "dt": DEFAULT_DT,
        "steps": 600,
        "gravity": DEFAULT_GRAVITY.tolist(),
        "resolution": "wall_reflection",
        "exclude_intra_body": False,
    },
    "entities": {
        "particles": {
            "mass": [1.0, 2.0, 0.5, 1.5],
            "pos": [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [-1.0, 1.0, 0.0], [1.0, 2.0, 0.0]],
            "vel": [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, -1.0, 0.0]],
            "ids": ["p1", "p2", "p3", "p4"],
        },
        "bodies": [
            {"name": "body1", "particles": ["p1", "p2"]},
            {"name": "body2", "particles": ["p3", "p4"]},
        ],
    },
}


def demo_scenario() -> ScenarioDefinition:
    return copy.deepcopy(_DEMO_SCENARIO)


def load_scenario(path: str | Path) -> ScenarioDefinition:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    defn = _validate_scenario_v1(data)
    logger.info("loaded scenario %s", path)
    return defn


def save_scenario(path: str | Path, defn: ScenarioDefinition) -> None:
    Path(path).write_text(
        json.dumps(defn, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def scenario_to_runtime(
    defn: ScenarioDefinition,
) -> tuple[SimulationContext, SimulationStep, float, int]:
    defn = _validate_scenario_v1(defn)
    sim = defn["simulation"]
    dt = float(sim["dt"])
    steps = int(sim["steps"])

    entities = defn.get("entities", {})
    id_map: dict[str, int] = {}
    state = ParticlesState.empty()
    if "particles" in entities:
        p = entities["particles"]
        state = ParticlesState(pos=p["pos"], vel=p["vel"], mass=p["mass"])
        for idx, pid in enumerate(p.get("ids", [])):
            id_map[pid] = idx
    context = SimulationContext(state)

    for body in entities.get("bodies", []):
        indices = [_member_index(m, id_map) for m in body["particles"]]
        context.add_body(indices, name=body.get("name"))
    context.validate()

    stepper = SimulationStep(
        model=UniformGravity(sim.get("gravity", DEFAULT_GRAVITY)),
        integrator=SymplecticEuler(),
        policy=_policy_from_sim(sim),
        exclude_intra_body=bool(sim.get("exclude_intra_body", False)),
    )
    logger.debug(
        "runtime built: %d particles, %d bodies, dt=%g, steps=%d",
        len(context.particles),
        len(context.bodies),
        dt,
        steps,
    )
    return context, stepper, dt, steps


def _policy_from_sim(sim: dict[str, Any]) -> ResolutionPolicy:
    name = sim.get("resolution", "wall_reflection")
    if name == "wall_reflection":
        return WallReflection()
    if name == "elastic_impulse":
        return ElasticImpulse(restitution=float(sim.get("restitution", 1.0)))
    raise ValueError(f"unsupported resolution policy: {name}")


def _member_index(member: Any, id_map: dict[str, int]) -> int:
    if isinstance(member, str):
        return id_map[member]
    return int(member)


def _require(obj: dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"missing required field: {ctx}.{key}")
    return obj[key]


def _validate_array(arr: Any, shape_suffix: tuple[int, ...], ctx: str) -> None:
    a = np.asarray(arr, dtype=np.float64)
    if a.ndim != len(shape_suffix) + 1:
        raise ValueError(f"{ctx} must be an array with shape (*, {', '.join(map(str, shape_suffix))})")
    if tuple(a.shape[1:]) != shape_suffix:
        raise ValueError(f"{ctx} must have shape (*, {', '.join(map(str, shape_suffix))})")
    if not np.all(np.isfinite(a)):
        raise ValueError(f"{ctx} must contain only finite values")


def _validate_ids(values: Any, expected_len: int, ctx: str) -> dict[str, int]:
    if not isinstance(values, list) or len(values) != expected_len:
        raise ValueError(f"{ctx} must be a list of length {expected_len}")
    id_map: dict[str, int] = {}
    for idx, entry in enumerate(values):
        if not isinstance(entry, str) or not entry:
            raise ValueError(f"{ctx}[{idx}] must be a non-empty string")
        if entry in id_map:
            raise ValueError(f"duplicate particle id: {entry}")
        id_map[entry] = idx
    return id_map


def _validate_scenario_v1(data: dict[str, Any]) -> ScenarioDefinition:
    if not isinstance(data, dict):
        raise ValueError("scenario must be a JSON object")
    if data.get("schema_version") != 1:
        raise ValueError("schema_version must be 1")

    sim = _require(data, "simulation", "scenario")
    _require(sim, "dt", "simulation")
    _require(sim, "steps", "simulation")
    if not math.isfinite(float(sim["dt"])) or sim["dt"] <= 0:
        raise ValueError("simulation.dt must be > 0")
    if sim["steps"] < 0:
        raise ValueError("simulation.steps must be >= 0")
    if "gravity" in sim:
        g = sim["gravity"]
        if len(g) != 3 or not all(math.isfinite(float(c)) for c in g):
            raise ValueError("simulation.gravity must be 3 finite values")
    if sim.get("resolution", "wall_reflection") not in RESOLUTION_POLICIES:
        raise ValueError("simulation.resolution invalid")
    if "restitution" in sim:
        e = float(sim["restitution"])
        if e < 0.0 or e > 1.0:
            raise ValueError("simulation.restitution must be in [0, 1]")
    if "exclude_intra_body" in sim and not isinstance(sim["exclude_intra_body"], bool):
        raise ValueError("simulation.exclude_intra_body must be boolean")

    if "sampling" in data:
        every = data["sampling"].get("every")
        if every is not None and every <= 0:
            raise ValueError("sampling.every must be > 0")

    entities = data.get("entities", {})
    n = 0
    id_map: dict[str, int] = {}
    if "particles" in entities:
        p = entities["particles"]
        _require(p, "pos", "particles")
        _require(p, "vel", "particles")
        _require(p, "mass", "particles")
        _validate_array(p["pos"], (3,), "particles.pos")
        _validate_array(p["vel"], (3,), "particles.vel")
        n = len(p["pos"])
        if len(p["vel"]) != n:
            raise ValueError("particles.vel must have length N")
        if len(p["mass"]) != n:
            raise ValueError("particles.mass must have length N")
        for idx, mass in enumerate(p["mass"]):
            m = float(mass)
            if not math.isfinite(m) or m <= 0.0:
                raise ValueError(f"particles.mass[{idx}] must be > 0")
        if "ids" in p:
            id_map = _validate_ids(p["ids"], n, "particles.ids")

    bodies = entities.get("bodies", [])
    if not isinstance(bodies, list):
        raise ValueError("bodies must be a list")
    for b_idx, body in enumerate(bodies):
        ctx = f"bodies[{b_idx}]"
        if not isinstance(body, dict):
            raise ValueError(f"{ctx} must be an object")
        members = _require(body, "particles", ctx)
        if not isinstance(members, list):
            raise ValueError(f"{ctx}.particles must be a list")
        for member in members:
            if isinstance(member, str):
                if member not in id_map:
                    raise ValueError(f"{ctx}.particles references unknown id: {member}")
            elif isinstance(member, int) and not isinstance(member, bool):
                if member < 0 or member >= n:
                    raise ValueError(f"{ctx}.particles index out of range: {member}")
            else:
                raise ValueError(f"{ctx}.particles entries must be ids or indices")
        if "name" in body and not isinstance(body["name"], str):
            raise ValueError(f"{ctx}.name must be a string")

    return data
