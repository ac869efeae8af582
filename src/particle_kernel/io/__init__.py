"""Scenario file support."""

from .scenario import (  # noqa: F401
    ScenarioDefinition,
    demo_scenario,
    load_scenario,
    save_scenario,
    scenario_to_runtime,
)
