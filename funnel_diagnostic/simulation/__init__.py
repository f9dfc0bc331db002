"""
Projection and Simulation

- Stage projection: fills missing stages from real upstream data with
  scenario benchmark rates, compounding down the funnel
- Scenario simulation: deterministic what-if cascades from a lead volume
  and custom rates, with revenue, ROI and CAC
"""

from .projector import ProjectedStages, StageProjector, project_stages
from .simulator import (
    SimulationResult,
    simulate,
    scenario_rates,
    sensitivity
)

__all__ = [
    "ProjectedStages",
    "StageProjector",
    "project_stages",
    "SimulationResult",
    "simulate",
    "scenario_rates",
    "sensitivity"
]
