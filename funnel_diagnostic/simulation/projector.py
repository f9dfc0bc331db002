"""
Stage Projector

Fills missing funnel stages from the nearest real upstream stage using
a scenario's benchmark rates.

The projection walks the stage order left to right, carrying forward
the effective value of the previous step. A projected stage feeds the
next projection, so scenario assumptions compound down the funnel.
Each projected value is rounded once, to the nearest integer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..benchmarks.profiles import BenchmarkRepository, get_repository, resolve_scenario
from ..core.arithmetic import round_half_up
from ..core.entities import (
    Scenario,
    Stage,
    StageValue,
    Transition,
    STAGE_ORDER,
    needs_projection
)
from ..schemas import FunnelInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectedStages:
    """Effective value and provenance for every stage."""
    scenario: Scenario
    values: tuple  # (Stage, StageValue) pairs in STAGE_ORDER

    def __getitem__(self, stage: Stage) -> StageValue:
        for key, value in self.values:
            if key == stage:
                return value
        raise KeyError(stage)

    def value(self, stage: Stage) -> int:
        return self[stage].value

    def is_projected(self, stage: Stage) -> bool:
        return self[stage].is_projected

    @property
    def any_projected(self) -> bool:
        return any(v.is_projected for _, v in self.values)

    def counts(self) -> dict:
        """Effective count per stage."""
        return {stage: value.value for stage, value in self.values}

    def to_dict(self) -> dict:
        return {stage.output_key: value.to_dict() for stage, value in self.values}


class StageProjector:
    """
    Projects absent or zero stages forward from real data.

    A stage keeps its real count when it is positive; otherwise it is
    previous effective value x scenario rate, rounded half up. Leads
    have no upstream and are never projected.
    """

    def __init__(self, repository: BenchmarkRepository = None):
        self._repository = repository or get_repository()

    def project(
        self,
        inputs: FunnelInputs,
        scenario=None,
        sector=None
    ) -> ProjectedStages:
        """Resolve every stage to a real or projected value."""
        resolved = resolve_scenario(scenario)
        values = []
        previous: Optional[int] = None

        for stage in STAGE_ORDER:
            real = inputs.real_count(stage)
            step = self._project_step(stage, real, previous, resolved, sector)
            values.append((stage, step))
            previous = step.value

        projected = ProjectedStages(scenario=resolved, values=tuple(values))
        if projected.any_projected:
            logger.debug(
                "Projected stages (%s): %s",
                resolved.value,
                {s.value: v.value for s, v in projected.values if v.is_projected}
            )
        return projected

    def _project_step(
        self,
        stage: Stage,
        real: Optional[int],
        previous: Optional[int],
        scenario: Scenario,
        sector
    ) -> StageValue:
        """One reducer step: keep the real count or derive it from upstream."""
        if not needs_projection(real):
            return StageValue(value=int(real), is_projected=False)

        transition = Transition.into(stage)
        if transition is None or previous is None:
            # Leads: nothing upstream to project from
            return StageValue(value=int(real or 0), is_projected=False)

        if previous <= 0:
            return StageValue(value=0, is_projected=True)

        rate = self._repository.get_scenario_rate(transition, scenario, sector)
        return StageValue(value=round_half_up(previous * rate), is_projected=True)


def project_stages(inputs: FunnelInputs, scenario=None, sector=None) -> ProjectedStages:
    """Project missing stages with the shared benchmark repository."""
    return StageProjector().project(inputs, scenario, sector)
