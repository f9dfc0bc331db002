"""
Cost Engine

Cost per stage (investment / stage count) on real and projected counts,
and the cost increase between adjacent stages.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.arithmetic import safe_divide
from ..core.entities import Stage, STAGE_ORDER, TRANSITION_ORDER
from ..schemas import FunnelInputs


_COST_KEYS = {
    Stage.LEADS: "cpl",
    Stage.QUALIFIED: "costQualified",
    Stage.SALES_QUALIFIED: "costSalesQualified",
    Stage.OPPORTUNITIES: "costOpportunity",
    Stage.CONTRACTS: "costContract",
}


@dataclass(frozen=True)
class CostPerStage:
    """Currency cost to reach each stage; None when undefined."""
    cpl: Optional[float] = None
    cost_qualified: Optional[float] = None
    cost_sales_qualified: Optional[float] = None
    cost_opportunity: Optional[float] = None
    cost_contract: Optional[float] = None  # CAC

    def for_stage(self, stage: Stage) -> Optional[float]:
        return {
            Stage.LEADS: self.cpl,
            Stage.QUALIFIED: self.cost_qualified,
            Stage.SALES_QUALIFIED: self.cost_sales_qualified,
            Stage.OPPORTUNITIES: self.cost_opportunity,
            Stage.CONTRACTS: self.cost_contract,
        }[stage]

    def to_dict(self) -> dict:
        return {_COST_KEYS[stage]: self.for_stage(stage) for stage in STAGE_ORDER}


@dataclass(frozen=True)
class CostStep:
    """Cost increase from one stage to the next."""
    label: str
    from_stage: Stage
    to_stage: Stage
    delta: float

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "from": _COST_KEYS[self.from_stage],
            "to": _COST_KEYS[self.to_stage],
            "delta": self.delta,
        }


@dataclass(frozen=True)
class CostBreakdown:
    """Real costs, projected costs and the step deltas between them."""
    costs: CostPerStage
    projected_costs: CostPerStage
    cost_steps: tuple
    largest_cost_step: Optional[CostStep]


def cost_per_stage(investment, counts: Mapping[Stage, Optional[int]]) -> CostPerStage:
    """
    Investment divided by each stage count.

    Missing investment (zero or less) or a missing/zero count gives None.
    """
    spend = investment if investment and investment > 0 else None

    def cost(stage):
        return safe_divide(spend, counts.get(stage))

    return CostPerStage(
        cpl=cost(Stage.LEADS),
        cost_qualified=cost(Stage.QUALIFIED),
        cost_sales_qualified=cost(Stage.SALES_QUALIFIED),
        cost_opportunity=cost(Stage.OPPORTUNITIES),
        cost_contract=cost(Stage.CONTRACTS)
    )


def cost_steps(costs: CostPerStage) -> list:
    """Deltas between adjacent stages where both costs resolve."""
    steps = []
    for transition in TRANSITION_ORDER:
        before = costs.for_stage(transition.source)
        after = costs.for_stage(transition.target)
        if before is None or after is None:
            continue
        steps.append(CostStep(
            label=transition.short_label,
            from_stage=transition.source,
            to_stage=transition.target,
            delta=after - before
        ))
    return steps


def largest_cost_step(steps) -> Optional[CostStep]:
    """Step with the largest positive delta; the earliest wins ties."""
    largest = None
    for step in steps:
        if step.delta <= 0:
            continue
        if largest is None or step.delta > largest.delta:
            largest = step
    return largest


def calculate_costs(inputs: FunnelInputs, stages) -> CostBreakdown:
    """
    Cost breakdown for a funnel.

    Real costs use reported counts only. Projected costs use the
    effective counts from the projector, and the cost steps are taken
    from those projected costs.
    """
    real_counts = {stage: inputs.real_count(stage) for stage in STAGE_ORDER}
    costs = cost_per_stage(inputs.investment, real_counts)
    projected_costs = cost_per_stage(inputs.investment, stages.counts())

    steps = cost_steps(projected_costs)
    return CostBreakdown(
        costs=costs,
        projected_costs=projected_costs,
        cost_steps=tuple(steps),
        largest_cost_step=largest_cost_step(steps)
    )
