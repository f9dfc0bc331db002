"""
Leads needed for one contract.

Combines the deepest real conversion available with benchmark scenario
rates for the remaining transitions. Real data closest to the contract
stage is preferred because it needs the fewest benchmark assumptions.
"""

from dataclasses import dataclass
from typing import Optional

from ..benchmarks.profiles import BenchmarkRepository, get_repository
from ..core.arithmetic import ceil_clean, safe_divide
from ..core.entities import Stage, STAGE_ORDER, TRANSITION_ORDER, stage_short_name
from ..schemas import FunnelInputs


@dataclass(frozen=True)
class LeadsForContract:
    """Lead volume and spend needed to close one contract."""
    leads_needed: int
    investment_needed: Optional[float]
    conversion_path_description: str
    uses_real_conversion: bool
    total_conversion: float  # fraction

    def to_dict(self) -> dict:
        return {
            "leadsNeeded": self.leads_needed,
            "investmentNeeded": self.investment_needed,
            "conversionPathDescription": self.conversion_path_description,
            "usesRealConversion": self.uses_real_conversion,
            "totalConversion": self.total_conversion,
        }


def deepest_real_stage(inputs: FunnelInputs) -> Optional[Stage]:
    """Deepest stage after leads with a positive reported count."""
    for stage in reversed(STAGE_ORDER[1:]):
        count = inputs.real_count(stage)
        if count is not None and count > 0:
            return stage
    return None


def calculate_leads_for_contract(
    inputs: FunnelInputs,
    scenario=None,
    sector=None,
    repository: BenchmarkRepository = None
) -> Optional[LeadsForContract]:
    """
    Minimum leads (and spend) for one contract.

    Returns None when leads or investment are zero.
    """
    if inputs.leads <= 0 or inputs.investment <= 0:
        return None

    repository = repository or get_repository()
    anchor = deepest_real_stage(inputs)

    segments = []
    if anchor is not None:
        total = safe_divide(inputs.real_count(anchor), inputs.leads)
        segments.append(f"leads→{stage_short_name(anchor)} real")
        remaining = TRANSITION_ORDER[STAGE_ORDER.index(anchor):]
    else:
        total = 1.0
        remaining = TRANSITION_ORDER

    for transition in remaining:
        total *= repository.get_scenario_rate(transition, scenario, sector)
        segments.append(f"{transition.short_label} benchmark")

    if not total or total <= 0:
        return None

    leads_needed = ceil_clean(1 / total)
    cpl = safe_divide(inputs.investment, inputs.leads)

    return LeadsForContract(
        leads_needed=leads_needed,
        investment_needed=leads_needed * cpl if cpl is not None else None,
        conversion_path_description=", ".join(segments),
        uses_real_conversion=anchor is not None,
        total_conversion=total
    )
