"""
Stage Impact

What a weak transition would be worth at its benchmark average:
1. Extra output at the transition (source count x benchmark avg - real)
2. Extra contracts, pushing that output down the rest of the funnel
   with the real rates, or the benchmark average where a rate is not
   measured
"""

from dataclasses import dataclass
from typing import Optional

from ..core.arithmetic import round_half_up
from ..core.entities import Transition, TRANSITION_ORDER


@dataclass(frozen=True)
class StageImpact:
    """Potential gain from lifting one transition to its benchmark."""
    transition: Transition
    extra_output: int
    extra_contracts: int

    @property
    def description(self) -> str:
        text = f"+{self.extra_output} {self.transition.target.label.lower()}"
        if self.transition != Transition.OPPORTUNITY_CONTRACT and self.extra_contracts > 0:
            text += f" → +{self.extra_contracts} contracts"
        return text

    def to_dict(self) -> dict:
        return {
            "extraOutput": self.extra_output,
            "extraContracts": self.extra_contracts,
            "description": self.description,
        }


def _downstream_fraction(conversion) -> float:
    """Rate used to carry extra volume through a transition."""
    if conversion.rate is not None and not conversion.is_projected:
        return conversion.rate / 100
    return conversion.benchmark.avg / 100


def stage_impact(conversion, conversions) -> Optional[StageImpact]:
    """
    Impact of one transition, or None when there is nothing to gain.

    Only measured, eligible transitions below their benchmark average
    have an impact.
    """
    if not conversion.is_rankable or conversion.rate >= conversion.benchmark.avg:
        return None

    potential = conversion.from_count * conversion.benchmark.avg / 100
    extra_output = round_half_up(potential - (conversion.to_count or 0))
    if extra_output <= 0:
        return None

    carried = float(extra_output)
    index = TRANSITION_ORDER.index(conversion.transition)
    for downstream in conversions[index + 1:]:
        carried *= _downstream_fraction(downstream)

    return StageImpact(
        transition=conversion.transition,
        extra_output=extra_output,
        extra_contracts=round_half_up(carried)
    )


def calculate_stage_impacts(conversions) -> dict:
    """Transition -> StageImpact for every transition with a potential gain."""
    impacts = {}
    for conversion in conversions:
        impact = stage_impact(conversion, conversions)
        if impact is not None:
            impacts[conversion.transition] = impact
    return impacts
