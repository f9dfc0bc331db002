"""
Confidence Scorer

Scores how far a diagnosis can be trusted (0-100). The score starts at
100 and loses itemized penalties for:
- Transitions without enough source samples
- Downstream counts larger than their upstream count
- Missing optional data the diagnosis relies on

Weights and level thresholds come from ConfidencePolicy. A sample
penalty is never smaller than the inconsistency penalty, so pushing any
stage below its sample minimum never raises the score.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from ..config import ConfidencePolicy, get_settings
from ..core.entities import Stage, Transition, MIN_SAMPLE_SIZES
from ..schemas import FunnelInputs
from .calculator import FunnelCalculation, sequence_violations

logger = logging.getLogger(__name__)


class ConfidenceLevel(str, Enum):
    """Confidence buckets."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PenaltyCategory(str, Enum):
    """What a penalty is about."""
    SAMPLE = "sample"
    COMPLETENESS = "completeness"
    CONSISTENCY = "consistency"


@dataclass(frozen=True)
class ConfidencePenalty:
    """A single deduction from the confidence score."""
    reason: str
    penalty: int
    category: PenaltyCategory

    def to_dict(self) -> dict:
        return {
            "reason": self.reason,
            "penaltyAmount": self.penalty,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class ConfidenceScoreResult:
    """Confidence score with its explanation."""
    score: int
    level: ConfidenceLevel
    penalties: tuple = ()
    top_penalties: tuple = ()
    has_inconsistency: bool = False

    @property
    def label(self) -> str:
        return {
            ConfidenceLevel.LOW: "Low confidence",
            ConfidenceLevel.MEDIUM: "Medium confidence",
            ConfidenceLevel.HIGH: "High confidence",
        }[self.level]

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "level": self.level.value,
            "label": self.label,
            "penalties": [p.to_dict() for p in self.penalties],
            "topPenalties": [p.to_dict() for p in self.top_penalties],
            "hasInconsistency": self.has_inconsistency,
        }


class ConfidenceScorer:
    """
    Deterministic penalty-based confidence scoring.

    Penalties are collected in a fixed order (sample, consistency,
    completeness) so that ties in the top penalties are stable.
    """

    def __init__(self, policy: ConfidencePolicy = None):
        self.policy = policy or get_settings().confidence

    def score(
        self,
        inputs: FunnelInputs,
        calculation: FunnelCalculation
    ) -> ConfidenceScoreResult:
        """Score a funnel calculation."""
        penalties = []
        penalties.extend(self._sample_penalties(inputs, calculation))

        consistency = self._consistency_penalties(inputs)
        penalties.extend(consistency)

        penalties.extend(self._completeness_penalties(inputs))

        total = sum(p.penalty for p in penalties)
        score = max(0, min(100, 100 - total))

        top = sorted(penalties, key=lambda p: p.penalty, reverse=True)
        result = ConfidenceScoreResult(
            score=score,
            level=self._level(score),
            penalties=tuple(penalties),
            top_penalties=tuple(top[:self.policy.top_penalties]),
            has_inconsistency=bool(consistency)
        )

        logger.debug(
            "Confidence %d (%s), %d penalties",
            result.score, result.level.value, len(penalties)
        )
        return result

    def _sample_weight(self, weight: int) -> int:
        # An ineligible stage never costs less than the inconsistency it
        # may hide, so shrinking a sample cannot raise the score
        return max(weight, self.policy.inconsistency_penalty)

    def _transition_weight(self, transition: Transition) -> int:
        return self._sample_weight({
            Transition.LEAD_QUALIFIED: self.policy.lead_qualified_sample_penalty,
            Transition.QUALIFIED_SALES_QUALIFIED: self.policy.qualified_sales_qualified_sample_penalty,
            Transition.SALES_QUALIFIED_OPPORTUNITY: self.policy.sales_qualified_opportunity_sample_penalty,
            Transition.OPPORTUNITY_CONTRACT: self.policy.opportunity_contract_sample_penalty,
        }[transition])

    def _sample_penalties(
        self,
        inputs: FunnelInputs,
        calculation: FunnelCalculation
    ) -> list:
        penalties = []

        for conversion in calculation.ineligible:
            source = conversion.transition.source
            if conversion.from_count == 0:
                reason = f"{source.label} not provided"
            else:
                reason = (
                    f"Small {source.label.lower()} sample "
                    f"({conversion.from_count} < {conversion.min_sample_size})"
                )
            penalties.append(ConfidencePenalty(
                reason=reason,
                penalty=self._transition_weight(conversion.transition),
                category=PenaltyCategory.SAMPLE
            ))

        contracts = inputs.contracts
        minimum = MIN_SAMPLE_SIZES[Stage.CONTRACTS]
        if contracts is not None and contracts < minimum:
            penalties.append(ConfidencePenalty(
                reason=f"Small contracts sample ({contracts} < {minimum})",
                penalty=self._sample_weight(self.policy.small_contract_sample_penalty),
                category=PenaltyCategory.SAMPLE
            ))

        return penalties

    def _consistency_penalties(self, inputs: FunnelInputs) -> list:
        return [
            ConfidencePenalty(
                reason=(
                    f"Inconsistent data: {t.target.label.lower()} "
                    f"> {t.source.label.lower()}"
                ),
                penalty=self.policy.inconsistency_penalty,
                category=PenaltyCategory.CONSISTENCY
            )
            for t in sequence_violations(inputs)
        ]

    def _completeness_penalties(self, inputs: FunnelInputs) -> list:
        penalties = []

        if inputs.investment <= 0:
            penalties.append(ConfidencePenalty(
                reason="Investment not provided",
                penalty=self.policy.missing_investment_penalty,
                category=PenaltyCategory.COMPLETENESS
            ))

        if inputs.contracts is None:
            penalties.append(ConfidencePenalty(
                reason="Contracts not provided; closing is projected",
                penalty=self.policy.missing_contracts_penalty,
                category=PenaltyCategory.COMPLETENESS
            ))
        else:
            # Reported contracts, even zero, need ticket and cycle to be read
            if inputs.average_ticket is None:
                penalties.append(ConfidencePenalty(
                    reason="Average ticket not provided",
                    penalty=self.policy.missing_ticket_penalty,
                    category=PenaltyCategory.COMPLETENESS
                ))
            if inputs.cycle_days is None:
                penalties.append(ConfidencePenalty(
                    reason="Sales cycle not provided",
                    penalty=self.policy.missing_cycle_penalty,
                    category=PenaltyCategory.COMPLETENESS
                ))

        return penalties

    def _level(self, score: int) -> ConfidenceLevel:
        if score >= self.policy.high_threshold:
            return ConfidenceLevel.HIGH
        if score >= self.policy.medium_threshold:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW


def calculate_confidence_score(
    inputs: FunnelInputs,
    calculation: FunnelCalculation,
    policy: ConfidencePolicy = None
) -> ConfidenceScoreResult:
    """Score a calculation with the configured policy."""
    return ConfidenceScorer(policy).score(inputs, calculation)
