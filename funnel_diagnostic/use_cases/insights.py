"""
Insight & Bottleneck Ranker

Turns a funnel calculation into a short, ordered list of actionable
insights:
1. Rank trustworthy transitions (eligible, measured) worst first
2. Name the primary bottleneck when confidence allows it
3. Add further stage gaps
4. Add heuristic rules from the playbook tables (ROI, CPL, ticket size)
5. Add sector rules fired by below-benchmark transitions
6. Keep the most urgent few
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..benchmarks.playbooks import FORM_TYPE_GUIDANCE, STAGE_PLAYBOOKS, rules_for
from ..benchmarks.profiles import AVERAGE_MARKET_CONVERSION, get_profile
from ..config import InsightPolicy, get_settings
from ..core.entities import ConversionStatus
from ..metrics.calculator import ConversionRate, FinancialMetrics, FunnelCalculation
from ..metrics.confidence import ConfidenceScoreResult
from ..schemas import FunnelInputs

logger = logging.getLogger(__name__)

LOW_CONFIDENCE_NOTICE = "insufficient confidence to name a bottleneck"
NO_ELIGIBLE_STAGE_NOTICE = "no eligible measured stage to rank"


class InsightKind(str, Enum):
    """Insight severity/tone."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class Insight:
    """A single structured recommendation."""
    id: str
    kind: InsightKind
    title: str
    description: str = ""
    suggested_action: str = ""
    stage_ref: Optional[str] = None
    priority: int = 5  # 1 = most urgent

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "stageRef": self.stage_ref,
            "title": self.title,
            "description": self.description,
            "suggestedAction": self.suggested_action,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class BottleneckResult:
    """Primary bottleneck, or the reason none was named."""
    conversion: Optional[ConversionRate] = None
    notice: Optional[str] = None

    def to_dict(self) -> Optional[dict]:
        return self.conversion.to_dict() if self.conversion else None


def rank_bottlenecks(conversions) -> list:
    """
    Eligible, measured transitions sorted worst first.

    Lower rate first; ties go to the larger distance from the benchmark
    average.
    """
    rankable = [c for c in conversions if c.is_rankable]
    return sorted(rankable, key=lambda c: (c.rate, -abs(c.gap)))


class InsightRanker:
    """
    Ranks funnel stages and builds insights.

    Stage names are only singled out when the confidence score reaches
    the policy's bottleneck threshold.
    """

    def __init__(self, policy: InsightPolicy = None):
        self.policy = policy or get_settings().insights

    def identify_bottleneck(
        self,
        conversions,
        confidence: ConfidenceScoreResult
    ) -> BottleneckResult:
        """Worst ranked transition, withheld under low confidence."""
        if confidence.score < self.policy.bottleneck_min_confidence:
            return BottleneckResult(notice=LOW_CONFIDENCE_NOTICE)

        ranked = rank_bottlenecks(conversions)
        if not ranked:
            return BottleneckResult(notice=NO_ELIGIBLE_STAGE_NOTICE)
        return BottleneckResult(conversion=ranked[0])

    def generate(
        self,
        inputs: FunnelInputs,
        calculation: FunnelCalculation,
        confidence: ConfidenceScoreResult,
        financials: FinancialMetrics = None,
        bottleneck: BottleneckResult = None
    ) -> list:
        """Build, order and trim insights for a diagnosis."""
        if not calculation.has_valid_data:
            return [Insight(
                id="no_data",
                kind=InsightKind.INFO,
                title="Insufficient data",
                description="No leads reported for the period.",
                suggested_action="Fill in the funnel counts to receive a diagnosis.",
                priority=99
            )]

        bottleneck = bottleneck or self.identify_bottleneck(calculation.conversions, confidence)
        insights = []

        if bottleneck.conversion is not None:
            insights.append(self._stage_insight(bottleneck.conversion, primary=True))
            for conversion in rank_bottlenecks(calculation.conversions)[1:]:
                if conversion.status in (ConversionStatus.CRITICAL, ConversionStatus.WARNING):
                    insights.append(self._stage_insight(conversion, primary=False))
        elif bottleneck.notice == LOW_CONFIDENCE_NOTICE:
            insights.append(self._low_confidence_insight(confidence))

        insights.extend(self._financial_insights(inputs, calculation, financials))
        insights.extend(self._ticket_insights(inputs))
        insights.extend(self._global_insights(inputs, calculation))
        insights.extend(self._sector_rule_insights(calculation, confidence))

        ordered = sorted(insights, key=lambda i: i.priority)
        return ordered[:self.policy.max_insights]

    def _stage_insight(self, conversion: ConversionRate, primary: bool) -> Insight:
        playbook = STAGE_PLAYBOOKS[conversion.transition]
        benchmark = conversion.benchmark
        comparison = (
            f"{conversion.label} converts {conversion.rate:.1f}% against a "
            f"{benchmark.avg:.1f}% benchmark ({conversion.gap:+.1f} pp)."
        )

        if conversion.status == ConversionStatus.CRITICAL:
            kind, title, priority = InsightKind.CRITICAL, playbook.critical_title, 2
        elif conversion.status == ConversionStatus.WARNING:
            kind, title, priority = InsightKind.WARNING, playbook.warning_title, 3
        else:
            kind = InsightKind.INFO
            title = f"Weakest stage: {conversion.label} ({playbook.focus.lower()})"
            priority = 4

        if primary and kind != InsightKind.INFO:
            title = f"Bottleneck: {title}"
            priority -= 1

        description = f"{comparison} {playbook.heuristic}"
        if conversion.impact is not None:
            description += f" Reaching the benchmark: {conversion.impact.description}."

        return Insight(
            id=f"{'bottleneck' if primary else 'gap'}_{conversion.transition.value}",
            kind=kind,
            title=title,
            description=description,
            suggested_action=playbook.primary_action,
            stage_ref=conversion.transition.value,
            priority=priority
        )

    def _sector_rule_insights(
        self,
        calculation: FunnelCalculation,
        confidence: ConfidenceScoreResult
    ) -> list:
        # Rules name a stage, so they share the bottleneck confidence gate
        if confidence.score < self.policy.bottleneck_min_confidence:
            return []

        insights = []
        for conversion in calculation.conversions:
            if not conversion.is_rankable:
                continue
            critical = conversion.status == ConversionStatus.CRITICAL
            for rule in rules_for(calculation.sector, conversion.transition, conversion.status):
                insights.append(Insight(
                    id=f"rule_{rule.id}",
                    kind=InsightKind.CRITICAL if critical else InsightKind.WARNING,
                    title=rule.title,
                    description=rule.description,
                    suggested_action=rule.action,
                    stage_ref=conversion.transition.value,
                    priority=3 if critical else 4
                ))
        return insights

    def _low_confidence_insight(self, confidence: ConfidenceScoreResult) -> Insight:
        reasons = "; ".join(p.reason for p in confidence.top_penalties)
        return Insight(
            id="low_confidence",
            kind=InsightKind.INFO,
            title="Insufficient confidence to name a bottleneck",
            description=f"Confidence score {confidence.score}/100. {reasons}".strip(),
            suggested_action="Collect a larger, consistent sample before acting on stage rates.",
            priority=2
        )

    def _financial_insights(
        self,
        inputs: FunnelInputs,
        calculation: FunnelCalculation,
        financials: Optional[FinancialMetrics]
    ) -> list:
        if financials is None:
            return []

        insights = []
        if financials.roi is not None and financials.roi < 0:
            insights.append(Insight(
                id="roi_negative",
                kind=InsightKind.CRITICAL,
                title="Negative ROI",
                description=f"Return of {financials.roi:.0f}%: spend exceeds recovered revenue.",
                suggested_action="Stop scaling spend and fix conversion before investing more.",
                priority=1
            ))

        low_conversion = (
            inputs.contracts is not None
            and calculation.global_conversion is not None
            and calculation.global_conversion < AVERAGE_MARKET_CONVERSION
        )
        if (low_conversion and financials.cpl is not None
                and financials.cpl > self.policy.high_cpl_threshold):
            insights.append(Insight(
                id="cpl_high",
                kind=InsightKind.WARNING,
                title="High cost per lead with low conversion",
                description=(
                    f"CPL of {financials.cpl:.2f} while overall conversion is below "
                    f"the {AVERAGE_MARKET_CONVERSION}% market average."
                ),
                suggested_action="Stop scaling volume; move spend to high-converting landing pages.",
                stage_ref=None,
                priority=3
            ))
        return insights

    def _ticket_insights(self, inputs: FunnelInputs) -> list:
        ticket = inputs.average_ticket
        if ticket is None or ticket <= self.policy.high_ticket_threshold:
            return []
        return [Insight(
            id="high_ticket_forms",
            kind=InsightKind.INFO,
            title="High-ticket capture",
            description=FORM_TYPE_GUIDANCE["native_forms"] + ".",
            suggested_action=FORM_TYPE_GUIDANCE["landing_page"] + ".",
            priority=5
        )]

    def _global_insights(self, inputs: FunnelInputs, calculation: FunnelCalculation) -> list:
        # Only measured contracts say anything about real performance
        if not inputs.contracts or calculation.global_conversion is None:
            return []

        profile = get_profile(calculation.sector)
        if calculation.global_conversion < profile.conversion_range.avg:
            return []
        return [Insight(
            id="global_healthy",
            kind=InsightKind.SUCCESS,
            title="Healthy overall conversion",
            description=(
                f"Overall conversion of {calculation.global_conversion:.2f}% is at or above "
                f"the {profile.conversion_range.avg}% benchmark for {profile.label}."
            ),
            priority=6
        )]


def generate_insights(
    inputs: FunnelInputs,
    calculation: FunnelCalculation,
    confidence: ConfidenceScoreResult,
    financials: FinancialMetrics = None,
    policy: InsightPolicy = None
) -> list:
    """Insights with the configured policy."""
    return InsightRanker(policy).generate(inputs, calculation, confidence, financials)
