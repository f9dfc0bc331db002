"""
Funnel Calculator

Calculates the real (non-projected) funnel metrics:
- Conversion rate per transition, with benchmark status
- Global lead -> contract conversion
- Sample-size eligibility per transition
- Potential gain of each weak transition at its benchmark average
- Financial ratios (CPL, CAC, revenue, ROI, sales velocity)

All divisions are null-safe: an undefined ratio is None, never an
error and never NaN or infinity.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..benchmarks.profiles import (
    BenchmarkProfile,
    BenchmarkRepository,
    StageBenchmark,
    get_repository
)
from ..core.arithmetic import is_number, safe_divide, safe_percent
from ..core.entities import (
    ConversionStatus,
    Sector,
    Stage,
    Transition,
    MIN_SAMPLE_SIZES,
    TRANSITION_ORDER,
    needs_projection
)
from ..schemas import FunnelInputs
from .impact import StageImpact, calculate_stage_impacts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionRate:
    """Conversion between two adjacent stages, from real counts."""
    transition: Transition
    from_count: int
    to_count: Optional[int]
    rate: Optional[float]  # percentage
    benchmark: StageBenchmark
    status: ConversionStatus
    eligible: bool
    is_projected: bool
    min_sample_size: int
    impact: Optional[StageImpact] = None  # gain at benchmark average

    @property
    def label(self) -> str:
        return self.transition.label

    @property
    def gap(self) -> Optional[float]:
        """Percentage points above (+) or below (-) the benchmark average."""
        if self.rate is None:
            return None
        return self.rate - self.benchmark.avg

    @property
    def is_rankable(self) -> bool:
        return self.eligible and not self.is_projected and self.rate is not None

    def to_dict(self) -> dict:
        return {
            "stageKey": self.transition.value,
            "label": self.label,
            "fromCount": self.from_count,
            "toCount": self.to_count,
            "rate": self.rate,
            "benchmark": self.benchmark.to_dict(),
            "status": self.status.value,
            "eligible": self.eligible,
            "minSampleSize": self.min_sample_size,
            "isProjected": self.is_projected,
            "gap": self.gap,
            "impact": self.impact.to_dict() if self.impact else None,
        }


@dataclass(frozen=True)
class FunnelCalculation:
    """Output of the funnel calculator."""
    sector: Sector
    global_conversion: Optional[float]
    conversions: tuple
    has_valid_data: bool
    validation_errors: tuple = ()

    def conversion_for(self, transition: Transition) -> ConversionRate:
        for conversion in self.conversions:
            if conversion.transition == transition:
                return conversion
        raise KeyError(transition)

    @property
    def ineligible(self) -> list:
        return [c for c in self.conversions if not c.eligible]


@dataclass(frozen=True)
class FinancialMetrics:
    """Financial ratios from the reported inputs."""
    cpl: Optional[float] = None
    cac: Optional[float] = None
    revenue: Optional[float] = None
    roi: Optional[float] = None  # percentage
    sales_velocity: Optional[float] = None  # currency per day

    def to_dict(self) -> dict:
        return {
            "cpl": self.cpl,
            "cac": self.cac,
            "revenue": self.revenue,
            "roi": self.roi,
            "salesVelocity": self.sales_velocity,
        }


def is_eligible(count: Optional[int], stage: Stage) -> bool:
    """True when a stage holds enough samples to trust rates out of it."""
    if count is None:
        return False
    return count >= MIN_SAMPLE_SIZES[stage]


def classify_status(rate: Optional[float], benchmark: StageBenchmark) -> ConversionStatus:
    """ok at or above avg, warning between min and avg, critical below min."""
    if rate is None:
        return ConversionStatus.NO_DATA
    if rate >= benchmark.avg:
        return ConversionStatus.OK
    if rate >= benchmark.min:
        return ConversionStatus.WARNING
    return ConversionStatus.CRITICAL


_SEQUENCE_MESSAGES = {
    Transition.LEAD_QUALIFIED: "qualified leads cannot exceed leads",
    Transition.QUALIFIED_SALES_QUALIFIED: "sales-qualified leads cannot exceed qualified leads",
    Transition.SALES_QUALIFIED_OPPORTUNITY: "opportunities cannot exceed sales-qualified leads",
    Transition.OPPORTUNITY_CONTRACT: "contracts cannot exceed opportunities",
}


def sequence_violations(inputs: FunnelInputs) -> list:
    """Transitions whose downstream count exceeds the upstream count."""
    violations = []
    for transition in TRANSITION_ORDER:
        upstream = inputs.real_count(transition.source)
        downstream = inputs.real_count(transition.target)
        if upstream is None or downstream is None:
            continue
        if downstream > upstream:
            violations.append(transition)
    return violations


def validate_funnel_sequence(inputs: FunnelInputs) -> list:
    """
    Human-readable sequence violations.

    Never raises; callers decide whether a non-empty list blocks a save.
    """
    return [_SEQUENCE_MESSAGES[t] for t in sequence_violations(inputs)]


class FunnelCalculator:
    """
    Calculates real conversion metrics for a funnel.

    A transition is classified against its benchmark only when it is
    eligible (enough source samples) and its destination stage was
    actually measured. Everything else is reported as no_data.
    """

    def __init__(self, repository: BenchmarkRepository = None):
        self._repository = repository or get_repository()

    def calculate(
        self,
        inputs: FunnelInputs,
        sector=None,
        stages=None
    ) -> FunnelCalculation:
        """
        Calculate conversion rates and global conversion.

        stages, when given, are the projected stages; their contracts
        value drives the global conversion and their provenance marks
        projected transitions.
        """
        profile = self._repository.get_profile(sector)
        conversions = tuple(
            self._conversion(inputs, transition, profile, stages)
            for transition in TRANSITION_ORDER
        )
        impacts = calculate_stage_impacts(conversions)
        conversions = tuple(
            replace(c, impact=impacts.get(c.transition)) for c in conversions
        )

        return FunnelCalculation(
            sector=profile.sector,
            global_conversion=self._global_conversion(inputs, stages),
            conversions=conversions,
            has_valid_data=inputs.leads > 0,
            validation_errors=tuple(validate_funnel_sequence(inputs))
        )

    def _conversion(
        self,
        inputs: FunnelInputs,
        transition: Transition,
        profile: BenchmarkProfile,
        stages
    ) -> ConversionRate:
        source = transition.source
        from_count = inputs.real_count(source) or 0
        to_count = inputs.real_count(transition.target)
        rate = safe_percent(to_count, from_count)

        if stages is not None:
            projected = stages.is_projected(transition.target)
        else:
            projected = needs_projection(to_count)

        eligible = is_eligible(from_count, source)
        benchmark = profile.for_transition(transition)
        if eligible and not projected:
            status = classify_status(rate, benchmark)
        else:
            status = ConversionStatus.NO_DATA

        return ConversionRate(
            transition=transition,
            from_count=from_count,
            to_count=to_count,
            rate=rate,
            benchmark=benchmark,
            status=status,
            eligible=eligible,
            is_projected=projected,
            min_sample_size=MIN_SAMPLE_SIZES[source]
        )

    def _global_conversion(self, inputs: FunnelInputs, stages) -> Optional[float]:
        """Contracts / leads x 100, using the effective contracts count."""
        if stages is not None:
            contracts = stages.value(Stage.CONTRACTS)
        else:
            contracts = inputs.contracts
        return safe_percent(contracts, inputs.leads)

    def calculate_financials(self, inputs: FunnelInputs) -> FinancialMetrics:
        """
        Calculate financial ratios from reported values only.

        Sales velocity = (opportunities x ticket x win rate) / cycle days.
        """
        investment = inputs.investment if inputs.investment > 0 else None
        contracts = inputs.contracts
        ticket = inputs.average_ticket

        cpl = safe_divide(investment, inputs.leads)
        cac = safe_divide(investment, contracts)

        revenue = None
        if contracts and ticket:
            revenue = contracts * ticket

        roi = None
        if revenue is not None and investment is not None:
            roi = (revenue - investment) / investment * 100

        sales_velocity = None
        if (is_number(inputs.cycle_days) and inputs.cycle_days > 0 and ticket
                and inputs.opportunities > 0 and contracts is not None):
            win_rate = safe_divide(contracts, inputs.opportunities)
            sales_velocity = safe_divide(
                inputs.opportunities * ticket * win_rate,
                inputs.cycle_days
            )

        return FinancialMetrics(
            cpl=cpl,
            cac=cac,
            revenue=revenue,
            roi=roi,
            sales_velocity=sales_velocity
        )


def calculate_funnel(inputs: FunnelInputs, sector=None, stages=None) -> FunnelCalculation:
    """Run the funnel calculator with the shared benchmark repository."""
    return FunnelCalculator().calculate(inputs, sector, stages)
