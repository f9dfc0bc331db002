"""
Funnel Diagnosis

The full request/response flow:
1. Validate the stage sequence
2. Project missing stages for the scenario
3. Calculate real conversions against the sector benchmark
4. Compute costs and confidence from the calculation
5. Estimate leads needed for one contract
6. Rank the bottleneck and build insights

Every step is a pure function of the input record, so identical
requests produce identical reports.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..benchmarks.profiles import BenchmarkRepository, get_repository, resolve_scenario
from ..config import Settings, get_settings
from ..core.entities import Scenario, Sector
from ..metrics.acquisition import LeadsForContract, calculate_leads_for_contract
from ..metrics.calculator import FinancialMetrics, FunnelCalculation, FunnelCalculator
from ..metrics.confidence import ConfidenceScorer, ConfidenceScoreResult
from ..metrics.costs import CostBreakdown, calculate_costs
from ..schemas import DiagnosticReport, FunnelInputs
from ..simulation.projector import ProjectedStages, StageProjector
from .insights import BottleneckResult, InsightRanker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnosis:
    """Typed result of a diagnosis run."""
    inputs: FunnelInputs
    sector: Sector
    scenario: Scenario
    stages: ProjectedStages
    calculation: FunnelCalculation
    costs: CostBreakdown
    financials: FinancialMetrics
    confidence: ConfidenceScoreResult
    leads_for_contract: Optional[LeadsForContract]
    bottleneck: BottleneckResult
    insights: tuple

    def to_report(self) -> DiagnosticReport:
        """Serializable report for persistence and rendering."""
        largest = self.costs.largest_cost_step
        return DiagnosticReport(
            sector=self.sector.value,
            scenario=self.scenario.value,
            costs=self.costs.costs.to_dict(),
            cost_steps=[s.to_dict() for s in self.costs.cost_steps],
            largest_cost_step=largest.to_dict() if largest else None,
            conversions=[c.to_dict() for c in self.calculation.conversions],
            global_conversion=self.calculation.global_conversion,
            projected_stages=self.stages.to_dict(),
            projected_costs=self.costs.projected_costs.to_dict(),
            leads_for_contract=(
                self.leads_for_contract.to_dict() if self.leads_for_contract else None
            ),
            confidence_score_result=self.confidence.to_dict(),
            insights=[i.to_dict() for i in self.insights],
            has_valid_data=self.calculation.has_valid_data,
            validation_errors=list(self.calculation.validation_errors),
            bottleneck=self.bottleneck.to_dict(),
            bottleneck_notice=self.bottleneck.notice,
            financials=self.financials.to_dict()
        )


class FunnelDiagnosisUseCase:
    """
    Runs the diagnosis pipeline.

    Flow:
    1. Resolve sector and scenario (falling back to defaults)
    2. Project stages
    3. Calculate conversions and financials
    4. Score costs and confidence
    5. Leads for one contract
    6. Bottleneck and insights
    """

    def __init__(
        self,
        settings: Settings = None,
        repository: BenchmarkRepository = None
    ):
        self._settings = settings or get_settings()
        self._repository = repository or get_repository()
        self._projector = StageProjector(self._repository)
        self._calculator = FunnelCalculator(self._repository)
        self._scorer = ConfidenceScorer(self._settings.confidence)
        self._ranker = InsightRanker(self._settings.insights)

    def run(
        self,
        inputs: Union[FunnelInputs, dict],
        sector=None,
        scenario=None
    ) -> Diagnosis:
        """
        Diagnose a funnel.

        This is the main entry point for the use case.
        """
        inputs = coerce_inputs(inputs)
        resolved_sector = self._repository.resolve_sector(
            sector if sector is not None else self._settings.default_sector
        )
        resolved_scenario = resolve_scenario(scenario)

        # Step 1-2: Project missing stages
        stages = self._projector.project(inputs, resolved_scenario, resolved_sector)

        # Step 3: Real conversions and financials
        calculation = self._calculator.calculate(inputs, resolved_sector, stages)
        financials = self._calculator.calculate_financials(inputs)

        # Step 4: Costs and confidence
        costs = calculate_costs(inputs, stages)
        confidence = self._scorer.score(inputs, calculation)

        # Step 5: Leads for one contract
        leads_for_contract = calculate_leads_for_contract(
            inputs, resolved_scenario, resolved_sector, self._repository
        )

        # Step 6: Bottleneck and insights
        bottleneck = self._ranker.identify_bottleneck(calculation.conversions, confidence)
        insights = self._ranker.generate(
            inputs, calculation, confidence, financials, bottleneck
        )

        logger.debug(
            "Diagnosis %s/%s: confidence=%d bottleneck=%s insights=%d",
            resolved_sector.value,
            resolved_scenario.value,
            confidence.score,
            bottleneck.conversion.transition.value if bottleneck.conversion else None,
            len(insights)
        )

        return Diagnosis(
            inputs=inputs,
            sector=resolved_sector,
            scenario=resolved_scenario,
            stages=stages,
            calculation=calculation,
            costs=costs,
            financials=financials,
            confidence=confidence,
            leads_for_contract=leads_for_contract,
            bottleneck=bottleneck,
            insights=tuple(insights)
        )


def coerce_inputs(inputs: Union[FunnelInputs, dict]) -> FunnelInputs:
    """Accept a FunnelInputs record or a raw mapping (snake or camel case)."""
    if isinstance(inputs, FunnelInputs):
        return inputs
    return FunnelInputs.model_validate(inputs)


def run_diagnosis(
    inputs: Union[FunnelInputs, dict],
    sector=None,
    scenario=None,
    settings: Settings = None
) -> Diagnosis:
    """Typed diagnosis."""
    return FunnelDiagnosisUseCase(settings).run(inputs, sector, scenario)


def diagnose(
    inputs: Union[FunnelInputs, dict],
    sector=None,
    scenario=None,
    settings: Settings = None
) -> DiagnosticReport:
    """Diagnose a funnel and return the serializable report."""
    return run_diagnosis(inputs, sector, scenario, settings).to_report()
