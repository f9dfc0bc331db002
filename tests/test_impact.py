"""Tests for the benchmark-gap impact of weak transitions."""

from funnel_diagnostic.config import ConfidencePolicy, InsightPolicy
from funnel_diagnostic.core.entities import Transition
from funnel_diagnostic.metrics.calculator import calculate_funnel
from funnel_diagnostic.metrics.confidence import ConfidenceScorer
from funnel_diagnostic.metrics.impact import StageImpact
from funnel_diagnostic.schemas import FunnelInputs
from funnel_diagnostic.use_cases.insights import InsightRanker


WEAK_TOP = FunnelInputs(investment=10000, leads=1000, qualified_leads=150,
                        sales_qualified_leads=60, opportunities=35, contracts=6,
                        average_ticket=3000, cycle_days=30)


def test_weak_transition_carries_extra_output_to_contracts():
    calculation = calculate_funnel(WEAK_TOP, "general_b2b")
    impact = calculation.conversion_for(Transition.LEAD_QUALIFIED).impact

    # 1000 x 22.5% = 225 qualified, 75 missing; 75 x 40% x 35/60 x 6/35 = 3
    assert impact == StageImpact(Transition.LEAD_QUALIFIED, 75, 3)
    assert impact.description == "+75 qualified leads → +3 contracts"


def test_transitions_at_benchmark_have_no_impact():
    calculation = calculate_funnel(WEAK_TOP, "general_b2b")
    for transition in (Transition.QUALIFIED_SALES_QUALIFIED,
                       Transition.SALES_QUALIFIED_OPPORTUNITY,
                       Transition.OPPORTUNITY_CONTRACT):
        assert calculation.conversion_for(transition).impact is None


def test_closing_impact_lists_contracts_once():
    inputs = FunnelInputs(leads=1000, qualified_leads=250, sales_qualified_leads=60,
                          opportunities=40, contracts=4)
    impact = calculate_funnel(inputs, "general_b2b").conversion_for(
        Transition.OPPORTUNITY_CONTRACT).impact

    assert impact.extra_output == 2
    assert impact.extra_contracts == 2
    assert impact.description == "+2 contracts"


def test_unmeasured_downstream_uses_benchmark_average():
    inputs = FunnelInputs(leads=1000, qualified_leads=150, sales_qualified_leads=0,
                          opportunities=0, contracts=0)
    impact = calculate_funnel(inputs, "general_b2b").conversion_for(
        Transition.LEAD_QUALIFIED).impact

    # 75 x 20% x 55% x 15% = 1.24
    assert impact.extra_output == 75
    assert impact.extra_contracts == 1


def test_ineligible_or_projected_transitions_have_no_impact():
    small = calculate_funnel(FunnelInputs(leads=20, qualified_leads=1), "general_b2b")
    assert small.conversion_for(Transition.LEAD_QUALIFIED).impact is None

    projected = calculate_funnel(FunnelInputs(leads=1000, qualified_leads=0), "general_b2b")
    assert projected.conversion_for(Transition.LEAD_QUALIFIED).impact is None


def test_impact_is_serialized():
    calculation = calculate_funnel(WEAK_TOP, "general_b2b")
    data = calculation.conversion_for(Transition.LEAD_QUALIFIED).to_dict()

    assert data["impact"] == {
        "extraOutput": 75,
        "extraContracts": 3,
        "description": "+75 qualified leads → +3 contracts",
    }
    assert calculation.conversion_for(Transition.OPPORTUNITY_CONTRACT).to_dict()["impact"] is None


def test_stage_insight_quotes_impact():
    calculation = calculate_funnel(WEAK_TOP, "general_b2b")
    confidence = ConfidenceScorer(ConfidencePolicy()).score(WEAK_TOP, calculation)
    insights = InsightRanker(InsightPolicy()).generate(WEAK_TOP, calculation, confidence)

    assert insights[0].id == "bottleneck_lead_qualified"
    assert insights[0].description.endswith(
        "Reaching the benchmark: +75 qualified leads → +3 contracts."
    )
