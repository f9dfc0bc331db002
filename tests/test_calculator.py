"""Tests for conversion metrics, eligibility and sequence validation."""

import pytest

from funnel_diagnostic.benchmarks.profiles import StageBenchmark
from funnel_diagnostic.core.entities import ConversionStatus, Stage, Transition
from funnel_diagnostic.metrics.calculator import (
    FunnelCalculator,
    calculate_funnel,
    classify_status,
    is_eligible,
    validate_funnel_sequence,
)
from funnel_diagnostic.schemas import FunnelInputs
from funnel_diagnostic.simulation.projector import project_stages


def test_healthy_funnel_rates_and_statuses(healthy_inputs):
    calculation = calculate_funnel(healthy_inputs, "general_b2b")

    rates = [c.rate for c in calculation.conversions]
    assert rates == pytest.approx([25.0, 24.0, 58.3333, 17.1429], rel=1e-4)
    assert all(c.status == ConversionStatus.OK for c in calculation.conversions)
    assert all(c.eligible for c in calculation.conversions)
    assert calculation.global_conversion == pytest.approx(0.6)
    assert calculation.has_valid_data
    assert calculation.validation_errors == ()


def test_zero_leads_has_no_valid_data():
    calculation = calculate_funnel(FunnelInputs())
    assert not calculation.has_valid_data
    assert calculation.global_conversion is None
    assert all(c.rate is None for c in calculation.conversions)
    assert all(c.status == ConversionStatus.NO_DATA for c in calculation.conversions)


def test_global_conversion_uses_projected_contracts(leads_only_inputs):
    stages = project_stages(leads_only_inputs, "realistic")
    calculation = FunnelCalculator().calculate(leads_only_inputs, "general_b2b", stages)
    assert calculation.global_conversion == pytest.approx(0.4)


def test_rates_come_from_real_counts_only(leads_only_inputs):
    stages = project_stages(leads_only_inputs, "realistic")
    calculation = calculate_funnel(leads_only_inputs, "general_b2b", stages)

    lead_qualified = calculation.conversion_for(Transition.LEAD_QUALIFIED)
    assert lead_qualified.rate == 0
    assert lead_qualified.is_projected
    assert lead_qualified.status == ConversionStatus.NO_DATA


def test_small_source_sample_is_ineligible(healthy_inputs):
    inputs = healthy_inputs.model_copy(update={"opportunities": 8, "contracts": 2})
    calculation = calculate_funnel(inputs)

    closing = calculation.conversion_for(Transition.OPPORTUNITY_CONTRACT)
    assert not closing.eligible
    assert closing.status == ConversionStatus.NO_DATA
    assert closing.min_sample_size == 10
    assert calculation.ineligible == [closing]


def test_absent_contracts_are_projected_without_stages(healthy_inputs):
    inputs = healthy_inputs.model_copy(update={"contracts": None})
    closing = calculate_funnel(inputs).conversion_for(Transition.OPPORTUNITY_CONTRACT)
    assert closing.rate is None
    assert closing.is_projected
    assert closing.status == ConversionStatus.NO_DATA


def test_is_eligible_thresholds():
    assert is_eligible(30, Stage.LEADS)
    assert not is_eligible(29, Stage.LEADS)
    assert is_eligible(10, Stage.OPPORTUNITIES)
    assert not is_eligible(None, Stage.QUALIFIED)


def test_classify_status():
    benchmark = StageBenchmark(20.0, 25.0, 22.5)
    assert classify_status(22.5, benchmark) == ConversionStatus.OK
    assert classify_status(21.0, benchmark) == ConversionStatus.WARNING
    assert classify_status(20.0, benchmark) == ConversionStatus.WARNING
    assert classify_status(19.9, benchmark) == ConversionStatus.CRITICAL
    assert classify_status(None, benchmark) == ConversionStatus.NO_DATA


def test_validate_funnel_sequence():
    inputs = FunnelInputs(leads=100, qualified_leads=150, sales_qualified_leads=10,
                          opportunities=12, contracts=None)
    assert validate_funnel_sequence(inputs) == [
        "qualified leads cannot exceed leads",
        "opportunities cannot exceed sales-qualified leads",
    ]


def test_validate_consistent_funnel(healthy_inputs):
    assert validate_funnel_sequence(healthy_inputs) == []


def test_conversion_to_dict(healthy_inputs):
    data = calculate_funnel(healthy_inputs).conversions[0].to_dict()
    assert data["stageKey"] == "lead_qualified"
    assert data["label"] == "Leads → Qualified leads"
    assert data["fromCount"] == 1000
    assert data["toCount"] == 250
    assert data["status"] == "ok"
    assert data["gap"] == pytest.approx(2.5)


def test_financials():
    inputs = FunnelInputs(investment=10000, leads=1000, qualified_leads=200,
                          sales_qualified_leads=50, opportunities=20, contracts=5,
                          average_ticket=4000, cycle_days=40)
    financials = FunnelCalculator().calculate_financials(inputs)

    assert financials.cpl == pytest.approx(10)
    assert financials.cac == pytest.approx(2000)
    assert financials.revenue == pytest.approx(20000)
    assert financials.roi == pytest.approx(100)
    assert financials.sales_velocity == pytest.approx(500)


def test_financials_without_investment_are_none():
    financials = FunnelCalculator().calculate_financials(FunnelInputs(leads=100, contracts=0))
    assert financials.cpl is None
    assert financials.cac is None
    assert financials.roi is None
