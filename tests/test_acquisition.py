"""Tests for the leads-for-one-contract calculation."""

import pytest

from funnel_diagnostic.core.entities import Stage
from funnel_diagnostic.metrics.acquisition import (
    calculate_leads_for_contract,
    deepest_real_stage,
)
from funnel_diagnostic.schemas import FunnelInputs


def test_real_opportunities_with_benchmark_closing():
    inputs = FunnelInputs(investment=10000, leads=500, opportunities=50)
    result = calculate_leads_for_contract(inputs, "realistic", "general_b2b")

    assert result.total_conversion == pytest.approx(0.015)
    assert result.leads_needed == 67
    assert result.investment_needed == pytest.approx(1340)
    assert result.uses_real_conversion
    assert result.conversion_path_description == (
        "leads→opportunity real, opportunity→contract benchmark"
    )


def test_deepest_real_stage_wins():
    inputs = FunnelInputs(investment=10000, leads=1000, qualified_leads=300,
                          opportunities=40, contracts=None)
    assert deepest_real_stage(inputs) == Stage.OPPORTUNITIES


def test_real_contracts_need_no_benchmark():
    inputs = FunnelInputs(investment=5000, leads=1000, qualified_leads=200,
                          sales_qualified_leads=50, opportunities=30, contracts=10)
    result = calculate_leads_for_contract(inputs)

    assert result.leads_needed == 100
    assert result.investment_needed == pytest.approx(500)
    assert result.conversion_path_description == "leads→contract real"


def test_full_benchmark_chain_without_real_stages():
    inputs = FunnelInputs(investment=1000, leads=100)
    result = calculate_leads_for_contract(inputs, "realistic")

    assert not result.uses_real_conversion
    assert result.leads_needed == 270
    assert result.investment_needed == pytest.approx(2700)
    assert result.conversion_path_description.count("benchmark") == 4


@pytest.mark.parametrize(
    "inputs",
    [
        FunnelInputs(investment=0, leads=500, opportunities=50),
        FunnelInputs(investment=1000, leads=0),
    ],
)
def test_missing_leads_or_investment_is_none(inputs):
    assert calculate_leads_for_contract(inputs) is None
