"""Tests for confidence scoring."""

import pytest

from funnel_diagnostic.config import ConfidencePolicy
from funnel_diagnostic.core.entities import MIN_SAMPLE_SIZES, Stage
from funnel_diagnostic.metrics.calculator import calculate_funnel
from funnel_diagnostic.metrics.confidence import (
    ConfidenceLevel,
    ConfidenceScorer,
    PenaltyCategory,
    calculate_confidence_score,
)
from funnel_diagnostic.schemas import FunnelInputs


def _score(inputs, policy=None):
    return calculate_confidence_score(inputs, calculate_funnel(inputs), policy or ConfidencePolicy())


def test_complete_consistent_funnel_scores_full(healthy_inputs):
    result = _score(healthy_inputs)
    assert result.score == 100
    assert result.level == ConfidenceLevel.HIGH
    assert result.penalties == ()
    assert result.top_penalties == ()
    assert not result.has_inconsistency


def test_ineligible_stage_and_inconsistency(healthy_inputs):
    # 5 opportunities is below the sample minimum, and 6 contracts exceed them
    inputs = healthy_inputs.model_copy(update={"opportunities": 5})
    result = _score(inputs)

    assert result.score < 100
    assert result.score == 60
    assert result.level == ConfidenceLevel.MEDIUM
    assert result.has_inconsistency

    categories = [p.category for p in result.top_penalties]
    assert PenaltyCategory.SAMPLE in categories
    assert PenaltyCategory.CONSISTENCY in categories


def test_score_is_clamped_at_zero():
    result = _score(FunnelInputs())
    assert result.score == 0
    assert result.level == ConfidenceLevel.LOW
    assert len(result.top_penalties) == 3


def test_missing_optional_data_lowers_score(healthy_inputs):
    full = _score(healthy_inputs).score
    no_ticket = _score(healthy_inputs.model_copy(update={"average_ticket": None})).score
    no_ticket_or_cycle = _score(
        healthy_inputs.model_copy(update={"average_ticket": None, "cycle_days": None})
    ).score

    assert full > no_ticket > no_ticket_or_cycle
    assert no_ticket == 90
    assert no_ticket_or_cycle == 85


def test_small_contract_sample(healthy_inputs):
    result = _score(healthy_inputs.model_copy(update={"contracts": 2}))
    reasons = [p.reason for p in result.penalties]
    assert reasons == ["Small contracts sample (2 < 5)"]
    assert result.score == 80


def test_missing_stage_reason(healthy_inputs):
    inputs = healthy_inputs.model_copy(update={"sales_qualified_leads": 0, "opportunities": 0,
                                               "contracts": 0})
    reasons = [p.reason for p in _score(inputs).penalties]
    assert "Sales-qualified leads not provided" in reasons
    assert "Opportunities not provided" in reasons


def test_policy_weights_are_configurable(healthy_inputs):
    inputs = healthy_inputs.model_copy(update={"qualified_leads": 1200, "sales_qualified_leads": 60})
    policy = ConfidencePolicy(inconsistency_penalty=40)
    result = ConfidenceScorer(policy).score(inputs, calculate_funnel(inputs))
    assert result.score == 60


def test_policy_reads_environment(monkeypatch):
    monkeypatch.setenv("FUNNEL_CONFIDENCE_MISSING_CYCLE_PENALTY", "15")
    assert ConfidencePolicy().missing_cycle_penalty == 15


def test_to_dict(healthy_inputs):
    data = _score(healthy_inputs.model_copy(update={"cycle_days": None})).to_dict()
    assert data["score"] == 95
    assert data["level"] == "high"
    assert data["topPenalties"] == [
        {"reason": "Sales cycle not provided", "penaltyAmount": 5, "category": "completeness"}
    ]


_STAGE_FIELDS = {
    Stage.LEADS: "leads",
    Stage.QUALIFIED: "qualified_leads",
    Stage.SALES_QUALIFIED: "sales_qualified_leads",
    Stage.OPPORTUNITIES: "opportunities",
    Stage.CONTRACTS: "contracts",
}

_FUNNELS = {
    "consistent": dict(leads=1000, qualified_leads=250, sales_qualified_leads=60,
                       opportunities=35, contracts=6),
    "opportunities_over_sql": dict(leads=1000, qualified_leads=250, sales_qualified_leads=20,
                                   opportunities=25, contracts=3),
    "contracts_over_opportunities": dict(leads=1000, qualified_leads=250,
                                         sales_qualified_leads=60, opportunities=35,
                                         contracts=40),
    "qualified_over_leads": dict(leads=1000, qualified_leads=1200, sales_qualified_leads=60,
                                 opportunities=35, contracts=6),
}


def _funnel(counts):
    return FunnelInputs(investment=10000, average_ticket=3000, cycle_days=30, **counts)


@pytest.mark.parametrize("name", sorted(_FUNNELS))
@pytest.mark.parametrize("stage", list(_STAGE_FIELDS))
@pytest.mark.parametrize("offset", [1, None])
def test_shrinking_a_stage_below_its_minimum_never_raises_score(name, stage, offset):
    base = _funnel(_FUNNELS[name])
    field = _STAGE_FIELDS[stage]
    minimum = MIN_SAMPLE_SIZES[stage]
    if getattr(base, field) < minimum:
        pytest.skip("stage already below its minimum")

    lowered_count = minimum - offset if offset else 0
    lowered = base.model_copy(update={field: lowered_count})

    assert _score(lowered).score <= _score(base).score


def test_clearing_an_inconsistency_by_shrinking_a_stage():
    # Opportunities above sales-qualified leads; dropping them below the
    # sample minimum clears the inconsistency but must not pay off
    base = _funnel(_FUNNELS["opportunities_over_sql"])
    lowered = base.model_copy(update={"opportunities": 5})

    assert _score(base).score == 60
    assert _score(lowered).score == 60


def test_sample_penalty_never_below_inconsistency_penalty():
    policy = ConfidencePolicy(inconsistency_penalty=50)
    base = _funnel(dict(leads=1000, qualified_leads=250, sales_qualified_leads=20,
                        opportunities=25, contracts=6))
    lowered = base.model_copy(update={"opportunities": 9})

    assert _score(base, policy).score == 50
    assert _score(lowered, policy).score == 50
    penalty = _score(lowered, policy).penalties[0]
    assert penalty.category == PenaltyCategory.SAMPLE
    assert penalty.penalty == 50
