"""Tests for the benchmark repository and playbook tables."""

import pytest

from funnel_diagnostic.benchmarks import playbooks
from funnel_diagnostic.benchmarks.profiles import (
    BenchmarkRepository,
    get_profile,
    get_scenario_rate,
    list_profiles,
    resolve_scenario,
    resolve_sector,
)
from funnel_diagnostic.core.entities import (
    ConversionStatus,
    Scenario,
    Sector,
    Transition,
    TRANSITION_ORDER,
)


def test_every_sector_has_a_profile():
    profiles = list_profiles()
    assert [p.sector for p in profiles] == list(Sector)


def test_ranges_are_ordered():
    for profile in list_profiles():
        for transition in TRANSITION_ORDER:
            benchmark = profile.for_transition(transition)
            assert benchmark.min <= benchmark.avg <= benchmark.max
        assert profile.conversion_range.min <= profile.conversion_range.max


def test_general_b2b_realistic_rates():
    rates = [get_scenario_rate(t, "realistic", "general_b2b") for t in TRANSITION_ORDER]
    assert rates == pytest.approx([0.225, 0.20, 0.55, 0.15])


def test_scenario_selects_bound():
    transition = Transition.LEAD_QUALIFIED
    assert get_scenario_rate(transition, Scenario.CONSERVATIVE) == pytest.approx(0.20)
    assert get_scenario_rate(transition, Scenario.REALISTIC) == pytest.approx(0.225)
    assert get_scenario_rate(transition, Scenario.AGGRESSIVE) == pytest.approx(0.25)


def test_unknown_identifiers_fall_back():
    assert get_profile("martian").sector == Sector.GENERAL_B2B
    assert get_profile(None).sector == Sector.GENERAL_B2B
    assert resolve_scenario("bogus") == Scenario.REALISTIC
    assert get_scenario_rate(Transition.OPPORTUNITY_CONTRACT, "bogus", "martian") == pytest.approx(0.15)


def test_identifiers_are_normalized():
    assert resolve_sector(" SaaS_Tech ") == Sector.SAAS_TECH
    assert resolve_scenario("AGGRESSIVE") == Scenario.AGGRESSIVE


def test_repository_default_sector_is_configurable():
    repository = BenchmarkRepository(default_sector=Sector.LEGAL)
    assert repository.get_profile("nope").sector == Sector.LEGAL


def test_profile_tables_are_read_only():
    profile = get_profile(Sector.GENERAL_B2B)
    with pytest.raises(TypeError):
        profile.stages[Transition.LEAD_QUALIFIED] = None


def test_every_transition_has_a_playbook():
    for transition in TRANSITION_ORDER:
        playbook = playbooks.STAGE_PLAYBOOKS[transition]
        assert playbook.transition == transition
        assert playbook.primary_action
        assert playbooks.get_stage_actions(transition)


def test_every_sector_family_has_rules():
    for family in (playbooks.B2B_SECTORS, playbooks.SERVICES_SECTORS, playbooks.B2C_SECTORS):
        assert any(rule.sectors >= family and rule.sectors != playbooks.ALL_SECTORS
                   for rule in playbooks.SECTOR_RULES)
    assert playbooks.B2B_SECTORS | playbooks.SERVICES_SECTORS | playbooks.B2C_SECTORS == set(Sector)


def test_rules_match_sector_transition_and_status():
    found = playbooks.rules_for(Sector.CONSULTING, Transition.LEAD_QUALIFIED,
                                ConversionStatus.WARNING)
    assert [r.id for r in found] == ["landing_page_social_proof"]

    assert playbooks.rules_for(Sector.SAAS_TECH, Transition.LEAD_QUALIFIED,
                               ConversionStatus.CRITICAL) == []
    assert playbooks.rules_for(Sector.LEGAL, Transition.QUALIFIED_SALES_QUALIFIED,
                               ConversionStatus.OK) == []
