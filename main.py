#!/usr/bin/env python3
"""
Funnel Diagnostic - Main Demo

It runs:
1. A diagnosis with complete funnel data
2. A diagnosis with missing downstream stages (projected)
3. A what-if simulation with a sensitivity sweep
"""

import json
import logging

from funnel_diagnostic.config import get_settings
from funnel_diagnostic.core.entities import Transition
from funnel_diagnostic.simulation.simulator import simulate, scenario_rates, sensitivity
from funnel_diagnostic.use_cases.diagnosis import run_diagnosis


def _fmt(value, pattern="{:.2f}"):
    return "—" if value is None else pattern.format(value)


def print_diagnosis(title, diagnosis):
    print("=" * 60)
    print(title)
    print("=" * 60)
    print()
    print(f"Sector: {diagnosis.sector.value}   Scenario: {diagnosis.scenario.value}")
    print()

    print(f"{'Stage':<24} {'Value':<10} {'Projected':<10}")
    print("-" * 60)
    for stage, value in diagnosis.stages.values:
        print(f"{stage.label:<24} {value.value:<10} {'yes' if value.is_projected else '':<10}")
    print()

    print(f"{'Transition':<40} {'Rate':<10} {'Status':<10}")
    print("-" * 60)
    for conversion in diagnosis.calculation.conversions:
        print(
            f"{conversion.label:<40} {_fmt(conversion.rate, '{:.1f}%'):<10} "
            f"{conversion.status.value:<10}"
        )
    print()

    print(f"Global conversion: {_fmt(diagnosis.calculation.global_conversion, '{:.2f}%')}")
    largest = diagnosis.costs.largest_cost_step
    if largest:
        print(f"Largest cost step: {largest.label} (+{largest.delta:.2f})")
    leads = diagnosis.leads_for_contract
    if leads:
        print(
            f"Leads for 1 contract: {leads.leads_needed} "
            f"({leads.conversion_path_description}), "
            f"spend {_fmt(leads.investment_needed)}"
        )
    confidence = diagnosis.confidence
    print(f"Confidence: {confidence.score}/100 ({confidence.level.value})")
    for penalty in confidence.top_penalties:
        print(f"  - {penalty.reason} (-{penalty.penalty})")
    if diagnosis.calculation.validation_errors:
        print("Validation:")
        for error in diagnosis.calculation.validation_errors:
            print(f"  - {error}")
    print()

    print("Insights:")
    for insight in diagnosis.insights:
        print(f"  [{insight.kind.value}] {insight.title}")
        if insight.suggested_action:
            print(f"      -> {insight.suggested_action}")
    print()


def run_diagnosis_demo():
    """Diagnose a complete funnel and a partial one."""
    complete = {
        "investment": 25000,
        "leads": 1200,
        "qualifiedLeads": 240,
        "salesQualifiedLeads": 36,
        "opportunities": 20,
        "contracts": 3,
        "averageTicket": 6500,
        "cycleDays": 45,
        "period": "2025-09",
    }
    print_diagnosis("DIAGNOSIS: COMPLETE FUNNEL", run_diagnosis(complete, "saas_tech"))

    partial = {
        "investment": 10000,
        "leads": 1000,
        "qualifiedLeads": 0,
        "salesQualifiedLeads": 0,
        "opportunities": 0,
    }
    print_diagnosis(
        "DIAGNOSIS: PROJECTED FUNNEL",
        run_diagnosis(partial, "general_b2b", "realistic")
    )


def run_simulation_demo():
    """What-if cascade and a sensitivity sweep on the closing rate."""
    print("=" * 60)
    print("SCENARIO SIMULATION")
    print("=" * 60)
    print()

    result = simulate(2000, [20, 25, 60, 15], ticket=3000, investment=5000)
    print(json.dumps(result.to_dict(), indent=2))
    print()

    print(f"{'Closing rate':<15} {'Contracts':<12} {'ROI':<10}")
    print("-" * 40)
    sweep = sensitivity(
        2000,
        scenario_rates("realistic"),
        Transition.OPPORTUNITY_CONTRACT,
        deltas=[-5, -2.5, 0, 2.5, 5],
        ticket=3000,
        investment=5000
    )
    for rate, outcome in sweep:
        print(f"{rate:<15.1f} {outcome.contracts:<12} {_fmt(outcome.roi, '{:.0f}%'):<10}")
    print()


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.logging_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print(f"{settings.app_name} - Demo")
    print()
    run_diagnosis_demo()
    run_simulation_demo()


if __name__ == "__main__":
    main()
