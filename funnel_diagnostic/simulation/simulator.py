"""
Scenario Simulator

"What-if" cascades: a starting lead volume runs through one custom rate
per transition and yields stage counts and financial outcomes.

The simulator is a pure function. It keeps no state between calls, so
it can be called repeatedly with nudged rates for sensitivity analysis.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union

from ..benchmarks.profiles import get_repository, resolve_scenario
from ..core.arithmetic import is_number, round_half_up, safe_divide, safe_percent
from ..core.entities import Stage, Transition, STAGE_ORDER, TRANSITION_ORDER, coerce_enum

RateInput = Union[Mapping, Sequence]


@dataclass(frozen=True)
class SimulationResult:
    """
    Results of a simulation run.

    Counts are rounded per stage, like stage projections.
    """
    base_leads: int
    rates: dict = field(default_factory=dict)  # Transition -> %
    counts: dict = field(default_factory=dict)  # Stage -> int

    revenue: Optional[float] = None
    roi: Optional[float] = None  # %
    cac: Optional[float] = None
    overall_conversion: Optional[float] = None  # %

    @property
    def qualified(self) -> int:
        return self.counts[Stage.QUALIFIED]

    @property
    def sales_qualified(self) -> int:
        return self.counts[Stage.SALES_QUALIFIED]

    @property
    def opportunities(self) -> int:
        return self.counts[Stage.OPPORTUNITIES]

    @property
    def contracts(self) -> int:
        return self.counts[Stage.CONTRACTS]

    def to_dict(self) -> dict:
        return {
            "baseLeads": self.base_leads,
            "rates": {t.value: self.rates[t] for t in TRANSITION_ORDER},
            "stages": {s.output_key: self.counts[s] for s in STAGE_ORDER},
            "revenue": self.revenue,
            "roi": self.roi,
            "cac": self.cac,
            "overallConversion": self.overall_conversion,
        }


def normalize_rates(rates: RateInput) -> dict:
    """
    Rates as a Transition -> percentage mapping.

    Accepts a mapping keyed by Transition (or its value) or a sequence of
    four rates in funnel order. Missing or non-numeric rates count as 0.
    """
    normalized = {t: 0.0 for t in TRANSITION_ORDER}
    if rates is None:
        return normalized

    if isinstance(rates, Mapping):
        for key, value in rates.items():
            transition = coerce_enum(Transition, key)
            if transition is not None and is_number(value):
                normalized[transition] = float(value)
        return normalized

    for transition, value in zip(TRANSITION_ORDER, rates):
        if is_number(value):
            normalized[transition] = float(value)
    return normalized


def simulate(
    base_leads: int,
    rates: RateInput,
    ticket: Optional[float] = None,
    investment: Optional[float] = None
) -> SimulationResult:
    """
    Cascade base_leads through the given rates.

    revenue = contracts x ticket, ROI = (revenue - investment) /
    investment x 100, CAC = investment / contracts. Each is None when
    its inputs are missing or the division is undefined.
    """
    normalized = normalize_rates(rates)
    leads = round_half_up(base_leads) if is_number(base_leads) and base_leads > 0 else 0

    counts = {Stage.LEADS: leads}
    previous = leads
    for transition in TRANSITION_ORDER:
        previous = round_half_up(previous * normalized[transition] / 100)
        previous = max(previous, 0)
        counts[transition.target] = previous

    contracts = counts[Stage.CONTRACTS]
    spend = investment if is_number(investment) and investment > 0 else None

    revenue = contracts * ticket if is_number(ticket) else None
    roi = None
    if revenue is not None and spend is not None:
        roi = (revenue - spend) / spend * 100

    return SimulationResult(
        base_leads=leads,
        rates=normalized,
        counts=counts,
        revenue=revenue,
        roi=roi,
        cac=safe_divide(spend, contracts),
        overall_conversion=safe_percent(contracts, leads)
    )


def scenario_rates(scenario=None, sector=None) -> dict:
    """Benchmark rates (percentages) for a scenario, ready for simulate()."""
    repository = get_repository()
    resolved = resolve_scenario(scenario)
    return {
        t: repository.get_scenario_rate(t, resolved, sector) * 100
        for t in TRANSITION_ORDER
    }


def sensitivity(
    base_leads: int,
    rates: RateInput,
    transition,
    deltas: Sequence[float],
    ticket: Optional[float] = None,
    investment: Optional[float] = None
) -> list:
    """
    Re-run the simulation nudging one transition's rate.

    Returns (rate, SimulationResult) pairs, one per delta in percentage
    points. Rates are floored at zero.
    """
    base = normalize_rates(rates)
    target = coerce_enum(Transition, transition)
    if target is None:
        return []

    results = []
    for delta in deltas:
        nudged = dict(base)
        nudged[target] = max(0.0, base[target] + delta)
        results.append((nudged[target], simulate(base_leads, nudged, ticket, investment)))
    return results
