"""
Benchmark Repository

Static sector profiles with min/max/avg conversion rates per funnel
transition, plus the overall lead-to-contract range for each sector.

The tables are built once at import time and exposed read-only; nothing
in the engine mutates them.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from ..config import get_settings
from ..core.entities import Scenario, Sector, Transition, coerce_enum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageBenchmark:
    """Expected conversion range for one transition (percentages)."""
    min: float
    max: float
    avg: float

    def rate_for(self, scenario: Scenario) -> float:
        """Percentage selected by a scenario."""
        if scenario == Scenario.CONSERVATIVE:
            return self.min
        if scenario == Scenario.AGGRESSIVE:
            return self.max
        return self.avg

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "avg": self.avg}


@dataclass(frozen=True)
class BenchmarkProfile:
    """Benchmark profile for a sector."""
    sector: Sector
    label: str
    description: str
    conversion_range: StageBenchmark  # lead -> contract, %
    stages: Mapping[Transition, StageBenchmark]

    def for_transition(self, transition: Transition) -> StageBenchmark:
        return self.stages[transition]


# Average lead -> sale conversion across all sectors (%)
AVERAGE_MARKET_CONVERSION = 2.98


def _stages(lead_qualified, qualified_sql, sql_opportunity, opportunity_contract):
    return MappingProxyType({
        Transition.LEAD_QUALIFIED: StageBenchmark(*lead_qualified),
        Transition.QUALIFIED_SALES_QUALIFIED: StageBenchmark(*qualified_sql),
        Transition.SALES_QUALIFIED_OPPORTUNITY: StageBenchmark(*sql_opportunity),
        Transition.OPPORTUNITY_CONTRACT: StageBenchmark(*opportunity_contract),
    })


class BenchmarkRepository:
    """
    Read-only lookup of sector benchmark profiles.

    Lookups never fail: unknown sectors resolve to the default profile
    and unknown scenarios to the default scenario.
    """

    def __init__(self, default_sector: Sector = Sector.GENERAL_B2B):
        self._profiles = self._define_profiles()
        self._default_sector = default_sector

    def _define_profiles(self) -> Mapping[Sector, BenchmarkProfile]:
        """Define all sector profiles (min, max, avg per transition)."""
        profiles = {
            Sector.GENERAL_B2B: BenchmarkProfile(
                sector=Sector.GENERAL_B2B,
                label="General B2B",
                description="Overall B2B market average",
                conversion_range=StageBenchmark(1.5, 4.0, 2.5),
                stages=_stages(
                    (20.0, 25.0, 22.5),
                    (15.0, 25.0, 20.0),
                    (50.0, 60.0, 55.0),
                    (12.0, 18.0, 15.0)
                )
            ),
            Sector.GENERAL_B2C: BenchmarkProfile(
                sector=Sector.GENERAL_B2C,
                label="General B2C",
                description="Overall B2C market average",
                conversion_range=StageBenchmark(2.0, 5.0, 3.28),
                stages=_stages(
                    (25.0, 35.0, 30.0),
                    (20.0, 30.0, 25.0),
                    (55.0, 70.0, 62.5),
                    (15.0, 25.0, 20.0)
                )
            ),
            Sector.CONSULTING: BenchmarkProfile(
                sector=Sector.CONSULTING,
                label="Consulting / Complex Services",
                description="High-value consulting and services",
                conversion_range=StageBenchmark(0.8, 2.5, 1.55),
                stages=_stages(
                    (30.0, 50.0, 40.0),
                    (15.0, 25.0, 20.0),
                    (45.0, 60.0, 52.5),
                    (10.0, 16.0, 13.0)
                )
            ),
            Sector.SAAS_TECH: BenchmarkProfile(
                sector=Sector.SAAS_TECH,
                label="SaaS / Tech B2B",
                description="Technology and software companies",
                conversion_range=StageBenchmark(1.2, 3.5, 2.06),
                stages=_stages(
                    (25.0, 45.0, 35.0),
                    (15.0, 25.0, 20.0),
                    (50.0, 60.0, 55.0),
                    (12.0, 20.0, 16.0)
                )
            ),
            Sector.INDUSTRY: BenchmarkProfile(
                sector=Sector.INDUSTRY,
                label="Industry / Manufacturing",
                description="Industrial segment",
                conversion_range=StageBenchmark(2.0, 5.5, 3.81),
                stages=_stages(
                    (35.0, 55.0, 45.0),
                    (20.0, 30.0, 25.0),
                    (50.0, 65.0, 57.5),
                    (15.0, 22.0, 18.5)
                )
            ),
            Sector.LEGAL: BenchmarkProfile(
                sector=Sector.LEGAL,
                label="Legal Services",
                description="Law firms and legal services",
                conversion_range=StageBenchmark(4.45, 7.4, 5.93),
                stages=_stages(
                    (30.0, 45.0, 37.5),
                    (25.0, 40.0, 32.5),
                    (55.0, 70.0, 62.5),
                    (18.0, 28.0, 23.0)
                )
            ),
        }
        return MappingProxyType(profiles)

    def resolve_sector(self, sector) -> Sector:
        """Resolve a sector identifier, falling back to the default."""
        resolved = coerce_enum(Sector, sector)
        if resolved is None:
            if sector is not None:
                logger.debug("Unknown sector %r, using %s", sector, self._default_sector.value)
            return self._default_sector
        return resolved

    def get_profile(self, sector=None) -> BenchmarkProfile:
        """Get the profile for a sector (default profile if unknown)."""
        return self._profiles[self.resolve_sector(sector)]

    def list_profiles(self) -> list[BenchmarkProfile]:
        """All profiles, in sector declaration order."""
        return [self._profiles[s] for s in Sector]

    def get_scenario_rate(
        self,
        transition: Transition,
        scenario=None,
        sector=None
    ) -> float:
        """
        Fraction in [0, 1] for a transition under a scenario.

        conservative -> min, realistic -> avg, aggressive -> max.
        """
        benchmark = self.get_profile(sector).for_transition(transition)
        return benchmark.rate_for(resolve_scenario(scenario)) / 100


def resolve_scenario(scenario) -> Scenario:
    """Resolve a scenario identifier, falling back to the configured default."""
    resolved = coerce_enum(Scenario, scenario)
    if resolved is not None:
        return resolved
    fallback = coerce_enum(Scenario, get_settings().default_scenario) or Scenario.REALISTIC
    if scenario is not None:
        logger.debug("Unknown scenario %r, using %s", scenario, fallback.value)
    return fallback


def _default_repository() -> BenchmarkRepository:
    default = coerce_enum(Sector, get_settings().default_sector) or Sector.GENERAL_B2B
    return BenchmarkRepository(default_sector=default)


# Loaded once per process, read-only afterwards
_REPOSITORY = _default_repository()


def get_repository() -> BenchmarkRepository:
    return _REPOSITORY


def get_profile(sector=None) -> BenchmarkProfile:
    """Profile for a sector, never raising."""
    return _REPOSITORY.get_profile(sector)


def get_scenario_rate(transition: Transition, scenario=None, sector=None) -> float:
    """Scenario rate as a fraction for a transition."""
    return _REPOSITORY.get_scenario_rate(transition, scenario, sector)


def list_profiles() -> list[BenchmarkProfile]:
    return _REPOSITORY.list_profiles()


def resolve_sector(sector: Optional[object]) -> Sector:
    return _REPOSITORY.resolve_sector(sector)
