"""
Core Funnel Entities

This module defines the closed vocabularies the engine works with and
the canonical funnel order. Every other component reads stage and
transition order from here instead of repeating it inline.

Entities:
- Stage: a funnel stage (leads through contracts)
- Transition: a step between two adjacent stages
- Scenario: which benchmark bound drives projections
- Sector: which benchmark profile applies
- StageValue: an effective stage count with its provenance
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type, TypeVar


class Stage(str, Enum):
    """
    Funnel stages in canonical order.
    Each stage's population is a subset of the previous one.
    """
    LEADS = "leads"
    QUALIFIED = "qualified"
    SALES_QUALIFIED = "sales_qualified"
    OPPORTUNITIES = "opportunities"
    CONTRACTS = "contracts"

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]

    @property
    def output_key(self) -> str:
        """Key used for this stage in serialized output."""
        return _STAGE_OUTPUT_KEYS[self]


class Transition(str, Enum):
    """Transitions between adjacent stages, in funnel order."""
    LEAD_QUALIFIED = "lead_qualified"
    QUALIFIED_SALES_QUALIFIED = "qualified_sales_qualified"
    SALES_QUALIFIED_OPPORTUNITY = "sales_qualified_opportunity"
    OPPORTUNITY_CONTRACT = "opportunity_contract"

    @property
    def source(self) -> Stage:
        return _TRANSITION_STAGES[self][0]

    @property
    def target(self) -> Stage:
        return _TRANSITION_STAGES[self][1]

    @property
    def label(self) -> str:
        return f"{self.source.label} → {self.target.label}"

    @property
    def short_label(self) -> str:
        return f"{_SHORT_NAMES[self.source]}→{_SHORT_NAMES[self.target]}"

    @classmethod
    def into(cls, stage: Stage) -> Optional["Transition"]:
        """Transition that feeds the given stage (None for leads)."""
        for transition, (_, target) in _TRANSITION_STAGES.items():
            if target == stage:
                return transition
        return None


class Scenario(str, Enum):
    """
    Projection scenarios.
    Each one selects a bound of the benchmark range.
    """
    CONSERVATIVE = "conservative"   # benchmark min
    REALISTIC = "realistic"         # benchmark avg
    AGGRESSIVE = "aggressive"       # benchmark max


class Sector(str, Enum):
    """Business sectors with a benchmark profile."""
    GENERAL_B2B = "general_b2b"
    GENERAL_B2C = "general_b2c"
    CONSULTING = "consulting"
    SAAS_TECH = "saas_tech"
    INDUSTRY = "industry"
    LEGAL = "legal"


class ConversionStatus(str, Enum):
    """Health of a transition against its benchmark."""
    OK = "ok"
    WARNING = "warning"
    CRITICAL = "critical"
    NO_DATA = "no_data"


STAGE_ORDER: tuple = (
    Stage.LEADS,
    Stage.QUALIFIED,
    Stage.SALES_QUALIFIED,
    Stage.OPPORTUNITIES,
    Stage.CONTRACTS,
)

TRANSITION_ORDER: tuple = (
    Transition.LEAD_QUALIFIED,
    Transition.QUALIFIED_SALES_QUALIFIED,
    Transition.SALES_QUALIFIED_OPPORTUNITY,
    Transition.OPPORTUNITY_CONTRACT,
)

_STAGE_LABELS = {
    Stage.LEADS: "Leads",
    Stage.QUALIFIED: "Qualified leads",
    Stage.SALES_QUALIFIED: "Sales-qualified leads",
    Stage.OPPORTUNITIES: "Opportunities",
    Stage.CONTRACTS: "Contracts",
}

_SHORT_NAMES = {
    Stage.LEADS: "lead",
    Stage.QUALIFIED: "qualified",
    Stage.SALES_QUALIFIED: "sales-qualified",
    Stage.OPPORTUNITIES: "opportunity",
    Stage.CONTRACTS: "contract",
}

_STAGE_OUTPUT_KEYS = {
    Stage.LEADS: "leads",
    Stage.QUALIFIED: "qualified",
    Stage.SALES_QUALIFIED: "salesQualified",
    Stage.OPPORTUNITIES: "opportunities",
    Stage.CONTRACTS: "contracts",
}

_TRANSITION_STAGES = {
    Transition.LEAD_QUALIFIED: (Stage.LEADS, Stage.QUALIFIED),
    Transition.QUALIFIED_SALES_QUALIFIED: (Stage.QUALIFIED, Stage.SALES_QUALIFIED),
    Transition.SALES_QUALIFIED_OPPORTUNITY: (Stage.SALES_QUALIFIED, Stage.OPPORTUNITIES),
    Transition.OPPORTUNITY_CONTRACT: (Stage.OPPORTUNITIES, Stage.CONTRACTS),
}

# Minimum source-stage sample before a rate is trusted
MIN_SAMPLE_SIZES = {
    Stage.LEADS: 30,
    Stage.QUALIFIED: 20,
    Stage.SALES_QUALIFIED: 10,
    Stage.OPPORTUNITIES: 10,
    Stage.CONTRACTS: 5,
}


def stage_short_name(stage: Stage) -> str:
    return _SHORT_NAMES[stage]


def needs_projection(count) -> bool:
    """A stage is projected when its real count is absent or not positive."""
    return count is None or count <= 0


@dataclass(frozen=True)
class StageValue:
    """
    Effective count for a stage.

    is_projected is True only when the real input was absent or zero
    and the value was derived from an upstream stage.
    """
    value: int
    is_projected: bool = False

    def to_dict(self) -> dict:
        return {"value": self.value, "isProjected": self.is_projected}


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value) -> Optional[E]:
    """Resolve an enum member from a member or its value; None if unknown."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None
