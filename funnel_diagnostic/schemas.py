"""
Pydantic Schemas for the Diagnostic Request and Response

The request record validates raw numbers from collaborators; the
response record is the JSON contract that persistence and rendering
consume. Both use camelCase on the wire and snake_case in Python.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .core.entities import Stage


# =============================================================================
# Request
# =============================================================================

class FunnelInputs(BaseModel):
    """
    Raw funnel counts for one period.

    Optional fields left out are None, which is distinct from zero.
    Stage counts larger than their upstream stage are accepted here and
    reported by validation instead.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore"
    )

    investment: float = Field(
        default=0.0,
        ge=0,
        description="Media investment for the period"
    )
    leads: int = Field(default=0, ge=0)
    qualified_leads: int = Field(default=0, ge=0)
    sales_qualified_leads: int = Field(default=0, ge=0)
    opportunities: int = Field(default=0, ge=0)

    contracts: Optional[int] = Field(
        default=None,
        ge=0,
        description="Closed contracts; leave empty to project them"
    )
    average_ticket: Optional[float] = Field(default=None, ge=0)
    cycle_days: Optional[float] = Field(default=None, ge=0)
    period: Optional[str] = None

    def real_count(self, stage: Stage) -> Optional[int]:
        """Reported count for a stage (None when not provided)."""
        if stage == Stage.LEADS:
            return self.leads
        if stage == Stage.QUALIFIED:
            return self.qualified_leads
        if stage == Stage.SALES_QUALIFIED:
            return self.sales_qualified_leads
        if stage == Stage.OPPORTUNITIES:
            return self.opportunities
        return self.contracts


# =============================================================================
# Response
# =============================================================================

class DiagnosticReport(BaseModel):
    """
    Serializable diagnosis output.

    Nested records are already plain dictionaries so the whole report
    can be stored as an opaque JSON blob.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True
    )

    sector: str
    scenario: str

    costs: dict
    cost_steps: List[dict] = Field(default_factory=list)
    largest_cost_step: Optional[dict] = None
    conversions: List[dict] = Field(default_factory=list)
    global_conversion: Optional[float] = None
    projected_stages: dict
    projected_costs: dict
    leads_for_contract: Optional[dict] = None
    confidence_score_result: dict
    insights: List[dict] = Field(default_factory=list)
    has_valid_data: bool = False
    validation_errors: List[str] = Field(default_factory=list)

    bottleneck: Optional[dict] = None
    bottleneck_notice: Optional[str] = None
    financials: dict = Field(default_factory=dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
