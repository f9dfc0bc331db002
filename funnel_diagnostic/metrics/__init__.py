"""
Funnel Metrics

This module provides:
- Conversion and financial calculation
- Cost per stage and cost steps
- Leads needed for one contract
- Confidence scoring
- Stage impact at benchmark rates
"""

from .calculator import (
    ConversionRate,
    FunnelCalculation,
    FunnelCalculator,
    FinancialMetrics,
    calculate_funnel,
    classify_status,
    is_eligible,
    validate_funnel_sequence
)
from .costs import CostPerStage, CostStep, CostBreakdown, calculate_costs
from .impact import StageImpact, calculate_stage_impacts
from .acquisition import LeadsForContract, calculate_leads_for_contract
from .confidence import (
    ConfidenceLevel,
    ConfidencePenalty,
    ConfidenceScoreResult,
    ConfidenceScorer,
    calculate_confidence_score
)

__all__ = [
    "ConversionRate",
    "FunnelCalculation",
    "FunnelCalculator",
    "FinancialMetrics",
    "calculate_funnel",
    "classify_status",
    "is_eligible",
    "validate_funnel_sequence",
    "CostPerStage",
    "CostStep",
    "CostBreakdown",
    "calculate_costs",
    "StageImpact",
    "calculate_stage_impacts",
    "LeadsForContract",
    "calculate_leads_for_contract",
    "ConfidenceLevel",
    "ConfidencePenalty",
    "ConfidenceScoreResult",
    "ConfidenceScorer",
    "calculate_confidence_score"
]
