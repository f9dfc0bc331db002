"""
Core domain vocabulary and arithmetic for the funnel engine.
"""

from .entities import (
    Stage,
    Transition,
    Scenario,
    Sector,
    ConversionStatus,
    StageValue,
    STAGE_ORDER,
    TRANSITION_ORDER,
    MIN_SAMPLE_SIZES,
    coerce_enum,
    needs_projection
)
from .arithmetic import safe_divide, safe_percent, round_half_up, is_number

__all__ = [
    "Stage",
    "Transition",
    "Scenario",
    "Sector",
    "ConversionStatus",
    "StageValue",
    "STAGE_ORDER",
    "TRANSITION_ORDER",
    "MIN_SAMPLE_SIZES",
    "coerce_enum",
    "needs_projection",
    "safe_divide",
    "safe_percent",
    "round_half_up",
    "is_number"
]
