"""
Configuration Management

Centralized policy for:
- Fallback sector and scenario
- Confidence penalty weights and level thresholds
- Insight limits
"""

from .settings import (
    Settings,
    ConfidencePolicy,
    InsightPolicy,
    get_settings
)

__all__ = [
    "Settings",
    "ConfidencePolicy",
    "InsightPolicy",
    "get_settings"
]
