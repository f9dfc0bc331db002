"""
Funnel Diagnostic Engine

Deterministic sales/marketing funnel diagnosis: per-stage conversion
against sector benchmarks, scenario projection of missing stages,
cost per stage, confidence scoring and ranked insights.

The engine is pure: every call builds its output from an immutable
input record and returns plain, JSON-serializable data.
"""

__version__ = "0.1.0"

from .use_cases.diagnosis import diagnose
from .schemas import FunnelInputs, DiagnosticReport
from .simulation.simulator import simulate

__all__ = [
    "diagnose",
    "simulate",
    "FunnelInputs",
    "DiagnosticReport",
]
