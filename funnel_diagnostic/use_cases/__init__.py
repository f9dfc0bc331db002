"""
Use Cases

1. Funnel diagnosis: projection, conversions, costs, confidence and
   leads-for-contract in one deterministic report
2. Insight ranking: bottleneck naming and actionable recommendations
"""

from .diagnosis import Diagnosis, FunnelDiagnosisUseCase, diagnose, run_diagnosis
from .insights import (
    Insight,
    InsightKind,
    InsightRanker,
    BottleneckResult,
    generate_insights,
    rank_bottlenecks
)

__all__ = [
    "Diagnosis",
    "FunnelDiagnosisUseCase",
    "diagnose",
    "run_diagnosis",
    "Insight",
    "InsightKind",
    "InsightRanker",
    "BottleneckResult",
    "generate_insights",
    "rank_bottlenecks"
]
