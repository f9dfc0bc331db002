"""
Benchmark reference data: sector profiles and playbook tables.
"""

from .profiles import (
    StageBenchmark,
    BenchmarkProfile,
    BenchmarkRepository,
    AVERAGE_MARKET_CONVERSION,
    get_profile,
    get_scenario_rate,
    get_repository,
    list_profiles,
    resolve_scenario,
    resolve_sector
)
from .playbooks import (
    StagePlaybook,
    SectorRule,
    STAGE_PLAYBOOKS,
    SECTOR_RULES,
    get_stage_actions,
    rules_for
)

__all__ = [
    "StageBenchmark",
    "BenchmarkProfile",
    "BenchmarkRepository",
    "AVERAGE_MARKET_CONVERSION",
    "get_profile",
    "get_scenario_rate",
    "get_repository",
    "list_profiles",
    "resolve_scenario",
    "resolve_sector",
    "StagePlaybook",
    "STAGE_PLAYBOOKS",
    "SectorRule",
    "SECTOR_RULES",
    "get_stage_actions",
    "rules_for"
]
