"""
Settings Management with Pydantic

Provides type-safe engine policy with:
- Environment variable support
- Validation
- Separate policy groups for confidence scoring and insights

Penalty weights and level thresholds are empirical policy, not derived
constants, so they live here rather than in the scoring code.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfidencePolicy(BaseSettings):
    """Penalty weights and level thresholds for the confidence score."""
    model_config = SettingsConfigDict(
        env_prefix="FUNNEL_CONFIDENCE_",
        extra="ignore"
    )

    # Sample penalties, one per ineligible stage. Each must be at least
    # inconsistency_penalty: lowering a stage below its minimum can clear
    # a downstream > upstream pair, and the score must not rise for it.
    lead_qualified_sample_penalty: int = 25
    qualified_sales_qualified_sample_penalty: int = 20
    sales_qualified_opportunity_sample_penalty: int = 20
    opportunity_contract_sample_penalty: int = 20
    small_contract_sample_penalty: int = 20

    # Consistency penalty, one per downstream > upstream pair
    inconsistency_penalty: int = 20

    # Completeness penalties
    missing_investment_penalty: int = 10
    missing_contracts_penalty: int = 10
    missing_ticket_penalty: int = 10
    missing_cycle_penalty: int = 5

    # Level buckets
    high_threshold: int = 75
    medium_threshold: int = 50

    top_penalties: int = 3


class InsightPolicy(BaseSettings):
    """Limits and thresholds used when ranking insights."""
    model_config = SettingsConfigDict(
        env_prefix="FUNNEL_INSIGHTS_",
        extra="ignore"
    )

    max_insights: int = 3
    bottleneck_min_confidence: int = 50

    high_ticket_threshold: float = 5000.0
    high_cpl_threshold: float = 50.0


class Settings(BaseSettings):
    """Main engine settings."""
    model_config = SettingsConfigDict(
        env_prefix="FUNNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_name: str = "Funnel Diagnostic"
    debug: bool = False
    log_level: str = "INFO"

    # Fallbacks for unknown identifiers
    default_sector: str = "general_b2b"
    default_scenario: str = "realistic"

    # Sub-configurations
    confidence: ConfidencePolicy = Field(default_factory=ConfidencePolicy)
    insights: InsightPolicy = Field(default_factory=InsightPolicy)

    @property
    def logging_level(self) -> int:
        """Numeric log level; debug forces DEBUG."""
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level.upper(), logging.INFO)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            confidence=ConfidencePolicy(),
            insights=InsightPolicy()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
