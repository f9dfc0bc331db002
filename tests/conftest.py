"""Shared funnel fixtures."""

import pytest

from funnel_diagnostic.schemas import FunnelInputs


@pytest.fixture
def healthy_inputs():
    """Every transition eligible, consistent and at or above benchmark."""
    return FunnelInputs(
        investment=10000,
        leads=1000,
        qualified_leads=250,
        sales_qualified_leads=60,
        opportunities=35,
        contracts=6,
        average_ticket=3000,
        cycle_days=30
    )


@pytest.fixture
def leads_only_inputs():
    """Only leads reported; every downstream stage must be projected."""
    return FunnelInputs(
        investment=10000,
        leads=1000,
        qualified_leads=0,
        sales_qualified_leads=0,
        opportunities=0,
        contracts=0
    )
