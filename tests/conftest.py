"""Pytest fixtures and utilities for the Barista DLP test suite."""
import pytest
from unittest.mock import AsyncMock

from barista_dlp.core.config import RiskConfig, SafetyConfig
from barista_dlp.ledger.client import LedgerClient

from tests.helpers import make_exposure, make_portfolio


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_safety_config():
    """Safety thresholds matching the documented defaults."""
    return SafetyConfig(
        min_deposit="1",
        recommended_min_deposit="10",
        max_sane_deposit="1000",
        min_remaining_capital="10",
        withdrawal_buffer_pct=10,
        large_withdrawal_pct=50,
    )


@pytest.fixture
def test_risk_config():
    """Margin rates matching the documented defaults."""
    return RiskConfig(initial_margin_pct=10, maintenance_margin_pct=5)


# =============================================================================
# Portfolio Fixtures
# =============================================================================

@pytest.fixture
def flat_portfolio():
    """100 tokens of equity, no PnL, no positions."""
    return make_portfolio(equity="100")


@pytest.fixture
def portfolio_with_positions():
    """Portfolio with one long and one short exposure."""
    return make_portfolio(
        equity="100",
        pnl="-2.5",
        exposures=[
            make_exposure("BTC-PERP", qty="2", mark="100", upnl="1.5"),
            make_exposure("ETH-PERP", qty="-3", mark="20", upnl="-4"),
        ],
    )


# =============================================================================
# Ledger Client Fixtures
# =============================================================================

@pytest.fixture
def mock_ledger(flat_portfolio):
    """Ledger client mock returning the flat portfolio."""
    client = AsyncMock(spec=LedgerClient)
    client.get_portfolio.return_value = flat_portfolio
    return client
