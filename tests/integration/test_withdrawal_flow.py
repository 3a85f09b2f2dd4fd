"""Integration tests: ledger -> monitor -> safety gate."""
import pytest

from barista_dlp.ledger.client import InMemoryLedgerClient
from barista_dlp.portfolio.monitor import MonitorState, PortfolioMonitor
from barista_dlp.risk.metrics import RiskLevel, evaluate
from barista_dlp.risk.safety import SafetyErrorCode, SafetyGate
from barista_dlp.utils.formatting import format_percent, format_token

from tests.helpers import make_exposure, make_portfolio, tokens

IDENTITY = "LP1111111111111111111111111111111111111111"


@pytest.fixture
def ledger():
    return InMemoryLedgerClient()


@pytest.fixture
def gate(test_safety_config):
    return SafetyGate(test_safety_config)


class TestWithdrawalFlow:
    """A liquidity provider checks the portfolio, then attempts withdrawals."""

    @pytest.mark.asyncio
    async def test_flat_portfolio_withdrawal(self, ledger, gate, test_risk_config):
        ledger.set_portfolio(IDENTITY, make_portfolio(equity="100"))
        monitor = PortfolioMonitor(ledger, IDENTITY, interval=60, risk_config=test_risk_config)

        snapshot = await monitor.refresh()
        assert format_token(snapshot.free_collateral) == "100.0 SOL"

        portfolio = await ledger.get_portfolio(IDENTITY)
        result = gate.check_withdrawal(portfolio, tokens("30"))
        assert result.safe is True
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_open_positions_block_until_closed(self, ledger, gate, test_risk_config):
        with_positions = make_portfolio(
            equity="100",
            pnl="-12",
            exposures=[make_exposure("BTC-PERP", qty="1", mark="100", upnl="-12")],
        )
        ledger.set_portfolio(IDENTITY, with_positions)
        monitor = PortfolioMonitor(ledger, IDENTITY, interval=60, risk_config=test_risk_config)

        snapshot = await monitor.refresh()
        assert snapshot.has_open_positions is True
        assert format_percent(evaluate(with_positions).risk_ratio) == "12.00%"
        assert evaluate(with_positions).risk_level == RiskLevel.HIGH

        blocked = gate.check_withdrawal(with_positions, tokens("10"))
        assert blocked.error_codes == [SafetyErrorCode.OPEN_POSITIONS_PRESENT]

        # Positions closed; loss realised
        closed = make_portfolio(equity="88")
        ledger.set_portfolio(IDENTITY, closed)
        snapshot = await monitor.refresh()
        assert snapshot.has_open_positions is False
        assert monitor.updates_published == 2

        allowed = gate.check_withdrawal(closed, tokens("82"))
        assert allowed.safe is True
        assert len(allowed.warnings) == 3

    @pytest.mark.asyncio
    async def test_portfolio_missing(self, ledger):
        monitor = PortfolioMonitor(ledger, IDENTITY, interval=60)
        await monitor.start()
        try:
            assert monitor.state == MonitorState.NOT_FOUND
            assert monitor.snapshot is None
        finally:
            await monitor.stop()
