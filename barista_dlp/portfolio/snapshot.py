"""Build the aggregate portfolio view from one ledger fetch."""
from typing import List, Optional

from barista_dlp.core.codec import EQUITY_SCALE
from barista_dlp.core.config import RiskConfig
from barista_dlp.core.fixed_point import FixedPointDecimal
from barista_dlp.core.models import Portfolio, PortfolioSnapshot, Position
from barista_dlp.risk import metrics

# Risk ratio is published with six decimals
RISK_RATIO_SCALE = 6


def build_positions(
    portfolio: Portfolio, config: Optional[RiskConfig] = None
) -> List[Position]:
    """One Position per exposure, in ledger order."""
    positions = []
    for exposure in portfolio.exposures:
        margin = metrics.position_margin(
            exposure.position_qty, exposure.mark_price, EQUITY_SCALE, config
        )
        positions.append(
            Position(
                instrument_id=exposure.instrument_id,
                quantity=exposure.position_qty,
                mark_price=exposure.mark_price,
                notional=margin.notional,
                initial_margin=margin.initial_margin,
                maintenance_margin=margin.maintenance_margin,
                unrealized_pnl=exposure.unrealized_pnl,
            )
        )
    return positions


def build_snapshot(
    portfolio: Portfolio, config: Optional[RiskConfig] = None
) -> PortfolioSnapshot:
    """
    Combine raw ledger state with risk metrics.

    Args:
        portfolio: Raw portfolio from the ledger client
        config: Margin rates; defaults to the global risk config

    Returns:
        A new immutable PortfolioSnapshot
    """
    positions = build_positions(portfolio, config)

    zero = FixedPointDecimal.zero(EQUITY_SCALE)
    initial_margin = zero
    maintenance_margin = zero
    total_unrealized_pnl = zero
    for position in positions:
        initial_margin = initial_margin + position.initial_margin
        maintenance_margin = maintenance_margin + position.maintenance_margin
        total_unrealized_pnl = total_unrealized_pnl + position.unrealized_pnl

    total_equity = portfolio.equity + total_unrealized_pnl
    result = metrics.evaluate(portfolio)
    ratio = result.risk_ratio

    return PortfolioSnapshot(
        equity=portfolio.equity,
        total_equity=total_equity,
        initial_margin=initial_margin,
        maintenance_margin=maintenance_margin,
        free_collateral=metrics.free_collateral(
            portfolio.equity, total_unrealized_pnl, initial_margin
        ),
        margin_ratio=metrics.margin_ratio(total_equity, initial_margin),
        total_unrealized_pnl=total_unrealized_pnl,
        open_interest=result.open_interest,
        risk_ratio=FixedPointDecimal(
            ratio.numerator * 10 ** RISK_RATIO_SCALE // ratio.denominator,
            RISK_RATIO_SCALE,
        ),
        positions=tuple(positions),
    )
