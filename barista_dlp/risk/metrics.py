"""Risk metrics derived from raw portfolio state.

Every function here is pure and total: any valid Portfolio maps to a result,
and zero denominators are defined as zero risk rather than errors.
"""
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional

from barista_dlp.core.codec import EQUITY_SCALE
from barista_dlp.core.config import RiskConfig, risk_config
from barista_dlp.core.fixed_point import FixedPointDecimal
from barista_dlp.core.models import Portfolio

# Percent figures carry two decimals
MARGIN_RATIO_SCALE = 2

# Risk-ratio bands (|pnl| / equity)
RISK_LEVEL_LOW_MAX = Fraction(5, 100)
RISK_LEVEL_MODERATE_MAX = Fraction(10, 100)
RISK_LEVEL_HIGH_MAX = Fraction(20, 100)


class RiskLevel(str, Enum):
    """Coarse classification of a portfolio's risk ratio."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class RiskMetricsResult:
    """Aggregate risk figures for one portfolio evaluation.

    Attributes:
        open_interest: Sum of absolute position quantities (scale 9)
        risk_ratio: |pnl| / equity, exact
    """
    open_interest: FixedPointDecimal
    risk_ratio: Fraction

    @property
    def risk_level(self) -> RiskLevel:
        return classify_risk(self.risk_ratio)


@dataclass(frozen=True)
class PositionMargin:
    """Margin requirement estimate for a single position."""
    notional: FixedPointDecimal
    initial_margin: FixedPointDecimal
    maintenance_margin: FixedPointDecimal


# =============================================================================
# Portfolio-level Metrics
# =============================================================================

def open_interest(portfolio: Portfolio) -> FixedPointDecimal:
    """Sum of ``|position_qty|`` over all exposures; zero with no exposures."""
    total = FixedPointDecimal.zero(EQUITY_SCALE)
    for exposure in portfolio.exposures:
        total = total + abs(exposure.position_qty)
    return total


def risk_ratio(portfolio: Portfolio) -> Fraction:
    """``|pnl| / equity``, or zero for a portfolio with no equity."""
    if portfolio.equity.is_zero():
        return Fraction(0)
    return Fraction(abs(portfolio.pnl.value), abs(portfolio.equity.value))


def evaluate(portfolio: Portfolio) -> RiskMetricsResult:
    return RiskMetricsResult(
        open_interest=open_interest(portfolio),
        risk_ratio=risk_ratio(portfolio),
    )


def classify_risk(ratio: Fraction) -> RiskLevel:
    if ratio < RISK_LEVEL_LOW_MAX:
        return RiskLevel.LOW
    if ratio < RISK_LEVEL_MODERATE_MAX:
        return RiskLevel.MODERATE
    if ratio < RISK_LEVEL_HIGH_MAX:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


# =============================================================================
# Margin Estimates
# =============================================================================

def position_margin(
    quantity: FixedPointDecimal,
    mark_price: FixedPointDecimal,
    scale: int = EQUITY_SCALE,
    config: Optional[RiskConfig] = None,
) -> PositionMargin:
    """
    Estimate margin for one position.

    ``notional = |quantity| * mark_price`` rescaled to ``scale``; initial and
    maintenance margin are configured percentages of notional.

    Args:
        quantity: Signed position quantity
        mark_price: Mark price
        scale: Canonical scale of the result (the equity scale)
        config: Margin rates; defaults to the global risk config

    Returns:
        PositionMargin with all figures at ``scale``
    """
    cfg = config or risk_config
    notional = (abs(quantity) * mark_price).rescale(scale)
    return PositionMargin(
        notional=notional,
        initial_margin=notional.percent(cfg.initial_margin_pct),
        maintenance_margin=notional.percent(cfg.maintenance_margin_pct),
    )


def free_collateral(
    equity: FixedPointDecimal,
    total_unrealized_pnl: FixedPointDecimal,
    initial_margin: FixedPointDecimal,
) -> FixedPointDecimal:
    """``(equity + total_unrealized_pnl) - initial_margin``."""
    return (equity + total_unrealized_pnl) - initial_margin


def margin_ratio(
    total_equity: FixedPointDecimal, initial_margin: FixedPointDecimal
) -> FixedPointDecimal:
    """Total equity as a percentage of initial margin (scale 2).

    Zero when there is no initial margin.
    """
    if initial_margin.is_zero():
        return FixedPointDecimal.zero(MARGIN_RATIO_SCALE)
    return (total_equity * 100).divide(initial_margin, MARGIN_RATIO_SCALE)
