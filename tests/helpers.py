"""Builders for amounts and ledger records used across the test suite."""
from typing import List, Optional

from barista_dlp.core.codec import EQUITY_SCALE, PRICE_SCALE, parse_amount
from barista_dlp.core.fixed_point import FixedPointDecimal
from barista_dlp.core.models import Exposure, Portfolio


def tokens(text: str) -> FixedPointDecimal:
    """Token amount at the equity scale, e.g. tokens("1.5")."""
    return parse_amount(text, EQUITY_SCALE)


def price(text: str) -> FixedPointDecimal:
    """Price at the price scale, e.g. price("100")."""
    return parse_amount(text, PRICE_SCALE)


def make_exposure(
    instrument_id: str = "BTC-PERP",
    qty: str = "1",
    mark: str = "100",
    upnl: str = "0",
) -> Exposure:
    return Exposure(
        instrument_id=instrument_id,
        position_qty=tokens(qty),
        mark_price=price(mark),
        unrealized_pnl=tokens(upnl),
    )


def make_portfolio(
    equity: str = "100",
    pnl: str = "0",
    exposures: Optional[List[Exposure]] = None,
) -> Portfolio:
    exposures = exposures or []
    return Portfolio(
        equity=tokens(equity),
        pnl=tokens(pnl),
        exposure_count=len(exposures),
        exposures=tuple(exposures),
    )
