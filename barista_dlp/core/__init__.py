"""Fixed-point amounts, ledger models, configuration and errors."""

from barista_dlp.core.codec import (
    EQUITY_SCALE,
    PRICE_SCALE,
    format_amount,
    format_price,
    format_token_amount,
    parse_amount,
    parse_price,
    parse_token_amount,
)
from barista_dlp.core.exceptions import (
    BaristaError,
    DivisionByZero,
    LedgerError,
    LedgerNetworkError,
    MalformedAmount,
    PortfolioNotFound,
    ScaleMismatch,
)
from barista_dlp.core.fixed_point import FixedPointDecimal
from barista_dlp.core.models import Exposure, Portfolio, PortfolioSnapshot, Position

__all__ = [
    "EQUITY_SCALE",
    "PRICE_SCALE",
    "format_amount",
    "format_price",
    "format_token_amount",
    "parse_amount",
    "parse_price",
    "parse_token_amount",
    "BaristaError",
    "DivisionByZero",
    "LedgerError",
    "LedgerNetworkError",
    "MalformedAmount",
    "PortfolioNotFound",
    "ScaleMismatch",
    "FixedPointDecimal",
    "Exposure",
    "Portfolio",
    "PortfolioSnapshot",
    "Position",
]
