"""Plain-text presentation helpers for amounts, ratios and identifiers.

No colour or terminal handling here; renderers live with the CLI/UI.
"""
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Union

from barista_dlp.core.fixed_point import FixedPointDecimal

TOKEN_SYMBOL = "SOL"

Ratio = Union[Fraction, Decimal, FixedPointDecimal]


def _as_decimal(value: Ratio) -> Decimal:
    if isinstance(value, FixedPointDecimal):
        return value.to_decimal()
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(value)


def format_token(
    amount: FixedPointDecimal, decimals: int = 1, symbol: str = TOKEN_SYMBOL
) -> str:
    """Rounded token amount with suffix, e.g. ``"12.5 SOL"``."""
    value = amount.to_decimal()
    quantum = Decimal(1).scaleb(-decimals)
    return f"{value.quantize(quantum, rounding=ROUND_HALF_UP)} {symbol}"


def format_pnl(amount: FixedPointDecimal, decimals: int = 1, symbol: str = TOKEN_SYMBOL) -> str:
    """Signed token amount: ``"+1.0 SOL"``, ``"-0.5 SOL"``."""
    sign = "-" if amount.is_negative() else "+"
    return f"{sign}{format_token(abs(amount), decimals, symbol)}"


def format_percent(ratio: Ratio, decimals: int = 2) -> str:
    """A fraction as a percentage: ``Fraction(1, 20)`` -> ``"5.00%"``."""
    pct = _as_decimal(ratio) * 100
    quantum = Decimal(1).scaleb(-decimals)
    return f"{pct.quantize(quantum, rounding=ROUND_HALF_UP)}%"


def to_basis_points(ratio: Ratio) -> int:
    """``0.0005`` -> ``5``."""
    return int((_as_decimal(ratio) * 10000).to_integral_value(rounding=ROUND_HALF_UP))


def format_basis_points(bps: int) -> str:
    """``5`` -> ``"0.05%"``."""
    return f"{(Decimal(bps) / 100).quantize(Decimal('0.01'))}%"


def format_pubkey(pubkey: str, chars: int = 8) -> str:
    """Shorten a long identifier to ``head...tail``."""
    if len(pubkey) <= chars * 2:
        return pubkey
    return f"{pubkey[:chars]}...{pubkey[-chars:]}"
