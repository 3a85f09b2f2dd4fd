"""Conversion between human decimal strings and fixed-point amounts.

Both directions work on the unscaled integer so that
``parse_amount(format_amount(x, s), s) == x`` for every representable ``x``.
"""
from typing import Optional, Union

from barista_dlp.core.exceptions import MalformedAmount
from barista_dlp.core.fixed_point import FixedPointDecimal

# Equity, PnL, deposit and withdrawal amounts (lamport-style base units)
EQUITY_SCALE = 9

# Oracle and mark prices
PRICE_SCALE = 6


def format_amount(
    amount: Union[FixedPointDecimal, int], scale: Optional[int] = None
) -> str:
    """Render an amount as a decimal string.

    Args:
        amount: Fixed-point value, or a raw unscaled integer
        scale: Decimal places to render; defaults to the amount's own scale.
            A fixed-point amount at a different scale is rescaled first.

    Returns:
        e.g. ``"-35.544057"`` for ``FixedPointDecimal(-35544057, 6)``
    """
    if isinstance(amount, FixedPointDecimal):
        if scale is None:
            scale = amount.scale
        unscaled = amount.rescale(scale).value
    else:
        if scale is None:
            raise ValueError("scale is required when formatting a raw integer")
        unscaled = int(amount)
    if scale < 0:
        raise ValueError(f"scale must be non-negative, got {scale}")

    sign = "-" if unscaled < 0 else ""
    digits = str(abs(unscaled))
    if scale == 0:
        return f"{sign}{digits}"

    digits = digits.rjust(scale + 1, "0")
    whole, fraction = digits[:-scale], digits[-scale:]
    return f"{sign}{whole}.{fraction}"


def parse_amount(text: str, scale: int) -> FixedPointDecimal:
    """Parse a decimal string into a fixed-point amount at ``scale``.

    Fractional digits beyond ``scale`` are truncated; missing ones are
    zero-padded.

    Raises:
        MalformedAmount: On anything other than an optional leading sign,
            digits and at most one decimal point
    """
    if not isinstance(text, str):
        raise MalformedAmount(repr(text), scale, "expected a string")
    if scale < 0:
        raise MalformedAmount(text, scale, "scale must be non-negative")

    body = text
    negative = False
    if body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]

    whole, point, fraction = body.partition(".")
    if not whole and not fraction:
        raise MalformedAmount(text, scale, "no digits")
    for part in (whole, fraction):
        if part and not (part.isascii() and part.isdigit()):
            raise MalformedAmount(text, scale, "unexpected character")

    fraction = fraction.ljust(scale, "0")[:scale]
    unscaled = int((whole or "0") + fraction)
    return FixedPointDecimal(-unscaled if negative else unscaled, scale)


def parse_token_amount(text: str) -> FixedPointDecimal:
    """Parse a user-entered token amount (9 decimals)."""
    return parse_amount(text, EQUITY_SCALE)


def format_token_amount(amount: Union[FixedPointDecimal, int]) -> str:
    return format_amount(amount, EQUITY_SCALE)


def parse_price(text: str) -> FixedPointDecimal:
    """Parse a price (6 decimals)."""
    return parse_amount(text, PRICE_SCALE)


def format_price(amount: Union[FixedPointDecimal, int]) -> str:
    return format_amount(amount, PRICE_SCALE)
