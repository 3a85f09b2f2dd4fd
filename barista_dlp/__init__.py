"""Barista DLP client core: fixed-point amounts, risk metrics, safety checks
and portfolio monitoring for liquidity providers."""

__version__ = "0.5.0"
