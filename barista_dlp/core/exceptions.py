"""Exception hierarchy for the Barista DLP client core."""
from typing import Optional


class BaristaError(Exception):
    """Base class for all errors raised by this package."""


# =============================================================================
# Arithmetic / Codec Errors
# =============================================================================

class MalformedAmount(BaristaError, ValueError):
    """A human-entered amount string could not be parsed at the given scale."""

    def __init__(self, text: str, scale: int, reason: str = ""):
        self.text = text
        self.scale = scale
        self.reason = reason
        message = f"Malformed amount {text!r} at scale {scale}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DivisionByZero(BaristaError, ZeroDivisionError):
    """Fixed-point division with a zero divisor."""


class ScaleMismatch(BaristaError, ValueError):
    """Two fixed-point values with different scales were combined."""

    def __init__(self, left: int, right: int, operation: str):
        self.left = left
        self.right = right
        self.operation = operation
        super().__init__(
            f"Cannot {operation} values at scale {left} and scale {right}; rescale first"
        )


# =============================================================================
# Ledger Errors
# =============================================================================

class LedgerError(BaristaError):
    """Failure reported at the ledger-client boundary."""


class PortfolioNotFound(LedgerError):
    """The ledger has no portfolio for this identity (a new user)."""

    def __init__(self, identity: str, message: Optional[str] = None):
        self.identity = identity
        super().__init__(message or f"Portfolio not found for {identity}")


class LedgerNetworkError(LedgerError):
    """Transient transport failure while talking to the ledger."""
