"""Data models for the Barista DLP client core.

Ledger records (Exposure, Portfolio) arrive from the ledger client and are
never mutated here. Position and PortfolioSnapshot are the derived views
handed to consumers. All models are frozen; all amounts are FixedPointDecimal.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from barista_dlp.core.codec import EQUITY_SCALE, PRICE_SCALE
from barista_dlp.core.fixed_point import FixedPointDecimal


def _require_scale(v: FixedPointDecimal, scale: int, name: str) -> FixedPointDecimal:
    if v.scale != scale:
        raise ValueError(f"{name} must be at scale {scale}, got scale {v.scale}")
    return v


# =============================================================================
# Ledger Records
# =============================================================================

class Exposure(BaseModel):
    """One open position held by a portfolio on the ledger.

    Attributes:
        instrument_id: Instrument identifier
        position_qty: Signed quantity (scale 9); negative is short
        mark_price: Current mark price (scale 6)
        unrealized_pnl: Unrealized PnL reported for the position (scale 9)
    """
    model_config = ConfigDict(frozen=True)

    instrument_id: str = Field(..., min_length=1, description="Instrument identifier")
    position_qty: FixedPointDecimal = Field(..., description="Signed position quantity")
    mark_price: FixedPointDecimal = Field(..., description="Mark price")
    unrealized_pnl: FixedPointDecimal = Field(..., description="Unrealized PnL")

    @field_validator("position_qty", "unrealized_pnl")
    @classmethod
    def validate_amount_scale(cls, v: FixedPointDecimal, info) -> FixedPointDecimal:
        return _require_scale(v, EQUITY_SCALE, info.field_name)

    @field_validator("mark_price")
    @classmethod
    def validate_price_scale(cls, v: FixedPointDecimal) -> FixedPointDecimal:
        _require_scale(v, PRICE_SCALE, "mark_price")
        if v.is_negative():
            raise ValueError("mark_price must not be negative")
        return v


class Portfolio(BaseModel):
    """Raw portfolio state as read from the ledger.

    Attributes:
        equity: Total account value (scale 9)
        pnl: Unrealized PnL (scale 9)
        exposure_count: Number of open exposures
        exposures: Open exposures, in ledger order
    """
    model_config = ConfigDict(frozen=True)

    equity: FixedPointDecimal = Field(..., description="Account equity")
    pnl: FixedPointDecimal = Field(
        default=FixedPointDecimal.zero(EQUITY_SCALE), description="Unrealized PnL"
    )
    exposure_count: int = Field(default=0, ge=0, description="Number of exposures")
    exposures: Tuple[Exposure, ...] = Field(default=(), description="Open exposures")

    @field_validator("equity", "pnl")
    @classmethod
    def validate_amount_scale(cls, v: FixedPointDecimal, info) -> FixedPointDecimal:
        return _require_scale(v, EQUITY_SCALE, info.field_name)

    @model_validator(mode="after")
    def validate_exposure_count(self) -> "Portfolio":
        if self.exposure_count != len(self.exposures):
            raise ValueError(
                f"exposure_count ({self.exposure_count}) does not match "
                f"number of exposures ({len(self.exposures)})"
            )
        return self

    @property
    def principal(self) -> FixedPointDecimal:
        """Net deposited capital: equity minus PnL."""
        return self.equity - self.pnl


# =============================================================================
# Derived Views
# =============================================================================

class Position(BaseModel):
    """A position with its margin figures, built from one Exposure."""
    model_config = ConfigDict(frozen=True)

    instrument_id: str
    quantity: FixedPointDecimal
    mark_price: FixedPointDecimal
    notional: FixedPointDecimal
    initial_margin: FixedPointDecimal
    maintenance_margin: FixedPointDecimal
    unrealized_pnl: FixedPointDecimal


class PortfolioSnapshot(BaseModel):
    """Aggregate portfolio view handed to polling consumers.

    Compared field by field; two snapshots built from identical ledger state
    are equal.

    Attributes:
        equity: Ledger equity
        total_equity: Equity plus total unrealized PnL
        initial_margin: Sum of position initial margins
        maintenance_margin: Sum of position maintenance margins
        free_collateral: Total equity minus initial margin
        margin_ratio: Total equity / initial margin, in percent (scale 2)
        total_unrealized_pnl: Sum of position unrealized PnL
        open_interest: Sum of absolute position quantities
        risk_ratio: |pnl| / equity as a decimal fraction
        positions: One entry per ledger exposure, in ledger order
    """
    model_config = ConfigDict(frozen=True)

    equity: FixedPointDecimal
    total_equity: FixedPointDecimal
    initial_margin: FixedPointDecimal
    maintenance_margin: FixedPointDecimal
    free_collateral: FixedPointDecimal
    margin_ratio: FixedPointDecimal
    total_unrealized_pnl: FixedPointDecimal
    open_interest: FixedPointDecimal
    risk_ratio: FixedPointDecimal
    positions: Tuple[Position, ...] = ()

    @property
    def position_count(self) -> int:
        return len(self.positions)

    @property
    def has_open_positions(self) -> bool:
        return not self.open_interest.is_zero()
