"""Configuration management for the Barista DLP client core.

Every policy threshold is a named module-level constant and the default of a
pydantic-settings field, so it can be overridden per instance, through the
environment, or through a ``.env`` file.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from barista_dlp.core.codec import EQUITY_SCALE, parse_amount
from barista_dlp.core.fixed_point import FixedPointDecimal

# =============================================================================
# Named Defaults
# =============================================================================

# Token thresholds, as human decimal strings at EQUITY_SCALE
MIN_DEPOSIT = "1"
RECOMMENDED_MIN_DEPOSIT = "10"
MAX_SANE_DEPOSIT = "1000"
MIN_REMAINING_CAPITAL = "10"

# Percentages (integer percent)
WITHDRAWAL_BUFFER_PCT = 10
LARGE_WITHDRAWAL_PCT = 50
INITIAL_MARGIN_PCT = 10
MAINTENANCE_MARGIN_PCT = 5

REFRESH_INTERVAL_SECONDS = 5.0

_SETTINGS = SettingsConfigDict(
    env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
)


def _validate_pct(v: int) -> int:
    if v < 0 or v > 100:
        raise ValueError("Percentage must be between 0 and 100")
    return v


# =============================================================================
# Safety Gate Configuration
# =============================================================================


class SafetyConfig(BaseSettings):
    """Thresholds for the deposit and withdrawal safety checks."""

    model_config = _SETTINGS

    min_deposit: str = Field(default=MIN_DEPOSIT, validation_alias="MIN_DEPOSIT")
    recommended_min_deposit: str = Field(
        default=RECOMMENDED_MIN_DEPOSIT, validation_alias="RECOMMENDED_MIN_DEPOSIT"
    )
    max_sane_deposit: str = Field(
        default=MAX_SANE_DEPOSIT, validation_alias="MAX_SANE_DEPOSIT"
    )
    min_remaining_capital: str = Field(
        default=MIN_REMAINING_CAPITAL, validation_alias="MIN_REMAINING_CAPITAL"
    )
    withdrawal_buffer_pct: int = Field(
        default=WITHDRAWAL_BUFFER_PCT, validation_alias="WITHDRAWAL_BUFFER_PCT"
    )
    large_withdrawal_pct: int = Field(
        default=LARGE_WITHDRAWAL_PCT, validation_alias="LARGE_WITHDRAWAL_PCT"
    )

    @field_validator(
        "min_deposit",
        "recommended_min_deposit",
        "max_sane_deposit",
        "min_remaining_capital",
    )
    @classmethod
    def validate_token_amount(cls, v: str) -> str:
        """Reject thresholds that are not non-negative decimal amounts."""
        if parse_amount(v, EQUITY_SCALE).is_negative():
            raise ValueError("Threshold must not be negative")
        return v

    @field_validator("withdrawal_buffer_pct", "large_withdrawal_pct")
    @classmethod
    def validate_pct(cls, v: int) -> int:
        return _validate_pct(v)

    # Thresholds in the integer domain used by the checks

    @property
    def min_deposit_amount(self) -> FixedPointDecimal:
        return parse_amount(self.min_deposit, EQUITY_SCALE)

    @property
    def recommended_min_deposit_amount(self) -> FixedPointDecimal:
        return parse_amount(self.recommended_min_deposit, EQUITY_SCALE)

    @property
    def max_sane_deposit_amount(self) -> FixedPointDecimal:
        return parse_amount(self.max_sane_deposit, EQUITY_SCALE)

    @property
    def min_remaining_capital_amount(self) -> FixedPointDecimal:
        return parse_amount(self.min_remaining_capital, EQUITY_SCALE)


# =============================================================================
# Risk Metrics Configuration
# =============================================================================


class RiskConfig(BaseSettings):
    """Margin rates applied to position notional."""

    model_config = _SETTINGS

    initial_margin_pct: int = Field(
        default=INITIAL_MARGIN_PCT, validation_alias="INITIAL_MARGIN_PCT"
    )
    maintenance_margin_pct: int = Field(
        default=MAINTENANCE_MARGIN_PCT, validation_alias="MAINTENANCE_MARGIN_PCT"
    )

    @field_validator("initial_margin_pct", "maintenance_margin_pct")
    @classmethod
    def validate_pct(cls, v: int) -> int:
        return _validate_pct(v)


# =============================================================================
# Portfolio Monitor Configuration
# =============================================================================


class MonitorConfig(BaseSettings):
    """Polling behaviour of the portfolio monitor."""

    model_config = _SETTINGS

    refresh_interval_seconds: float = Field(
        default=REFRESH_INTERVAL_SECONDS, validation_alias="REFRESH_INTERVAL_SECONDS"
    )

    @field_validator("refresh_interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Refresh interval must be positive")
        return v


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = _SETTINGS

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="json", validation_alias="LOG_FORMAT"
    )
    # Empty string disables the file handler
    log_file: str = Field(default="", validation_alias="LOG_FILE")


# =============================================================================
# Global Configuration Container
# =============================================================================


class BaristaConfig:
    """
    Container for all client-core configurations.

    Usage:
        from barista_dlp.core.config import barista_config

        floor = barista_config.safety.min_remaining_capital_amount
    """

    def __init__(self):
        self.safety = SafetyConfig()
        self.risk = RiskConfig()
        self.monitor = MonitorConfig()
        self.logging = LoggingConfig()

    def validate_configuration(self) -> dict:
        """
        Cross-field sanity checks that single-field validators cannot express.

        Returns:
            Dictionary with 'valid' boolean and 'issues' list
        """
        issues = []

        safety = self.safety
        if safety.min_deposit_amount > safety.recommended_min_deposit_amount:
            issues.append("MIN_DEPOSIT should not exceed RECOMMENDED_MIN_DEPOSIT")
        if safety.recommended_min_deposit_amount > safety.max_sane_deposit_amount:
            issues.append("RECOMMENDED_MIN_DEPOSIT should not exceed MAX_SANE_DEPOSIT")
        if self.risk.maintenance_margin_pct > self.risk.initial_margin_pct:
            issues.append("MAINTENANCE_MARGIN_PCT should not exceed INITIAL_MARGIN_PCT")

        return {"valid": len(issues) == 0, "issues": issues}


# =============================================================================
# Global Configuration Instances
# =============================================================================

safety_config = SafetyConfig()
risk_config = RiskConfig()
monitor_config = MonitorConfig()
logging_config = LoggingConfig()

barista_config = BaristaConfig()


__all__ = [
    "MIN_DEPOSIT",
    "RECOMMENDED_MIN_DEPOSIT",
    "MAX_SANE_DEPOSIT",
    "MIN_REMAINING_CAPITAL",
    "WITHDRAWAL_BUFFER_PCT",
    "LARGE_WITHDRAWAL_PCT",
    "INITIAL_MARGIN_PCT",
    "MAINTENANCE_MARGIN_PCT",
    "REFRESH_INTERVAL_SECONDS",
    "SafetyConfig",
    "RiskConfig",
    "MonitorConfig",
    "LoggingConfig",
    "BaristaConfig",
    "safety_config",
    "risk_config",
    "monitor_config",
    "logging_config",
    "barista_config",
]
