"""Unit tests for configuration loading and validation."""
import pytest
from pydantic import ValidationError

from barista_dlp.core.config import (
    BaristaConfig, LoggingConfig, MonitorConfig, RiskConfig, SafetyConfig,
)

from tests.helpers import tokens


class TestSafetyConfig:
    """Test safety thresholds."""

    def test_defaults(self, test_safety_config):
        config = SafetyConfig()
        assert config.min_deposit == "1"
        assert config.large_withdrawal_pct == 50
        assert config.min_remaining_capital_amount == tokens("10")
        assert config.model_dump() == test_safety_config.model_dump()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MIN_REMAINING_CAPITAL", "25.5")
        monkeypatch.setenv("LARGE_WITHDRAWAL_PCT", "75")
        config = SafetyConfig()
        assert config.min_remaining_capital_amount == tokens("25.5")
        assert config.large_withdrawal_pct == 75

    def test_field_name_override(self):
        config = SafetyConfig(max_sane_deposit="5000")
        assert config.max_sane_deposit_amount == tokens("5000")

    @pytest.mark.parametrize("pct", [-1, 101])
    def test_percentage_out_of_range(self, pct):
        with pytest.raises(ValidationError):
            SafetyConfig(withdrawal_buffer_pct=pct)

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            SafetyConfig(min_deposit="-1")

    def test_malformed_threshold_rejected(self):
        with pytest.raises(ValidationError):
            SafetyConfig(min_deposit="ten")


class TestOtherConfigs:
    """Test risk, monitor and logging settings."""

    def test_risk_defaults(self):
        config = RiskConfig()
        assert config.initial_margin_pct == 10
        assert config.maintenance_margin_pct == 5

    def test_risk_pct_range(self):
        with pytest.raises(ValidationError):
            RiskConfig(initial_margin_pct=150)

    def test_monitor_interval_must_be_positive(self):
        assert MonitorConfig().refresh_interval_seconds == 5.0
        with pytest.raises(ValidationError):
            MonitorConfig(refresh_interval_seconds=0)

    def test_monitor_interval_from_environment(self, monkeypatch):
        monkeypatch.setenv("REFRESH_INTERVAL_SECONDS", "0.5")
        assert MonitorConfig().refresh_interval_seconds == 0.5

    def test_logging_level_validated(self):
        assert LoggingConfig().log_level == "INFO"
        with pytest.raises(ValidationError):
            LoggingConfig(log_level="VERBOSE")


class TestBaristaConfig:
    """Test cross-field validation."""

    def test_defaults_are_valid(self):
        result = BaristaConfig().validate_configuration()
        assert result["valid"] is True
        assert result["issues"] == []

    def test_inconsistent_thresholds_reported(self, monkeypatch):
        monkeypatch.setenv("MIN_DEPOSIT", "50")
        monkeypatch.setenv("MAINTENANCE_MARGIN_PCT", "20")
        result = BaristaConfig().validate_configuration()
        assert result["valid"] is False
        assert len(result["issues"]) == 2
