"""Unit tests for amount parsing and formatting."""
import pytest

from barista_dlp.core.codec import (
    EQUITY_SCALE, PRICE_SCALE, format_amount, format_price, format_token_amount,
    parse_amount, parse_price, parse_token_amount,
)
from barista_dlp.core.exceptions import MalformedAmount
from barista_dlp.core.fixed_point import FixedPointDecimal


# =============================================================================
# Formatting
# =============================================================================

class TestFormatAmount:
    """Test rendering of fixed-point amounts."""

    def test_negative_price(self):
        assert format_amount(FixedPointDecimal(-35_544_057, 6)) == "-35.544057"

    def test_small_negative_keeps_leading_zero(self):
        assert format_amount(FixedPointDecimal(-5, 6)) == "-0.000005"

    def test_zero(self):
        assert format_amount(FixedPointDecimal(0, 9)) == "0.000000000"

    def test_scale_zero_has_no_point(self):
        assert format_amount(FixedPointDecimal(42, 0)) == "42"

    def test_raw_integer_with_scale(self):
        assert format_amount(1_500_000_000, 9) == "1.500000000"

    def test_raw_integer_requires_scale(self):
        with pytest.raises(ValueError):
            format_amount(15)

    def test_rescales_to_requested_scale(self):
        assert format_amount(FixedPointDecimal(1_999, 3), 1) == "1.9"

    def test_token_and_price_helpers(self):
        assert format_token_amount(FixedPointDecimal(10_000_000_000, 9)) == "10.000000000"
        assert format_price(FixedPointDecimal(100_000_000, 6)) == "100.000000"


# =============================================================================
# Parsing
# =============================================================================

class TestParseAmount:
    """Test parsing of decimal strings."""

    def test_parse_negative_price(self):
        assert parse_amount("-35.544057", 6) == FixedPointDecimal(-35_544_057, 6)

    def test_parse_pads_missing_fraction(self):
        assert parse_amount("1.5", 9) == FixedPointDecimal(1_500_000_000, 9)
        assert parse_amount("7", 2) == FixedPointDecimal(700, 2)

    def test_parse_truncates_extra_fraction(self):
        assert parse_amount("1.23456789", 6) == FixedPointDecimal(1_234_567, 6)
        assert parse_amount("-0.0000009", 6) == FixedPointDecimal(0, 6)

    def test_parse_partial_forms(self):
        assert parse_amount(".5", 1) == FixedPointDecimal(5, 1)
        assert parse_amount("5.", 1) == FixedPointDecimal(50, 1)
        assert parse_amount("+2", 0) == FixedPointDecimal(2, 0)

    @pytest.mark.parametrize("text", ["", ".", "-", "1.2.3", "1e5", " 1", "--1", "abc", "1,5"])
    def test_rejects_malformed(self, text):
        with pytest.raises(MalformedAmount):
            parse_amount(text, 9)

    def test_rejects_non_string(self):
        with pytest.raises(MalformedAmount):
            parse_amount(1.5, 9)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_amount("x", 2)

    def test_round_trip(self):
        for value in (0, 1, -1, 5, -5, 123_456_789, -35_544_057, 10 ** 18):
            for scale in (0, 2, 6, 9):
                amount = FixedPointDecimal(value, scale)
                assert parse_amount(format_amount(amount), scale) == amount

    def test_token_and_price_helpers(self):
        assert parse_token_amount("2").scale == EQUITY_SCALE
        assert parse_price("2").scale == PRICE_SCALE
