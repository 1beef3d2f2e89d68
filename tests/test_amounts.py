"""Tests for human amount to atomic unit conversion."""

from decimal import Decimal

import pytest

from swapsim.amounts import to_atomic_amount
from swapsim.errors import ConfigError


class TestToAtomicAmount:
    """Tests for to_atomic_amount."""

    def test_sol_amount(self):
        """Test a typical SOL amount."""
        assert to_atomic_amount("1.5", 9) == 1_500_000_000

    def test_excess_digits_truncated_not_rounded(self):
        """Test that extra fractional digits are dropped, not rounded."""
        assert to_atomic_amount("1.23456789123", 6) == 1_234_567
        assert to_atomic_amount("0.9999999", 6) == 999_999

    @pytest.mark.parametrize(
        "ui_amount,decimals,expected",
        [
            ("0.01", 9, 10_000_000),
            ("10", 6, 10_000_000),
            (".5", 2, 50),
            ("5.", 2, 500),
            ("0", 9, 0),
            ("000.000", 3, 0),
            ("7", 0, 7),
            ("7.9", 0, 7),
        ],
    )
    def test_conversions(self, ui_amount, decimals, expected):
        """Test padding, truncation and leading-zero handling."""
        assert to_atomic_amount(ui_amount, decimals) == expected

    def test_no_float_drift(self):
        """0.1 + 0.2 style values stay exact."""
        assert to_atomic_amount("0.3", 18) == 3 * 10**17
        assert to_atomic_amount("123456789.123456789", 9) == 123456789123456789

    def test_large_amount_beyond_float_precision(self):
        """Test amounts wider than a double's mantissa."""
        assert to_atomic_amount("98765432109876543210.5", 9) == 98765432109876543210500000000

    def test_decimal_and_int_inputs(self):
        """Test non-string numeric inputs."""
        assert to_atomic_amount(Decimal("2.25"), 6) == 2_250_000
        assert to_atomic_amount(Decimal("1E+3"), 2) == 100_000
        assert to_atomic_amount(3, 9) == 3_000_000_000

    def test_float_input(self):
        """Test floats convert by their shortest decimal form."""
        assert to_atomic_amount(0.3, 9) == 300_000_000
        assert to_atomic_amount(0.1, 18) == 10**17
        assert to_atomic_amount(1e21, 0) == 10**21

    def test_surrounding_whitespace_ignored(self):
        """Test that padding around a string amount is ignored."""
        assert to_atomic_amount("  1.5 ", 1) == 15

    @pytest.mark.parametrize(
        "bad,decimals",
        [
            ("abc", 6),
            ("1.2.3", 6),
            ("-1", 6),
            ("1e5", 6),
            ("1_000", 6),
            ("1,5", 6),
            ("0x10", 6),
            ("", 6),
            (".", 6),
            ("1.5e3", 1),
            ("1.2.3", 1),
            ("1.x", 0),
            (-0.5, 9),
            (float("nan"), 9),
        ],
    )
    def test_invalid_amount(self, bad, decimals):
        """Test that malformed amounts fail even past the truncation point."""
        with pytest.raises(ConfigError):
            to_atomic_amount(bad, decimals)

    def test_negative_decimals(self):
        """Test that negative decimals are rejected."""
        with pytest.raises(ConfigError):
            to_atomic_amount("1", -1)
