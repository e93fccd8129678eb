"""
Unit Tests - Package Size Parsing
"""
from decimal import Decimal

import pytest

from sales_engine.parsing import parse_package_size
from sales_engine.parsing.package_size import format_magnitude


class TestParsePackageSize:
    """Tests for parse_package_size"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("6x330ml", "6 × 0.33 L"),
            ("4x250 ml", "4 × 0.25 L"),
            ("500g", "1 × 0.5 kg"),
            ("12 X 0,5 l", "12 × 0.5 l"),
            ("1 × 2 kg", "1 × 2 kg"),
        ],
    )
    def test_count_value_unit(self, value, expected):
        """Test full descriptions, converting ml and g"""
        assert parse_package_size(value) == expected

    def test_unconverted_unit_is_lower_cased(self):
        """Test units other than ml and g pass through"""
        assert parse_package_size("0.5L") == "1 × 0.5 l"

    def test_count_only(self):
        """Test a bare count"""
        assert parse_package_size("6x") == "6"

    def test_count_and_unit(self):
        """Test a count with a unit but no value"""
        assert parse_package_size("12 x ml") == "12 × L"

    def test_value_only(self):
        """Test a bare value defaults the count to 1"""
        assert parse_package_size("2") == "1 × 2"

    def test_value_is_rounded_to_two_places(self):
        """Test rounding after unit conversion"""
        assert parse_package_size("6x333ml") == "6 × 0.33 L"
        assert parse_package_size("1x5ml") == "1 × 0.01 L"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank(self, value):
        """Test blank input"""
        assert parse_package_size(value) is None

    def test_oversized_value_does_not_raise(self):
        """Test a magnitude too large to round is treated as missing"""
        assert parse_package_size("1x" + "9" * 30) == "1"
        assert parse_package_size("9" * 30 + "ml") == "1 × L"


class TestFormatMagnitude:
    """Tests for format_magnitude"""

    def test_trailing_zeros_dropped(self):
        """Test trailing zeros and point are removed"""
        assert format_magnitude(Decimal("2.50")) == "2.5"
        assert format_magnitude(Decimal("10")) == "10"
        assert format_magnitude(Decimal("0.330")) == "0.33"

    def test_too_large_to_round(self):
        """Test values beyond decimal precision give None"""
        assert format_magnitude(Decimal("9" * 30)) is None
