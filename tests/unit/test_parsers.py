"""
Unit Tests - Scalar Parsers
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from sales_engine.parsing import (
    normalize_country,
    normalize_text,
    parse_currency,
    parse_date,
    parse_ean,
    parse_email,
    parse_identifier,
    parse_integer,
    parse_logical,
    parse_month,
    parse_number,
    parse_phone,
    parse_rate,
    resolve_date,
    strip_diacritics,
)


class TestParseDate:
    """Tests for the date cascade"""

    def test_iso_date(self):
        """Test ISO text resolves on the first step"""
        assert resolve_date("2023-01-11") == (date(2023, 1, 11), "iso")

    def test_iso_round_trip(self):
        """Test isoformat output parses back to the same date"""
        for day in (date(2023, 1, 6), date(1999, 12, 31), date(2024, 2, 29)):
            assert parse_date(day.isoformat()) == day

    def test_pinned_examples(self):
        """Test reference inputs across formats"""
        assert parse_date("03/30/23") == date(2023, 3, 30)
        assert parse_date("28/01/2023") == date(2023, 1, 28)
        assert parse_date("2023-01-06") == date(2023, 1, 6)

    def test_iso_datetime(self):
        """Test ISO text with a time part keeps only the date"""
        assert parse_date("2023-01-11 14:30:00") == date(2023, 1, 11)

    def test_ambiguous_dotted_date_reads_month_first(self):
        """Test "06.01.2023" is 1 June 2023"""
        assert resolve_date("06.01.2023") == (date(2023, 6, 1), "en-US-normalized")

    def test_impossible_month_falls_through_to_day_first(self):
        """Test a day above 12 in first position is read day-first"""
        assert resolve_date("28.01.2023") == (date(2023, 1, 28), "en-GB-normalized")

    def test_slashed_day_first(self):
        """Test en-GB slash format"""
        assert resolve_date("13/01/2023") == (date(2023, 1, 13), "en-GB")

    def test_us_month_name(self):
        """Test English month names"""
        assert parse_date("January 11, 2023") == date(2023, 1, 11)

    def test_polish_month_name(self):
        """Test Polish genitive month names"""
        assert resolve_date("5 stycznia 2022") == (date(2022, 1, 5), "pl-PL")

    def test_serial_number(self):
        """Test spreadsheet serial numbers"""
        assert resolve_date(44937) == (date(2023, 1, 11), "serial")
        assert parse_date(44937.0) == date(2023, 1, 11)

    @pytest.mark.parametrize("value", [10**400, 10**9, Decimal("sNaN"), Decimal("NaN"), float("inf"), 0, -5])
    def test_out_of_range_serials(self, value):
        """Test numbers with no calendar date give None instead of raising"""
        assert parse_date(value) is None

    def test_native_dates_pass_through(self):
        """Test date and datetime values"""
        assert resolve_date(date(2023, 5, 1)) == (date(2023, 5, 1), "native")
        assert parse_date(datetime(2023, 5, 1, 12, 0)) == date(2023, 5, 1)

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", "2023-02-30", True])
    def test_unparseable_values(self, value):
        """Test values no interpretation fits"""
        assert parse_date(value) is None

    def test_parse_month_truncates(self):
        """Test month parsing returns the first day of the month"""
        assert parse_month("2023-03") == date(2023, 3, 1)
        assert parse_month("2023-03-17") == date(2023, 3, 1)
        assert parse_month("marzec 2023") == date(2023, 3, 1)
        assert parse_month(None) is None


class TestParseNumber:
    """Tests for numeric parsing"""

    def test_comma_decimal(self):
        """Test comma as decimal separator"""
        assert parse_number("175,26") == Decimal("175.26")
        assert parse_number("175.26") == parse_number("175,26")

    def test_native_numbers(self):
        """Test int and float inputs"""
        assert parse_number(42) == Decimal(42)
        assert parse_number(1.5) == Decimal("1.5")

    def test_currency_suffix_is_ignored(self):
        """Test non-numeric characters are dropped"""
        assert parse_number("12.50 zł") == Decimal("12.50")

    def test_negative(self):
        """Test leading minus sign"""
        assert parse_number("-3,5") == Decimal("-3.5")

    @pytest.mark.parametrize("value", [None, "", "abc", "1,234.56", float("nan"), True])
    def test_invalid_numbers(self, value):
        """Test values that are not numbers"""
        assert parse_number(value) is None

    def test_parse_integer(self):
        """Test whole numbers only"""
        assert parse_integer("3") == 3
        assert parse_integer(4.0) == 4
        assert parse_integer("2,5") is None

    def test_parse_rate(self):
        """Test percentages become fractions"""
        assert parse_rate("5%") == Decimal("0.05")
        assert parse_rate("0.05") == Decimal("0.05")
        assert parse_rate(None) is None


class TestTextParsers:
    """Tests for text normalization"""

    def test_normalize_text_collapses_and_titles(self):
        """Test whitespace collapse and title case"""
        assert normalize_text("  jan   kowalski ") == "Jan Kowalski"

    def test_normalize_text_keeps_diacritics(self):
        """Test allowed accented letters survive"""
        assert normalize_text("ŁÓDŹ") == "Łódź"

    def test_normalize_text_drops_symbols(self):
        """Test disallowed characters are removed"""
        assert normalize_text("Café #1!") == "Café 1"

    def test_normalize_text_numbers(self):
        """Test numeric cells are rendered without a trailing .0"""
        assert normalize_text(123) == "123"
        assert normalize_text(12.0) == "12"

    @pytest.mark.parametrize("value", [None, "", "   ", "!!!"])
    def test_normalize_text_blank(self, value):
        """Test blank text"""
        assert normalize_text(value) is None

    def test_strip_diacritics(self):
        """Test accented letters map to ASCII"""
        assert strip_diacritics("Zażółć gęślą jaźń") == "Zazolc gesla jazn"
        assert strip_diacritics("Straße") == "Strasse"
        assert strip_diacritics(None) is None

    def test_parse_identifier(self):
        """Test identifiers are trimmed and lose a float suffix"""
        assert parse_identifier(" ORD-1 ") == "ORD-1"
        assert parse_identifier(1001.0) == "1001"
        assert parse_identifier("  ") is None

    def test_parse_currency(self):
        """Test currency codes are three upper-case letters"""
        assert parse_currency(" pln ") == "PLN"
        assert parse_currency("zloty") is None
        assert parse_currency(None) is None

    def test_parse_email(self):
        """Test e-mail addresses are lower-cased ASCII"""
        assert parse_email("Łukasz.Wiśniewski@Example.PL") == "lukasz.wisniewski@example.pl"
        assert parse_email("not-an-email") is None

    def test_parse_ean(self):
        """Test EAN-13 codes"""
        assert parse_ean(5901234123457.0) == "5901234123457"
        assert parse_ean("590-123-412-3457") == "5901234123457"
        assert parse_ean("12345") is None

    def test_parse_phone(self):
        """Test phone digits keep a leading plus"""
        assert parse_phone("+48 600 100 200") == "+48600100200"
        assert parse_phone("600-100-200") == "600100200"


class TestParseLogical:
    """Tests for boolean parsing"""

    @pytest.mark.parametrize("value", ["YES", "y", "True", 1, 1.0, "1"])
    def test_true_values(self, value):
        """Test truthy spellings"""
        assert parse_logical(value) is True

    @pytest.mark.parametrize("value", ["no", "N", "false", 0, "0"])
    def test_false_values(self, value):
        """Test falsy spellings"""
        assert parse_logical(value) is False

    @pytest.mark.parametrize("value", [None, "", "maybe", 2])
    def test_unknown_values(self, value):
        """Test values with no boolean reading"""
        assert parse_logical(value) is None


class TestNormalizeCountry:
    """Tests for country normalization"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("PL", "Poland"),
            ("polska", "Poland"),
            (" Niemcy ", "Germany"),
            ("czechy", "Czech Republic"),
            ("UK", "United Kingdom"),
        ],
    )
    def test_known_aliases(self, value, expected):
        """Test names, native names and codes resolve to English names"""
        assert normalize_country(value) == expected

    def test_unknown_country_is_kept(self):
        """Test unknown countries pass through title-cased"""
        assert normalize_country("atlantis") == "Atlantis"

    def test_blank_country(self):
        """Test blank input"""
        assert normalize_country("") is None
