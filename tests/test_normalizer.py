"""
Tests for the amount, tax and date normalizers.
"""

from datetime import date
from decimal import Decimal

import pytest

from invoice_scraper.exceptions import InvalidDateFormatError
from invoice_scraper.normalizer import (
    calculate_gross_amount,
    format_amount,
    is_canonical_date,
    normalize_date,
    normalize_net_amount,
    parse_number,
    round_amount,
)


class TestParseNumber:
    """Tests for number parsing."""

    def test_decimal_comma(self):
        assert parse_number("150,00") == Decimal("150.00")

    def test_decimal_point(self):
        assert parse_number("150.00") == Decimal("150.00")

    def test_european_thousands(self):
        assert parse_number("1.234,56") == Decimal("1234.56")

    def test_us_thousands(self):
        assert parse_number("1,234.56") == Decimal("1234.56")

    def test_thousands_without_fraction(self):
        assert parse_number("1,234") == Decimal("1234")

    def test_integer(self):
        assert parse_number("19") == Decimal("19")

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            parse_number("abc")

    def test_empty_string(self):
        with pytest.raises(ValueError):
            parse_number("")


class TestNormalizeNetAmount:
    """Tests for net amount normalization and currency conversion."""

    def test_euro_unchanged(self):
        assert normalize_net_amount("150,00", "€") == Decimal("150.00")

    def test_no_currency_unchanged(self):
        assert normalize_net_amount("150,00", None) == Decimal("150.00")

    def test_dollar_converted(self):
        assert normalize_net_amount("100.00", "$") == Decimal("93.00")

    def test_dollar_conversion_rounded(self):
        assert normalize_net_amount("10,55", "$") == Decimal("9.81")

    @pytest.mark.parametrize("raw", ["150,00", "150.00", "0,99"])
    def test_reference_currency_idempotent(self, raw):
        once = normalize_net_amount(raw, "€")
        assert normalize_net_amount(str(once), "€") == once
        assert normalize_net_amount(str(once), None) == once

    def test_decimal_comma_normalized(self):
        assert str(normalize_net_amount("150,00", "€")) == "150.00"

    def test_thousands_separator_stripped(self):
        assert normalize_net_amount("12.345", "€") == Decimal("12345.00")


class TestCalculateGrossAmount:
    """Tests for gross amount calculation."""

    def test_detected_rate(self):
        assert calculate_gross_amount(Decimal("150.00"), "19", "€") == Decimal("178.50")

    def test_detected_rate_with_dollar(self):
        assert calculate_gross_amount(Decimal("100.00"), "7", "$") == Decimal("107.00")

    def test_default_rate_for_euro(self):
        assert calculate_gross_amount(Decimal("100.00"), None, "€") == Decimal("119.00")

    def test_no_default_rate_for_dollar(self):
        assert calculate_gross_amount(Decimal("93.00"), None, "$") == Decimal("93.00")

    def test_no_default_rate_without_currency(self):
        assert calculate_gross_amount(Decimal("50.00"), None, None) == Decimal("50.00")

    @pytest.mark.parametrize("zero", ["0", "00"])
    def test_zero_rate_returns_net(self, zero):
        net = Decimal("99.99")
        assert calculate_gross_amount(net, zero, "€") == net

    @pytest.mark.parametrize("net,rate", [
        ("33.33", "7"),
        ("0.01", "19"),
        ("1234.56", "16"),
        ("10.05", "5"),
    ])
    def test_gross_formula(self, net, rate):
        net = Decimal(net)
        expected = round_amount(net * (1 + Decimal(rate) / 100))
        assert calculate_gross_amount(net, rate, "€") == expected


class TestFormatAmount:
    """Tests for amount formatting."""

    def test_two_fraction_digits(self):
        assert format_amount(Decimal("178.5")) == "178.50€"

    def test_integer_amount(self):
        assert format_amount(Decimal("93")) == "93.00€"


class TestNormalizeDate:
    """Tests for date normalization."""

    def test_canonical_unchanged(self):
        assert normalize_date("05.03.2024") == "05.03.2024"

    def test_canonical_checked_by_shape_only(self):
        assert is_canonical_date("31.04.2024")
        assert normalize_date("31.04.2024") == "31.04.2024"

    def test_surrounding_whitespace(self):
        assert normalize_date(" 05.03.2024 ") == "05.03.2024"

    @pytest.mark.parametrize("date_str", [
        "March 5, 2024",
        "3/5/2024",
        "5. März 2024",
        "5. March 2024",
        "05. Maerz 2024",
    ])
    def test_alternate_layouts(self, date_str):
        assert normalize_date(date_str) == "05.03.2024"

    def test_german_month_name(self):
        assert normalize_date("12. Oktober 2023") == "12.10.2023"

    @pytest.mark.parametrize("value", [
        date(2024, 7, 9),
        date(2023, 12, 31),
        date(2024, 2, 29),
    ])
    def test_round_trip(self, value):
        expected = f"{value.day:02d}.{value.month:02d}.{value.year}"
        layouts = [
            f"{value:%B} {value.day}, {value.year}",
            f"{value.month}/{value.day}/{value.year}",
            f"{value.day}. {value:%B} {value.year}",
        ]
        for date_str in layouts:
            assert normalize_date(date_str) == expected

    @pytest.mark.parametrize("date_str", [
        "45.13.2024",
        "Foo 5, 2024",
        "2/30/2024",
        "13/01/2024",
        "yesterday",
    ])
    def test_invalid_date(self, date_str):
        with pytest.raises(InvalidDateFormatError):
            normalize_date(date_str)

    def test_invalid_date_is_value_error(self):
        with pytest.raises(ValueError, match="Invalid date format"):
            normalize_date("45.13.2024")
