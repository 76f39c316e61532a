"""
Unit tests for amount and date normalization.
"""
from decimal import Decimal

import pytest

from dirham.common.models import Direction
from dirham.parsing.exceptions import InvalidDateComponent
from dirham.parsing.normalize import (
    AMOUNT_RE,
    apply_sign,
    build_date_iso,
    clean_description,
    format_iso_date,
    parse_amount,
)


# =============================================================================
# AMOUNTS
# =============================================================================

class TestParseAmount:
    @pytest.mark.parametrize("text,expected", [
        ("1 200,00", Decimal("1200.00")),
        ("25,00", Decimal("25.00")),
        ("10 000 000,00", Decimal("10000000.00")),
        ("1 234,56", Decimal("1234.56")),
        ("2024 100,00", Decimal("100.00")),
    ])
    def test_valid_amounts(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["abc", "", None, ",", "12,34,56"])
    def test_unparseable_yields_zero(self, text):
        assert parse_amount(text) == Decimal(0)

    def test_year_as_integer_part_is_kept(self):
        assert parse_amount("2024,00") == Decimal("2024.00")


class TestAmountGrammar:
    @pytest.mark.parametrize("text", ["1 200,00", "0,50", "999,99", "12 345 678,90"])
    def test_matches(self, text):
        assert AMOUNT_RE.match(text)

    @pytest.mark.parametrize("text", ["1200.00", "1 20,00", "12,5", "-10,00", "2024 450,00"])
    def test_rejects(self, text):
        assert not AMOUNT_RE.match(text)


class TestApplySign:
    def test_credit_positive(self):
        assert apply_sign(Decimal("-5.00"), Direction.CREDIT) == Decimal("5.00")

    def test_debit_negative(self):
        assert apply_sign(Decimal("5.00"), Direction.DEBIT) == Decimal("-5.00")


# =============================================================================
# DATES
# =============================================================================

class TestBuildDate:
    def test_basic(self):
        assert build_date_iso("07", "07", "2024") == "2024-07-07"

    def test_zero_padded(self):
        assert format_iso_date(2024, 1, 5) == "2024-01-05"

    def test_day_clamped_to_month_end(self):
        assert build_date_iso(31, 2, 2024) == "2024-02-29"
        assert build_date_iso(31, 2, 2023) == "2023-02-28"
        assert build_date_iso(31, 6, 2024) == "2024-06-30"

    @pytest.mark.parametrize("day,month,year", [
        (0, 5, 2024),
        (32, 5, 2024),
        (10, 0, 2024),
        (10, 13, 2024),
        (10, 5, 1999),
        (10, 5, 2031),
        ("xx", 5, 2024),
        (None, 5, 2024),
    ])
    def test_invalid_components(self, day, month, year):
        with pytest.raises(InvalidDateComponent):
            build_date_iso(day, month, year)

    def test_custom_year_bounds(self):
        assert build_date_iso(1, 1, 1995, min_year=1990) == "1995-01-01"


class TestCleanDescription:
    def test_embedded_dates_removed(self):
        assert clean_description("VIR.EMIS WEB VERS Smart Stooners   28 06 2024") == "VIR.EMIS WEB VERS Smart Stooners"

    def test_slash_dates_removed(self):
        assert clean_description("ACHAT 12/05/2024 MARJANE 13/05/24") == "ACHAT MARJANE"

    def test_whitespace_collapsed(self):
        assert clean_description("  RETRAIT   GAB\tCASA ") == "RETRAIT GAB CASA"

    def test_empty(self):
        assert clean_description("") == ""
