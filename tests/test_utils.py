"""Tests for utility functions."""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from zerobudget.utils import clean_description, parse_amount, parse_date, read_file, to_date


class TestParseDate:
    """Tests for parse_date function."""

    def test_yyyy_mm_dd(self) -> None:
        """Test YYYY-MM-DD format."""
        assert parse_date("2024-07-15") == datetime(2024, 7, 15)

    def test_iso_with_time(self) -> None:
        """Test ISO timestamps with and without the T separator."""
        assert parse_date("2024-07-15T09:30:00") == datetime(2024, 7, 15, 9, 30)
        assert parse_date("2024-07-15 09:30:00") == datetime(2024, 7, 15, 9, 30)

    def test_mm_dd_yyyy(self) -> None:
        """Test MM/DD/YYYY format."""
        assert parse_date("07/15/2024") == datetime(2024, 7, 15)

    def test_dd_mmm_yyyy(self) -> None:
        """Test DD MMM YYYY format."""
        assert parse_date("15 Jul 2024") == datetime(2024, 7, 15)
        assert parse_date("15 July 2024") == datetime(2024, 7, 15)

    def test_quoted_date(self) -> None:
        """Test date with quotes."""
        assert parse_date('"2024-07-15"') == datetime(2024, 7, 15)

    def test_empty_string(self) -> None:
        """Test empty string returns None."""
        assert parse_date("") is None
        assert parse_date("   ") is None

    def test_invalid_date(self) -> None:
        """Test invalid date returns None."""
        assert parse_date("not a date") is None
        assert parse_date("2024-02-30") is None


class TestParseAmount:
    """Tests for parse_amount function."""

    def test_simple_amount(self) -> None:
        """Test simple numeric amount."""
        assert parse_amount("123.45") == Decimal("123.45")
        assert parse_amount("100") == Decimal("100")

    def test_negative_amount(self) -> None:
        """Test negative amount."""
        assert parse_amount("-123.45") == Decimal("-123.45")

    def test_parentheses_negative(self) -> None:
        """Test accounting style negatives."""
        assert parse_amount("(50.00)") == Decimal("-50.00")

    def test_thousands_separator(self) -> None:
        """Test amount with thousands separator."""
        assert parse_amount("1,234.56") == Decimal("1234.56")
        assert parse_amount("1,234,567.89") == Decimal("1234567.89")

    def test_currency_symbols_and_codes(self) -> None:
        """Test currency markers are stripped."""
        assert parse_amount("$1,234.56") == Decimal("1234.56")
        assert parse_amount("USD 12.00") == Decimal("12.00")
        assert parse_amount("€5") == Decimal("5")

    def test_currency_code_after_amount(self) -> None:
        """Test a trailing currency code is stripped."""
        assert parse_amount("12.00 USD") == Decimal("12.00")
        assert parse_amount("(1,234.56 SGD)") == Decimal("-1234.56")

    def test_letters_touching_digits_rejected(self) -> None:
        """Test capital letters are only stripped as a separate currency code."""
        assert parse_amount("ABC12") is None
        assert parse_amount("12ABC") is None
        assert parse_amount("1ABC2") is None

    def test_comma_decimal_separator(self) -> None:
        """Test European style formats."""
        assert parse_amount("1.234,56", decimal_separator=",") == Decimal("1234.56")
        assert parse_amount("1 234,56", decimal_separator=",") == Decimal("1234.56")

    def test_rejects_special_values(self) -> None:
        """Test NaN, infinity and exponents are not amounts."""
        assert parse_amount("NaN") is None
        assert parse_amount("Infinity") is None
        assert parse_amount("1e5") is None

    def test_invalid_amount(self) -> None:
        """Test invalid amounts return None."""
        assert parse_amount("") is None
        assert parse_amount("abc") is None
        assert parse_amount("(-5)") is None


class TestCleanDescription:
    """Tests for clean_description function."""

    def test_collapses_whitespace(self) -> None:
        """Test runs of whitespace and newlines become single spaces."""
        assert clean_description("  Coffee\n  shop\tdowntown ") == "Coffee shop downtown"


class TestToDate:
    """Tests for to_date function."""

    def test_datetime_and_date(self) -> None:
        """Test both date and datetime inputs."""
        assert to_date(datetime(2024, 7, 15, 12)) == date(2024, 7, 15)
        assert to_date(date(2024, 7, 15)) == date(2024, 7, 15)


class TestReadFile:
    """Tests for read_file function."""

    def test_reads_utf8_with_bom(self, tmp_path: Path) -> None:
        """Test a BOM is stripped from CSV text."""
        path = tmp_path / "export.csv"
        path.write_bytes("\ufeffDate,Amount\n2024-07-01,5\n".encode())

        assert read_file(path).startswith("Date,Amount")

    def test_falls_back_to_latin1(self, tmp_path: Path) -> None:
        """Test non-UTF-8 bytes are still decoded."""
        path = tmp_path / "export.csv"
        path.write_bytes(b"Description\nCaf\xe9\n")

        assert "Caf\xe9" in read_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing files raise ValueError."""
        with pytest.raises(ValueError, match="File not found"):
            read_file(tmp_path / "missing.csv")
