"""Tests for potsettle.dates pure functions."""

from datetime import date

import pytest

from potsettle.dates import current_month, month_label, parse_month
from potsettle.domain.models import Month


class TestParseMonth:
    """Tests for parse_month."""

    def test_valid_month(self) -> None:
        """Should accept YYYY-MM."""
        assert parse_month("2025-01") == Month("2025-01")

    def test_normalizes_single_digit_month(self) -> None:
        """Should pad the month number."""
        assert parse_month(" 2025-3 ") == Month("2025-03")

    @pytest.mark.parametrize("value", ["2025-13", "2025-00", "January", "2025/01", "", "2025-01-15"])
    def test_invalid_month(self, value: str) -> None:
        """Should raise ValueError for anything that is not a year and month."""
        with pytest.raises(ValueError):
            parse_month(value)


class TestMonthLabel:
    """Tests for month_label."""

    def test_january(self) -> None:
        """Should spell out the month name."""
        assert month_label(Month("2025-01")) == "January 2025"

    def test_december(self) -> None:
        """Should handle the last month of the year."""
        assert month_label(Month("2024-12")) == "December 2024"


class TestCurrentMonth:
    """Tests for current_month."""

    def test_given_date(self) -> None:
        """Should return the month containing the given date."""
        assert current_month(date(2024, 2, 29)) == Month("2024-02")

    def test_today(self) -> None:
        """Should default to today's month."""
        assert current_month() == Month(date.today().strftime("%Y-%m"))
