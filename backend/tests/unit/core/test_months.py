"""
Unit Tests for month label helpers
"""
from datetime import date

from app.utils.months import (
    financial_year_months,
    financial_year_range,
    labels_for_dates,
    month_sort_key,
    parse_month_label,
    previous_month,
    quarter_range,
    reporting_month,
    to_number,
)


class TestMonthLabels:

    def test_parse(self):
        assert parse_month_label("SEP 2025") == (2025, 9)
        assert parse_month_label(" jan 2024 ") == (2024, 1)

    def test_reporting_month_is_previous_calendar_month(self):
        assert reporting_month(date(2025, 10, 15)) == "SEP 2025"
        assert reporting_month(date(2025, 1, 1)) == "DEC 2024"

    def test_previous_month_wraps_year(self):
        assert previous_month("JAN 2025") == "DEC 2024"
        assert previous_month("SEP 2025") == "AUG 2025"

    def test_sort_key_orders_chronologically(self):
        labels = ["JAN 2025", "DEC 2024", "MAR 2025"]

        assert sorted(labels, key=month_sort_key) == ["DEC 2024", "JAN 2025", "MAR 2025"]

    def test_sort_key_unparseable_label(self):
        assert month_sort_key("N/A") == (0, 0)


class TestFinancialYear:

    def test_april_start(self):
        assert financial_year_months("JUN 2025") == ["APR 2025", "MAY 2025", "JUN 2025"]

    def test_april_start_crossing_calendar_year(self):
        months = financial_year_months("FEB 2025")

        assert months[0] == "APR 2024"
        assert months[-1] == "FEB 2025"
        assert len(months) == 11

    def test_january_start(self):
        assert financial_year_months("MAR 2025", start_jan=True) == ["JAN 2025", "FEB 2025", "MAR 2025"]

    def test_financial_year_range(self):
        assert financial_year_range("2024-25") == (date(2024, 4, 1), date(2025, 3, 31))

    def test_quarters(self):
        assert quarter_range("2024-25", "Q1") == (date(2024, 4, 1), date(2024, 6, 30))
        assert quarter_range("2024-25", "Q3") == (date(2024, 10, 1), date(2024, 12, 31))
        assert quarter_range("2024-25", "Q4") == (date(2025, 1, 1), date(2025, 3, 31))

    def test_labels_for_dates(self):
        assert labels_for_dates(date(2024, 11, 20), date(2025, 1, 3)) == ["NOV 2024", "DEC 2024", "JAN 2025"]


class TestToNumber:

    def test_numeric_values(self):
        assert to_number("12") == 12.0
        assert to_number("1,250.5") == 1250.5
        assert to_number(3) == 3.0

    def test_non_numeric_values(self):
        assert to_number(None) is None
        assert to_number("Yes") is None
        assert to_number("2025-01-01") is None

    def test_non_finite_values(self):
        assert to_number("nan") is None
        assert to_number("inf") is None
        assert to_number("-Infinity") is None
