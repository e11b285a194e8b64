"""
Month label helpers.

Statistics are keyed by an upper-case month label such as "SEP 2025".
The reporting month is the previous calendar month; the financial year
runs April to March unless a topic starts its year in January.
"""
import math
from datetime import date
from typing import List, Optional, Tuple

MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

FIN_YEAR_START_MONTH = 4


def month_label(year: int, month: int) -> str:
    return f"{MONTHS[month - 1]} {year}"


def parse_month_label(label: str) -> Tuple[int, int]:
    """'SEP 2025' -> (2025, 9)"""
    name, year = label.strip().upper().split()
    return int(year), MONTHS.index(name) + 1


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def reporting_month(today: Optional[date] = None) -> str:
    today = today or date.today()
    return month_label(*shift_month(today.year, today.month, -1))


def previous_month(label: str) -> str:
    return month_label(*shift_month(*parse_month_label(label), -1))


def month_sort_key(label: str) -> Tuple[int, int]:
    try:
        return parse_month_label(label)
    except (ValueError, IndexError):
        return (0, 0)


def months_between(start: Tuple[int, int], end: Tuple[int, int]) -> List[str]:
    """Inclusive list of labels from (year, month) to (year, month)"""
    labels = []
    year, month = start
    while (year, month) <= end:
        labels.append(month_label(year, month))
        year, month = shift_month(year, month, 1)
    return labels


def financial_year_months(label: str, start_jan: bool = False) -> List[str]:
    """Labels from the start of the label's financial year up to the label"""
    year, month = parse_month_label(label)
    if start_jan:
        start = (year, 1)
    else:
        start = (year if month >= FIN_YEAR_START_MONTH else year - 1, FIN_YEAR_START_MONTH)
    return months_between(start, (year, month))


def financial_year_range(financial_year: str) -> Tuple[date, date]:
    """'2024-25' -> (2024-04-01, 2025-03-31)"""
    start_year = int(financial_year.split("-")[0])
    return date(start_year, 4, 1), date(start_year + 1, 3, 31)


def quarter_range(financial_year: str, quarter: str) -> Tuple[date, date]:
    """Q1 Apr-Jun, Q2 Jul-Sep, Q3 Oct-Dec, Q4 Jan-Mar of the financial year"""
    start_year = int(financial_year.split("-")[0])
    index = int(quarter.upper().lstrip("Q")) - 1
    first_year, first_month = shift_month(start_year, FIN_YEAR_START_MONTH, index * 3)
    last_year, last_month = shift_month(first_year, first_month, 2)
    return date(first_year, first_month, 1), _month_end(last_year, last_month)


def _month_end(year: int, month: int) -> date:
    next_year, next_month = shift_month(year, month, 1)
    return date.fromordinal(date(next_year, next_month, 1).toordinal() - 1)


def labels_for_dates(start: date, end: date) -> List[str]:
    return months_between((start.year, start.month), (end.year, end.month))


def to_number(value) -> Optional[float]:
    """Numeric statistic value, or None for text, dates and Yes/No answers"""
    if value is None:
        return None
    try:
        number = float(str(value).strip().replace(",", ""))
    except ValueError:
        return None
    return number if math.isfinite(number) else None
