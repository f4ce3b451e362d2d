"""Calendar-month helpers shared by the analyzer and the engine."""

import calendar
from datetime import date


def shift_month(day: date, months: int) -> date:
    """First day of the month `months` away from `day` (negative goes back)."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month
