"""Calendar helpers for the month navigator and the business-days card.

Months are zero-indexed here, like GoalRecord.month.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

MONTH_NAMES_PT = (
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
)

SUNDAY = 6


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """(first day, first day of next month)."""
    first = date(year, month + 1, 1)
    _, days = calendar.monthrange(year, month + 1)
    return first, first + timedelta(days=days)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    total = year * 12 + month + delta
    return total // 12, total % 12


def month_label(year: int, month: int) -> str:
    return f"{MONTH_NAMES_PT[month]} {year}"


def remaining_business_days(year: int, month: int, today: date) -> int:
    """Monday–Saturday days left in the month, counting `today`.

    Past months have none left; future months count in full.
    """
    first, end_exclusive = month_bounds(year, month)
    start = max(first, today)
    if start >= end_exclusive:
        return 0
    return sum(
        1
        for offset in range((end_exclusive - start).days)
        if (start + timedelta(days=offset)).weekday() != SUNDAY
    )
