from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, timedelta
from typing import Iterable

from spendlens.domain.errors import UsageError
from spendlens.domain.models import ExpenseRecord, FilterPeriod

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(month: str) -> tuple[int, int]:
    match = _MONTH_RE.match(str(month or "").strip())
    if match is None:
        raise UsageError(f"month must be in YYYY-MM format, got {month!r}")
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12:
        raise UsageError(f"month number must be 1-12, got {month!r}")
    return year, month_number


def shift_month(year: int, month_number: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month_number - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month_number: int) -> tuple[str, str]:
    start = date(year, month_number, 1)
    end = date(year, month_number, monthrange(year, month_number)[1])
    return start.isoformat(), end.isoformat()


def month_key(year: int, month_number: int) -> str:
    return f"{year:04d}-{month_number:02d}"


def expenses_in_month(expenses: Iterable[ExpenseRecord], year: int, month_number: int) -> list[ExpenseRecord]:
    # Matches on the record's own calendar month; "YYYY-MM" prefix of a fixed-width date.
    prefix = month_key(year, month_number) + "-"
    return [expense for expense in expenses if expense.date.startswith(prefix)]


def filter_expenses(
    expenses: Iterable[ExpenseRecord],
    today: date,
    start_date: str | None = None,
    end_date: str | None = None,
    category_id: str | None = None,
    period: FilterPeriod | str | None = None,
) -> list[ExpenseRecord]:
    """
    Narrow an expense set. Dates are compared as YYYY-MM-DD strings, which order
    correctly because the format is zero-padded and fixed width.

    Explicit bounds and `period` both apply when given. The input is never
    mutated; an empty result is a normal outcome.
    """
    filtered = list(expenses)

    if start_date:
        filtered = [e for e in filtered if e.date >= start_date]
    if end_date:
        filtered = [e for e in filtered if e.date <= end_date]

    if category_id:
        filtered = [e for e in filtered if e.category_id == category_id]

    if period:
        try:
            period = FilterPeriod(period)
        except ValueError as exc:
            raise UsageError(f"period must be one of {[p.value for p in FilterPeriod]}, got {period!r}") from exc

        if period == FilterPeriod.TODAY:
            filtered = [e for e in filtered if e.date == today.isoformat()]
        elif period == FilterPeriod.WEEK:
            week_ago = (today - timedelta(days=7)).isoformat()
            filtered = [e for e in filtered if e.date > week_ago]
        elif period == FilterPeriod.MONTH:
            filtered = expenses_in_month(filtered, today.year, today.month)
        elif period == FilterPeriod.YEAR:
            prefix = f"{today.year:04d}-"
            filtered = [e for e in filtered if e.date.startswith(prefix)]

    return filtered
