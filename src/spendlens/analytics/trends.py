from __future__ import annotations

from calendar import month_name
from datetime import date
from typing import Sequence

from spendlens.analytics.filters import expenses_in_month, month_key, shift_month
from spendlens.domain.errors import UsageError
from spendlens.domain.models import ExpenseRecord
from spendlens.domain.schemas import DailyTrendPoint, MonthlyTrendPoint

DEFAULT_TREND_MONTHS = 12


def build_daily_trends(expenses: Sequence[ExpenseRecord]) -> list[DailyTrendPoint]:
    daily_totals: dict[str, float] = {}
    for expense in expenses:
        daily_totals[expense.date] = daily_totals.get(expense.date, 0.0) + expense.amount

    points = [DailyTrendPoint(date=day, total=round(total, 2)) for day, total in daily_totals.items()]
    return sorted(points, key=lambda point: point.date)


def build_monthly_trends(
    expenses: Sequence[ExpenseRecord],
    today: date,
    months: int = DEFAULT_TREND_MONTHS,
) -> list[MonthlyTrendPoint]:
    """One point per calendar month, oldest first, ending with the current month.

    Months without expenses are emitted with zero totals so the series is
    always `months` long and contiguous.
    """
    if months < 1:
        raise UsageError(f"months must be >= 1, got {months}")

    trends: list[MonthlyTrendPoint] = []
    for offset in range(months - 1, -1, -1):
        year, month_number = shift_month(today.year, today.month, -offset)
        month_expenses = expenses_in_month(expenses, year, month_number)
        total = sum(expense.amount for expense in month_expenses)
        count = len(month_expenses)
        trends.append(
            MonthlyTrendPoint(
                month=month_key(year, month_number),
                year=year,
                month_number=month_number,
                month_name=month_name[month_number],
                total=round(total, 2),
                count=count,
                average=round(total / count, 2) if count > 0 else 0.0,
            )
        )
    return trends
