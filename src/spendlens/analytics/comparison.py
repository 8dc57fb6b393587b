from __future__ import annotations

from datetime import date
from typing import Sequence

from spendlens.analytics.filters import filter_expenses
from spendlens.domain.errors import UsageError
from spendlens.domain.models import ChangeDirection, ExpenseRecord
from spendlens.domain.schemas import DateRange, PeriodChange, PeriodComparison, PeriodTotals


def _period_totals(expenses: Sequence[ExpenseRecord]) -> tuple[float, PeriodTotals]:
    total = sum(expense.amount for expense in expenses)
    count = len(expenses)
    return total, PeriodTotals(
        total=round(total, 2),
        count=count,
        average=round(total / count, 2) if count > 0 else 0.0,
    )


def compare_periods(
    expenses: Sequence[ExpenseRecord],
    today: date,
    current: DateRange | None,
    previous: DateRange | None,
) -> PeriodComparison:
    if current is None or previous is None:
        raise UsageError("currentPeriod and previousPeriod are required")

    current_total, current_totals = _period_totals(
        filter_expenses(expenses, today, start_date=current.start_date, end_date=current.end_date)
    )
    previous_total, previous_totals = _period_totals(
        filter_expenses(expenses, today, start_date=previous.start_date, end_date=previous.end_date)
    )

    change_amount = current_total - previous_total
    # No baseline spending: report 0 rather than an infinite change.
    change_percentage = (change_amount / previous_total) * 100 if previous_total > 0 else 0.0
    if change_amount > 0:
        direction = ChangeDirection.INCREASE
    elif change_amount < 0:
        direction = ChangeDirection.DECREASE
    else:
        direction = ChangeDirection.NO_CHANGE

    return PeriodComparison(
        current=current_totals,
        previous=previous_totals,
        change=PeriodChange(
            amount=round(change_amount, 2),
            percentage=round(change_percentage, 2),
            direction=direction,
        ),
    )


def classify_period(start_date: str, end_date: str) -> str:
    span_days = (date.fromisoformat(end_date) - date.fromisoformat(start_date)).days
    if span_days <= 1:
        return "day"
    if span_days <= 7:
        return "week"
    if span_days <= 31:
        return "month"
    if span_days <= 365:
        return "year"
    return "custom"
