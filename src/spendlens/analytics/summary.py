from __future__ import annotations

from typing import Any, Mapping, Sequence

from spendlens.domain.models import CategoryRecord, ExpenseRecord, FilterPeriod
from spendlens.domain.schemas import (
    CategoryBreakdownEntry,
    CategoryPerformanceEntry,
    DateRange,
    ExpensePayload,
    SpendingSummary,
)

TOP_EXPENSES_LIMIT = 10
UNKNOWN_CATEGORY_NAME = "Unknown Category"
UNKNOWN_CATEGORY_COLOR = "#CCCCCC"
UNKNOWN_CATEGORY_ICON = "help"


def summary_period(start_date: str | None, end_date: str | None, period: Any) -> DateRange | str:
    if start_date and end_date:
        return DateRange(start_date=start_date, end_date=end_date)
    if period is None:
        return FilterPeriod.ALL.value
    return FilterPeriod(period).value


def build_category_breakdown(
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
) -> list[CategoryBreakdownEntry]:
    totals: dict[str, float] = {}
    counts: dict[str, int] = {}
    for expense in expenses:
        totals[expense.category_id] = totals.get(expense.category_id, 0.0) + expense.amount
        counts[expense.category_id] = counts.get(expense.category_id, 0) + 1

    total_spent = sum(expense.amount for expense in expenses)

    breakdown: list[CategoryBreakdownEntry] = []
    for category_id, total in totals.items():
        category = categories.get(category_id)
        count = counts[category_id]
        percentage = (total / total_spent) * 100 if total_spent > 0 else 0.0
        breakdown.append(
            CategoryBreakdownEntry(
                category_id=category_id,
                category_name=category.name if category else UNKNOWN_CATEGORY_NAME,
                category_color=category.color if category else UNKNOWN_CATEGORY_COLOR,
                category_icon=category.icon if category else UNKNOWN_CATEGORY_ICON,
                total=round(total, 2),
                count=count,
                percentage=round(percentage, 2),
                average=round(total / count, 2),
            )
        )

    # sorted() is stable, so equal totals keep discovery order.
    return sorted(breakdown, key=lambda entry: entry.total, reverse=True)


def build_category_performance(
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
) -> list[CategoryPerformanceEntry]:
    return [
        CategoryPerformanceEntry(
            category_id=entry.category_id,
            category_name=entry.category_name,
            total=entry.total,
            count=entry.count,
            average=entry.average,
            percentage_of_total=entry.percentage,
            rank=index + 1,
        )
        for index, entry in enumerate(build_category_breakdown(expenses, categories))
    ]


def top_expenses(expenses: Sequence[ExpenseRecord], limit: int = TOP_EXPENSES_LIMIT) -> list[ExpensePayload]:
    ranked = sorted(expenses, key=lambda expense: expense.amount, reverse=True)
    return [ExpensePayload.from_record(expense) for expense in ranked[:limit]]


def build_spending_summary(
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
    period: DateRange | str = FilterPeriod.ALL.value,
) -> SpendingSummary:
    if not expenses:
        return SpendingSummary(period=period)

    total = sum(expense.amount for expense in expenses)
    count = len(expenses)
    # Divides by the number of distinct days that have an expense, not by the span of the period.
    distinct_days = len({expense.date for expense in expenses})
    daily_average = total / distinct_days if distinct_days else 0.0

    return SpendingSummary(
        total=round(total, 2),
        count=count,
        average=round(total / count, 2),
        daily_average=round(daily_average, 2),
        category_breakdown=build_category_breakdown(expenses, categories),
        top_expenses=top_expenses(expenses),
        period=period,
    )
