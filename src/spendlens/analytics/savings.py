from __future__ import annotations

import math
from typing import Mapping, Sequence

from spendlens.analytics._formatting import format_amount
from spendlens.analytics.summary import build_category_breakdown
from spendlens.domain.models import CategoryRecord, ExpenseRecord
from spendlens.domain.schemas import SavingsRecommendation

SMALL_EXPENSE_LIMIT = 25.0
SMALL_EXPENSE_MIN_COUNT = 5
SMALL_EXPENSE_SAVINGS_RATE = 0.3
MIN_MONTHLY_SAVINGS = 10.0
PROJECTION_DAYS = 30
HIGH_CATEGORY_SHARE = 40.0
HIGH_CATEGORY_SAVINGS_RATE = 0.15


def _frequent_small_expenses(expenses: Sequence[ExpenseRecord]) -> list[SavingsRecommendation]:
    groups: dict[tuple[str, int], dict[str, float]] = {}
    for expense in expenses:
        if expense.amount >= SMALL_EXPENSE_LIMIT:
            continue
        key = (expense.category_id, math.floor(expense.amount))
        group = groups.setdefault(key, {"count": 0, "total": 0.0})
        group["count"] += 1
        group["total"] += expense.amount

    recommendations: list[SavingsRecommendation] = []
    for (category_id, _), group in groups.items():
        count = int(group["count"])
        if count < SMALL_EXPENSE_MIN_COUNT:
            continue
        # Scaled by the size of the whole filtered set, not by elapsed days.
        monthly_projection = group["total"] * (PROJECTION_DAYS / len(expenses))
        potential_savings = monthly_projection * SMALL_EXPENSE_SAVINGS_RATE
        if potential_savings <= MIN_MONTHLY_SAVINGS:
            continue
        average = group["total"] / count
        recommendations.append(
            SavingsRecommendation(
                type="frequent_small_expenses",
                category=category_id,
                description=(
                    f"You have {count} small expenses averaging ${average:.2f}. "
                    "Consider budgeting or bulk purchasing."
                ),
                potential_savings=round(potential_savings, 2),
                frequency=count,
                average_amount=round(average, 2),
                total_amount=round(group["total"], 2),
            )
        )
    return recommendations


def _high_category_spending(
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
) -> list[SavingsRecommendation]:
    return [
        SavingsRecommendation(
            type="high_category_spending",
            category=entry.category_id,
            description=(
                f"{entry.category_name} accounts for {format_amount(entry.percentage)}% of your spending. "
                "Consider reviewing these expenses."
            ),
            potential_savings=round(entry.total * HIGH_CATEGORY_SAVINGS_RATE, 2),
            current_spending=entry.total,
            percentage=entry.percentage,
        )
        for entry in build_category_breakdown(expenses, categories)
        if entry.percentage > HIGH_CATEGORY_SHARE
    ]


def recommend_savings(
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
) -> list[SavingsRecommendation]:
    if not expenses:
        return []
    recommendations = _frequent_small_expenses(expenses) + _high_category_spending(expenses, categories)
    return sorted(recommendations, key=lambda item: item.potential_savings, reverse=True)
