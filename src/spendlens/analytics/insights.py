from __future__ import annotations

from datetime import date
from typing import Sequence

from spendlens.analytics._formatting import format_amount
from spendlens.analytics.budgets import analyze_budgets
from spendlens.analytics.filters import expenses_in_month, shift_month
from spendlens.analytics.summary import build_category_breakdown
from spendlens.analytics.trends import build_monthly_trends
from spendlens.domain.models import PRIORITY_ORDER, Priority
from spendlens.domain.schemas import BudgetAnalysis, Insight
from spendlens.infrastructure.snapshot import LedgerSnapshot

HIGH_CATEGORY_SHARE = 40.0
DOMINANT_CATEGORY_SHARE = 60.0
TREND_CHANGE_PCT = 20.0
SHARP_TREND_CHANGE_PCT = 50.0
NEAR_LIMIT_HIGH_PCT = 90.0
UNDER_BUDGET_PCT = 50.0
UNDER_BUDGET_DAYS_LEFT = 7
PATTERN_MONTHS = 6
PATTERN_MIN_MONTHS = 3
PATTERN_DEVIATION_PCT = 30.0
PATTERN_HIGH_DEVIATION_PCT = 50.0


def high_spending_category_insights(snapshot: LedgerSnapshot, today: date) -> list[Insight]:
    current = expenses_in_month(snapshot.expenses, today.year, today.month)
    breakdown = build_category_breakdown(current, snapshot.category_map())
    if not breakdown:
        return []

    top = breakdown[0]
    if top.percentage <= HIGH_CATEGORY_SHARE:
        return []
    return [
        Insight(
            id=f"insight-high-spending-{top.category_id}",
            type="high_spending_category",
            title=f"High {top.category_name} Spending",
            description=f"{top.category_name} accounts for {top.percentage:.1f}% of your spending this month",
            priority=Priority.HIGH if top.percentage > DOMINANT_CATEGORY_SHARE else Priority.MEDIUM,
            actionable=True,
            data={
                "categoryId": top.category_id,
                "categoryName": top.category_name,
                "percentage": top.percentage,
                "amount": top.total,
            },
        )
    ]


def spending_trend_insights(snapshot: LedgerSnapshot, today: date) -> list[Insight]:
    current = expenses_in_month(snapshot.expenses, today.year, today.month)
    previous = expenses_in_month(snapshot.expenses, *shift_month(today.year, today.month, -1))
    if not current or not previous:
        return []

    current_total = sum(expense.amount for expense in current)
    previous_total = sum(expense.amount for expense in previous)
    change = ((current_total - previous_total) / previous_total) * 100
    if abs(change) <= TREND_CHANGE_PCT:
        return []

    increased = change > 0
    return [
        Insight(
            id="insight-spending-trend",
            type="spending_increase" if increased else "spending_decrease",
            title=f"Spending {'Increased' if increased else 'Decreased'}",
            description=(
                f"Your spending has {'increased' if increased else 'decreased'} by "
                f"{abs(change):.1f}% compared to last month"
            ),
            priority=Priority.HIGH if abs(change) > SHARP_TREND_CHANGE_PCT else Priority.MEDIUM,
            actionable=increased,
            data={
                "currentAmount": current_total,
                "previousAmount": previous_total,
                "changePercentage": change,
                "changeAmount": current_total - previous_total,
            },
        )
    ]


def _budget_insight(budget: BudgetAnalysis) -> Insight | None:
    if budget.is_over_budget:
        over_amount = budget.spent_amount - budget.budget_amount
        return Insight(
            id=f"insight-budget-over-{budget.budget_id}",
            type="budget_warning",
            title=f"Over Budget: {budget.category_name}",
            description=f"You've exceeded your {budget.category_name} budget by {format_amount(over_amount)}",
            priority=Priority.HIGH,
            actionable=True,
            data={
                "budgetId": budget.budget_id,
                "categoryId": budget.category_id,
                "categoryName": budget.category_name,
                "budgetAmount": budget.budget_amount,
                "spentAmount": budget.spent_amount,
                "overAmount": over_amount,
            },
        )
    if budget.is_near_limit:
        return Insight(
            id=f"insight-budget-near-{budget.budget_id}",
            type="budget_warning",
            title=f"Budget Warning: {budget.category_name}",
            description=(
                f"You've used {budget.utilization_percentage:.1f}% of your {budget.category_name} budget"
            ),
            priority=Priority.HIGH if budget.utilization_percentage > NEAR_LIMIT_HIGH_PCT else Priority.MEDIUM,
            actionable=True,
            data={
                "budgetId": budget.budget_id,
                "categoryId": budget.category_id,
                "categoryName": budget.category_name,
                "utilizationPercentage": budget.utilization_percentage,
                "remainingAmount": budget.remaining_amount,
            },
        )
    if budget.utilization_percentage < UNDER_BUDGET_PCT and budget.days_remaining < UNDER_BUDGET_DAYS_LEFT:
        return Insight(
            id=f"insight-budget-savings-{budget.budget_id}",
            type="savings_opportunity",
            title=f"Great Budgeting: {budget.category_name}",
            description=(
                f"You're well under budget for {budget.category_name} with "
                f"{format_amount(budget.remaining_amount)} remaining"
            ),
            priority=Priority.LOW,
            actionable=False,
            data={
                "budgetId": budget.budget_id,
                "categoryId": budget.category_id,
                "categoryName": budget.category_name,
                "utilizationPercentage": budget.utilization_percentage,
                "remainingAmount": budget.remaining_amount,
            },
        )
    return None


def budget_insights(snapshot: LedgerSnapshot, today: date) -> list[Insight]:
    insights: list[Insight] = []
    for budget in analyze_budgets(snapshot, today):
        insight = _budget_insight(budget)
        if insight is not None:
            insights.append(insight)
    return insights


def unusual_pattern_insights(snapshot: LedgerSnapshot, today: date) -> list[Insight]:
    trends = build_monthly_trends(snapshot.expenses, today, PATTERN_MONTHS)
    if len(trends) < PATTERN_MIN_MONTHS:
        return []

    average = sum(point.total for point in trends) / len(trends)
    if average == 0:
        return []

    current = trends[-1]
    deviation = ((current.total - average) / average) * 100
    if abs(deviation) <= PATTERN_DEVIATION_PCT:
        return []

    above = deviation > 0
    return [
        Insight(
            id="insight-unusual-pattern",
            type="unusual_pattern",
            title="Unusually High Spending" if above else "Unusually Low Spending",
            description=(
                f"This month's spending is {abs(deviation):.1f}% {'above' if above else 'below'} your average"
            ),
            priority=Priority.HIGH if abs(deviation) > PATTERN_HIGH_DEVIATION_PCT else Priority.MEDIUM,
            actionable=above,
            data={
                "currentAmount": current.total,
                "averageAmount": average,
                "deviationPercentage": deviation,
                "monthlyTrends": [point.to_wire() for point in trends[-3:]],
            },
        )
    ]


def sort_by_priority(insights: Sequence[Insight]) -> list[Insight]:
    return sorted(insights, key=lambda insight: PRIORITY_ORDER[Priority(insight.priority)], reverse=True)


def generate_insights(snapshot: LedgerSnapshot, today: date, compare_months: int = 1) -> list[Insight]:
    """
    Build the insight feed for the month containing `today`.

    Sources, in order: dominant category, month-over-month trend, budget
    warnings, unusual monthly pattern. The combined list is ordered
    high > medium > low; equal priorities keep source order.

    `compare_months` is accepted for callers that pass it; comparison is
    always against the immediately preceding month.
    """
    insights: list[Insight] = []
    insights.extend(high_spending_category_insights(snapshot, today))
    insights.extend(spending_trend_insights(snapshot, today))
    insights.extend(budget_insights(snapshot, today))
    insights.extend(unusual_pattern_insights(snapshot, today))
    return sort_by_priority(insights)
