from __future__ import annotations

from calendar import monthrange
from datetime import date
from typing import Mapping, Sequence

from spendlens.analytics.filters import month_bounds, month_key, parse_month
from spendlens.analytics.summary import UNKNOWN_CATEGORY_NAME
from spendlens.domain.errors import NotFoundError, UsageError
from spendlens.domain.models import BudgetHealth, BudgetRecord, BudgetStatus, CategoryRecord, ExpenseRecord
from spendlens.domain.schemas import BudgetAnalysis, BudgetProjection
from spendlens.infrastructure.snapshot import LedgerSnapshot

NEAR_LIMIT_THRESHOLD = 80.0
DANGER_THRESHOLD = 100.0


def budget_status(budget: BudgetRecord, today: date) -> BudgetStatus:
    if not budget.is_active:
        return BudgetStatus.INACTIVE
    if today.isoformat() < budget.start_date:
        return BudgetStatus.UPCOMING
    if today.isoformat() > budget.end_date:
        return BudgetStatus.EXPIRED
    return BudgetStatus.ACTIVE


def budget_health(utilization: float) -> BudgetHealth:
    if utilization >= DANGER_THRESHOLD:
        return BudgetHealth.DANGER
    if utilization >= NEAR_LIMIT_THRESHOLD:
        return BudgetHealth.WARNING
    return BudgetHealth.GOOD


def days_remaining(budget: BudgetRecord, today: date) -> int:
    # Negative once the budget has expired.
    return (date.fromisoformat(budget.end_date) - today).days


def is_currently_active(budget: BudgetRecord, today: date) -> bool:
    return budget_status(budget, today) == BudgetStatus.ACTIVE


def budget_expenses(budget: BudgetRecord, expenses: Sequence[ExpenseRecord]) -> list[ExpenseRecord]:
    return [
        expense
        for expense in expenses
        if expense.category_id == budget.category_id and budget.start_date <= expense.date <= budget.end_date
    ]


def analyze_budget(
    budget: BudgetRecord,
    expenses: Sequence[ExpenseRecord],
    categories: Mapping[str, CategoryRecord],
    today: date,
    near_limit_threshold: float = NEAR_LIMIT_THRESHOLD,
) -> BudgetAnalysis:
    # The stored `spent` field is not trusted; recompute from the ledger.
    spent = sum(expense.amount for expense in budget_expenses(budget, expenses))
    utilization = (spent / budget.amount) * 100 if budget.amount > 0 else 0.0
    is_over = spent > budget.amount
    category = categories.get(budget.category_id)

    return BudgetAnalysis(
        budget_id=budget.id,
        category_id=budget.category_id,
        category_name=category.name if category else UNKNOWN_CATEGORY_NAME,
        budget_amount=budget.amount,
        spent_amount=spent,
        remaining_amount=max(0.0, budget.amount - spent),
        utilization_percentage=utilization,
        percentage_used=utilization,
        status=budget_status(budget, today),
        health=budget_health(utilization),
        days_remaining=days_remaining(budget, today),
        is_over_budget=is_over,
        is_near_limit=utilization >= near_limit_threshold,
        overage_amount=spent - budget.amount if is_over else 0.0,
        period=budget.period,
        start_date=budget.start_date,
        end_date=budget.end_date,
    )


def _select_budgets(
    snapshot: LedgerSnapshot,
    today: date,
    category_id: str | None,
    month: str | None,
) -> list[BudgetRecord]:
    budgets = [budget for budget in snapshot.budgets if is_currently_active(budget, today)]
    if category_id:
        budgets = [budget for budget in budgets if budget.category_id == category_id]
    if month:
        prefix = month_key(*parse_month(month)) + "-"
        budgets = [budget for budget in budgets if budget.start_date.startswith(prefix)]
    return budgets


def analyze_budgets(
    snapshot: LedgerSnapshot,
    today: date,
    category_id: str | None = None,
    month: str | None = None,
) -> list[BudgetAnalysis]:
    """Analyze currently active budgets, highest utilization first."""
    categories = snapshot.category_map()
    analysis = [
        analyze_budget(budget, snapshot.expenses, categories, today)
        for budget in _select_budgets(snapshot, today, category_id, month)
    ]
    return sorted(analysis, key=lambda item: item.utilization_percentage, reverse=True)


def analyze_category_budget(
    snapshot: LedgerSnapshot,
    today: date,
    category_id: str,
    month: str | None = None,
) -> BudgetAnalysis | None:
    analysis = analyze_budgets(snapshot, today, category_id=category_id, month=month)
    return analysis[0] if analysis else None


def project_budget(
    snapshot: LedgerSnapshot,
    today: date,
    category_id: str | None,
    month: str | None,
) -> BudgetProjection:
    """Burn-rate forecast of a category's spending to the end of `month`."""
    if not category_id or not month:
        raise UsageError("categoryId and month are required for budget projection")

    year, month_number = parse_month(month)
    analysis = analyze_category_budget(snapshot, today, category_id, month)
    if analysis is None:
        raise NotFoundError(f"No budget found for category {category_id!r} in {month}")

    budget_amount = analysis.budget_amount
    days_in_month = monthrange(year, month_number)[1]
    month_start, month_end = month_bounds(year, month_number)
    expenses = [
        expense
        for expense in snapshot.expenses
        if expense.category_id == category_id and month_start <= expense.date <= month_end
    ]

    if not expenses:
        return BudgetProjection(
            budget_amount=budget_amount,
            current_spent=0.0,
            daily_average=0.0,
            projected_total=0.0,
            will_exceed_budget=False,
            projected_overage=0.0,
            days_remaining=days_in_month,
            recommended_daily_spend=round(budget_amount / days_in_month, 2),
        )

    total_spent = sum(expense.amount for expense in expenses)
    # Burn rate is measured over days that have spending, not elapsed days.
    days_with_expenses = len({expense.date for expense in expenses})
    daily_average = total_spent / days_with_expenses
    projected_total = round(daily_average * days_in_month, 2)
    # Decided on the reported (rounded) total so the flag never contradicts it.
    will_exceed = projected_total > budget_amount
    projected_overage = projected_total - budget_amount if will_exceed else 0.0

    remaining_days = max(0, days_in_month - today.day)
    remaining_budget = max(0.0, budget_amount - total_spent)

    return BudgetProjection(
        budget_amount=budget_amount,
        current_spent=total_spent,
        daily_average=round(daily_average, 2),
        projected_total=projected_total,
        will_exceed_budget=will_exceed,
        projected_overage=round(projected_overage, 2),
        days_remaining=remaining_days,
        recommended_daily_spend=round(remaining_budget / remaining_days, 2) if remaining_days > 0 else 0.0,
    )
