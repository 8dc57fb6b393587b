from __future__ import annotations

from typing import Any

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, BudgetProjection
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class BudgetAnalysisTool(AnalyticsTool):
    name = "budget.analysis"
    description = (
        "Utilization, remaining amount, status and health of currently active budgets. "
        "With `categoryId` returns that category's budget only (or null)."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> Any:
        return service.get_budget_analysis(query)


@register_tool
class BudgetProjectionTool(AnalyticsTool):
    name = "budget.projection"
    description = (
        "Project month-end spend for one category from its average spending day. "
        "Requires `categoryId` and `month` (YYYY-MM) or `month_number` + `year`."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> BudgetProjection:
        return service.get_budget_projection(query)
