from __future__ import annotations

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, CategoryBreakdownEntry, CategoryPerformanceEntry
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class CategoryBreakdownTool(AnalyticsTool):
    name = "ledger.category_breakdown"
    description = (
        "Spending per category (total, count, average, share of total) sorted by total. "
        "Honours startDate/endDate, categoryId and period filters."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[CategoryBreakdownEntry]:
        return service.get_spending_by_category(query)


@register_tool
class CategoryPerformanceTool(AnalyticsTool):
    name = "ledger.category_performance"
    description = "Categories ranked by spend with their percentage of the filtered total."

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[CategoryPerformanceEntry]:
        return service.compare_category_performance(query)
