from __future__ import annotations

from spendlens.analytics.filters import month_bounds, parse_month
from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, DailyTrendPoint, MonthlyTrendPoint, SpendingSummary
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class SpendingSummaryTool(AnalyticsTool):
    name = "ledger.spending_summary"
    description = (
        "Totals, averages, per-category breakdown and the ten largest expenses. "
        "Use `month_number` + `year`, `startDate`/`endDate`, or `period` (today|week|month|year|all)."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> SpendingSummary:
        # A bare month narrows the summary to that calendar month.
        if query.month and not (query.start_date or query.end_date):
            start, end = month_bounds(*parse_month(query.month))
            query = query.model_copy(update={"start_date": start, "end_date": end})
        return service.get_spending_summary(query)


@register_tool
class DailyTrendsTool(AnalyticsTool):
    name = "trends.daily"
    description = "Total spent per calendar date, oldest first, for the filtered expenses."

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[DailyTrendPoint]:
        return service.get_daily_trends(query)


@register_tool
class MonthlyTrendsTool(AnalyticsTool):
    name = "trends.monthly"
    description = "Zero-filled monthly totals for the last `months` months (default 12) ending this month."

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[MonthlyTrendPoint]:
        return service.get_monthly_trends(query.months)
