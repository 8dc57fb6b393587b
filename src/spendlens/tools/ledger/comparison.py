from __future__ import annotations

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, PeriodComparison
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class ComparePeriodsTool(AnalyticsTool):
    name = "compare.periods"
    description = (
        "Compare total, count and average between `currentPeriod` and `previousPeriod`, "
        "each given as {startDate, endDate}."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> PeriodComparison:
        return service.compare_periods(query)
