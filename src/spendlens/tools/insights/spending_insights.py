from __future__ import annotations

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, Insight, SavingsRecommendation
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class SpendingInsightsTool(AnalyticsTool):
    name = "insights.spending"
    description = (
        "Rule-based observations: dominant categories, month-over-month change, "
        "budget warnings and unusual months. Highest priority first."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[Insight]:
        return service.get_spending_insights(query)


@register_tool
class SavingsRecommendationsTool(AnalyticsTool):
    name = "recommend.savings"
    description = "Estimated monthly savings from frequent small purchases and dominant categories."

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[SavingsRecommendation]:
        return service.get_savings_recommendations(query)
