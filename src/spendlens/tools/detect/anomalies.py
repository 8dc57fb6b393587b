from __future__ import annotations

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery, Anomaly
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class AnomaliesTool(AnalyticsTool):
    name = "detect.anomalies"
    description = (
        "Flag expenses above 3x the average of the filtered set (needs at least 5 expenses). "
        "Most extreme first."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> list[Anomaly]:
        return service.detect_anomalies(query)
