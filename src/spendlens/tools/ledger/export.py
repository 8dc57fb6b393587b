from __future__ import annotations

from typing import Any

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.schemas import AnalyticsQuery
from spendlens.tools._analytics_support import AnalyticsTool
from spendlens.tools.registry import register_tool


@register_tool
class ExportAnalyticsTool(AnalyticsTool):
    name = "export.analytics"
    description = (
        "Full analytics bundle (summary, categories, trends, insights, budgets) as JSON, "
        "or the filtered expenses as CSV text when `format` is csv."
    )

    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> Any:
        return service.export_analytics(query)
