from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

from pydantic import ValidationError

from spendlens.application.analytics_service import AnalyticsService
from spendlens.domain.errors import NotFoundError, UsageError
from spendlens.domain.schemas import AnalyticsQuery, ToolRequest, ToolResponse, WireModel
from spendlens.tools.base import Tool, ToolSpec

logger = logging.getLogger(__name__)

# Singleton used by every registered tool; tests swap it with patch().
analytics_service = AnalyticsService.from_env()


def current_service() -> AnalyticsService:
    return analytics_service


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _extract_request_args(request: Any) -> dict[str, Any]:
    args = dict(request.args) if isinstance(getattr(request, "args", None), dict) else {}

    # Nested {"filters": {...}} is merged underneath top-level keys.
    nested = args.pop("filters", None)
    if isinstance(nested, dict):
        args = {**nested, **args}

    # {"date_range": {"start": ..., "end": ...}} is accepted as an alias for startDate/endDate.
    date_range = args.pop("date_range", None) or args.pop("dateRange", None)
    if isinstance(date_range, dict):
        args.setdefault("startDate", date_range.get("start") or date_range.get("startDate"))
        args.setdefault("endDate", date_range.get("end") or date_range.get("endDate"))

    # month_number/year is accepted as an alias for month=YYYY-MM.
    month_number = _as_int(args.pop("month_number", None))
    year = _as_int(args.pop("year", None))
    if month_number is not None and year is not None and "month" not in args:
        args["month"] = f"{year:04d}-{month_number:02d}"

    return {key: value for key, value in args.items() if value is not None}


def query_from_request(request: Any) -> AnalyticsQuery:
    try:
        return AnalyticsQuery.model_validate(_extract_request_args(request))
    except ValidationError as exc:
        raise UsageError(f"Invalid tool args: {exc}") from exc


def to_result(value: Any) -> Any:
    if isinstance(value, WireModel):
        return value.to_wire()
    if isinstance(value, list):
        return [to_result(item) for item in value]
    return value


class AnalyticsTool(Tool):
    """Tool backed by one AnalyticsService query; bad input becomes an ok=False response."""

    def run(self, request: ToolRequest) -> ToolResponse:
        try:
            query = query_from_request(request)
            result = self.execute(current_service(), query)
        except (UsageError, NotFoundError) as exc:
            logger.info("Tool %s rejected request_id=%s: %s", self.name, request.request_id, exc)
            return ToolResponse(
                request_id=request.request_id,
                tool=self.name,
                ok=False,
                result={},
                errors=[str(exc)],
                context=request.context,
            )
        return ToolResponse(
            request_id=request.request_id,
            tool=self.name,
            result=to_result(result),
            context=request.context,
        )

    @abstractmethod
    def execute(self, service: AnalyticsService, query: AnalyticsQuery) -> Any:
        raise NotImplementedError

    def spec(self) -> ToolSpec:
        return ToolSpec(
            name=self.name,
            description=self.description,
            args_schema=AnalyticsQuery.model_json_schema(by_alias=True),
        )
