from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from spendlens.application.tool_executor import ToolExecutor
from spendlens.domain.errors import LedgerError, NotFoundError, UsageError
from spendlens.domain.schemas import AnalyticsQuery, ToolRequest
from spendlens.interface.cli import build_service
from spendlens.tools._analytics_support import to_result
from spendlens.tools.registry import registry

app = FastAPI(title="SpendLens API")
service = build_service()
executor = ToolExecutor(registry)


@app.exception_handler(UsageError)
def usage_error(_: Request, exc: UsageError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
def not_found(_: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(LedgerError)
def ledger_unavailable(_: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


def _query(request: Request) -> AnalyticsQuery:
    try:
        return AnalyticsQuery.model_validate(dict(request.query_params))
    except ValidationError as exc:
        raise UsageError(f"Invalid query parameters: {exc}") from exc


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/analytics/summary")
def summary(request: Request) -> Any:
    return to_result(service.get_spending_summary(_query(request)))


@app.get("/analytics/categories")
def categories(request: Request) -> Any:
    return to_result(service.get_spending_by_category(_query(request)))


@app.get("/analytics/categories/performance")
def category_performance(request: Request) -> Any:
    return to_result(service.compare_category_performance(_query(request)))


@app.get("/analytics/trends/daily")
def daily_trends(request: Request) -> Any:
    return to_result(service.get_daily_trends(_query(request)))


@app.get("/analytics/trends/monthly")
def monthly_trends(request: Request) -> Any:
    return to_result(service.get_monthly_trends(_query(request).months))


@app.get("/analytics/insights")
def insights(request: Request) -> Any:
    return to_result(service.get_spending_insights(_query(request)))


@app.get("/analytics/budgets")
def budgets(request: Request) -> Any:
    return to_result(service.get_budget_analysis(_query(request)))


@app.get("/analytics/budgets/projection")
def budget_projection(request: Request) -> Any:
    return to_result(service.get_budget_projection(_query(request)))


@app.get("/analytics/anomalies")
def anomalies(request: Request) -> Any:
    return to_result(service.detect_anomalies(_query(request)))


@app.get("/analytics/savings")
def savings(request: Request) -> Any:
    return to_result(service.get_savings_recommendations(_query(request)))


@app.get("/analytics/range")
def date_range(request: Request) -> Any:
    params = request.query_params
    return to_result(service.get_analytics_for_date_range(params.get("startDate"), params.get("endDate")))


@app.get("/analytics/export", response_model=None)
def export(request: Request) -> Any:
    result = service.export_analytics(_query(request))
    if isinstance(result, str):
        return Response(
            content=result,
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="expenses.csv"'},
        )
    return to_result(result)


@app.post("/analytics/compare")
def compare(payload: dict[str, Any] = Body(default={})) -> Any:
    return to_result(service.compare_periods(payload))


@app.delete("/analytics/cache")
def clear_cache() -> dict[str, bool]:
    return {"cleared": service.clear_cache()}


@app.post("/tools/run")
def run_tool(request: ToolRequest) -> dict:
    return executor.run(request).model_dump()
