from __future__ import annotations

import logging
import os
import time
from typing import Any, Mapping, Sequence, Union

from pydantic import ValidationError

from spendlens.analytics.anomalies import detect_anomalies
from spendlens.analytics.budgets import analyze_budgets, analyze_category_budget, project_budget
from spendlens.analytics.comparison import classify_period, compare_periods
from spendlens.analytics.export import export_csv
from spendlens.analytics.filters import filter_expenses
from spendlens.analytics.insights import generate_insights
from spendlens.analytics.savings import recommend_savings
from spendlens.analytics.summary import (
    build_category_breakdown,
    build_category_performance,
    build_spending_summary,
    summary_period,
)
from spendlens.analytics.trends import DEFAULT_TREND_MONTHS, build_daily_trends, build_monthly_trends
from spendlens.application.validator import ValidatorService
from spendlens.domain.errors import LedgerError, UsageError
from spendlens.domain.models import ExpenseRecord
from spendlens.domain.schemas import (
    AnalyticsExport,
    AnalyticsQuery,
    Anomaly,
    BudgetAnalysis,
    BudgetProjection,
    CategoryBreakdownEntry,
    CategoryPerformanceEntry,
    DailyTrendPoint,
    DateRange,
    DateRangeAnalytics,
    Insight,
    MonthlyTrendPoint,
    PeriodComparison,
    SavingsRecommendation,
    SpendingSummary,
)
from spendlens.infrastructure.clock import Clock, FixedClock, SystemClock
from spendlens.infrastructure.ledger_providers.json_provider import JsonFileLedger
from spendlens.infrastructure.ledger_providers.provider import Ledger
from spendlens.infrastructure.snapshot import LedgerSnapshot, take_snapshot

logger = logging.getLogger(__name__)

Options = Union[AnalyticsQuery, Mapping[str, Any], None]


class AnalyticsService:
    """
    Read-only analytics over a ledger.

    Every public call takes one snapshot of the ledger, runs the pure engines in
    `spendlens.analytics` over it, and returns derived records. "Now" always
    comes from the injected clock.

    Options may be an AnalyticsQuery, a mapping with camelCase or snake_case
    keys, or keyword arguments; malformed options raise UsageError.
    """

    EXPORT_VERSION = "1.0.0"

    def __init__(self, ledger: Ledger, clock: Clock | None = None, validator: ValidatorService | None = None):
        self._ledger = ledger
        self._clock = clock or SystemClock()
        self._validator = validator or ValidatorService()

    @classmethod
    def from_env(cls) -> "AnalyticsService":
        """JSON ledger at SPENDLENS_LEDGER_PATH; SPENDLENS_FIXED_DATE pins the clock."""
        fixed = os.getenv("SPENDLENS_FIXED_DATE", "").strip()
        clock: Clock = FixedClock(fixed) if fixed else SystemClock()
        return cls(JsonFileLedger(), clock=clock)

    @property
    def clock(self) -> Clock:
        return self._clock

    # ---- option and snapshot plumbing ----

    def _query(self, options: Options, overrides: Mapping[str, Any]) -> AnalyticsQuery:
        if isinstance(options, AnalyticsQuery) and not overrides:
            return options
        if isinstance(options, AnalyticsQuery):
            payload: dict[str, Any] = options.model_dump(exclude_unset=True)
        elif options is None:
            payload = {}
        elif isinstance(options, Mapping):
            payload = dict(options)
        else:
            raise UsageError(f"options must be a mapping or AnalyticsQuery, got {type(options).__name__}")
        payload.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return AnalyticsQuery.model_validate(payload)
        except ValidationError as exc:
            raise UsageError(f"Invalid analytics options: {exc}") from exc

    def _snapshot(self) -> LedgerSnapshot:
        return take_snapshot(self._ledger)

    def _filtered(self, snapshot: LedgerSnapshot, query: AnalyticsQuery, with_category: bool = True) -> list[ExpenseRecord]:
        return filter_expenses(
            snapshot.expenses,
            self._clock.today(),
            start_date=query.start_date,
            end_date=query.end_date,
            category_id=query.category_id if with_category else None,
            period=query.period,
        )

    def _summary(self, snapshot: LedgerSnapshot, query: AnalyticsQuery) -> SpendingSummary:
        period = summary_period(query.start_date, query.end_date, query.period)
        summary = build_spending_summary(self._filtered(snapshot, query), snapshot.category_map(), period)
        for issue in self._validator.validate(summary):
            logger.warning("Summary consistency issue code=%s path=%s: %s", issue.code, issue.path, issue.message)
        return summary

    # ---- summaries and breakdowns (degrade to empty results on ledger failure) ----

    def get_spending_summary(self, options: Options = None, **kwargs: Any) -> SpendingSummary:
        query = self._query(options, kwargs)
        t0 = time.perf_counter()
        try:
            snapshot = self._snapshot()
        except LedgerError as exc:
            logger.warning("Spending summary degraded to zeros: %s", exc)
            return SpendingSummary(period=summary_period(query.start_date, query.end_date, query.period))

        summary = self._summary(snapshot, query)
        logger.info(
            "Spending summary complete in %.3fs count=%d total=%.2f",
            time.perf_counter() - t0,
            summary.count,
            summary.total,
        )
        return summary

    def get_spending_by_category(self, options: Options = None, **kwargs: Any) -> list[CategoryBreakdownEntry]:
        query = self._query(options, kwargs)
        try:
            snapshot = self._snapshot()
        except LedgerError as exc:
            logger.warning("Category breakdown degraded to empty: %s", exc)
            return []
        return build_category_breakdown(self._filtered(snapshot, query), snapshot.category_map())

    def get_category_breakdown(self, expenses: Sequence[ExpenseRecord] | None = None) -> list[CategoryBreakdownEntry]:
        snapshot = self._snapshot()
        if expenses is None:
            expenses = snapshot.expenses
        return build_category_breakdown(expenses, snapshot.category_map())

    def compare_category_performance(self, options: Options = None, **kwargs: Any) -> list[CategoryPerformanceEntry]:
        query = self._query(options, kwargs)
        snapshot = self._snapshot()
        return build_category_performance(self._filtered(snapshot, query, with_category=False), snapshot.category_map())

    # ---- trends ----

    def get_daily_trends(self, options: Options = None, **kwargs: Any) -> list[DailyTrendPoint]:
        query = self._query(options, kwargs)
        return build_daily_trends(self._filtered(self._snapshot(), query))

    def get_monthly_trends(self, months: int = DEFAULT_TREND_MONTHS) -> list[MonthlyTrendPoint]:
        snapshot = self._snapshot()
        return build_monthly_trends(snapshot.expenses, self._clock.today(), months)

    # ---- insights, anomalies, savings ----

    def get_spending_insights(self, options: Options = None, **kwargs: Any) -> list[Insight]:
        query = self._query(options, kwargs)
        t0 = time.perf_counter()
        insights = generate_insights(self._snapshot(), self._clock.today(), query.compare_months)
        logger.info("Insights complete in %.3fs insights=%d", time.perf_counter() - t0, len(insights))
        return insights

    def detect_anomalies(self, options: Options = None, **kwargs: Any) -> list[Anomaly]:
        query = self._query(options, kwargs)
        anomalies = detect_anomalies(self._filtered(self._snapshot(), query))
        logger.info("Anomaly detection flagged=%d", len(anomalies))
        return anomalies

    def get_savings_recommendations(self, options: Options = None, **kwargs: Any) -> list[SavingsRecommendation]:
        query = self._query(options, kwargs)
        snapshot = self._snapshot()
        return recommend_savings(self._filtered(snapshot, query, with_category=False), snapshot.category_map())

    # ---- budgets ----

    def get_budget_analysis(
        self, options: Options = None, **kwargs: Any
    ) -> BudgetAnalysis | list[BudgetAnalysis] | None:
        """A single analysis (or None) when categoryId is given, otherwise a list."""
        query = self._query(options, kwargs)
        snapshot = self._snapshot()
        today = self._clock.today()
        if query.category_id:
            return analyze_category_budget(snapshot, today, query.category_id, query.month)
        return analyze_budgets(snapshot, today, month=query.month)

    def get_budget_projection(self, options: Options = None, **kwargs: Any) -> BudgetProjection:
        query = self._query(options, kwargs)
        if not query.category_id or not query.month:
            raise UsageError("categoryId and month are required for budget projection")
        projection = project_budget(self._snapshot(), self._clock.today(), query.category_id, query.month)
        logger.info(
            "Budget projection category=%s month=%s projected=%.2f exceed=%s",
            query.category_id,
            query.month,
            projection.projected_total,
            projection.will_exceed_budget,
        )
        return projection

    # ---- comparisons ----

    def compare_periods(self, options: Options = None, **kwargs: Any) -> PeriodComparison:
        query = self._query(options, kwargs)
        if query.current_period is None or query.previous_period is None:
            raise UsageError("currentPeriod and previousPeriod are required")
        return compare_periods(
            self._snapshot().expenses,
            self._clock.today(),
            query.current_period,
            query.previous_period,
        )

    def get_analytics_for_date_range(self, start_date: str | None, end_date: str | None) -> DateRangeAnalytics:
        if not start_date or not end_date:
            raise UsageError("Start date and end date are required")
        try:
            date_range = DateRange(start_date=start_date, end_date=end_date)
        except ValidationError as exc:
            raise UsageError(f"Invalid date range: {exc}") from exc

        snapshot = self._snapshot()
        query = AnalyticsQuery(start_date=date_range.start_date, end_date=date_range.end_date)
        summary = self._summary(snapshot, query)
        return DateRangeAnalytics(
            date_range=date_range,
            summary=summary,
            category_breakdown=summary.category_breakdown,
            insights=generate_insights(snapshot, self._clock.today()),
            period=classify_period(date_range.start_date, date_range.end_date),
        )

    # ---- export ----

    def export_csv(self, options: Options = None, **kwargs: Any) -> str:
        query = self._query(options, kwargs)
        snapshot = self._snapshot()
        return export_csv(self._filtered(snapshot, query, with_category=False), snapshot.category_map())

    def export_analytics(self, options: Options = None, **kwargs: Any) -> AnalyticsExport | str:
        query = self._query(options, kwargs)
        if query.format == "csv":
            return self.export_csv(query)

        t0 = time.perf_counter()
        snapshot = self._snapshot()
        today = self._clock.today()
        filters: dict[str, str] = {}
        if query.start_date and query.end_date:
            filters = {"startDate": query.start_date, "endDate": query.end_date}
        exported_at = self._clock.now().isoformat()

        export = AnalyticsExport(
            version=self.EXPORT_VERSION,
            export_date=exported_at,
            summary=self._summary(snapshot, AnalyticsQuery.model_validate(filters)),
            categories=build_category_breakdown(snapshot.expenses, snapshot.category_map()),
            trends=build_monthly_trends(snapshot.expenses, today) if query.include_trends else None,
            insights=generate_insights(snapshot, today, query.compare_months) if query.include_insights else None,
            budget_analysis=analyze_budgets(snapshot, today) if query.include_budgets else None,
            metadata={"generatedAt": exported_at, "format": "json", "filters": filters},
        )
        logger.info("Analytics export complete in %.3fs", time.perf_counter() - t0)
        return export

    def clear_cache(self) -> bool:
        # Nothing is cached; kept so callers have a stable invalidation hook.
        return True
