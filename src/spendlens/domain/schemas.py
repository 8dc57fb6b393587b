from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from spendlens.domain.models import (
    BudgetHealth,
    BudgetPeriod,
    BudgetStatus,
    ChangeDirection,
    ExpenseRecord,
    FilterPeriod,
    Priority,
)

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%m/%d/%Y", "%m-%d-%Y")


def coerce_iso_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return value

    # Canonical format first.
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date().isoformat()
        except ValueError:
            continue
    raise ValueError(f"unrecognized date {text!r}, expected YYYY-MM-DD")


class WireModel(BaseModel):
    """Derived records are exchanged with presentation code under camelCase names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DateRange(WireModel):
    start_date: str = Field(description="Start date in YYYY-MM-DD format, e.g. 2026-01-31.")
    end_date: str = Field(description="End date in YYYY-MM-DD format, e.g. 2026-01-31.")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return coerce_iso_date(value)

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        if self.start_date > self.end_date:
            raise ValueError("startDate must be <= endDate")
        return self


class AnalyticsQuery(WireModel):
    """
    Options accepted by every analytics query.

    Recognized keys (camelCase on the wire, snake_case in Python):
      - startDate / endDate (inclusive, YYYY-MM-DD)
      - categoryId
      - period (today, week, month, year, all)
      - month (YYYY-MM), compareMonths
      - months (monthly trend length)
      - currentPeriod / previousPeriod (period comparison)
      - format / includeInsights / includeTrends / includeBudgets (export)
    """

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    category_id: Optional[str] = None
    period: Optional[FilterPeriod] = None
    month: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}$")
    compare_months: int = Field(default=1, ge=1)
    months: int = Field(default=12, ge=1)
    current_period: Optional[DateRange] = None
    previous_period: Optional[DateRange] = None
    format: Literal["json", "csv"] = "json"
    include_insights: bool = True
    include_trends: bool = True
    include_budgets: bool = True

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return coerce_iso_date(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def blank_category_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ExpensePayload(WireModel):
    id: str
    amount: float
    description: str
    date: str
    category_id: str
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_record(cls, expense: ExpenseRecord) -> "ExpensePayload":
        return cls(
            id=expense.id,
            amount=expense.amount,
            description=expense.description,
            date=expense.date,
            category_id=expense.category_id,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )


class CategoryBreakdownEntry(WireModel):
    category_id: str
    category_name: str
    category_color: str
    category_icon: str
    total: float
    count: int
    percentage: float
    average: float


class CategoryPerformanceEntry(WireModel):
    category_id: str
    category_name: str
    total: float
    count: int
    average: float
    percentage_of_total: float
    rank: int


class SpendingSummary(WireModel):
    total: float = 0.0
    count: int = 0
    average: float = 0.0
    daily_average: float = 0.0
    category_breakdown: List[CategoryBreakdownEntry] = Field(default_factory=list)
    top_expenses: List[ExpensePayload] = Field(default_factory=list)
    period: Union[DateRange, str] = FilterPeriod.ALL.value


class DailyTrendPoint(WireModel):
    date: str
    total: float


class MonthlyTrendPoint(WireModel):
    month: str
    year: int
    month_number: int
    month_name: str
    total: float
    count: int
    average: float


class BudgetAnalysis(WireModel):
    budget_id: str
    category_id: str
    category_name: str
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    utilization_percentage: float
    percentage_used: float
    status: BudgetStatus
    health: BudgetHealth
    days_remaining: int
    is_over_budget: bool
    is_near_limit: bool
    overage_amount: float
    period: BudgetPeriod
    start_date: str
    end_date: str


class BudgetProjection(WireModel):
    budget_amount: float
    current_spent: float
    daily_average: float
    projected_total: float
    will_exceed_budget: bool
    projected_overage: float
    days_remaining: int
    recommended_daily_spend: float


class Insight(WireModel):
    id: str
    type: str
    title: str
    description: str
    priority: Priority
    actionable: bool
    data: Dict[str, Any] = Field(default_factory=dict)


class Anomaly(WireModel):
    type: Literal["unusual_amount"] = "unusual_amount"
    expense: ExpensePayload
    severity: Literal["medium", "high"]
    reason: str
    deviation_multiple: float


class SavingsRecommendation(WireModel):
    type: Literal["frequent_small_expenses", "high_category_spending"]
    category: str
    description: str
    potential_savings: float
    frequency: Optional[int] = None
    average_amount: Optional[float] = None
    total_amount: Optional[float] = None
    current_spending: Optional[float] = None
    percentage: Optional[float] = None


class PeriodTotals(WireModel):
    total: float
    count: int
    average: float


class PeriodChange(WireModel):
    amount: float
    percentage: float
    direction: ChangeDirection


class PeriodComparison(WireModel):
    current: PeriodTotals
    previous: PeriodTotals
    change: PeriodChange


class DateRangeAnalytics(WireModel):
    date_range: DateRange
    summary: SpendingSummary
    category_breakdown: List[CategoryBreakdownEntry] = Field(default_factory=list)
    insights: List[Insight] = Field(default_factory=list)
    period: str


class AnalyticsExport(WireModel):
    version: str = "1.0.0"
    export_date: str
    summary: SpendingSummary
    categories: List[CategoryBreakdownEntry] = Field(default_factory=list)
    trends: Optional[List[MonthlyTrendPoint]] = None
    insights: Optional[List[Insight]] = None
    budget_analysis: Optional[List[BudgetAnalysis]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ToolContext(BaseModel):
    user_id: str
    ledger_id: str = "ldg_main"
    timezone: str = "UTC"


class ToolRequest(BaseModel):
    request_id: str
    tool: str
    args: Dict[str, Any] = Field(
        default_factory=dict,
        description="Analytics options (see AnalyticsQuery); camelCase or snake_case keys.",
    )
    context: ToolContext


class ToolResponse(BaseModel):
    request_id: str
    tool: str
    ok: bool = True
    result: Any = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)
    context: ToolContext
