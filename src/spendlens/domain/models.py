from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class FilterPeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class BudgetStatus(str, Enum):
    ACTIVE = "active"
    UPCOMING = "upcoming"
    EXPIRED = "expired"
    INACTIVE = "inactive"


class BudgetHealth(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


PRIORITY_ORDER: dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class ChangeDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    NO_CHANGE = "no_change"


@dataclass(frozen=True)
class ExpenseRecord:
    id: str
    amount: float
    description: str
    date: str  # YYYY-MM-DD
    category_id: str
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True)
class CategoryRecord:
    id: str
    name: str
    color: str = "#CCCCCC"
    icon: str = "help"
    is_default: bool = False


@dataclass(frozen=True)
class BudgetRecord:
    id: str
    category_id: str
    amount: float
    period: BudgetPeriod
    start_date: str
    end_date: str
    spent: float = 0.0  # stored by the ledger, never used for analysis
    is_active: bool = True
