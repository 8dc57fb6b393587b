from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _LedgerRow(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LedgerExpenseRow(_LedgerRow):
    id: str
    amount: float = Field(gt=0, le=999999.99)
    description: str
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    category_id: str
    created_at: str = ""
    updated_at: str = ""


class LedgerCategoryRow(_LedgerRow):
    id: str
    name: str
    color: str = "#CCCCCC"
    icon: str = "help"
    is_default: bool = False


class LedgerBudgetRow(_LedgerRow):
    id: str
    category_id: str
    amount: float = Field(gt=0)
    period: str = "monthly"
    start_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    end_date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    spent: Optional[float] = None
    is_active: bool = True


class LedgerDocument(_LedgerRow):
    """Shape of a tracker data export: three flat record collections."""

    expenses: list[LedgerExpenseRow] = Field(default_factory=list)
    categories: list[LedgerCategoryRow] = Field(default_factory=list)
    budgets: list[LedgerBudgetRow] = Field(default_factory=list)
