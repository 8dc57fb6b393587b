from __future__ import annotations

from typing import Mapping, Sequence

from spendlens.analytics._formatting import format_amount
from spendlens.analytics.summary import UNKNOWN_CATEGORY_NAME
from spendlens.domain.models import CategoryRecord, ExpenseRecord

CSV_HEADER = "Date,Amount,Category,Description"


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def export_csv(expenses: Sequence[ExpenseRecord], categories: Mapping[str, CategoryRecord]) -> str:
    lines = [CSV_HEADER]
    for expense in expenses:
        category = categories.get(expense.category_id)
        category_name = category.name if category else UNKNOWN_CATEGORY_NAME
        lines.append(
            f"{expense.date},{format_amount(expense.amount)},{_quote(category_name)},{_quote(expense.description)}"
        )
    return "\n".join(lines) + "\n"
