from __future__ import annotations

from typing import Iterable

from spendlens.domain.models import BudgetRecord, CategoryRecord, ExpenseRecord
from spendlens.infrastructure.ledger_providers.provider import Ledger


class InMemoryLedger(Ledger):
    name = "memory"

    def __init__(
        self,
        expenses: Iterable[ExpenseRecord] | None = None,
        categories: Iterable[CategoryRecord] | None = None,
        budgets: Iterable[BudgetRecord] | None = None,
    ) -> None:
        self._expenses = list(expenses or [])
        self._categories = list(categories or [])
        self._budgets = list(budgets or [])

    def list_expenses(self) -> list[ExpenseRecord]:
        return list(self._expenses)

    def list_categories(self) -> list[CategoryRecord]:
        return list(self._categories)

    def list_budgets(self) -> list[BudgetRecord]:
        return list(self._budgets)
