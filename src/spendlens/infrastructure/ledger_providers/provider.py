from __future__ import annotations

from abc import ABC, abstractmethod

from spendlens.domain.models import BudgetRecord, CategoryRecord, ExpenseRecord


class LedgerProviderError(RuntimeError):
    pass


class Ledger(ABC):
    """Base contract for the record store the analytics engine reads from."""

    name: str = "ledger"

    @abstractmethod
    def list_expenses(self) -> list[ExpenseRecord]:
        raise NotImplementedError

    @abstractmethod
    def list_categories(self) -> list[CategoryRecord]:
        raise NotImplementedError

    @abstractmethod
    def list_budgets(self) -> list[BudgetRecord]:
        raise NotImplementedError

    def load_all(self) -> tuple[list[ExpenseRecord], list[CategoryRecord], list[BudgetRecord]]:
        """Return expenses, categories and budgets from one consistent read of the store."""
        return self.list_expenses(), self.list_categories(), self.list_budgets()
