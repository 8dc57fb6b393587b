from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from spendlens.domain.ledger_schemas import LedgerBudgetRow, LedgerCategoryRow, LedgerDocument, LedgerExpenseRow
from spendlens.domain.models import BudgetPeriod, BudgetRecord, CategoryRecord, ExpenseRecord
from spendlens.infrastructure.ledger_providers.provider import Ledger, LedgerProviderError

logger = logging.getLogger(__name__)


class JsonFileLedger(Ledger):
    """Reads a tracker data export (expenses, categories, budgets) from a JSON file."""

    name = "json_file"

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path or os.getenv("SPENDLENS_LEDGER_PATH", "data/ledger.json"))

    @property
    def path(self) -> Path:
        return self._path

    def list_expenses(self) -> list[ExpenseRecord]:
        return [self._normalize_expense_row(row) for row in self._load().expenses]

    def list_categories(self) -> list[CategoryRecord]:
        return [self._normalize_category_row(row) for row in self._load().categories]

    def list_budgets(self) -> list[BudgetRecord]:
        return [self._normalize_budget_row(row) for row in self._load().budgets]

    def load_all(self) -> tuple[list[ExpenseRecord], list[CategoryRecord], list[BudgetRecord]]:
        document = self._load()
        return (
            [self._normalize_expense_row(row) for row in document.expenses],
            [self._normalize_category_row(row) for row in document.categories],
            [self._normalize_budget_row(row) for row in document.budgets],
        )

    def _load(self) -> LedgerDocument:
        logger.debug("JSON ledger reading path=%s", self._path)
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LedgerProviderError(f"Unable to read ledger file {self._path}: {exc}") from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LedgerProviderError(f"Ledger file {self._path} is not valid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise LedgerProviderError(f"Expected ledger object in {self._path}, got {type(payload).__name__}")

        try:
            document = LedgerDocument.model_validate(payload)
        except ValidationError as exc:
            raise LedgerProviderError(f"Ledger file {self._path} did not match LedgerDocument schema: {exc}") from exc

        logger.info(
            "JSON ledger loaded expenses=%d categories=%d budgets=%d",
            len(document.expenses),
            len(document.categories),
            len(document.budgets),
        )
        return document

    def _normalize_expense_row(self, row: LedgerExpenseRow) -> ExpenseRecord:
        return ExpenseRecord(
            id=row.id,
            amount=float(row.amount),
            description=row.description.strip(),
            date=row.date,
            category_id=row.category_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _normalize_category_row(self, row: LedgerCategoryRow) -> CategoryRecord:
        return CategoryRecord(
            id=row.id,
            name=row.name,
            color=row.color,
            icon=row.icon,
            is_default=row.is_default,
        )

    def _normalize_budget_row(self, row: LedgerBudgetRow) -> BudgetRecord:
        try:
            period = BudgetPeriod(row.period)
        except ValueError as exc:
            raise LedgerProviderError(f"Unsupported budget period {row.period!r} on budget {row.id}") from exc
        return BudgetRecord(
            id=row.id,
            category_id=row.category_id,
            amount=float(row.amount),
            period=period,
            start_date=row.start_date,
            end_date=row.end_date,
            spent=float(row.spent or 0.0),
            is_active=row.is_active,
        )
