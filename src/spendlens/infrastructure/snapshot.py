from __future__ import annotations

import logging
from dataclasses import dataclass, field

from spendlens.domain.errors import LedgerError
from spendlens.domain.models import BudgetRecord, CategoryRecord, ExpenseRecord
from spendlens.infrastructure.ledger_providers.provider import Ledger, LedgerProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable view of the ledger taken once per analytics call."""

    expenses: tuple[ExpenseRecord, ...] = ()
    categories: tuple[CategoryRecord, ...] = ()
    budgets: tuple[BudgetRecord, ...] = ()
    _category_index: dict[str, CategoryRecord] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = {category.id: category for category in self.categories}
        object.__setattr__(self, "_category_index", index)

    def category_map(self) -> dict[str, CategoryRecord]:
        return dict(self._category_index)

    def category(self, category_id: str) -> CategoryRecord | None:
        return self._category_index.get(category_id)


def take_snapshot(ledger: Ledger) -> LedgerSnapshot:
    try:
        expenses, categories, budgets = ledger.load_all()
    except (LedgerProviderError, OSError) as exc:
        logger.warning("Ledger read failed provider=%s: %s", ledger.name, exc)
        raise LedgerError(f"Failed to read ledger {ledger.name!r}: {exc}") from exc

    logger.debug(
        "Snapshot taken provider=%s expenses=%d categories=%d budgets=%d",
        ledger.name,
        len(expenses),
        len(categories),
        len(budgets),
    )
    return LedgerSnapshot(expenses=tuple(expenses), categories=tuple(categories), budgets=tuple(budgets))
