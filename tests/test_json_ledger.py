from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from spendlens.domain.errors import LedgerError
from spendlens.domain.models import BudgetPeriod
from spendlens.infrastructure.ledger_providers.json_provider import JsonFileLedger
from spendlens.infrastructure.ledger_providers.provider import LedgerProviderError
from spendlens.infrastructure.snapshot import take_snapshot

LEDGER = {
    "expenses": [
        {
            "id": "e1",
            "amount": 12.5,
            "description": "  Coffee beans ",
            "date": "2025-09-10",
            "categoryId": "food",
            "createdAt": "2025-09-10T08:00:00Z",
            "receiptUrl": "ignored",
        }
    ],
    "categories": [{"id": "food", "name": "Food", "color": "#FF5722", "icon": "restaurant", "isDefault": True}],
    "budgets": [
        {
            "id": "b1",
            "categoryId": "food",
            "amount": 300,
            "period": "monthly",
            "startDate": "2025-09-01",
            "endDate": "2025-09-30",
            "spent": 42,
        }
    ],
}


class JsonFileLedgerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "ledger.json"

    def _write(self, payload) -> JsonFileLedger:
        self.path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload, encoding="utf-8")
        return JsonFileLedger(self.path)

    def test_reads_camel_case_export(self) -> None:
        ledger = self._write(LEDGER)

        [expense] = ledger.list_expenses()
        self.assertEqual(expense.id, "e1")
        self.assertEqual(expense.amount, 12.5)
        self.assertEqual(expense.description, "Coffee beans")
        self.assertEqual(expense.category_id, "food")
        self.assertEqual(expense.created_at, "2025-09-10T08:00:00Z")

        [category] = ledger.list_categories()
        self.assertEqual((category.name, category.color, category.icon, category.is_default), ("Food", "#FF5722", "restaurant", True))

        [budget] = ledger.list_budgets()
        self.assertEqual(budget.period, BudgetPeriod.MONTHLY)
        self.assertEqual((budget.amount, budget.spent, budget.is_active), (300.0, 42.0, True))

    def test_missing_collections_default_to_empty(self) -> None:
        ledger = self._write({"expenses": []})
        self.assertEqual(ledger.list_categories(), [])
        self.assertEqual(ledger.list_budgets(), [])

    def test_path_defaults_to_environment(self) -> None:
        with patch.dict("os.environ", {"SPENDLENS_LEDGER_PATH": str(self.path)}):
            self.assertEqual(JsonFileLedger().path, self.path)

    def test_missing_file(self) -> None:
        with self.assertRaises(LedgerProviderError):
            JsonFileLedger(self.path).list_expenses()

    def test_invalid_documents(self) -> None:
        bad_expense = {"expenses": [dict(LEDGER["expenses"][0], amount=0)]}
        bad_date = {"expenses": [dict(LEDGER["expenses"][0], date="10/09/2025")]}
        bad_period = {"budgets": [dict(LEDGER["budgets"][0], period="daily")]}
        cases = {"not json": "{nope", "not an object": [], "bad amount": bad_expense, "bad date": bad_date}
        for label, payload in cases.items():
            with self.subTest(label):
                with self.assertRaises(LedgerProviderError):
                    self._write(payload).list_expenses()

        with self.assertRaises(LedgerProviderError):
            self._write(bad_period).list_budgets()

    def test_snapshot_reads_the_file_once(self) -> None:
        ledger = self._write(LEDGER)
        renamed = dict(LEDGER, expenses=[], categories=[dict(LEDGER["categories"][0], name="Renamed")])
        real_load = ledger._load

        def load_then_rewrite():
            document = real_load()
            self.path.write_text(json.dumps(renamed), encoding="utf-8")
            return document

        with patch.object(ledger, "_load", side_effect=load_then_rewrite) as load:
            snapshot = take_snapshot(ledger)

        self.assertEqual(load.call_count, 1)
        self.assertEqual([expense.id for expense in snapshot.expenses], ["e1"])
        self.assertEqual(snapshot.category("food").name, "Food")
        self.assertEqual([budget.id for budget in snapshot.budgets], ["b1"])

    def test_snapshot_wraps_unreadable_file(self) -> None:
        with self.assertLogs("spendlens.infrastructure.snapshot", level="WARNING"):
            with self.assertRaises(LedgerError) as ctx:
                take_snapshot(JsonFileLedger(self.path))
        self.assertIsInstance(ctx.exception.__cause__, LedgerProviderError)


if __name__ == "__main__":
    unittest.main()
