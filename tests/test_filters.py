from __future__ import annotations

import unittest
from datetime import date

from spendlens.analytics.filters import filter_expenses, month_bounds, parse_month, shift_month
from spendlens.domain.errors import UsageError
from spendlens.domain.models import ExpenseRecord, FilterPeriod

TODAY = date(2025, 9, 20)


def _expense(expense_id: str, amount: float, day: str, category_id: str = "food") -> ExpenseRecord:
    return ExpenseRecord(id=expense_id, amount=amount, description=expense_id, date=day, category_id=category_id)


class FilterExpensesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.expenses = [
            _expense("e1", 10.0, "2024-12-31"),
            _expense("e2", 20.0, "2025-08-31", "transport"),
            _expense("e3", 30.0, "2025-09-01"),
            _expense("e4", 40.0, "2025-09-13"),
            _expense("e5", 50.0, "2025-09-14", "transport"),
            _expense("e6", 60.0, "2025-09-20"),
        ]

    def _ids(self, expenses) -> list[str]:
        return [expense.id for expense in expenses]

    def test_no_filters_returns_everything_in_order(self) -> None:
        self.assertEqual(self._ids(filter_expenses(self.expenses, TODAY)), ["e1", "e2", "e3", "e4", "e5", "e6"])

    def test_explicit_bounds_are_inclusive(self) -> None:
        result = filter_expenses(self.expenses, TODAY, start_date="2025-08-31", end_date="2025-09-13")
        self.assertEqual(self._ids(result), ["e2", "e3", "e4"])

    def test_category_filter(self) -> None:
        result = filter_expenses(self.expenses, TODAY, category_id="transport")
        self.assertEqual(self._ids(result), ["e2", "e5"])

    def test_today_period(self) -> None:
        self.assertEqual(self._ids(filter_expenses(self.expenses, TODAY, period="today")), ["e6"])

    def test_week_period_excludes_the_seventh_day_back(self) -> None:
        result = filter_expenses(self.expenses, TODAY, period=FilterPeriod.WEEK)
        self.assertEqual(self._ids(result), ["e5", "e6"])

    def test_month_and_year_periods_match_calendar_fields(self) -> None:
        self.assertEqual(self._ids(filter_expenses(self.expenses, TODAY, period="month")), ["e3", "e4", "e5", "e6"])
        self.assertEqual(
            self._ids(filter_expenses(self.expenses, TODAY, period="year")),
            ["e2", "e3", "e4", "e5", "e6"],
        )

    def test_all_period_keeps_everything(self) -> None:
        self.assertEqual(len(filter_expenses(self.expenses, TODAY, period="all")), 6)

    def test_bounds_and_period_both_apply(self) -> None:
        result = filter_expenses(self.expenses, TODAY, start_date="2025-09-14", period="month", category_id="food")
        self.assertEqual(self._ids(result), ["e6"])

    def test_unknown_period_is_a_usage_error(self) -> None:
        with self.assertRaises(UsageError):
            filter_expenses(self.expenses, TODAY, period="decade")

    def test_input_is_not_mutated_and_empty_result_is_normal(self) -> None:
        before = list(self.expenses)
        self.assertEqual(filter_expenses(self.expenses, TODAY, category_id="missing"), [])
        self.assertEqual(self.expenses, before)


class MonthHelpersTests(unittest.TestCase):
    def test_parse_month(self) -> None:
        self.assertEqual(parse_month("2025-09"), (2025, 9))
        for bad in ("2025-9", "2025-13", "", None, "09-2025"):
            with self.subTest(bad=bad):
                with self.assertRaises(UsageError):
                    parse_month(bad)

    def test_shift_month_crosses_year_boundaries(self) -> None:
        self.assertEqual(shift_month(2025, 1, -1), (2024, 12))
        self.assertEqual(shift_month(2025, 12, 1), (2026, 1))
        self.assertEqual(shift_month(2025, 3, -15), (2023, 12))

    def test_month_bounds_handles_leap_years(self) -> None:
        self.assertEqual(month_bounds(2024, 2), ("2024-02-01", "2024-02-29"))
        self.assertEqual(month_bounds(2025, 2), ("2025-02-01", "2025-02-28"))


if __name__ == "__main__":
    unittest.main()
