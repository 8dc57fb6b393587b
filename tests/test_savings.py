from __future__ import annotations

import unittest

from spendlens.analytics.savings import recommend_savings
from spendlens.domain.models import CategoryRecord, ExpenseRecord

CATEGORIES = {
    "coffee": CategoryRecord(id="coffee", name="Coffee"),
    "transport": CategoryRecord(id="transport", name="Transport"),
}


def _expense(expense_id: str, amount: float, category_id: str) -> ExpenseRecord:
    return ExpenseRecord(id=expense_id, amount=amount, description=expense_id, date="2025-09-10", category_id=category_id)


class SavingsRecommenderTests(unittest.TestCase):
    def test_projection_scales_by_filtered_record_count(self) -> None:
        # 22.50 across 5 small purchases out of 10 records: 22.5 * 30 / 10 * 0.3 = 20.25.
        expenses = [_expense(f"c{i}", 4.5, "coffee") for i in range(5)]
        expenses += [_expense(f"t{i}", 100, "transport") for i in range(5)]
        recommendations = recommend_savings(expenses, CATEGORIES)

        self.assertEqual([r.type for r in recommendations], ["high_category_spending", "frequent_small_expenses"])
        high, small = recommendations
        self.assertEqual(high.category, "transport")
        self.assertEqual(high.potential_savings, 75.0)
        self.assertEqual(high.current_spending, 500.0)
        self.assertEqual(high.percentage, 95.69)
        self.assertEqual(
            high.description,
            "Transport accounts for 95.69% of your spending. Consider reviewing these expenses.",
        )

        self.assertEqual(small.category, "coffee")
        self.assertEqual(small.potential_savings, 20.25)
        self.assertEqual((small.frequency, small.average_amount, small.total_amount), (5, 4.5, 22.5))
        self.assertEqual(
            small.description,
            "You have 5 small expenses averaging $4.50. Consider budgeting or bulk purchasing.",
        )

    def test_groups_by_whole_amount_and_needs_five(self) -> None:
        expenses = [_expense(f"c{i}", amount, "coffee") for i, amount in enumerate([4.1, 4.9, 4.5, 4.0, 5.0])]
        recommendations = recommend_savings(expenses, CATEGORIES)
        self.assertEqual([r.type for r in recommendations], ["high_category_spending"])

    def test_small_savings_are_dropped(self) -> None:
        expenses = [_expense(f"c{i}", 1.0, "coffee") for i in range(5)]
        expenses += [_expense(f"t{i}", 30, "transport") for i in range(5)]
        types = [r.type for r in recommend_savings(expenses, CATEGORIES)]
        self.assertNotIn("frequent_small_expenses", types)

    def test_sorted_by_potential_savings(self) -> None:
        expenses = [_expense(f"c{i}", 4.0, "coffee") for i in range(5)]
        recommendations = recommend_savings(expenses, CATEGORIES)

        self.assertEqual([r.potential_savings for r in recommendations], [36.0, 3.0])
        self.assertEqual(recommendations[1].to_wire()["currentSpending"], 20.0)
        self.assertNotIn("frequency", recommendations[1].to_wire())

    def test_empty(self) -> None:
        self.assertEqual(recommend_savings([], CATEGORIES), [])


if __name__ == "__main__":
    unittest.main()
