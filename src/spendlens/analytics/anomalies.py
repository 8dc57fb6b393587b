from __future__ import annotations

from statistics import mean
from typing import Sequence

from spendlens.analytics._formatting import format_amount
from spendlens.domain.models import ExpenseRecord
from spendlens.domain.schemas import Anomaly, ExpensePayload

MIN_SAMPLE_SIZE = 5
THRESHOLD_MULTIPLIER = 3.0


def detect_anomalies(expenses: Sequence[ExpenseRecord]) -> list[Anomaly]:
    """Flag expenses above three times the mean of the set.

    Fewer than five expenses is not enough history; the result is then empty.
    """
    if len(expenses) < MIN_SAMPLE_SIZE:
        return []

    average = mean(expense.amount for expense in expenses)
    threshold = average * THRESHOLD_MULTIPLIER

    anomalies: list[Anomaly] = []
    for expense in expenses:
        if expense.amount <= threshold:
            continue
        anomalies.append(
            Anomaly(
                expense=ExpensePayload.from_record(expense),
                severity="high" if expense.amount > threshold * 2 else "medium",
                reason=f"Amount {format_amount(expense.amount)} is significantly higher than average {average:.2f}",
                deviation_multiple=round(expense.amount / average, 2),
            )
        )

    return sorted(anomalies, key=lambda anomaly: anomaly.deviation_multiple, reverse=True)
