from __future__ import annotations

from dataclasses import dataclass

from spendlens.domain.schemas import SpendingSummary


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    path: str = ""
    severity: str = "error"  # "error" | "warn"


class ValidatorService:
    """
    Deterministic consistency checks for a SpendingSummary.

    Checks:
      - breakdown totals add up to the summary total (within TOTAL_TOLERANCE;
        larger drift that per-entry rounding can explain is only a warning)
      - breakdown counts add up to the summary count
      - breakdown percentages add up to ~100 when anything was spent
      - top expenses are ordered by amount, at most TOP_LIMIT of them
    """

    TOTAL_TOLERANCE = 0.01
    ROUNDING_STEP = 0.005
    PERCENTAGE_TOLERANCE = 0.5
    TOP_LIMIT = 10

    def validate(self, summary: SpendingSummary) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        breakdown = summary.category_breakdown

        # --- 1) Empty summaries must be all zeros ---
        if summary.count == 0:
            if summary.total or summary.average or summary.daily_average or breakdown or summary.top_expenses:
                issues.append(ValidationIssue(
                    code="EMPTY_NOT_ZERO",
                    message="Summary with no expenses carries non-zero values",
                    path="total",
                ))
            return issues

        # --- 2) Breakdown reconciles with totals ---
        breakdown_total = sum(entry.total for entry in breakdown)
        drift = abs(breakdown_total - summary.total)
        if drift > self.TOTAL_TOLERANCE:
            # Half a cent per rounded entry (plus the total) is still rounding, not lost data.
            rounding_allowance = self.ROUNDING_STEP * (len(breakdown) + 1)
            within_rounding = drift <= rounding_allowance
            issues.append(ValidationIssue(
                code="BREAKDOWN_TOTAL_DRIFT" if within_rounding else "BREAKDOWN_TOTAL_MISMATCH",
                message=f"Category totals sum to {breakdown_total:.2f}, summary total is {summary.total:.2f}",
                path="categoryBreakdown[].total",
                severity="warn" if within_rounding else "error",
            ))

        breakdown_count = sum(entry.count for entry in breakdown)
        if breakdown_count != summary.count:
            issues.append(ValidationIssue(
                code="BREAKDOWN_COUNT_MISMATCH",
                message=f"Category counts sum to {breakdown_count}, summary count is {summary.count}",
                path="categoryBreakdown[].count",
            ))

        if summary.total > 0:
            percentage_total = sum(entry.percentage for entry in breakdown)
            if abs(percentage_total - 100) > self.PERCENTAGE_TOLERANCE:
                issues.append(ValidationIssue(
                    code="PERCENTAGE_SUM",
                    message=f"Category percentages sum to {percentage_total:.2f}",
                    path="categoryBreakdown[].percentage",
                    severity="warn",
                ))

        # --- 3) Top expenses ---
        top = summary.top_expenses
        if len(top) > self.TOP_LIMIT:
            issues.append(ValidationIssue(
                code="TOP_EXPENSES_LIMIT",
                message=f"Expected at most {self.TOP_LIMIT} top expenses; got {len(top)}",
                path="topExpenses",
            ))
        if any(top[i].amount < top[i + 1].amount for i in range(len(top) - 1)):
            issues.append(ValidationIssue(
                code="TOP_EXPENSES_ORDER",
                message="Top expenses are not sorted by amount descending",
                path="topExpenses",
            ))

        return issues
