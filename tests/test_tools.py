from __future__ import annotations

import unittest
from unittest.mock import patch

import spendlens.tools  # noqa: F401
from spendlens.application.analytics_service import AnalyticsService
from spendlens.application.tool_executor import ToolExecutor
from spendlens.domain.models import BudgetPeriod, BudgetRecord, CategoryRecord, ExpenseRecord
from spendlens.domain.schemas import ToolContext, ToolRequest, ToolResponse
from spendlens.infrastructure.clock import FixedClock
from spendlens.infrastructure.ledger_providers.memory_provider import InMemoryLedger
from spendlens.infrastructure.ledger_providers.provider import Ledger
from spendlens.tools._analytics_support import query_from_request
from spendlens.tools.base import Tool
from spendlens.tools.registry import ToolRegistry, registry

EXPECTED_TOOLS = {
    "ledger.spending_summary",
    "ledger.category_breakdown",
    "ledger.category_performance",
    "trends.daily",
    "trends.monthly",
    "budget.analysis",
    "budget.projection",
    "detect.anomalies",
    "insights.spending",
    "compare.periods",
    "recommend.savings",
    "export.analytics",
}


class _BrokenLedger(Ledger):
    name = "broken"

    def list_expenses(self):
        raise ConnectionError("ledger offline")

    def list_categories(self):
        return []

    def list_budgets(self):
        return []


class _FakeTool:
    name = "fake_tool"

    def run(self, request: ToolRequest) -> ToolResponse:
        return ToolResponse(request_id=request.request_id, tool=self.name, result={"echo": request.args}, context=request.context)


def _service() -> AnalyticsService:
    ledger = InMemoryLedger(
        expenses=[
            ExpenseRecord(id="e1", amount=50, description="Lunch", date="2025-09-18", category_id="food"),
            ExpenseRecord(id="e2", amount=75, description="Train", date="2025-09-20", category_id="transport"),
            ExpenseRecord(id="e3", amount=40, description="Dinner", date="2025-08-12", category_id="food"),
        ],
        categories=[CategoryRecord(id="food", name="Food"), CategoryRecord(id="transport", name="Transport")],
        budgets=[
            BudgetRecord(
                id="b1",
                category_id="food",
                amount=200,
                period=BudgetPeriod.MONTHLY,
                start_date="2025-09-01",
                end_date="2025-09-30",
            )
        ],
    )
    return AnalyticsService(ledger, clock=FixedClock("2025-09-20"))


def _request(tool_name: str, args: dict | None = None) -> ToolRequest:
    return ToolRequest(
        request_id=f"req:{tool_name}",
        tool=tool_name,
        args=args or {},
        context=ToolContext(user_id="u_123", timezone="America/New_York"),
    )


class ToolRegistryTests(unittest.TestCase):
    def test_register_and_get_tool(self) -> None:
        local = ToolRegistry()
        tool = _FakeTool()
        local.register(tool)

        self.assertIs(local.get_tool("fake_tool"), tool)
        self.assertEqual(local.names(), ["fake_tool"])
        local.clear()
        with self.assertRaises(KeyError):
            local.get_tool("fake_tool")

    def test_builtin_tools_self_register_on_import(self) -> None:
        names = {spec.name for spec in registry.list_specs()}
        self.assertTrue(EXPECTED_TOOLS.issubset(names))

    def test_specs_describe_analytics_options(self) -> None:
        spec = registry.get_tool("budget.projection").spec()
        self.assertIn("categoryId", spec.args_schema["properties"])
        self.assertIn("month", spec.args_schema["properties"])
        self.assertTrue(spec.description)

    def test_every_tool_declares_its_own_args_schema(self) -> None:
        for spec in registry.list_specs():
            with self.subTest(spec.name):
                self.assertIn("properties", spec.args_schema)

    def test_tool_without_spec_cannot_be_built(self) -> None:
        class _SpeclessTool(Tool):
            name = "specless"

            def run(self, request: ToolRequest) -> ToolResponse:
                return ToolResponse(request_id=request.request_id, tool=self.name)

        with self.assertRaises(TypeError):
            _SpeclessTool()


class QueryFromRequestTests(unittest.TestCase):
    def test_aliases_are_normalized(self) -> None:
        query = query_from_request(
            _request(
                "x",
                {
                    "date_range": {"start": "2025-08-01", "end": "2025-08-31"},
                    "filters": {"categoryId": "food", "period": "year"},
                    "period": "all",
                },
            )
        )
        self.assertEqual((query.start_date, query.end_date), ("2025-08-01", "2025-08-31"))
        self.assertEqual(query.category_id, "food")
        self.assertEqual(query.period, "all")

        self.assertEqual(query_from_request(_request("x", {"month_number": "3", "year": 2025})).month, "2025-03")


class AnalyticsToolsTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = patch("spendlens.tools._analytics_support.analytics_service", _service())
        patcher.start()
        self.addCleanup(patcher.stop)
        self.executor = ToolExecutor(registry)

    def test_month_summary(self) -> None:
        response = self.executor.run(_request("ledger.spending_summary", {"month_number": 9, "year": 2025}))

        self.assertTrue(response.ok)
        self.assertEqual(response.result["total"], 125.0)
        self.assertEqual(response.result["period"], {"startDate": "2025-09-01", "endDate": "2025-09-30"})
        self.assertEqual(response.context.timezone, "America/New_York")

    def test_filters_reach_the_service(self) -> None:
        response = self.executor.run(_request("ledger.category_breakdown", {"filters": {"categoryId": "food"}}))
        self.assertEqual([entry["categoryId"] for entry in response.result], ["food"])
        self.assertEqual(response.result[0]["total"], 90.0)

    def test_budget_tools(self) -> None:
        projection = self.executor.run(_request("budget.projection", {"categoryId": "food", "month": "2025-09"}))
        self.assertTrue(projection.ok)
        self.assertTrue(projection.result["willExceedBudget"])

        missing = self.executor.run(_request("budget.projection", {"categoryId": "food"}))
        self.assertFalse(missing.ok)
        self.assertIn("categoryId and month", missing.errors[0])

        not_found = self.executor.run(_request("budget.projection", {"categoryId": "transport", "month": "2025-09"}))
        self.assertFalse(not_found.ok)

        single = self.executor.run(_request("budget.analysis", {"categoryId": "transport"}))
        self.assertTrue(single.ok)
        self.assertIsNone(single.result)

    def test_invalid_args_are_rejected(self) -> None:
        response = self.executor.run(_request("trends.monthly", {"months": 0}))
        self.assertFalse(response.ok)
        self.assertIn("Invalid tool args", response.errors[0])

    def test_remaining_tools_return_wire_payloads(self) -> None:
        monthly = self.executor.run(_request("trends.monthly", {"months": 2}))
        self.assertEqual([point["month"] for point in monthly.result], ["2025-08", "2025-09"])

        comparison = self.executor.run(
            _request(
                "compare.periods",
                {
                    "currentPeriod": {"startDate": "2025-09-01", "endDate": "2025-09-30"},
                    "previousPeriod": {"startDate": "2025-08-01", "endDate": "2025-08-31"},
                },
            )
        )
        self.assertEqual(comparison.result["change"]["direction"], "increase")

        csv_export = self.executor.run(_request("export.analytics", {"format": "csv"}))
        self.assertTrue(csv_export.result.startswith("Date,Amount,Category,Description\n"))

        for name in ("trends.daily", "ledger.category_performance", "detect.anomalies", "insights.spending", "recommend.savings"):
            with self.subTest(tool=name):
                response = self.executor.run(_request(name))
                self.assertTrue(response.ok, response.errors)
                self.assertIsInstance(response.result, list)

    def test_run_calls_runs_in_order(self) -> None:
        responses = self.executor.run_calls([_request("trends.daily"), _request("trends.monthly")])
        self.assertEqual([response.tool for response in responses], ["trends.daily", "trends.monthly"])


class ToolExecutorFailureTests(unittest.TestCase):
    def test_unknown_tool(self) -> None:
        response = ToolExecutor(registry).run(_request("nope"))
        self.assertFalse(response.ok)
        self.assertIn("Tool not registered: nope", response.errors[0])

    def test_ledger_failure_becomes_error_response(self) -> None:
        broken = AnalyticsService(_BrokenLedger(), clock=FixedClock("2025-09-20"))
        with patch("spendlens.tools._analytics_support.analytics_service", broken):
            with self.assertLogs("spendlens.application.tool_executor", level="ERROR"):
                response = ToolExecutor(registry).run(_request("detect.anomalies"))

        self.assertFalse(response.ok)
        self.assertIn("ledger offline", response.errors[0])


if __name__ == "__main__":
    unittest.main()
