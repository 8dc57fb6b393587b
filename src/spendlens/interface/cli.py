from __future__ import annotations

import json
from datetime import datetime, timezone

from spendlens.application.analytics_service import AnalyticsService
from spendlens.application.tool_executor import ToolExecutor
from spendlens.domain.schemas import ToolContext, ToolRequest
from spendlens.tools.registry import registry

DEFAULT_TOOL = "ledger.spending_summary"


def build_service() -> AnalyticsService:
    import spendlens.tools  # noqa: F401
    from spendlens.tools._analytics_support import current_service

    return current_service()


def main() -> None:
    build_service()
    print("Tools: " + ", ".join(registry.names()))
    tool_name = input("SpendLens > ").strip() or DEFAULT_TOOL
    raw_args = input("args (JSON, optional) > ").strip()
    try:
        args = json.loads(raw_args) if raw_args else {}
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON args: {exc}")
        return

    request = ToolRequest(
        request_id=f"req_cli_{datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')}",
        tool=tool_name,
        args=args if isinstance(args, dict) else {},
        context=ToolContext(user_id="u_cli"),
    )
    response = ToolExecutor(registry).run(request)
    print(response.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
