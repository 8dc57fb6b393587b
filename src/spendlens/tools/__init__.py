# Importing the tool modules registers them on the shared registry.
from spendlens.tools.detect import anomalies  # noqa: F401
from spendlens.tools.forecast import budget_projection  # noqa: F401
from spendlens.tools.insights import spending_insights  # noqa: F401
from spendlens.tools.ledger import category_summary, comparison, export, month_summary  # noqa: F401
