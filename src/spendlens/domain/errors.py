from __future__ import annotations


class AnalyticsError(RuntimeError):
    pass


class UsageError(AnalyticsError, ValueError):
    """A required option is missing or malformed."""


class NotFoundError(AnalyticsError, LookupError):
    """The requested budget (or other ledger entity) does not exist."""


class LedgerError(AnalyticsError):
    """The ledger could not be read."""
