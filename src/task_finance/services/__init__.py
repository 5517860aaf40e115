"""Caller-side services around the finance engine."""

from task_finance.services.event_bus import FinanceEvent, FinanceEventBus
from task_finance.services.report_cache import FinanceReportCache

__all__ = ["FinanceEvent", "FinanceEventBus", "FinanceReportCache"]
