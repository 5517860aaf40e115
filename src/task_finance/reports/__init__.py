"""Report builders for the finance engine.

This package contains:
- TimeSeriesBuilder: cumulative series, distribution, daily activity
- TransactionListBuilder: the ledger
- FinanceEngine: the facade producing task and project reports
"""

from task_finance.reports.finance_engine import (
    FinanceEngine,
    ProjectFinanceReport,
    TaskFinanceReport,
)
from task_finance.reports.time_series import (
    DailyActivity,
    DistributionSlice,
    SeriesPoint,
    TimeSeriesBuilder,
)
from task_finance.reports.transaction_list import (
    Transaction,
    TransactionListBuilder,
    TransactionType,
    ledger_total,
)

__all__ = [
    "DailyActivity",
    "DistributionSlice",
    "FinanceEngine",
    "ProjectFinanceReport",
    "SeriesPoint",
    "TaskFinanceReport",
    "TimeSeriesBuilder",
    "Transaction",
    "TransactionListBuilder",
    "TransactionType",
    "ledger_total",
]
