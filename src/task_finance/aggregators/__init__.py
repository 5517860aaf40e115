"""Aggregators for turning priced records into totals and day buckets.

This package contains:
- CostAggregator: labor/external totals and per-day buckets
- ProjectFinanceAggregator: project roll-up of task contributions
"""

from task_finance.aggregators.cost_aggregator import (
    AggregationResult,
    CostAggregator,
    DayBucket,
    UserDayBreakdown,
    in_window,
)
from task_finance.aggregators.project_aggregator import (
    ProjectFinanceAggregator,
    ProjectRollup,
    TaskContribution,
)

__all__ = [
    "AggregationResult",
    "CostAggregator",
    "DayBucket",
    "ProjectFinanceAggregator",
    "ProjectRollup",
    "TaskContribution",
    "UserDayBreakdown",
    "in_window",
]
