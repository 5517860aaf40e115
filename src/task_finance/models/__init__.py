"""Data models for the finance engine.

This package contains Pydantic models for all engine inputs:
- BaseDataModel: Base class with common configuration
- TimeEntry: One logged work interval
- CostItem: One external expense
- FinanceSettings: Budget, rate and commission settings
- Project / Task: Owners of entries, costs and settings
- FinanceSnapshot: One complete engine input
"""

from task_finance.models.base import BaseDataModel
from task_finance.models.cost_item import CostItem
from task_finance.models.finance_settings import FinanceSettings
from task_finance.models.project import DONE_STATUS, Project, Task
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.models.time_entry import TimeEntry

__all__ = [
    "BaseDataModel",
    "CostItem",
    "DONE_STATUS",
    "FinanceSettings",
    "FinanceSnapshot",
    "Project",
    "Task",
    "TimeEntry",
]
