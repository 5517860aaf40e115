"""Finance snapshot data model.

This module defines the FinanceSnapshot model: one already-fetched,
already-authorized read of everything the engine needs for a task or a
project. The engine is a pure function of a snapshot.
"""

import datetime as dt
from typing import Dict, List, Optional

from pydantic import Field, model_validator

from task_finance.models.base import BaseDataModel
from task_finance.models.cost_item import CostItem
from task_finance.models.project import Project, Task
from task_finance.models.time_entry import TimeEntry


class FinanceSnapshot(BaseDataModel):
    """Immutable input of one engine invocation.

    Attributes:
        snapshot_id: Optional identifier used for logging
        project: Owning project (None for standalone tasks)
        tasks: Tasks covered by the snapshot
        time_entries: Time entries of those tasks
        cost_items: Cost items of the tasks and the project
        user_default_rates: Per-user default hourly rates in cents
        as_of: Business date the snapshot was taken on
        window_start: Optional first day to include (inclusive)
        window_end: Optional last day to include (inclusive)

    Example:
        >>> snapshot = FinanceSnapshot(
        ...     tasks=[Task(id="task-1")],
        ...     as_of=dt.date(2024, 3, 31),
        ... )
        >>> snapshot.get_task("task-1").id
        'task-1'
    """

    snapshot_id: Optional[str] = Field(None, description="Snapshot identifier")
    project: Optional[Project] = Field(None, description="Owning project")
    tasks: List[Task] = Field(default_factory=list)
    time_entries: List[TimeEntry] = Field(default_factory=list)
    cost_items: List[CostItem] = Field(default_factory=list)
    user_default_rates: Dict[str, int] = Field(default_factory=dict)
    as_of: dt.date = Field(
        default_factory=dt.date.today, description="Snapshot business date"
    )
    window_start: Optional[dt.date] = Field(None, description="Window start")
    window_end: Optional[dt.date] = Field(None, description="Window end")

    @model_validator(mode="after")
    def validate_window(self) -> "FinanceSnapshot":
        """Validate that the window is not inverted.

        Raises:
            ValueError: If window_start is after window_end
        """
        if (
            self.window_start is not None
            and self.window_end is not None
            and self.window_start > self.window_end
        ):
            raise ValueError(
                f"window_start ({self.window_start}) must be on or before "
                f"window_end ({self.window_end})"
            )
        return self

    def get_task(self, task_id: str) -> Task:
        """Look up a task by id.

        Raises:
            KeyError: If the snapshot does not contain the task
        """
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(f"Task '{task_id}' is not part of the snapshot")

    def entries_for_task(self, task_id: str) -> List[TimeEntry]:
        """Time entries logged on the given task, in snapshot order."""
        return [e for e in self.time_entries if e.task_id == task_id]

    def costs_for_task(self, task_id: str) -> List[CostItem]:
        """Cost items attached to the given task, in snapshot order."""
        return [c for c in self.cost_items if c.task_id == task_id]

    def project_level_costs(self) -> List[CostItem]:
        """Cost items attached to the project but to no task."""
        return [c for c in self.cost_items if c.task_id is None]
