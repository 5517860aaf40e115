"""Task and project data models for the finance engine.

This module defines the Task and Project models which own time entries
and cost items and carry their finance settings.
"""
from typing import Optional

from pydantic import Field, field_validator

from task_finance.models.base import BaseDataModel
from task_finance.models.finance_settings import FinanceSettings

DONE_STATUS = "done"


class Project(BaseDataModel):
    """Represents a project.

    A project supplies rate and commission fallbacks to its tasks and may
    carry a project-wide budget.

    Attributes:
        id: Project identifier
        name: Project name
        client_name: Client name (optional)
        finance: Project finance settings

    Example:
        >>> project = Project(
        ...     id="proj-1",
        ...     name="Website Redesign",
        ...     finance=FinanceSettings(hourly_rate_cents=5000),
        ... )
        >>> project.hourly_rate_cents
        5000
    """

    id: str = Field(..., min_length=1, description="Project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    client_name: Optional[str] = Field(None, description="Client name")
    finance: FinanceSettings = Field(default_factory=FinanceSettings)

    @field_validator("id", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Args:
            v: The value to validate
            info: Field validation info

        Returns:
            The validated value

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @property
    def hourly_rate_cents(self) -> Optional[int]:
        """Project default hourly rate in cents."""
        return self.finance.hourly_rate_cents


class Task(BaseDataModel):
    """Represents a task with its finance settings.

    Attributes:
        id: Task identifier
        title: Task title
        status: Workflow status ('todo', 'in_progress', 'done', ...)
        project_id: Owning project (None for standalone tasks)
        finance: Task finance settings

    Example:
        >>> task = Task(
        ...     id="task-1",
        ...     title="Landing page",
        ...     finance=FinanceSettings(fixed_budget_cents=100000),
        ... )
        >>> task.finance.fixed_budget_cents
        100000
    """

    id: str = Field(..., min_length=1, description="Task identifier")
    title: str = Field("", description="Task title")
    status: str = Field("todo", description="Workflow status")
    project_id: Optional[str] = Field(None, description="Project identifier")
    finance: FinanceSettings = Field(default_factory=FinanceSettings)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        """Lower-case and strip the status."""
        return v.strip().lower()

    @property
    def hourly_rate_cents(self) -> Optional[int]:
        """Task-level hourly rate override in cents."""
        return self.finance.hourly_rate_cents

    @property
    def is_done(self) -> bool:
        """Whether the task is completed."""
        return self.status == DONE_STATUS

    def effective_settings(self, project: Optional[Project]) -> FinanceSettings:
        """Task settings with rate and commission inherited from the project."""
        return self.finance.inherit(project.finance if project else None)
