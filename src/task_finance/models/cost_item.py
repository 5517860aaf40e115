"""Cost item data model for the finance engine.

This module defines the CostItem model which represents one external
(non-labor) expense attached to a task or a project.
"""

import datetime as dt
from typing import Optional

from pydantic import Field, field_validator

from task_finance.models.base import BaseDataModel


class CostItem(BaseDataModel):
    """Represents one external expense (software, licences, travel, ...).

    Cost items are always counted as external cost and are never
    reclassified as labor.

    Attributes:
        id: Cost item identifier
        project_id: Owning project (optional)
        task_id: Owning task; None means a project-level cost
        name: Short name of the expense
        description: Optional description
        category: Optional category (e.g. 'Software', 'Travel')
        amount_cents: Amount in cents
        date: Calendar day of the expense
        is_billable: Whether the expense is billable

    Example:
        >>> cost = CostItem(
        ...     id="c-1",
        ...     task_id="task-1",
        ...     name="Figma licence",
        ...     amount_cents=4500,
        ...     date=dt.date(2024, 3, 4),
        ... )
        >>> cost.amount_cents
        4500
    """

    id: str = Field(..., min_length=1, description="Cost item identifier")
    project_id: Optional[str] = Field(None, description="Project identifier")
    task_id: Optional[str] = Field(None, description="Task identifier")
    name: str = Field(..., min_length=1, description="Expense name")
    description: Optional[str] = Field(None, description="Expense description")
    category: Optional[str] = Field(None, description="Expense category")
    amount_cents: int = Field(..., description="Amount in cents")
    date: dt.date = Field(..., description="Calendar day of the expense")
    is_billable: bool = Field(True, description="Whether the expense is billable")

    @field_validator("name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that the name is not empty or whitespace only.

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()
