"""Time entry data model for the finance engine.

This module defines the TimeEntry model which represents one logged work
interval of a user on a task.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from task_finance.models.base import BaseDataModel, to_decimal


class TimeEntry(BaseDataModel):
    """Represents a single logged work interval.

    Entries are created when a user logs time manually or stops a timer.
    The engine never trusts ``amount_cents``: the amount is always
    recomputed from ``hours`` and the resolved hourly rate.

    Attributes:
        id: Entry identifier
        task_id: Task the time was logged on
        user_id: User who logged the time
        user_name: Display name of the user (optional)
        date: Calendar day the work belongs to
        hours: Decimal hours worked (>= 0)
        hourly_rate_cents: Explicit rate for this entry (optional)
        billing_type: Raw billing type ('regular', 'extra', legacy 'tm', ...)
        is_billable: Whether the entry is billable
        amount_cents: Amount stored at the source (informational only)
        created_at: When the entry was created (used for ordering ties)
        description: Optional free-text description

    Example:
        >>> entry = TimeEntry(
        ...     id="te-1",
        ...     task_id="task-1",
        ...     user_id="user-1",
        ...     date=dt.date(2024, 3, 4),
        ...     hours=Decimal("2.5"),
        ...     billing_type="regular",
        ... )
        >>> entry.hours
        Decimal('2.5')
    """

    id: str = Field(..., min_length=1, description="Entry identifier")
    task_id: str = Field(..., min_length=1, description="Task identifier")
    user_id: str = Field(..., min_length=1, description="User identifier")
    user_name: Optional[str] = Field(None, description="User display name")
    date: dt.date = Field(..., description="Calendar day of the work")
    hours: Decimal = Field(..., ge=0, description="Decimal hours worked")
    hourly_rate_cents: Optional[int] = Field(
        None, description="Explicit hourly rate in cents"
    )
    billing_type: Optional[str] = Field(None, description="Raw billing type")
    is_billable: bool = Field(True, description="Whether the entry is billable")
    amount_cents: Optional[int] = Field(
        None, description="Stored amount, never used for totals"
    )
    created_at: Optional[dt.datetime] = Field(None, description="Creation time")
    description: Optional[str] = Field(None, description="Optional notes")

    @field_validator("hours", mode="before")
    @classmethod
    def convert_hours(cls, v: Union[str, int, float, Decimal]) -> Decimal:
        """Convert hours to Decimal for precision.

        Args:
            v: The value to convert

        Returns:
            The value as a Decimal

        Raises:
            ValueError: If the value cannot be converted to Decimal
        """
        return to_decimal(v)

    @field_validator("billing_type")
    @classmethod
    def normalize_billing_type(cls, v: Optional[str]) -> Optional[str]:
        """Lower-case and strip the billing type, mapping blanks to None."""
        if v is None:
            return None
        v = v.strip().lower()
        return v or None
