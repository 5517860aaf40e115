"""Finance settings data model.

This module defines the FinanceSettings model which carries the budget,
rate and commission configuration of a task or a project.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import Field, field_validator

from task_finance.models.base import BaseDataModel, to_decimal


class FinanceSettings(BaseDataModel):
    """Budget, rate and commission settings of a task or project.

    Every field is optional so that task settings can inherit from the
    owning project's settings field by field (see ``inherit``).

    Attributes:
        fixed_budget_cents: Pre-agreed spending ceiling in cents
        hourly_rate_cents: Hourly rate override in cents
        sales_commission_enabled: Whether sales commission applies
            (None means "not set", which resolves to disabled)
        sales_commission_percent: Commission percentage (None means default)

    Example:
        >>> settings = FinanceSettings(
        ...     fixed_budget_cents=100000,
        ...     sales_commission_enabled=True,
        ... )
        >>> settings.commission_enabled
        True
    """

    fixed_budget_cents: Optional[int] = Field(
        None, ge=0, description="Fixed budget in cents"
    )
    hourly_rate_cents: Optional[int] = Field(
        None, ge=0, description="Hourly rate override in cents"
    )
    sales_commission_enabled: Optional[bool] = Field(
        None, description="Whether sales commission is enabled"
    )
    sales_commission_percent: Optional[Decimal] = Field(
        None, description="Sales commission percentage"
    )

    @field_validator("sales_commission_percent", mode="before")
    @classmethod
    def convert_percent(
        cls, v: Optional[Union[str, int, float, Decimal]]
    ) -> Optional[Decimal]:
        """Convert the commission percentage to Decimal for precision."""
        return to_decimal(v)

    @property
    def commission_enabled(self) -> bool:
        """Whether commission applies, treating an unset flag as disabled."""
        return bool(self.sales_commission_enabled)

    def inherit(self, parent: Optional["FinanceSettings"]) -> "FinanceSettings":
        """Return a copy with unset rate and commission fields taken from parent.

        The fixed budget is never inherited: a project budget is a ceiling
        for the whole project, not for each of its tasks.

        Args:
            parent: Settings of the owning project (may be None)

        Returns:
            New FinanceSettings with inherited values filled in

        Example:
            >>> project = FinanceSettings(hourly_rate_cents=5000,
            ...                           sales_commission_enabled=True)
            >>> task = FinanceSettings(fixed_budget_cents=100000)
            >>> merged = task.inherit(project)
            >>> (merged.hourly_rate_cents, merged.commission_enabled)
            (5000, True)
        """
        if parent is None:
            return self.model_copy()

        return FinanceSettings(
            fixed_budget_cents=self.fixed_budget_cents,
            hourly_rate_cents=(
                self.hourly_rate_cents
                if self.hourly_rate_cents is not None
                else parent.hourly_rate_cents
            ),
            sales_commission_enabled=(
                self.sales_commission_enabled
                if self.sales_commission_enabled is not None
                else parent.sales_commission_enabled
            ),
            sales_commission_percent=(
                self.sales_commission_percent
                if self.sales_commission_percent is not None
                else parent.sales_commission_percent
            ),
        )
