"""Budget consumption summary for a task or project.

Combines the fixed budget with aggregated labor and external cost into
the canonical figures shown by the dashboard, the finance panel and the
report: spent, remaining and extra.

Margin is deliberately not computed here. Consumers that need it derive
it from the raw components exposed on FinanceSummary.
"""

from dataclasses import dataclass
from typing import Optional

from task_finance.models.finance_settings import FinanceSettings


@dataclass(frozen=True)
class FinanceSummary:
    """Budget consumption figures, all in cents.

    Attributes:
        budget_amount_cents: Fixed budget (0 when unset)
        labor_cost_cents: Sum of priced time entry amounts
        external_cost_cents: Sum of cost item amounts
        total_cost_cents: labor + external
        spent_cents: Total realized cost (equal to total_cost_cents)
        remaining_cents: max(0, budget - total), never negative
        extra_cents: max(0, total - budget), the overrun

    Example:
        >>> summary = FinanceSummaryBuilder().build(
        ...     FinanceSettings(fixed_budget_cents=100000), 125000, 0
        ... )
        >>> (summary.remaining_cents, summary.extra_cents)
        (0, 25000)
    """

    budget_amount_cents: int
    labor_cost_cents: int
    external_cost_cents: int
    total_cost_cents: int
    spent_cents: int
    remaining_cents: int
    extra_cents: int

    @property
    def is_over_budget(self) -> bool:
        return self.extra_cents > 0


class FinanceSummaryBuilder:
    """Builds FinanceSummary values from settings and aggregated costs."""

    def build(
        self,
        settings: Optional[FinanceSettings],
        labor_cost_cents: int,
        external_cost_cents: int,
    ) -> FinanceSummary:
        """Build the summary of one task.

        Args:
            settings: Finance settings supplying the fixed budget
            labor_cost_cents: Aggregated labor cost
            external_cost_cents: Aggregated external cost

        Returns:
            FinanceSummary; a missing budget counts as 0, making all cost extra
        """
        budget = 0
        if settings is not None and settings.fixed_budget_cents is not None:
            budget = settings.fixed_budget_cents
        return self.build_from_budget(budget, labor_cost_cents, external_cost_cents)

    def build_from_budget(
        self, budget_cents: int, labor_cost_cents: int, external_cost_cents: int
    ) -> FinanceSummary:
        """Build a summary from an already-determined budget amount."""
        total = labor_cost_cents + external_cost_cents
        return FinanceSummary(
            budget_amount_cents=budget_cents,
            labor_cost_cents=labor_cost_cents,
            external_cost_cents=external_cost_cents,
            total_cost_cents=total,
            spent_cents=total,
            remaining_cents=max(0, budget_cents - total),
            extra_cents=max(0, total - budget_cents),
        )
