"""Sales commission calculation.

Commission is paid on realized revenue: the fixed budget plus whatever
time-and-material overage was billed on top of it. It is not computed on
cost.
"""

from decimal import Decimal
from typing import Optional

from task_finance.calculators.money import percent_of_cents
from task_finance.models.finance_settings import FinanceSettings

DEFAULT_COMMISSION_PERCENT = Decimal("10")


class CommissionCalculator:
    """Computes sales commission for a task or project.

    Attributes:
        default_percent: Percentage used when commission is enabled but no
            percentage is set

    Example:
        >>> calculator = CommissionCalculator()
        >>> settings = FinanceSettings(sales_commission_enabled=True)
        >>> calculator.commission(100000, 25000, settings)
        12500
    """

    def __init__(self, default_percent: Optional[Decimal] = None):
        self.default_percent = (
            DEFAULT_COMMISSION_PERCENT if default_percent is None else default_percent
        )

    def effective_percent(self, settings: FinanceSettings) -> Decimal:
        """The commission percentage, falling back to the default."""
        if settings.sales_commission_percent is None:
            return self.default_percent
        return settings.sales_commission_percent

    def commission(
        self, budget_cents: int, extra_cents: int, settings: FinanceSettings
    ) -> int:
        """Calculate commission in cents.

        Args:
            budget_cents: Fixed budget in cents
            extra_cents: Time-and-material overage in cents
            settings: Finance settings carrying the commission flag and percent

        Returns:
            round((budget + extra) × percent / 100), or 0 when commission is
            disabled or the base is not positive
        """
        if not settings.commission_enabled:
            return 0

        base = budget_cents + extra_cents
        if base <= 0:
            return 0

        return percent_of_cents(base, self.effective_percent(settings))
