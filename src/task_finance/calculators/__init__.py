"""Calculators for per-entry pricing and finance figures.

This package contains:
- RateResolver: hourly rate fallback chain
- BillingClassifier: regular vs. extra (time-and-material) entries
- price_entries: rate resolution, pricing and classification in one pass
- CommissionCalculator: sales commission on budget + extra
- FinanceSummaryBuilder: spent / remaining / extra figures
- money and time_utils: rounding policy and display helpers
"""

from task_finance.calculators.billing_classifier import (
    EXTRA_BILLING_TYPES,
    KNOWN_BILLING_TYPES,
    BillingClass,
    BillingClassifier,
    classify_billing_type,
    is_known_billing_type,
)
from task_finance.calculators.commission_calculator import (
    DEFAULT_COMMISSION_PERCENT,
    CommissionCalculator,
)
from task_finance.calculators.entry_pricing import (
    PricedEntry,
    price_entries,
    price_entry,
)
from task_finance.calculators.finance_summary import (
    FinanceSummary,
    FinanceSummaryBuilder,
)
from task_finance.calculators.money import (
    cents_to_major,
    format_currency,
    labor_amount_cents,
    major_to_cents,
    percent_of_cents,
    round_cents,
)
from task_finance.calculators.rate_resolver import (
    UNRESOLVED_RATE,
    RateContext,
    RateResolver,
    RateSource,
    ResolvedRate,
)
from task_finance.calculators.time_utils import (
    format_hours,
    hours_from_seconds,
    hours_to_seconds,
    hours_to_time,
)

__all__ = [
    "BillingClass",
    "BillingClassifier",
    "CommissionCalculator",
    "DEFAULT_COMMISSION_PERCENT",
    "EXTRA_BILLING_TYPES",
    "FinanceSummary",
    "FinanceSummaryBuilder",
    "KNOWN_BILLING_TYPES",
    "PricedEntry",
    "RateContext",
    "RateResolver",
    "RateSource",
    "ResolvedRate",
    "UNRESOLVED_RATE",
    "cents_to_major",
    "classify_billing_type",
    "format_currency",
    "format_hours",
    "hours_from_seconds",
    "hours_to_seconds",
    "hours_to_time",
    "is_known_billing_type",
    "labor_amount_cents",
    "major_to_cents",
    "percent_of_cents",
    "price_entries",
    "price_entry",
    "round_cents",
]
