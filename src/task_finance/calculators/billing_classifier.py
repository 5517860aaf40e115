"""Billing classification of time entries.

A time entry either counts against the fixed budget ("regular") or is
time-and-material work billed outside the budget ("extra"). The legacy
value "tm" is an alias of "extra". Anything else, including unknown
strings, is regular: classification never inflates T&M billing.
"""

from enum import Enum
from typing import Optional

from task_finance.models.time_entry import TimeEntry


class BillingClass(str, Enum):
    """Billing bucket of a time entry."""

    REGULAR = "regular"
    EXTRA = "extra"


EXTRA_BILLING_TYPES = frozenset({"extra", "tm"})
KNOWN_BILLING_TYPES = EXTRA_BILLING_TYPES | {"regular"}


def _normalize(billing_type: Optional[str]) -> str:
    return (billing_type or "").strip().lower()


def classify_billing_type(billing_type: Optional[str]) -> BillingClass:
    """Classify a raw billing type string.

    Example:
        >>> classify_billing_type("TM")
        <BillingClass.EXTRA: 'extra'>
        >>> classify_billing_type("overtime??")
        <BillingClass.REGULAR: 'regular'>
        >>> classify_billing_type(None)
        <BillingClass.REGULAR: 'regular'>
    """
    if _normalize(billing_type) in EXTRA_BILLING_TYPES:
        return BillingClass.EXTRA
    return BillingClass.REGULAR


def is_known_billing_type(billing_type: Optional[str]) -> bool:
    """Whether the value is unset or one of the recognized billing types."""
    normalized = _normalize(billing_type)
    return normalized == "" or normalized in KNOWN_BILLING_TYPES


class BillingClassifier:
    """Labels time entries as regular or extra."""

    def classify(self, entry: TimeEntry) -> BillingClass:
        """Classify one entry by its billing type alone."""
        return classify_billing_type(entry.billing_type)

    def is_extra(self, entry: TimeEntry) -> bool:
        """Shortcut for ``classify(entry) is BillingClass.EXTRA``."""
        return self.classify(entry) is BillingClass.EXTRA
