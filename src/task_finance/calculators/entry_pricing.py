"""Per-entry enrichment: rate resolution, pricing and classification.

Every consumer of the engine (summary, time series, ledger) works on the
same list of PricedEntry records produced here, which is what makes their
totals agree.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from task_finance.calculators.billing_classifier import (
    BillingClass,
    BillingClassifier,
)
from task_finance.calculators.money import labor_amount_cents
from task_finance.calculators.rate_resolver import RateResolver, ResolvedRate
from task_finance.models.project import Project, Task
from task_finance.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricedEntry:
    """A time entry together with its resolved rate, amount and class.

    Attributes:
        entry: The source time entry
        rate: Resolved hourly rate and its source
        amount_cents: round(hours × rate), recomputed, never taken from source
        billing_class: Regular or extra

    Example:
        >>> priced = price_entry(entry, task, project, {})
        >>> priced.amount_cents
        50000
    """

    entry: TimeEntry
    rate: ResolvedRate
    amount_cents: int
    billing_class: BillingClass

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def date(self) -> dt.date:
        return self.entry.date

    @property
    def hours(self) -> Decimal:
        return self.entry.hours

    @property
    def user_id(self) -> str:
        return self.entry.user_id

    @property
    def rate_cents(self) -> int:
        return self.rate.rate_cents

    @property
    def rate_was_resolved(self) -> bool:
        return self.rate.rate_was_resolved

    @property
    def is_extra(self) -> bool:
        return self.billing_class is BillingClass.EXTRA


def price_entry(
    entry: TimeEntry,
    task: Optional[Task],
    project: Optional[Project],
    user_default_rates: Mapping[str, int],
    resolver: Optional[RateResolver] = None,
    classifier: Optional[BillingClassifier] = None,
) -> PricedEntry:
    """Resolve, price and classify a single time entry.

    Args:
        entry: Time entry to enrich
        task: Task the entry belongs to (None if unknown)
        project: Project owning the task (None for standalone tasks)
        user_default_rates: Mapping of user_id to default rate in cents
        resolver: Rate resolver to use (default: new RateResolver)
        classifier: Billing classifier to use (default: new BillingClassifier)

    Returns:
        PricedEntry with amount recomputed from hours and resolved rate
    """
    resolver = resolver or RateResolver()
    classifier = classifier or BillingClassifier()

    rate = resolver.resolve(
        entry, task, project, user_default_rates.get(entry.user_id)
    )
    return PricedEntry(
        entry=entry,
        rate=rate,
        amount_cents=labor_amount_cents(entry.hours, rate.rate_cents),
        billing_class=classifier.classify(entry),
    )


def price_entries(
    entries: Iterable[TimeEntry],
    tasks: Iterable[Task],
    project: Optional[Project] = None,
    user_default_rates: Optional[Mapping[str, int]] = None,
) -> List[PricedEntry]:
    """Price a batch of entries, looking up each entry's task.

    Entries whose task is not among ``tasks`` are still priced; their rate
    falls back to the project and user levels.

    Args:
        entries: Time entries to enrich
        tasks: Tasks the entries may belong to
        project: Project owning the tasks
        user_default_rates: Mapping of user_id to default rate in cents

    Returns:
        List of PricedEntry in the same order as entries
    """
    tasks_by_id: Dict[str, Task] = {task.id: task for task in tasks}
    rates = user_default_rates or {}
    resolver = RateResolver()
    classifier = BillingClassifier()

    priced = [
        price_entry(
            entry,
            tasks_by_id.get(entry.task_id),
            project,
            rates,
            resolver=resolver,
            classifier=classifier,
        )
        for entry in entries
    ]

    unresolved = sum(1 for p in priced if not p.rate_was_resolved)
    if unresolved:
        logger.warning(
            f"{unresolved} of {len(priced)} time entries have no resolvable "
            f"hourly rate and are priced at 0"
        )
    logger.debug(f"Priced {len(priced)} time entries")
    return priced
