"""Cost aggregation into totals and per-day buckets.

This module turns priced time entries and cost items into:
- labor and external cost totals
- calendar-day buckets with regular/extra hours and a per-user breakdown
- hour totals (total, billable, regular, extra)

Days with no hours and no cost are left out of ``daily_data``. This only
keeps chart series dense; totals do not depend on it.
"""

import datetime as dt
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from task_finance.calculators.entry_pricing import PricedEntry
from task_finance.models.cost_item import CostItem

logger = logging.getLogger(__name__)

ZERO_HOURS = Decimal("0")


@dataclass
class UserDayBreakdown:
    """One user's activity on one day.

    Attributes:
        user_id: User identifier
        user_name: Display name (None if unknown)
        hours: Hours logged that day
        amount_cents: Labor amount of those hours
        is_extra: True if any of the user's entries that day is extra
    """

    user_id: str
    user_name: Optional[str]
    hours: Decimal
    amount_cents: int
    is_extra: bool


@dataclass
class DayBucket:
    """Aggregated activity of one calendar day.

    Attributes:
        date: Calendar day
        labor_cost_cents: Labor cost of the day's entries
        external_cost_cents: External cost of the day's cost items
        regular_hours: Hours classified regular
        extra_hours: Hours classified extra
        per_user: Per-user breakdown, most hours first
    """

    date: dt.date
    labor_cost_cents: int
    external_cost_cents: int
    regular_hours: Decimal
    extra_hours: Decimal
    per_user: List[UserDayBreakdown] = field(default_factory=list)

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.extra_hours

    @property
    def total_cost_cents(self) -> int:
        return self.labor_cost_cents + self.external_cost_cents

    @property
    def is_empty(self) -> bool:
        return self.total_hours == ZERO_HOURS and self.total_cost_cents == 0


@dataclass
class AggregationResult:
    """Totals and daily buckets of one aggregation run.

    Attributes:
        labor_cost_cents: Sum of bucket labor cost
        external_cost_cents: Sum of bucket external cost
        daily_data: Non-empty day buckets, oldest first
        total_hours: Hours of all aggregated entries
        billable_hours: Hours of billable entries
        regular_hours: Hours classified regular
        extra_hours: Hours classified extra
        unresolved_rate_entry_ids: Entries priced at 0 for lack of a rate
    """

    labor_cost_cents: int
    external_cost_cents: int
    daily_data: List[DayBucket]
    total_hours: Decimal = ZERO_HOURS
    billable_hours: Decimal = ZERO_HOURS
    regular_hours: Decimal = ZERO_HOURS
    extra_hours: Decimal = ZERO_HOURS
    unresolved_rate_entry_ids: List[str] = field(default_factory=list)

    @property
    def total_cost_cents(self) -> int:
        return self.labor_cost_cents + self.external_cost_cents


def _created_sort_key(created_at: Optional[dt.datetime]) -> Tuple[bool, dt.datetime]:
    # Entries without a creation time sort after those with one
    if created_at is None:
        return (True, dt.datetime.min)
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return (False, created_at)


class _UserAccumulator:
    def __init__(self, priced: PricedEntry, index: int):
        self.user_id = priced.user_id
        self.user_name = priced.entry.user_name
        self.hours = ZERO_HOURS
        self.amount_cents = 0
        self.is_extra = False
        self.first_created = _created_sort_key(priced.entry.created_at)
        self.first_index = index

    def add(self, priced: PricedEntry, index: int) -> None:
        self.hours += priced.hours
        self.amount_cents += priced.amount_cents
        if priced.is_extra:
            self.is_extra = True
        if self.user_name is None:
            self.user_name = priced.entry.user_name
        self.first_created = min(
            self.first_created, _created_sort_key(priced.entry.created_at)
        )
        self.first_index = min(self.first_index, index)

    def sort_key(self):
        return (-self.hours, self.first_created, self.first_index)

    def to_breakdown(self) -> UserDayBreakdown:
        return UserDayBreakdown(
            user_id=self.user_id,
            user_name=self.user_name,
            hours=self.hours,
            amount_cents=self.amount_cents,
            is_extra=self.is_extra,
        )


class _BucketAccumulator:
    def __init__(self, date: dt.date):
        self.date = date
        self.labor_cost_cents = 0
        self.external_cost_cents = 0
        self.regular_hours = ZERO_HOURS
        self.extra_hours = ZERO_HOURS
        self.users: Dict[str, _UserAccumulator] = OrderedDict()

    def add_entry(self, priced: PricedEntry, index: int) -> None:
        if priced.is_extra:
            self.extra_hours += priced.hours
        else:
            self.regular_hours += priced.hours
        self.labor_cost_cents += priced.amount_cents

        user = self.users.get(priced.user_id)
        if user is None:
            user = self.users[priced.user_id] = _UserAccumulator(priced, index)
        user.add(priced, index)

    def add_cost(self, cost: CostItem) -> None:
        self.external_cost_cents += cost.amount_cents

    def to_bucket(self) -> DayBucket:
        users = sorted(self.users.values(), key=lambda u: u.sort_key())
        return DayBucket(
            date=self.date,
            labor_cost_cents=self.labor_cost_cents,
            external_cost_cents=self.external_cost_cents,
            regular_hours=self.regular_hours,
            extra_hours=self.extra_hours,
            per_user=[u.to_breakdown() for u in users],
        )


def in_window(
    date: dt.date, window_start: Optional[dt.date], window_end: Optional[dt.date]
) -> bool:
    if window_start is not None and date < window_start:
        return False
    if window_end is not None and date > window_end:
        return False
    return True


class CostAggregator:
    """Aggregates priced entries and cost items into totals and day buckets.

    The aggregator:
    1. Filters entries and costs to the optional inclusive date window
    2. Groups entries by calendar day, splitting regular and extra hours
    3. Groups cost items by calendar day
    4. Builds a per-user breakdown for each day
    5. Drops days with no hours and no cost
    6. Sums bucket figures into totals

    Example:
        >>> aggregator = CostAggregator()
        >>> result = aggregator.aggregate(priced_entries, cost_items)
        >>> result.labor_cost_cents == sum(p.amount_cents for p in priced_entries)
        True
    """

    def aggregate(
        self,
        entries: Sequence[PricedEntry],
        costs: Sequence[CostItem],
        window_start: Optional[dt.date] = None,
        window_end: Optional[dt.date] = None,
    ) -> AggregationResult:
        """Aggregate entries and costs.

        Args:
            entries: Priced time entries
            costs: External cost items
            window_start: First day to include (inclusive, optional)
            window_end: Last day to include (inclusive, optional)

        Returns:
            AggregationResult with totals, hour figures and daily buckets
        """
        windowed_entries = [
            p for p in entries if in_window(p.date, window_start, window_end)
        ]
        windowed_costs = [
            c for c in costs if in_window(c.date, window_start, window_end)
        ]
        if window_start is not None or window_end is not None:
            logger.debug(
                f"Window {window_start} to {window_end}: "
                f"{len(windowed_entries)}/{len(entries)} entries, "
                f"{len(windowed_costs)}/{len(costs)} costs"
            )

        buckets: Dict[dt.date, _BucketAccumulator] = {}
        for index, priced in enumerate(windowed_entries):
            bucket = buckets.get(priced.date)
            if bucket is None:
                bucket = buckets[priced.date] = _BucketAccumulator(priced.date)
            bucket.add_entry(priced, index)

        for cost in windowed_costs:
            bucket = buckets.get(cost.date)
            if bucket is None:
                bucket = buckets[cost.date] = _BucketAccumulator(cost.date)
            bucket.add_cost(cost)

        daily_data = []
        for date in sorted(buckets):
            day = buckets[date].to_bucket()
            if day.is_empty:
                continue
            daily_data.append(day)

        regular_hours = sum((d.regular_hours for d in daily_data), ZERO_HOURS)
        extra_hours = sum((d.extra_hours for d in daily_data), ZERO_HOURS)
        billable_hours = sum(
            (p.hours for p in windowed_entries if p.entry.is_billable), ZERO_HOURS
        )

        result = AggregationResult(
            labor_cost_cents=sum(d.labor_cost_cents for d in daily_data),
            external_cost_cents=sum(d.external_cost_cents for d in daily_data),
            daily_data=daily_data,
            total_hours=regular_hours + extra_hours,
            billable_hours=billable_hours,
            regular_hours=regular_hours,
            extra_hours=extra_hours,
            unresolved_rate_entry_ids=[
                p.id for p in windowed_entries if not p.rate_was_resolved
            ],
        )

        logger.info(
            f"Aggregated {len(windowed_entries)} entries and {len(windowed_costs)} "
            f"costs into {len(daily_data)} day buckets "
            f"(labor={result.labor_cost_cents}, "
            f"external={result.external_cost_cents})"
        )
        return result
