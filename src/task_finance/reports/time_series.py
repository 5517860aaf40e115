"""Chart series built from aggregated day buckets.

This module turns the CostAggregator's daily data into:
- the cumulative-burn series (running cost against a flat budget line)
- the cost distribution slices for the ring chart
- per-day activity rows for the task daily activity chart
- a user-by-day hours matrix as a pandas DataFrame
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Sequence

import pandas as pd

from task_finance.aggregators.cost_aggregator import DayBucket, UserDayBreakdown

logger = logging.getLogger(__name__)

LABOR_BUDGET_LABEL = "Labor (Budget)"
EXTERNAL_LABEL = "External"
LABOR_EXTRA_LABEL = "Labor (Extra)"
COMMISSION_LABEL = "Commission"


@dataclass(frozen=True)
class SeriesPoint:
    """One point of the cumulative-burn chart.

    Attributes:
        date: Calendar day of the bucket
        cumulative_cost_cents: Labor + external cost up to and including date
        budget_cents: Budget reference line (same on every point)
    """

    date: dt.date
    cumulative_cost_cents: int
    budget_cents: int


@dataclass(frozen=True)
class DistributionSlice:
    """One slice of the cost distribution chart."""

    label: str
    value_cents: int


@dataclass
class DailyActivity:
    """One row of the daily activity chart.

    Attributes:
        date: Calendar day
        weekday: Day of week, Monday=0 ... Sunday=6
        regular_hours: Hours counted against the budget
        extra_hours: Time-and-material hours
        users: Per-user breakdown, most hours first
    """

    date: dt.date
    weekday: int
    regular_hours: Decimal
    extra_hours: Decimal
    users: List[UserDayBreakdown] = field(default_factory=list)

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.extra_hours


class TimeSeriesBuilder:
    """Builds chart series from day buckets.

    All methods take the bucket list as produced by CostAggregator, which
    is already sorted by date and free of empty days.

    Example:
        >>> builder = TimeSeriesBuilder()
        >>> series = builder.build_series(result.daily_data, 100000)
        >>> series[-1].cumulative_cost_cents == result.total_cost_cents
        True
    """

    def build_series(
        self, daily_data: Sequence[DayBucket], budget_cents: int
    ) -> List[SeriesPoint]:
        """Build the cumulative cost series.

        Args:
            daily_data: Day buckets in date order
            budget_cents: Budget drawn as a constant reference line

        Returns:
            One SeriesPoint per bucket with the running cost total
        """
        points = []
        running = 0
        for bucket in daily_data:
            running += bucket.labor_cost_cents + bucket.external_cost_cents
            points.append(
                SeriesPoint(
                    date=bucket.date,
                    cumulative_cost_cents=running,
                    budget_cents=budget_cents,
                )
            )
        logger.debug(f"Built cumulative series with {len(points)} points")
        return points

    def build_distribution(
        self,
        labor_cost_cents: int,
        external_cost_cents: int,
        budget_cents: int,
        commission_cents: int,
    ) -> List[DistributionSlice]:
        """Split costs into the fixed distribution categories.

        Labor is split at the budget into a within-budget part and an extra
        part. Categories with no positive value are omitted.

        Args:
            labor_cost_cents: Total labor cost
            external_cost_cents: Total external cost
            budget_cents: Fixed budget
            commission_cents: Sales commission

        Returns:
            Slices in the order Labor (Budget), External, Labor (Extra),
            Commission

        Example:
            >>> TimeSeriesBuilder().build_distribution(125000, 0, 100000, 12500)
            [DistributionSlice(label='Labor (Budget)', value_cents=100000),
             DistributionSlice(label='Labor (Extra)', value_cents=25000),
             DistributionSlice(label='Commission', value_cents=12500)]
        """
        labor_in_budget = max(0, min(labor_cost_cents, budget_cents))
        candidates = [
            (LABOR_BUDGET_LABEL, labor_in_budget),
            (EXTERNAL_LABEL, external_cost_cents),
            (LABOR_EXTRA_LABEL, labor_cost_cents - labor_in_budget),
            (COMMISSION_LABEL, commission_cents),
        ]
        return [
            DistributionSlice(label=label, value_cents=value)
            for label, value in candidates
            if value > 0
        ]

    def build_daily_activity(
        self, daily_data: Sequence[DayBucket]
    ) -> List[DailyActivity]:
        """Build daily activity rows for days with logged hours.

        Days that only carry external cost are skipped; the activity chart
        shows time, not money.
        """
        rows = [
            DailyActivity(
                date=bucket.date,
                weekday=bucket.date.weekday(),
                regular_hours=bucket.regular_hours,
                extra_hours=bucket.extra_hours,
                users=list(bucket.per_user),
            )
            for bucket in daily_data
            if bucket.per_user
        ]
        logger.debug(f"Built {len(rows)} daily activity rows")
        return rows

    def build_user_matrix(self, daily_data: Sequence[DayBucket]) -> pd.DataFrame:
        """Generate a user-by-day hours matrix.

        Creates a pandas DataFrame with users as rows and ISO dates as
        columns. Users are labelled with their display name when known.

        Args:
            daily_data: Day buckets in date order

        Returns:
            DataFrame of float hours, missing cells filled with 0

        Example:
            >>> matrix = builder.build_user_matrix(result.daily_data)
            >>> matrix.loc["Alice", "2024-03-04"]
            2.5
        """
        if not daily_data:
            logger.info("No daily data, returning empty DataFrame")
            return pd.DataFrame()

        # Structure: {user_label: {iso_date: hours}}
        matrix_data: Dict[str, Dict[str, float]] = defaultdict(dict)
        columns = []
        for bucket in daily_data:
            date_label = bucket.date.isoformat()
            columns.append(date_label)
            for user in bucket.per_user:
                label = user.user_name or user.user_id
                current = matrix_data[label].get(date_label, 0.0)
                matrix_data[label][date_label] = current + float(user.hours)

        df = pd.DataFrame.from_dict(matrix_data, orient="index")
        df = df.reindex(columns=columns).fillna(0.0).sort_index()

        logger.info(
            f"Generated matrix with {len(df)} users and {len(df.columns)} days"
        )
        return df
