"""Tests for the cost aggregator.

Covers additivity of totals, day bucket density, regular/extra splitting
and the per-user daily breakdown.
"""

import datetime as dt
from decimal import Decimal

import pytest

from task_finance.aggregators.cost_aggregator import CostAggregator
from task_finance.calculators.entry_pricing import price_entries
from task_finance.models import Task


@pytest.fixture
def aggregator():
    return CostAggregator()


@pytest.fixture
def price(sample_project):
    def _price(entries):
        return price_entries(entries, [Task(id="task-1")], sample_project)

    return _price


class TestCostAggregator:
    """Test suite for CostAggregator."""

    def test_additivity(self, aggregator, price, make_entry, make_cost):
        """Labor equals the sum of entry amounts; external the sum of costs."""
        priced = price(
            [
                make_entry(hours=Decimal("0.333")),
                make_entry(hours=Decimal("2.5"), billing_type="extra"),
                make_entry(hours=Decimal("1"), date=dt.date(2024, 3, 8)),
            ]
        )
        costs = [make_cost(amount_cents=4500), make_cost(amount_cents=1234)]

        result = aggregator.aggregate(priced, costs)

        assert result.labor_cost_cents == sum(p.amount_cents for p in priced)
        assert result.external_cost_cents == 5734
        assert result.total_cost_cents == result.labor_cost_cents + 5734

    def test_days_sorted_and_dense(self, aggregator, price, make_entry, make_cost):
        """Only days with hours or cost appear, oldest first."""
        priced = price(
            [
                make_entry(date=dt.date(2024, 3, 10)),
                make_entry(date=dt.date(2024, 3, 4)),
                make_entry(date=dt.date(2024, 3, 6), hours=Decimal("0")),
            ]
        )
        costs = [make_cost(date=dt.date(2024, 3, 7))]

        result = aggregator.aggregate(priced, costs)

        dates = [d.date for d in result.daily_data]
        assert dates == [dt.date(2024, 3, 4), dt.date(2024, 3, 7), dt.date(2024, 3, 10)]
        assert all(not d.is_empty for d in result.daily_data)

    def test_bucket_sums_match_totals(self, aggregator, price, make_entry, make_cost):
        priced = price(
            [make_entry(date=dt.date(2024, 3, d), hours=Decimal(d)) for d in (4, 5, 6)]
        )
        result = aggregator.aggregate(priced, [make_cost()])

        assert sum(d.labor_cost_cents for d in result.daily_data) == result.labor_cost_cents
        assert sum(d.total_hours for d in result.daily_data) == result.total_hours

    def test_regular_extra_split(self, aggregator, price, make_entry):
        priced = price(
            [
                make_entry(hours=Decimal("2")),
                make_entry(hours=Decimal("1"), billing_type="tm"),
            ]
        )
        result = aggregator.aggregate(priced, [])

        (day,) = result.daily_data
        assert day.regular_hours == Decimal("2")
        assert day.extra_hours == Decimal("1")
        assert result.regular_hours == Decimal("2")
        assert result.extra_hours == Decimal("1")
        assert result.total_hours == Decimal("3")

    def test_scenario_e_single_user_breakdown(self, aggregator, price, make_entry):
        """Regular 2h and extra 1h of one user on one day form one row, extra."""
        priced = price(
            [
                make_entry(hours=Decimal("2"), billing_type="regular"),
                make_entry(hours=Decimal("1"), billing_type="extra"),
            ]
        )
        result = aggregator.aggregate(priced, [])

        (day,) = result.daily_data
        (user,) = day.per_user
        assert user.user_id == "user-1"
        assert user.hours == Decimal("3")
        assert user.is_extra is True
        assert user.amount_cents == 15000

    def test_per_user_ordering(self, aggregator, price, make_entry):
        """Users are ordered by hours, ties by earliest entry creation."""
        created = dt.datetime(2024, 3, 4, 9, 0)
        priced = price(
            [
                make_entry(user_id="carol", hours=Decimal("1"),
                           created_at=created + dt.timedelta(hours=2)),
                make_entry(user_id="bob", hours=Decimal("1"), created_at=created),
                make_entry(user_id="alice", hours=Decimal("3")),
            ]
        )
        result = aggregator.aggregate(priced, [])

        assert [u.user_id for u in result.daily_data[0].per_user] == [
            "alice",
            "bob",
            "carol",
        ]

    def test_billable_hours(self, aggregator, price, make_entry):
        priced = price(
            [
                make_entry(hours=Decimal("2")),
                make_entry(hours=Decimal("1.5"), is_billable=False),
            ]
        )
        result = aggregator.aggregate(priced, [])
        assert result.total_hours == Decimal("3.5")
        assert result.billable_hours == Decimal("2")

    def test_window_filter(self, aggregator, price, make_entry, make_cost):
        priced = price(
            [make_entry(date=dt.date(2024, 3, d)) for d in (1, 15, 31)]
        )
        costs = [make_cost(date=dt.date(2024, 2, 28)), make_cost(date=dt.date(2024, 3, 15))]

        result = aggregator.aggregate(
            priced, costs, window_start=dt.date(2024, 3, 1), window_end=dt.date(2024, 3, 15)
        )

        assert [d.date for d in result.daily_data] == [
            dt.date(2024, 3, 1),
            dt.date(2024, 3, 15),
        ]
        assert result.external_cost_cents == 4500

    def test_unresolved_entries_reported(self, aggregator, make_entry):
        priced = price_entries([make_entry(id="te-x")], [Task(id="task-1")])
        result = aggregator.aggregate(priced, [])
        assert result.unresolved_rate_entry_ids == ["te-x"]
        assert result.labor_cost_cents == 0

    def test_empty_input(self, aggregator):
        result = aggregator.aggregate([], [])
        assert result.daily_data == []
        assert result.total_cost_cents == 0
        assert result.total_hours == Decimal("0")
