"""Tests for per-entry pricing."""

from decimal import Decimal

from task_finance.calculators.billing_classifier import BillingClass
from task_finance.calculators.entry_pricing import price_entries, price_entry
from task_finance.calculators.rate_resolver import RateSource
from task_finance.models import Task


class TestEntryPricing:
    """Test suite for price_entry and price_entries."""

    def test_amount_recomputed(self, make_entry, budget_task, sample_project):
        """The stored amount is ignored; hours × rate is used instead."""
        entry = make_entry(hours=Decimal("10"), amount_cents=1)
        priced = price_entry(entry, budget_task, sample_project, {})
        assert priced.amount_cents == 50000
        assert priced.rate.source is RateSource.PROJECT

    def test_scenario_d_unresolved_tm_entry(self, make_entry):
        """A 'tm' entry without any rate is extra, priced 0 and flagged."""
        entry = make_entry(billing_type="tm", hours=Decimal("5"))
        priced = price_entry(entry, Task(id="task-1"), None, {})
        assert priced.billing_class is BillingClass.EXTRA
        assert priced.is_extra is True
        assert priced.amount_cents == 0
        assert priced.rate_was_resolved is False

    def test_user_default_lookup(self, make_entry):
        entry = make_entry(user_id="user-7", hours=Decimal("2"))
        priced = price_entry(entry, None, None, {"user-7": 3000})
        assert priced.amount_cents == 6000
        assert priced.rate.source is RateSource.USER_DEFAULT

    def test_price_entries_keeps_order(self, make_entry, budget_task, sample_project):
        entries = [make_entry(hours=Decimal(h)) for h in ("1", "2", "3")]
        priced = price_entries(entries, [budget_task], sample_project)
        assert [p.id for p in priced] == [e.id for e in entries]
        assert [p.amount_cents for p in priced] == [5000, 10000, 15000]

    def test_entries_of_unknown_tasks_use_fallbacks(self, make_entry, sample_project):
        entry = make_entry(task_id="ghost")
        (priced,) = price_entries([entry], [], sample_project)
        assert priced.rate.source is RateSource.PROJECT
