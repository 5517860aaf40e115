"""Tests for FinanceReportCache."""

import datetime as dt
from decimal import Decimal
from unittest.mock import Mock

import pytest

from task_finance.config import FinanceEngineConfig
from task_finance.models import FinanceSettings, Task
from task_finance.reports import FinanceEngine
from task_finance.services import FinanceEventBus, FinanceReportCache


@pytest.fixture
def config():
    return FinanceEngineConfig(cache_max_size=3)


@pytest.fixture
def engine(config):
    return Mock(wraps=FinanceEngine(config))


@pytest.fixture
def bus():
    return FinanceEventBus()


@pytest.fixture
def cache(engine, config, bus):
    return FinanceReportCache(engine, config, event_bus=bus)


@pytest.fixture
def two_task_snapshot(sample_snapshot):
    return sample_snapshot.model_copy(
        update={"tasks": sample_snapshot.tasks + [Task(id="task-2")]}
    )


class TestCaching:
    """Test suite for cache hits and misses."""

    def test_task_report_cached(self, cache, engine, sample_snapshot):
        first = cache.get_task_report(sample_snapshot, "task-1")
        second = cache.get_task_report(sample_snapshot, "task-1")

        assert first is second
        assert engine.build_task_report.call_count == 1
        stats = cache.get_cache_statistics()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate_percent"] == 50.0

    def test_window_is_part_of_key(self, cache, engine, sample_snapshot):
        windowed = sample_snapshot.model_copy(
            update={"window_start": dt.date(2024, 3, 5)}
        )
        cache.get_task_report(sample_snapshot, "task-1")
        report = cache.get_task_report(windowed, "task-1")

        assert engine.build_task_report.call_count == 2
        assert report.summary.labor_cost_cents == 80000

    def test_snapshot_is_part_of_key(self, cache, engine, sample_snapshot, make_entry):
        newer = sample_snapshot.model_copy(
            update={
                "snapshot_id": "snap-2",
                "time_entries": sample_snapshot.time_entries
                + [make_entry(id="te-late", hours=Decimal("5"))],
            }
        )
        cache.get_task_report(sample_snapshot, "task-1")
        report = cache.get_task_report(newer, "task-1")

        assert engine.build_task_report.call_count == 2
        assert report.snapshot_id == "snap-2"
        assert report.summary.labor_cost_cents == 145000

    def test_as_of_is_part_of_key(self, cache, sample_snapshot):
        project = sample_snapshot.project.model_copy(
            update={
                "finance": FinanceSettings(
                    hourly_rate_cents=5000, sales_commission_enabled=True
                )
            }
        )
        march = sample_snapshot.model_copy(update={"project": project})
        april = march.model_copy(update={"as_of": dt.date(2024, 4, 30)})
        cache.get_task_report(march, "task-1")
        report = cache.get_task_report(april, "task-1")

        assert report.commission_cents == 12450
        commission = [t for t in report.ledger if t.id == "commission-task-1"]
        assert [t.date for t in commission] == [dt.date(2024, 4, 30)]

    def test_snapshot_without_id_not_cached(self, cache, engine, sample_snapshot):
        anonymous = sample_snapshot.model_copy(update={"snapshot_id": None})
        cache.get_task_report(anonymous, "task-1")
        cache.get_project_report(anonymous)
        cache.get_task_report(anonymous, "task-1")

        assert engine.build_task_report.call_count == 2
        assert engine.build_project_report.call_count == 1
        assert len(cache) == 0

    def test_project_report_keyed_by_completed_only(
        self, cache, engine, sample_snapshot
    ):
        cache.get_project_report(sample_snapshot)
        cache.get_project_report(sample_snapshot, completed_only=True)
        cache.get_project_report(sample_snapshot)

        assert engine.build_project_report.call_count == 2

    def test_lru_eviction(self, cache, sample_snapshot):
        snapshots = [
            sample_snapshot.model_copy(update={"window_end": dt.date(2024, 3, d)})
            for d in (10, 11, 12, 13)
        ]
        for snapshot in snapshots[:3]:
            cache.get_task_report(snapshot, "task-1")
        # touch the oldest so the second becomes least recently used
        cache.get_task_report(snapshots[0], "task-1")
        cache.get_task_report(snapshots[3], "task-1")

        assert len(cache) == 3
        assert cache.get_cache_statistics()["evictions"] == 1
        cache.get_task_report(snapshots[0], "task-1")
        assert cache.get_cache_statistics()["hits"] == 2

    def test_disabled(self, engine, sample_snapshot):
        config = FinanceEngineConfig(enable_report_cache=False)
        cache = FinanceReportCache(engine, config)

        cache.get_task_report(sample_snapshot, "task-1")
        cache.get_task_report(sample_snapshot, "task-1")

        assert engine.build_task_report.call_count == 2
        assert len(cache) == 0


class TestInvalidation:
    """Test suite for event-driven invalidation."""

    def test_task_event_drops_task_and_project_reports(
        self, cache, bus, two_task_snapshot
    ):
        cache.get_task_report(two_task_snapshot, "task-1")
        cache.get_task_report(two_task_snapshot, "task-2")
        cache.get_project_report(two_task_snapshot)

        bus.publish("time_entry_changed", task_id="task-1")

        assert len(cache) == 1
        assert cache.get_cache_statistics()["invalidations"] == 2

    def test_event_without_task_clears_all(self, cache, bus, two_task_snapshot):
        cache.get_task_report(two_task_snapshot, "task-1")
        cache.get_task_report(two_task_snapshot, "task-2")

        bus.publish("cost_item_changed")

        assert len(cache) == 0

    def test_rebuilt_after_invalidation(self, cache, engine, bus, sample_snapshot):
        cache.get_task_report(sample_snapshot, "task-1")
        bus.publish("task_status_changed", task_id="task-1")
        cache.get_task_report(sample_snapshot, "task-1")

        assert engine.build_task_report.call_count == 2

    def test_detach(self, cache, bus, sample_snapshot):
        cache.get_task_report(sample_snapshot, "task-1")
        cache.detach()

        assert bus.publish("task_settings_changed", task_id="task-1") == 0
        assert len(cache) == 1

    def test_manual_invalidate(self, cache, sample_snapshot):
        cache.get_task_report(sample_snapshot, "task-1")
        assert cache.invalidate("task-2") == 0
        assert cache.invalidate() == 1

    def test_report_built_across_invalidation_not_stored(
        self, cache, engine, config, sample_snapshot
    ):
        real_engine = FinanceEngine(config)

        def build_while_entry_changes(snapshot, task_id):
            report = real_engine.build_task_report(snapshot, task_id)
            cache.invalidate(task_id)
            return report

        engine.build_task_report.side_effect = build_while_entry_changes

        report = cache.get_task_report(sample_snapshot, "task-1")

        assert report.summary.labor_cost_cents == 120000
        assert len(cache) == 0
        cache.get_task_report(sample_snapshot, "task-1")
        assert engine.build_task_report.call_count == 2
