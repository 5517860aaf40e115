"""Tests for SnapshotReader."""

import datetime as dt
import json
from decimal import Decimal

import pytest

from task_finance.config import FinanceEngineConfig
from task_finance.readers import SnapshotReader, SnapshotReadError


@pytest.fixture
def reader():
    return SnapshotReader(FinanceEngineConfig())


@pytest.fixture
def minimal_data():
    return {
        "as_of": "2024-03-31",
        "tasks": [{"id": "task-1"}],
        "time_entries": [],
        "cost_items": [],
    }


def _entry(**overrides):
    record = {
        "id": "te-1",
        "task_id": "task-1",
        "user_id": "user-1",
        "date": "2024-03-04",
        "hours": 2,
    }
    record.update(overrides)
    return record


class TestReadDict:
    """Test suite for normalizing a decoded snapshot document."""

    def test_sample_document(self, reader, sample_snapshot_data):
        snapshot = reader.read_dict(sample_snapshot_data)

        assert snapshot.snapshot_id == "snap-json"
        assert snapshot.as_of == dt.date(2024, 3, 31)
        assert snapshot.project.client_name == "ACME s.r.o."
        assert snapshot.project.hourly_rate_cents == 5000
        assert snapshot.project.finance.commission_enabled
        assert [t.id for t in snapshot.tasks] == ["task-1", "task-2"]
        assert len(snapshot.time_entries) == 3
        assert len(snapshot.cost_items) == 2
        assert snapshot.user_default_rates == {"user-1": 4000}

    def test_task_settings_shapes(self, reader, sample_snapshot_data):
        snapshot = reader.read_dict(sample_snapshot_data)
        flat, nested = snapshot.tasks

        assert flat.status == "done"
        assert flat.finance.fixed_budget_cents == 100000
        assert nested.finance.fixed_budget_cents == 50000
        assert nested.finance.sales_commission_percent == Decimal("5")

    def test_budget_in_major_units(self, reader, minimal_data):
        minimal_data["tasks"] = [{"id": "task-1", "budget": "1250.50"}]
        snapshot = reader.read_dict(minimal_data)
        assert snapshot.tasks[0].finance.fixed_budget_cents == 125050

    def test_user_id_aliases(self, reader, sample_snapshot_data):
        entries = reader.read_dict(sample_snapshot_data).time_entries

        assert [e.user_id for e in entries] == ["user-1", "user-2", "user-1"]
        assert entries[1].user_name == "Bob"
        assert entries[1].billing_type == "tm"

    def test_duration_seconds(self, reader, sample_snapshot_data):
        entry = reader.read_dict(sample_snapshot_data).time_entries[2]
        assert entry.hours == Decimal("1.5")
        assert entry.hourly_rate_cents == 4000

    def test_cost_in_major_units(self, reader, sample_snapshot_data):
        costs = reader.read_dict(sample_snapshot_data).cost_items

        assert costs[0].amount_cents == 4500
        assert costs[1].amount_cents == 2000
        assert costs[1].task_id is None

    def test_datetime_converted_to_display_timezone(self, reader, minimal_data):
        # 23:30 UTC is already the next day in Bratislava (UTC+1 in March)
        minimal_data["time_entries"] = [
            _entry(date=None, start_time="2024-03-04T23:30:00Z")
        ]
        entry = reader.read_dict(minimal_data).time_entries[0]
        assert entry.date == dt.date(2024, 3, 5)

    def test_naive_datetime_kept(self, reader, minimal_data):
        minimal_data["time_entries"] = [_entry(date="2024-03-04T23:30:00")]
        entry = reader.read_dict(minimal_data).time_entries[0]
        assert entry.date == dt.date(2024, 3, 4)

    def test_created_at_parsed(self, reader, minimal_data):
        minimal_data["time_entries"] = [
            _entry(created_at="2024-03-04T08:00:00+00:00")
        ]
        entry = reader.read_dict(minimal_data).time_entries[0]
        assert entry.created_at == dt.datetime(2024, 3, 4, 8, tzinfo=dt.timezone.utc)

    def test_window(self, reader, minimal_data):
        minimal_data["window"] = {"start": "2024-03-01", "end": "2024-03-15"}
        snapshot = reader.read_dict(minimal_data)
        assert snapshot.window_start == dt.date(2024, 3, 1)
        assert snapshot.window_end == dt.date(2024, 3, 15)

    def test_users_default_rates(self, reader, minimal_data):
        minimal_data["user_default_rates"] = {"user-1": 4000}
        minimal_data["users"] = [
            {"id": "user-1", "default_hourly_rate": 99},
            {"id": "user-2", "default_hourly_rate": 45},
        ]
        snapshot = reader.read_dict(minimal_data)
        assert snapshot.user_default_rates == {"user-1": 4000, "user-2": 4500}

    def test_without_project(self, reader, minimal_data):
        assert reader.read_dict(minimal_data).project is None


class TestReadErrors:
    """Test suite for malformed input."""

    def test_not_an_object(self, reader):
        with pytest.raises(SnapshotReadError, match="JSON object"):
            reader.read_dict([])

    def test_collection_not_a_list(self, reader, minimal_data):
        minimal_data["tasks"] = {"id": "task-1"}
        with pytest.raises(SnapshotReadError, match="'tasks' must be a list"):
            reader.read_dict(minimal_data)

    def test_invalid_entry_reports_record(self, reader, minimal_data):
        minimal_data["time_entries"] = [_entry(), _entry(id="te-2", hours=-1)]
        with pytest.raises(SnapshotReadError) as exc_info:
            reader.read_dict(minimal_data)
        assert exc_info.value.record == "time_entries[1]"

    def test_entry_without_user(self, reader, minimal_data):
        minimal_data["time_entries"] = [_entry(user_id=None)]
        with pytest.raises(SnapshotReadError):
            reader.read_dict(minimal_data)

    def test_inverted_window(self, reader, minimal_data):
        minimal_data["window_start"] = "2024-03-15"
        minimal_data["window_end"] = "2024-03-01"
        with pytest.raises(SnapshotReadError, match="Invalid snapshot"):
            reader.read_dict(minimal_data)

    def test_skip_invalid(self, minimal_data):
        reader = SnapshotReader(FinanceEngineConfig(), skip_invalid=True)
        minimal_data["time_entries"] = [_entry(), _entry(id="te-2", hours="abc")]
        minimal_data["cost_items"] = ["not a record"]

        snapshot = reader.read_dict(minimal_data)

        assert [e.id for e in snapshot.time_entries] == ["te-1"]
        assert snapshot.cost_items == []

    def test_skip_invalid_keeps_tasks_strict(self, minimal_data):
        reader = SnapshotReader(FinanceEngineConfig(), skip_invalid=True)
        minimal_data["tasks"] = [{"id": ""}]
        with pytest.raises(SnapshotReadError):
            reader.read_dict(minimal_data)

    def test_fractional_cents_rejected(self, reader, minimal_data):
        minimal_data["cost_items"] = [{
            "id": "cost-1", "task_id": "task-1", "name": "Figma",
            "amount_cents": 4500.9, "date": "2024-03-05",
        }]
        with pytest.raises(SnapshotReadError) as exc_info:
            reader.read_dict(minimal_data)
        assert exc_info.value.record == "cost_items[0]"

    def test_fractional_user_rate_rejected(self, reader, minimal_data):
        minimal_data["user_default_rates"] = {"user-1": 4000.5}
        with pytest.raises(SnapshotReadError, match="Invalid snapshot"):
            reader.read_dict(minimal_data)

    def test_whole_cents_given_as_float_accepted(self, reader, minimal_data):
        minimal_data["tasks"] = [{"id": "task-1", "hourly_rate_cents": 5000.0}]
        snapshot = reader.read_dict(minimal_data)
        assert snapshot.tasks[0].hourly_rate_cents == 5000

    def test_non_object_user_is_a_record_error(self, reader, minimal_data):
        minimal_data["time_entries"] = [_entry(user_id=None, user="user-1")]
        with pytest.raises(SnapshotReadError) as exc_info:
            reader.read_dict(minimal_data)
        assert exc_info.value.record == "time_entries[0]"

    def test_non_object_nested_records_skipped(self, minimal_data):
        reader = SnapshotReader(FinanceEngineConfig(), skip_invalid=True)
        minimal_data["project"] = {"id": "proj-1", "name": "Web", "client": "ACME"}
        minimal_data["time_entries"] = [
            _entry(),
            _entry(id="te-2", user_id=None, user="user-1", assignee="user-1"),
        ]
        minimal_data["users"] = ["user-1", {"id": "user-2", "default_hourly_rate": 45}]

        snapshot = reader.read_dict(minimal_data)

        assert snapshot.project.client_name is None
        assert [e.id for e in snapshot.time_entries] == ["te-1"]
        assert snapshot.user_default_rates == {"user-2": 4500}


class TestReadFile:
    """Test suite for reading snapshot files."""

    def test_read_file(self, reader, snapshot_file):
        snapshot = reader.read_file(snapshot_file)
        assert snapshot.snapshot_id == "snap-json"

    def test_missing_file(self, reader, tmp_path):
        with pytest.raises(SnapshotReadError, match="not found"):
            reader.read_file(tmp_path / "missing.json")

    def test_invalid_json(self, reader, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotReadError, match="not valid JSON"):
            reader.read_file(path)

    def test_round_trip_through_file(self, reader, tmp_path, minimal_data):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(minimal_data), encoding="utf-8")
        assert reader.read_file(path).tasks[0].id == "task-1"
