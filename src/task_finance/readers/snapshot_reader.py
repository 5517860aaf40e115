"""Snapshot reader for building FinanceSnapshot objects from JSON.

This module is the data-access boundary of the engine. Raw records come in
several historical shapes; they are normalized here exactly once so that
the engine only ever sees validated models:
- the user of an entry may be given as ``user_id``, ``user.id`` or
  ``assignee.user_id``
- money may be given in cents (``*_cents``) or in major units
  (``hourly_rate``, ``amount``, ``budget``)
- timer entries may carry ``duration_seconds`` instead of ``hours``
- dates may be full datetimes; they are converted to the display timezone
  before being cut to a calendar day
"""

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from task_finance.calculators.money import major_to_cents
from task_finance.calculators.time_utils import hours_from_seconds
from task_finance.config.settings import FinanceEngineConfig, get_config
from task_finance.models.cost_item import CostItem
from task_finance.models.finance_settings import FinanceSettings
from task_finance.models.project import Project, Task
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

# Flat keys a task or project record may carry instead of a nested "finance"
_SETTINGS_KEYS = (
    "fixed_budget_cents",
    "budget_cents",
    "budget",
    "hourly_rate_cents",
    "hourly_rate",
    "sales_commission_enabled",
    "sales_commission_percent",
)


class SnapshotReadError(Exception):
    """Raised when a snapshot cannot be read or normalized.

    Attributes:
        message: Description of the failure
        record: Collection and index of the offending record, if any
    """

    def __init__(self, message: str, record: Optional[str] = None):
        self.message = message
        self.record = record
        prefix = f"{record}: " if record else ""
        super().__init__(f"{prefix}{message}")


def _nested(record: Mapping[str, Any], key: str) -> Dict[str, Any]:
    """Nested object of a record; anything that is not an object counts as absent."""
    value = record.get(key)
    return value if isinstance(value, dict) else {}


def _first_present(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _cents(record: Mapping[str, Any], cents_key: str, major_key: str) -> Any:
    """Read a money field given either in cents or in major units.

    Cent values are passed through untouched so that model validation
    rejects fractional cents.
    """
    if record.get(cents_key) is not None:
        return record[cents_key]
    if record.get(major_key) is not None:
        return major_to_cents(record[major_key])
    return None


class SnapshotReader:
    """Reader for JSON finance snapshots.

    Expected document shape::

        {
          "snapshot_id": "snap-1",
          "as_of": "2024-03-31",
          "window_start": "2024-03-01",
          "window_end": "2024-03-31",
          "project": {"id": "p-1", "name": "Web", "hourly_rate": 50},
          "tasks": [{"id": "t-1", "status": "done", "budget_cents": 100000}],
          "time_entries": [{"id": "e-1", "task_id": "t-1",
                            "user": {"id": "u-1", "name": "Alice"},
                            "date": "2024-03-04", "hours": 2.5}],
          "cost_items": [{"id": "c-1", "task_id": "t-1", "name": "Figma",
                          "amount": 45.0, "date": "2024-03-05"}],
          "user_default_rates": {"u-1": 4000}
        }

    Attributes:
        config: Engine configuration supplying the display timezone
        skip_invalid: Skip malformed entry and cost records with a warning
            instead of failing the whole read

    Example:
        >>> reader = SnapshotReader()
        >>> snapshot = reader.read_file("snapshot.json")
        >>> len(snapshot.time_entries)
        42
    """

    def __init__(
        self,
        config: Optional[FinanceEngineConfig] = None,
        skip_invalid: bool = False,
    ):
        self.config = config or get_config()
        self.skip_invalid = skip_invalid

    def read_file(self, path: Union[str, Path]) -> FinanceSnapshot:
        """Read a snapshot from a JSON file.

        Args:
            path: Path to the JSON document

        Returns:
            Validated FinanceSnapshot

        Raises:
            SnapshotReadError: If the file is missing, is not valid JSON or
                does not describe a valid snapshot
        """
        path = Path(path)
        logger.info(f"Reading finance snapshot from {path}")
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as e:
            raise SnapshotReadError(f"Snapshot file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise SnapshotReadError(f"Snapshot file is not valid JSON: {e}") from e

        return self.read_dict(data)

    def read_dict(self, data: Any) -> FinanceSnapshot:
        """Build a snapshot from an already-decoded JSON document.

        Raises:
            SnapshotReadError: If the document does not describe a valid
                snapshot
        """
        if not isinstance(data, dict):
            raise SnapshotReadError("Snapshot document must be a JSON object")

        project = None
        if data.get("project") is not None:
            project = self._build("project", data["project"], self._parse_project)

        tasks = self._build_all(data, "tasks", self._parse_task, strict=True)
        entries = self._build_all(data, "time_entries", self._parse_entry)
        costs = self._build_all(data, "cost_items", self._parse_cost)

        try:
            snapshot = FinanceSnapshot(
                snapshot_id=data.get("snapshot_id"),
                project=project,
                tasks=tasks,
                time_entries=entries,
                cost_items=costs,
                user_default_rates=self._parse_user_rates(data),
                **self._snapshot_dates(data),
            )
        except (ValidationError, ValueError, TypeError, ArithmeticError) as e:
            raise SnapshotReadError(f"Invalid snapshot: {e}") from e

        logger.info(
            f"Read snapshot {snapshot.snapshot_id or '<unnamed>'}: "
            f"{len(tasks)} tasks, {len(entries)} entries, {len(costs)} costs"
        )
        return snapshot

    def _build(self, label: str, record: Any, parser: Callable[[Dict], Any]) -> Any:
        if not isinstance(record, dict):
            raise SnapshotReadError("Record must be a JSON object", label)
        try:
            return parser(record)
        except (ValidationError, ValueError, TypeError, ArithmeticError) as e:
            raise SnapshotReadError(str(e), label) from e

    def _build_all(
        self,
        data: Mapping[str, Any],
        collection: str,
        parser: Callable[[Dict], Any],
        strict: bool = False,
    ) -> List[Any]:
        records = data.get(collection) or []
        if not isinstance(records, list):
            raise SnapshotReadError(f"'{collection}' must be a list")

        built = []
        for index, record in enumerate(records):
            label = f"{collection}[{index}]"
            try:
                built.append(self._build(label, record, parser))
            except SnapshotReadError as e:
                if strict or not self.skip_invalid:
                    raise
                logger.warning(f"Skipping invalid record {e}")
        return built

    def _parse_settings(self, record: Mapping[str, Any]) -> FinanceSettings:
        source = record.get("finance")
        if not isinstance(source, dict):
            source = {k: record[k] for k in _SETTINGS_KEYS if k in record}

        budget = _first_present(source, "fixed_budget_cents", "budget_cents")
        if budget is None and source.get("budget") is not None:
            budget = major_to_cents(source["budget"])

        return FinanceSettings(
            fixed_budget_cents=budget,
            hourly_rate_cents=_cents(source, "hourly_rate_cents", "hourly_rate"),
            sales_commission_enabled=source.get("sales_commission_enabled"),
            sales_commission_percent=source.get("sales_commission_percent"),
        )

    def _parse_project(self, record: Dict[str, Any]) -> Project:
        client = _nested(record, "client")
        return Project(
            id=record.get("id"),
            name=record.get("name"),
            client_name=record.get("client_name") or client.get("name"),
            finance=self._parse_settings(record),
        )

    def _parse_task(self, record: Dict[str, Any]) -> Task:
        return Task(
            id=record.get("id"),
            title=record.get("title") or record.get("name") or "",
            status=record.get("status") or "todo",
            project_id=record.get("project_id"),
            finance=self._parse_settings(record),
        )

    def _parse_entry(self, record: Dict[str, Any]) -> TimeEntry:
        user = _nested(record, "user")
        assignee = _nested(record, "assignee")

        hours = record.get("hours")
        if hours is None and record.get("duration_seconds") is not None:
            hours = hours_from_seconds(int(record["duration_seconds"]))

        return TimeEntry(
            id=record.get("id"),
            task_id=record.get("task_id"),
            user_id=(
                record.get("user_id") or user.get("id") or assignee.get("user_id")
            ),
            user_name=record.get("user_name") or user.get("name"),
            date=self._local_date(
                _first_present(record, "date", "start_time", "created_at")
            ),
            hours=hours,
            hourly_rate_cents=_cents(record, "hourly_rate_cents", "hourly_rate"),
            billing_type=record.get("billing_type"),
            is_billable=record.get("is_billable", True),
            amount_cents=_cents(record, "amount_cents", "amount"),
            created_at=self._parse_datetime(record.get("created_at")),
            description=record.get("description"),
        )

    def _parse_cost(self, record: Dict[str, Any]) -> CostItem:
        return CostItem(
            id=record.get("id"),
            project_id=record.get("project_id"),
            task_id=record.get("task_id"),
            name=record.get("name"),
            description=record.get("description"),
            category=record.get("category"),
            amount_cents=_cents(record, "amount_cents", "amount"),
            date=self._local_date(record.get("date")),
            is_billable=record.get("is_billable", True),
        )

    def _parse_user_rates(self, data: Mapping[str, Any]) -> Dict[str, int]:
        rates = dict(_nested(data, "user_default_rates"))
        for user in data.get("users") or []:
            if not isinstance(user, dict):
                logger.warning(f"Ignoring user record that is not an object: {user!r}")
                continue
            rate = _cents(user, "default_hourly_rate_cents", "default_hourly_rate")
            if user.get("id") and rate is not None:
                rates.setdefault(user["id"], rate)
        return rates

    def _snapshot_dates(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        window = data.get("window") or {}
        dates = {
            "as_of": data.get("as_of"),
            "window_start": data.get("window_start") or window.get("start"),
            "window_end": data.get("window_end") or window.get("end"),
        }
        return {k: self._local_date(v) for k, v in dates.items() if v is not None}

    @staticmethod
    def _parse_datetime(value: Any) -> Optional[dt.datetime]:
        if value is None or isinstance(value, dt.datetime):
            return value
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return dt.datetime.fromisoformat(text)

    def _local_date(self, value: Any) -> Optional[dt.date]:
        """Calendar day of a date or datetime value in the display timezone.

        Naive datetimes are taken to be local already.
        """
        if value is None:
            return None
        if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
            return value

        text = str(value).strip()
        if len(text) == 10:
            return dt.date.fromisoformat(text)

        moment = self._parse_datetime(value)
        if moment.tzinfo is not None:
            moment = moment.astimezone(self.config.tzinfo)
        return moment.date()
