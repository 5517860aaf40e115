"""Snapshot loading and JSON output shared by CLI commands."""

import dataclasses
import datetime as dt
import json
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

import click
from pydantic import BaseModel, ValidationError

from task_finance.cli.error_handlers import ConfigurationError, DataValidationError
from task_finance.config.settings import FinanceEngineConfig, get_config
from task_finance.models.snapshot import FinanceSnapshot
from task_finance.readers.snapshot_reader import SnapshotReader, SnapshotReadError


def load_engine_config() -> FinanceEngineConfig:
    """Load configuration, reporting invalid settings as ConfigurationError."""
    try:
        return get_config()
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            recovery_hint="Check the environment variables and your .env file",
        ) from e


def load_snapshot(
    path: str,
    config: FinanceEngineConfig,
    window_start: Optional[dt.date] = None,
    window_end: Optional[dt.date] = None,
    skip_invalid: bool = False,
) -> FinanceSnapshot:
    """Read a snapshot file and apply an optional date window override.

    Raises:
        DataValidationError: If the snapshot cannot be read
        click.BadParameter: If the window is inverted
    """
    try:
        snapshot = SnapshotReader(config, skip_invalid=skip_invalid).read_file(path)
    except SnapshotReadError as e:
        raise DataValidationError(
            e.message if e.record is None else str(e),
            recovery_hint="Run 'task-finance validate' on the snapshot for details",
        ) from e

    update = {}
    if window_start is not None:
        update["window_start"] = window_start
    if window_end is not None:
        update["window_end"] = window_end
    if update:
        start = update.get("window_start", snapshot.window_start)
        end = update.get("window_end", snapshot.window_end)
        if start is not None and end is not None and start > end:
            raise click.BadParameter(f"--from ({start}) is after --to ({end})")
        snapshot = snapshot.model_copy(update=update)
    return snapshot


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_plain(value: Any) -> Any:
    """Convert dataclasses (recursively) to dicts for JSON output."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def dump_json(payload: Any) -> str:
    """Serialize a CLI payload to indented JSON."""
    return json.dumps(
        to_plain(payload), default=_json_default, indent=2, ensure_ascii=False
    )
