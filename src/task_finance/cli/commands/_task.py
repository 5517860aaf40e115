"""Task report construction shared by the task-level commands."""

import functools

from task_finance.calculators.money import format_currency
from task_finance.cli.commands.options import as_date
from task_finance.cli.error_handlers import DataValidationError
from task_finance.cli.loading import load_engine_config, load_snapshot
from task_finance.reports.finance_engine import FinanceEngine, TaskFinanceReport


def build_task_report(
    snapshot_path, task_id, window_start, window_end
) -> TaskFinanceReport:
    """Load a snapshot and build one task's report.

    Raises:
        DataValidationError: If the snapshot is unreadable or lacks the task
    """
    config = load_engine_config()
    snapshot = load_snapshot(
        snapshot_path, config, as_date(window_start), as_date(window_end)
    )
    try:
        snapshot.get_task(task_id)
    except KeyError as e:
        known = ", ".join(t.id for t in snapshot.tasks) or "none"
        raise DataValidationError(
            f"Task '{task_id}' is not part of the snapshot",
            recovery_hint=f"Known tasks: {known}",
        ) from e
    return FinanceEngine(config).build_task_report(snapshot, task_id)


def money_formatter():
    """format_currency bound to the configured currency symbol."""
    return functools.partial(
        format_currency, symbol=load_engine_config().currency_symbol
    )
