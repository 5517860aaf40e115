"""CLI commands."""

from task_finance.cli.commands.activity import task_activity
from task_finance.cli.commands.ledger import task_ledger
from task_finance.cli.commands.project import project_report
from task_finance.cli.commands.series import task_series
from task_finance.cli.commands.summary import task_summary
from task_finance.cli.commands.validate import validate_snapshot

__all__ = [
    "project_report",
    "task_activity",
    "task_ledger",
    "task_series",
    "task_summary",
    "validate_snapshot",
]
