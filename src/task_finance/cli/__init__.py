"""Task Finance CLI.

This module provides a command-line interface over JSON finance snapshots:
task summaries, ledgers, chart series, daily activity, project roll-ups and
snapshot validation.
"""

from typing import Optional

import click

from task_finance import __version__
from task_finance.cli.commands import (
    project_report,
    task_activity,
    task_ledger,
    task_series,
    task_summary,
    validate_snapshot,
)
from task_finance.config.logging_config import LoggingConfig, configure_logging


@click.group(
    help="Task Finance CLI - Budget, cost and commission figures from snapshots"
)
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Log level (default: LOG_LEVEL or WARNING)",
)
def cli(log_level: Optional[str]):
    """Task Finance CLI main entry point."""
    config = LoggingConfig.from_env(default_level="WARNING")
    if log_level:
        config.log_level = log_level.upper()
    configure_logging(config)


cli.add_command(task_summary)
cli.add_command(task_ledger)
cli.add_command(task_series)
cli.add_command(task_activity)
cli.add_command(project_report)
cli.add_command(validate_snapshot)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
