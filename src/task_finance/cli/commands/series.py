"""Cumulative cost series and distribution command."""

import click

from task_finance.cli.commands._task import build_task_report, money_formatter
from task_finance.cli.commands.options import snapshot_options, task_option
from task_finance.cli.error_handlers import with_error_handling
from task_finance.cli.loading import dump_json
from task_finance.cli.utils.formatters import format_info, format_table


@click.command(name="series")
@task_option
@snapshot_options
def task_series(snapshot, task_id, window_start, window_end, as_json, debug):
    """Show the cumulative cost series and cost distribution of a task.

    Example:
        task-finance series snapshot.json --task task-1 --from 2024-03-01
    """
    with with_error_handling(debug):
        report = build_task_report(snapshot, task_id, window_start, window_end)

        if as_json:
            click.echo(
                dump_json(
                    {
                        "task_id": report.task_id,
                        "series": report.series,
                        "distribution": report.distribution,
                    }
                )
            )
            return

        if not report.series:
            click.echo(format_info("No activity in the selected window."))
            return

        money = money_formatter()
        click.echo(
            format_table(
                ["Date", "Cumulative cost", "Budget"],
                [
                    [
                        p.date.isoformat(),
                        money(p.cumulative_cost_cents),
                        money(p.budget_cents),
                    ]
                    for p in report.series
                ],
                right_align=[1, 2],
            )
        )
        click.echo()
        click.echo(
            format_table(
                ["Category", "Amount"],
                [[s.label, money(s.value_cents)] for s in report.distribution],
                right_align=[1],
            )
        )
