"""Task summary command."""

import click

from task_finance.calculators.time_utils import format_hours, hours_to_time
from task_finance.cli.commands._task import build_task_report, money_formatter
from task_finance.cli.commands.options import snapshot_options, task_option
from task_finance.cli.error_handlers import with_error_handling
from task_finance.cli.loading import dump_json
from task_finance.cli.utils.formatters import (
    format_key_values,
    format_success,
    format_warning,
)


@click.command(name="summary")
@task_option
@snapshot_options
def task_summary(snapshot, task_id, window_start, window_end, as_json, debug):
    """Show budget consumption of a task.

    Example:
        task-finance summary snapshot.json --task task-1
        task-finance summary snapshot.json --task task-1 --json
    """
    with with_error_handling(debug):
        report = build_task_report(snapshot, task_id, window_start, window_end)
        figures = report.summary
        aggregation = report.aggregation

        if as_json:
            click.echo(
                dump_json(
                    {
                        "task_id": report.task_id,
                        "summary": figures,
                        "commission_cents": report.commission_cents,
                        "commission_percent": report.commission_percent,
                        "total_hours": aggregation.total_hours,
                        "billable_hours": aggregation.billable_hours,
                        "regular_hours": aggregation.regular_hours,
                        "extra_hours": aggregation.extra_hours,
                        "unresolved_rate_entry_ids": (
                            aggregation.unresolved_rate_entry_ids
                        ),
                    }
                )
            )
            return

        money = money_formatter()
        click.echo(
            format_key_values(
                [
                    ("Budget", money(figures.budget_amount_cents)),
                    ("Labor cost", money(figures.labor_cost_cents)),
                    ("External cost", money(figures.external_cost_cents)),
                    ("Total cost", money(figures.total_cost_cents)),
                    ("Remaining", money(figures.remaining_cents)),
                    ("Extra", money(figures.extra_cents)),
                    ("Commission", money(report.commission_cents)),
                    (
                        "Hours",
                        f"{format_hours(aggregation.total_hours)} "
                        f"({hours_to_time(aggregation.total_hours)})",
                    ),
                    ("Extra hours", format_hours(aggregation.extra_hours)),
                ]
            )
        )

        click.echo()
        if aggregation.unresolved_rate_entry_ids:
            click.echo(
                format_warning(
                    f"{len(aggregation.unresolved_rate_entry_ids)} entries have no "
                    f"hourly rate and were priced at 0"
                )
            )
        if figures.is_over_budget:
            click.echo(format_warning("Task is over budget"))
        else:
            click.echo(format_success("Task is within budget"))
