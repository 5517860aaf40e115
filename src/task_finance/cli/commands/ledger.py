"""Task ledger command."""

import click

from task_finance.cli.commands._task import build_task_report, money_formatter
from task_finance.cli.commands.options import snapshot_options, task_option
from task_finance.cli.error_handlers import with_error_handling
from task_finance.cli.loading import dump_json
from task_finance.cli.utils.formatters import format_info, format_table


@click.command(name="ledger")
@task_option
@snapshot_options
def task_ledger(snapshot, task_id, window_start, window_end, as_json, debug):
    """List every transaction of a task, newest first.

    The total equals labor + external cost + commission.

    Example:
        task-finance ledger snapshot.json --task task-1
    """
    with with_error_handling(debug):
        report = build_task_report(snapshot, task_id, window_start, window_end)

        if as_json:
            click.echo(
                dump_json(
                    {
                        "task_id": report.task_id,
                        "transactions": report.ledger,
                        "total_cents": report.ledger_total_cents,
                    }
                )
            )
            return

        if not report.ledger:
            click.echo(format_info("No transactions for this task."))
            return

        money = money_formatter()
        rows = [
            [
                t.date.isoformat(),
                t.type.value,
                t.name,
                t.description,
                t.quantity_label,
                money(t.amount_cents),
            ]
            for t in report.ledger
        ]
        click.echo(
            format_table(
                ["Date", "Type", "Name", "Description", "Quantity", "Amount"],
                rows,
                max_width=40,
                right_align=[5],
            )
        )
        click.echo(f"Total: {money(report.ledger_total_cents)}")
