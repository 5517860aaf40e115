"""Daily activity command."""

import calendar

import click

from task_finance.calculators.time_utils import format_hours
from task_finance.cli.commands._task import build_task_report
from task_finance.cli.commands.options import snapshot_options, task_option
from task_finance.cli.error_handlers import with_error_handling
from task_finance.cli.loading import dump_json
from task_finance.cli.utils.formatters import format_info, format_table


@click.command(name="activity")
@task_option
@snapshot_options
@click.option(
    "--matrix", is_flag=True, help="Print a user-by-day hours matrix instead"
)
def task_activity(snapshot, task_id, window_start, window_end, as_json, debug, matrix):
    """Show hours per day and user for a task.

    Example:
        task-finance activity snapshot.json --task task-1
        task-finance activity snapshot.json --task task-1 --matrix
    """
    with with_error_handling(debug):
        report = build_task_report(snapshot, task_id, window_start, window_end)

        if matrix:
            df = report.user_matrix()
            if as_json:
                click.echo(df.to_json(orient="index"))
            elif df.empty:
                click.echo(format_info("No hours logged in the selected window."))
            else:
                click.echo(df.to_string())
            return

        if as_json:
            click.echo(
                dump_json(
                    {"task_id": report.task_id, "days": report.daily_activity}
                )
            )
            return

        if not report.daily_activity:
            click.echo(format_info("No hours logged in the selected window."))
            return

        rows = []
        for day in report.daily_activity:
            users = ", ".join(
                f"{u.user_name or u.user_id} {format_hours(u.hours)}"
                + (" (extra)" if u.is_extra else "")
                for u in day.users
            )
            rows.append(
                [
                    day.date.isoformat(),
                    calendar.day_abbr[day.weekday],
                    format_hours(day.regular_hours),
                    format_hours(day.extra_hours),
                    users,
                ]
            )
        click.echo(
            format_table(
                ["Date", "Day", "Regular", "Extra", "Users"],
                rows,
                right_align=[2, 3],
            )
        )
