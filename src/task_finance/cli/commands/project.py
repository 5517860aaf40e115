"""Project roll-up command."""

import click

from task_finance.calculators.money import format_currency
from task_finance.calculators.time_utils import format_hours
from task_finance.cli.commands.options import as_date, snapshot_options
from task_finance.cli.error_handlers import DataValidationError, with_error_handling
from task_finance.cli.loading import dump_json, load_engine_config, load_snapshot
from task_finance.cli.utils.formatters import format_key_values, format_table
from task_finance.reports.finance_engine import FinanceEngine


@click.command(name="project")
@snapshot_options
@click.option(
    "--completed-only",
    is_flag=True,
    help="Only include tasks whose status is done",
)
def project_report(snapshot, window_start, window_end, as_json, debug, completed_only):
    """Show the finance roll-up of all tasks in a snapshot.

    Project-level cost items are always included.

    Example:
        task-finance project snapshot.json
        task-finance project snapshot.json --completed-only --json
    """
    with with_error_handling(debug):
        config = load_engine_config()
        data = load_snapshot(
            snapshot, config, as_date(window_start), as_date(window_end)
        )
        if not data.tasks:
            raise DataValidationError(
                "Snapshot contains no tasks",
                recovery_hint="Add a 'tasks' list to the snapshot document",
            )

        report = FinanceEngine(config).build_project_report(
            data, completed_only=completed_only
        )

        if as_json:
            click.echo(
                dump_json(
                    {
                        "project_id": report.project_id,
                        "completed_only": report.completed_only,
                        "summary": report.summary,
                        "commission_cents": report.commission_cents,
                        "total_hours": report.aggregation.total_hours,
                        "billable_hours": report.aggregation.billable_hours,
                        "tasks": [
                            {
                                "task_id": r.task_id,
                                "summary": r.summary,
                                "commission_cents": r.commission_cents,
                            }
                            for r in report.task_reports
                        ],
                        "distribution": report.distribution,
                        "ledger_total_cents": report.ledger_total_cents,
                    }
                )
            )
            return

        def money(cents):
            return format_currency(cents, config.currency_symbol)

        rows = [
            [
                r.task_id,
                money(r.summary.budget_amount_cents),
                money(r.summary.total_cost_cents),
                money(r.summary.extra_cents),
                money(r.commission_cents),
                format_hours(r.aggregation.total_hours),
            ]
            for r in report.task_reports
        ]
        click.echo(
            format_table(
                ["Task", "Budget", "Cost", "Extra", "Commission", "Hours"],
                rows,
                right_align=[1, 2, 3, 4, 5],
            )
        )
        click.echo()
        figures = report.summary
        click.echo(
            format_key_values(
                [
                    ("Project", report.project_id or "-"),
                    ("Budget", money(figures.budget_amount_cents)),
                    ("Labor cost", money(figures.labor_cost_cents)),
                    ("External cost", money(figures.external_cost_cents)),
                    ("Remaining", money(figures.remaining_cents)),
                    ("Extra", money(figures.extra_cents)),
                    ("Commission", money(report.commission_cents)),
                    ("Billable hours", format_hours(report.aggregation.billable_hours)),
                ]
            )
        )
