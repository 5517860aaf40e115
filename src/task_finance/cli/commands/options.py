"""Options shared by the report commands."""

import click

DATE_FORMATS = ["%Y-%m-%d"]


def snapshot_options(func):
    """Add the snapshot argument and the --from/--to/--json/--debug options."""
    decorators = [
        click.argument("snapshot", type=click.Path(dir_okay=False)),
        click.option(
            "--from",
            "window_start",
            type=click.DateTime(formats=DATE_FORMATS),
            default=None,
            help="First day to include (YYYY-MM-DD), overrides the snapshot window",
        ),
        click.option(
            "--to",
            "window_end",
            type=click.DateTime(formats=DATE_FORMATS),
            default=None,
            help="Last day to include (YYYY-MM-DD), overrides the snapshot window",
        ),
        click.option(
            "--json", "as_json", is_flag=True, help="Print JSON instead of tables"
        ),
        click.option("--debug", is_flag=True, help="Show full stack traces"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def task_option(func):
    """Add the required --task option."""
    return click.option(
        "--task", "task_id", required=True, help="Task identifier to report on"
    )(func)


def as_date(value):
    """click.DateTime yields datetimes; the engine works on dates."""
    return value.date() if value is not None else None
