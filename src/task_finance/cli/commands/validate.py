"""Validate snapshot command."""

import click

from task_finance.cli.error_handlers import DataValidationError, with_error_handling
from task_finance.cli.loading import dump_json, load_engine_config, load_snapshot
from task_finance.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_warning,
)
from task_finance.validators.snapshot_validator import SnapshotValidator
from task_finance.validators.validation_report import ValidationSeverity

MAX_ISSUES_PER_SEVERITY = 20

_FORMATTERS = {
    ValidationSeverity.ERROR: format_error,
    ValidationSeverity.WARNING: format_warning,
    ValidationSeverity.INFO: format_info,
}


@click.command(name="validate")
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="warning",
    help="Minimum severity level to display (default: warning)",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of text")
@click.option("--debug", is_flag=True, help="Show full stack traces")
def validate_snapshot(snapshot, severity, as_json, debug):
    """Check a snapshot for data-integrity problems.

    Checks for:
    - Negative cost amounts and references to unknown tasks
    - Hours with more than 3 fractional digits
    - Unknown billing types, unresolved rates and zero-hour entries
    - Stored amounts that differ from the recomputed amount

    Returns a non-zero exit code if errors are found.

    Example:
        task-finance validate snapshot.json
        task-finance validate snapshot.json --severity info
    """
    with with_error_handling(debug):
        data = load_snapshot(snapshot, load_engine_config())
        report = SnapshotValidator().validate(data)
        minimum = ValidationSeverity[severity.upper()]

        if as_json:
            click.echo(
                dump_json(
                    {
                        "valid": report.is_valid(),
                        "errors": report.error_count,
                        "warnings": report.warning_count,
                        "issues": [
                            issue.to_dict()
                            for issue in report.issues
                            if issue.severity >= minimum
                        ],
                    }
                )
            )
        else:
            click.echo("=" * 60)
            click.echo(f"Validation Summary: {report.summary()}")
            click.echo("=" * 60)
            for sev in (
                ValidationSeverity.ERROR,
                ValidationSeverity.WARNING,
                ValidationSeverity.INFO,
            ):
                if sev < minimum:
                    continue
                issues = report.get_issues(sev)
                if not issues:
                    continue
                click.echo(f"\n{sev.name}S ({len(issues)}):")
                for issue in issues[:MAX_ISSUES_PER_SEVERITY]:
                    click.echo(_FORMATTERS[sev](f"  {issue}"))
                if len(issues) > MAX_ISSUES_PER_SEVERITY:
                    remaining = len(issues) - MAX_ISSUES_PER_SEVERITY
                    click.echo(f"  ... and {remaining} more")
            click.echo()

        if report.has_errors():
            raise DataValidationError(
                f"Validation failed with {report.error_count} error(s)",
                recovery_hint="Fix the listed records before building reports",
            )
        if not as_json:
            if report.warning_count:
                click.echo(
                    format_warning(
                        f"Validation completed with {report.warning_count} warning(s)"
                    )
                )
            else:
                click.echo(format_success("Validation passed! No issues found."))
