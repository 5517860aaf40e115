"""Error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click

from task_finance.cli.utils.formatters import format_error, format_warning

EXIT_CONFIGURATION_ERROR = 1
EXIT_DATA_VALIDATION_ERROR = 2
EXIT_PROCESSING_ERROR = 3
EXIT_ABORTED = 130
EXIT_UNEXPECTED_ERROR = 255


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    exit_code = EXIT_UNEXPECTED_ERROR
    title = "Error"

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Invalid environment or .env configuration."""

    exit_code = EXIT_CONFIGURATION_ERROR
    title = "Configuration Error"


class DataValidationError(CLIError):
    """Unreadable snapshot or snapshot that failed validation."""

    exit_code = EXIT_DATA_VALIDATION_ERROR
    title = "Data Validation Error"


class ProcessingError(CLIError):
    """Failure while building a report."""

    exit_code = EXIT_PROCESSING_ERROR
    title = "Processing Error"


def handle_cli_error(error: BaseException, debug: bool = False) -> int:
    """
    Print a user-friendly message for an error.

    Args:
        error: The exception that occurred
        debug: Whether to show the full stack trace

    Returns:
        Exit code for the error type
    """
    if isinstance(error, CLIError):
        click.echo(format_error(f"{error.title}: {error.message}"))
        if error.recovery_hint:
            click.echo(format_warning(f"Hint: {error.recovery_hint}"))
        return error.exit_code

    if isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return EXIT_ABORTED

    click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
    click.echo(str(error))
    if debug:
        click.echo("\nFull stack trace:")
        click.echo(
            "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        )
    else:
        click.echo(format_warning("\nRun with --debug flag for full stack trace"))
    return EXIT_UNEXPECTED_ERROR


class _ErrorHandler:
    """Context manager that turns exceptions into exit codes."""

    def __init__(self, show_debug: bool):
        self.show_debug = show_debug

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is None or isinstance(
            exc_val, (click.ClickException, click.exceptions.Exit, SystemExit)
        ):
            return False
        sys.exit(handle_cli_error(exc_val, self.show_debug))


def with_error_handling(debug: bool = False) -> _ErrorHandler:
    """
    Standardized error handling for CLI commands.

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                ...
    """
    return _ErrorHandler(debug)
