"""CLI utility functions."""

from task_finance.cli.utils.formatters import (
    format_error,
    format_info,
    format_key_values,
    format_success,
    format_table,
    format_warning,
)

__all__ = [
    "format_error",
    "format_info",
    "format_key_values",
    "format_success",
    "format_table",
    "format_warning",
]
