"""Output formatting utilities for the CLI."""

from typing import List, Optional, Sequence, Tuple

import click


def _styled(symbol: str, message: str, **style) -> str:
    return click.style(f"{symbol} {message}", **style)


def format_success(message: str) -> str:
    """Format a success message in green."""
    return _styled("✓", message, fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message in red."""
    return _styled("✗", message, fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message in yellow."""
    return _styled("⚠", message, fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message in blue."""
    return _styled("ℹ", message, fg="blue")


def format_table(
    headers: List[str],
    rows: List[List[str]],
    max_width: int = 80,
    right_align: Optional[Sequence[int]] = None,
) -> str:
    """Format data as a boxed table.

    Args:
        headers: Column headers
        rows: Data rows (each row is a list of cell values)
        max_width: Maximum width of a column; longer cells are truncated
        right_align: Indexes of columns to right-align (amounts, hours)

    Returns:
        Formatted table as a string

    Example:
        >>> print(format_table(["Day", "Hours"], [["2024-03-04", "2.5"]],
        ...                    right_align=[1]))
        +------------+-------+
        | Day        | Hours |
        +------------+-------+
        | 2024-03-04 |   2.5 |
        +------------+-------+
    """
    if not headers:
        return ""

    right = set(right_align or ())
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(w, max_width) for w in widths]

    def render(cells) -> str:
        parts = []
        for i, width in enumerate(widths):
            text = str(cells[i])[:width] if i < len(cells) else ""
            align = ">" if i in right else "<"
            parts.append(f" {text:{align}{width}} ")
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)
    return "\n".join(lines)


def format_key_values(pairs: Sequence[Tuple[str, str]]) -> str:
    """Format label/value pairs as an aligned two-column block."""
    if not pairs:
        return ""
    width = max(len(label) for label, _ in pairs)
    return "\n".join(f"{label + ':':<{width + 1}}  {value}" for label, value in pairs)
