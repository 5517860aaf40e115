"""Time utilities for the finance engine.

This module provides low-level helpers for decimal hours including:
- Converting timer durations (seconds) to decimal hours
- Display formatting as H:MM:SS or "X.Xh"
- Normalized hour strings for ledger labels

Decimal hours are the canonical value; every format here is a display
choice over the same number.
"""

from decimal import ROUND_HALF_UP, Decimal

HOURS_PRECISION = Decimal("0.001")
SECONDS_PER_HOUR = Decimal("3600")


def hours_from_seconds(seconds: int) -> Decimal:
    """Convert a timer duration to decimal hours with 3 decimal precision.

    Args:
        seconds: Duration in seconds

    Returns:
        Decimal hours rounded to 3 places (ROUND_HALF_UP)

    Example:
        >>> hours_from_seconds(5400)
        Decimal('1.500')
        >>> hours_from_seconds(1200)
        Decimal('0.333')
    """
    hours = Decimal(seconds) / SECONDS_PER_HOUR
    return hours.quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def hours_to_seconds(hours: Decimal) -> int:
    """Convert decimal hours to whole seconds (ROUND_HALF_UP).

    Example:
        >>> hours_to_seconds(Decimal("0.333"))
        1199
    """
    seconds = hours * SECONDS_PER_HOUR
    return int(seconds.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def hours_to_time(hours: Decimal) -> str:
    """Format decimal hours as H:MM:SS.

    Args:
        hours: Decimal hours

    Returns:
        Duration string, hours not zero-padded

    Example:
        >>> hours_to_time(Decimal("2.5"))
        '2:30:00'
        >>> hours_to_time(Decimal("0.333"))
        '0:19:59'
        >>> hours_to_time(Decimal("12.0125"))
        '12:00:45'
    """
    total_seconds = hours_to_seconds(hours)
    h, remainder = divmod(total_seconds, 3600)
    m, s = divmod(remainder, 60)
    return f"{h}:{m:02d}:{s:02d}"


def format_hours(hours: Decimal) -> str:
    """Format decimal hours with one decimal place and an "h" suffix.

    Example:
        >>> format_hours(Decimal("2.46"))
        '2.5h'
        >>> format_hours(Decimal("3"))
        '3.0h'
    """
    return f"{hours.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}h"


def format_decimal(value: Decimal) -> str:
    """Render a Decimal without trailing zeros or exponent notation.

    Example:
        >>> format_decimal(Decimal("2.500"))
        '2.5'
        >>> format_decimal(Decimal("10"))
        '10'
        >>> format_decimal(Decimal("0"))
        '0'
    """
    text = format(value.normalize(), "f")
    return text
