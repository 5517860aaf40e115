"""Money arithmetic and rounding policy for the finance engine.

All money values are integer cents. Every multiplication or division that
can produce fractional cents goes through ``round_cents`` so that one
rounding policy (ROUND_HALF_UP) is applied everywhere:
- labor amounts (hours × hourly rate)
- commission (base × percent / 100)
- conversion of major-unit input to cents at the data-access boundary
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

ROUNDING = ROUND_HALF_UP
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def round_cents(value: Decimal) -> int:
    """Round a fractional cent value to whole cents using ROUND_HALF_UP.

    Args:
        value: Amount in (possibly fractional) cents

    Returns:
        Amount in whole cents

    Example:
        >>> round_cents(Decimal("12.5"))
        13
        >>> round_cents(Decimal("-12.5"))
        -13
        >>> round_cents(Decimal("16649.833"))
        16650
    """
    return int(value.quantize(Decimal("1"), rounding=ROUNDING))


def labor_amount_cents(hours: Decimal, rate_cents: int) -> int:
    """Calculate the labor amount of an entry (hours × rate).

    Args:
        hours: Decimal hours worked
        rate_cents: Hourly rate in cents

    Returns:
        Amount in cents

    Example:
        >>> labor_amount_cents(Decimal("0.333"), 5000)
        1665
        >>> labor_amount_cents(Decimal("10"), 5000)
        50000
    """
    return round_cents(hours * Decimal(rate_cents))


def percent_of_cents(base_cents: int, percent: Decimal) -> int:
    """Calculate ``percent`` % of an amount in cents.

    Example:
        >>> percent_of_cents(125000, Decimal("10"))
        12500
        >>> percent_of_cents(333, Decimal("12.5"))
        42
    """
    return round_cents(Decimal(base_cents) * percent / HUNDRED)


def major_to_cents(value: Union[str, int, float, Decimal]) -> int:
    """Convert a major-unit amount (e.g. euros) to cents.

    Example:
        >>> major_to_cents("49.995")
        5000
        >>> major_to_cents(12)
        1200
    """
    return round_cents(Decimal(str(value)) * HUNDRED)


def cents_to_major(cents: int) -> Decimal:
    """Convert cents to a major-unit Decimal with 2 decimal places.

    Example:
        >>> cents_to_major(125050)
        Decimal('1250.50')
    """
    return (Decimal(cents) / HUNDRED).quantize(CENT)


def format_currency(cents: int, symbol: str = "€") -> str:
    """Format cents for display in Slovak style ("1 250,00 €").

    Args:
        cents: Amount in cents
        symbol: Currency symbol appended after the amount

    Returns:
        Formatted amount with space thousands separator and decimal comma

    Example:
        >>> format_currency(125050)
        '1 250,50 €'
        >>> format_currency(-500)
        '-5,00 €'
    """
    major = cents_to_major(abs(cents))
    text = f"{major:,.2f}".replace(",", " ").replace(".", ",")
    sign = "-" if cents < 0 else ""
    return f"{sign}{text} {symbol}"
