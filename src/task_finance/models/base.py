"""Base model for all input models of the finance engine.

This module provides a base Pydantic model with common configuration
and a shared helper for coercing numeric input to Decimal.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Rejection of unknown fields (records are normalized before construction)
    - Arbitrary types support for dates and decimals

    Example:
        >>> class Rate(BaseDataModel):
        ...     name: str
        ...     cents: int
        >>> rate = Rate(name="Senior", cents=5000)
        >>> rate.model_dump()
        {'name': 'Senior', 'cents': 5000}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date
        arbitrary_types_allowed=True,
        # Validate on assignment to catch errors early
        validate_assignment=True,
        strict=False,
        # Unknown fields are a sign the reader did not normalize the record
        extra="forbid",
        frozen=False,
    )


def to_decimal(v: Optional[Union[str, int, float, Decimal]]) -> Optional[Decimal]:
    """Convert a numeric value to Decimal, going through ``str`` for floats.

    Args:
        v: The value to convert (None passes through)

    Returns:
        The value as a Decimal, or None

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if v is None or isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert boolean {v} to Decimal")
    try:
        return Decimal(str(v).strip())
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {v!r} to Decimal: {e}")
