"""Normalization of stored Decimal amounts to floats for computation."""

from decimal import Decimal
from typing import Optional, Union

Number = Union[Decimal, float, int, None]


def to_number(value: Number) -> float:
    """Convert a stored amount to a float.

    Args:
        value: Decimal, float, int or None

    Returns:
        Float value, 0.0 for None
    """
    if value is None:
        return 0.0
    if isinstance(value, float):
        return value
    return float(value)


def to_number_or_none(value: Number) -> Optional[float]:
    """Convert a stored amount to a float, preserving None."""
    if value is None:
        return None
    return to_number(value)
