"""
Numeric Utilities
app/scoring/utils.py

Precision-safe rounding and number coercion for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union

Number = Union[int, float]


def to_decimal(value: float, places: int = 4) -> Decimal:
    """Convert float to Decimal with explicit precision."""
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places, rounding=ROUND_HALF_UP
    )


def round_half_up(value: float, places: int = 0) -> Number:
    """
    Round with halves away from zero for positives (2.5 -> 3, 66.5 -> 67).
    Returns int when places == 0, float otherwise.
    """
    rounded = to_decimal(value, places)
    if places == 0:
        return int(rounded)
    return float(rounded)


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to int so persisted JSON stays stable (8.0 -> 8)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def as_number(value: Any) -> Optional[Number]:
    """Return value if it is a real int/float (bools excluded), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def parse_index(value: Any) -> Optional[int]:
    """
    Coerce an answer value to an option index.

    Accepts ints, integral floats and numeric strings ("2", " 3 ").
    Returns None for anything else.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
