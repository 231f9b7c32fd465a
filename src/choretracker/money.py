"""Utilities for working with monetary values in the chore tracker.

Amounts are plain floats. Products and sums are kept unrounded; rounding to
cents happens only in :func:`format_currency`.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Union

from .exceptions import ValidationError

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike, *, field: str = "amount") -> float:
    """Convert ``value`` to a finite float or raise :class:`ValidationError`."""

    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {field}")
    if isinstance(value, str) and "_" in value:
        raise ValidationError(f"Invalid {field}")
    if not isinstance(value, (int, float, Decimal, str)):
        raise ValidationError(f"Invalid {field}")
    try:
        result = float(value.strip() if isinstance(value, str) else value)
    except (OverflowError, ValueError) as exc:
        raise ValidationError(f"Invalid {field}") from exc

    if not math.isfinite(result):
        raise ValidationError(f"Invalid {field}")
    return result


def require_positive(amount: float, *, allow_zero: bool = False, field: str = "amount") -> float:
    """Ensure ``amount`` is positive (or non-negative when ``allow_zero`` is true)."""

    if allow_zero:
        if amount < 0:
            raise ValidationError(f"Invalid {field}")
    else:
        if amount <= 0:
            raise ValidationError(f"Invalid {field}")
    return amount


def format_currency(amount: float) -> str:
    """Return ``amount`` as a currency formatted string (e.g. ``$12.34``)."""

    return f"${amount:.2f}"


__all__ = ["AmountLike", "format_currency", "require_positive", "to_amount"]
