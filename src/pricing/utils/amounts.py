"""Numeric guards shared by the pricing calculations.

Pricing never raises for bad business values: negative amounts are clamped
to zero and missing values count as zero. Values of the wrong type are a
contract violation by whoever fetched the data, so they fail fast with a
Protean ``ValidationError``.
"""

import math
from decimal import Decimal

from protean.exceptions import ValidationError


def as_number(value, field: str) -> float:
    """Coerce ``value`` to a float, treating ``None`` as zero."""
    if value is None:
        return 0.0

    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError({field: [f"Expected a number, got {type(value).__name__}"]})

    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValidationError({field: [f"Expected a finite number, got {value!r}"]})

    return number


def non_negative(value, field: str) -> float:
    """Coerce ``value`` to a float and clamp it at zero."""
    return max(0.0, as_number(value, field))


def as_points(value, field: str) -> int:
    """Coerce a points quantity to a whole, non-negative number of points."""
    return math.floor(non_negative(value, field))
