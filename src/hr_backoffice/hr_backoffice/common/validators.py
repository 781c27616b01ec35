from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import ValidationError

CENT = Decimal("0.01")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def to_money(value: Any) -> Decimal:
    """Quantize to 2 decimal places (half-up). None/'' becomes 0."""

    if value is None or value == "":
        return Decimal("0.00")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    if not d.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def require_amount(value: Any, field_name: str, *, allow_zero: bool = True) -> Decimal:
    amount = to_money(value)
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    if not allow_zero and amount == 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return amount


def require_count(value: Any, field_name: str) -> float:
    """Day counts may be fractional (half days), never negative."""

    if value is None or value == "":
        return 0
    try:
        n = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(n):
        raise ValidationError(f"{field_name} must be a finite number")
    if n < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return int(n) if n.is_integer() else n


def parse_int(value: Any, default: int, *, minimum: int = 1, maximum: Optional[int] = None) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    n = max(n, minimum)
    if maximum is not None:
        n = min(n, maximum)
    return n


def parse_bool(value: Any) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    if v in {"true", "1", "yes"}:
        return True
    if v in {"false", "0", "no"}:
        return False
    return None
