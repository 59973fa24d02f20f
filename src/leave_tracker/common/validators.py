from __future__ import annotations

from typing import Optional

from ..core.constants import MAX_PERIOD, MIN_PERIOD
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_period(value) -> int:
    """Parse a class period (1..6) from form input."""
    try:
        period = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Period must be between {MIN_PERIOD} and {MAX_PERIOD}")
    if period < MIN_PERIOD or period > MAX_PERIOD:
        raise ValidationError(f"Period must be between {MIN_PERIOD} and {MAX_PERIOD}")
    return period


def parse_yes_no(value: Optional[str], field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    v = (value or "").strip().lower()
    if v in {"yes", "true", "1", "on"}:
        return True
    if v in {"no", "false", "0", "off"}:
        return False
    raise ValidationError(f"{field_name} is required")
