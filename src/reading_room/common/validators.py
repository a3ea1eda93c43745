from __future__ import annotations

import math
from typing import Any, Optional, Union

from ..core.exceptions import ValidationError

Number = Union[int, float]


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value)


def coerce_number(value: Any, field_name: str) -> Number:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            raise ValidationError(f"{field_name} must be a number")
    else:
        raise ValidationError(f"{field_name} must be a number")

    # nan and inf would reach the JSON columns as invalid JSON.
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    if isinstance(value, str) and number.is_integer():
        return int(number)
    return number


def require_positive(value: Any, field_name: str) -> Number:
    number = coerce_number(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
