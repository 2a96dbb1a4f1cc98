# greencart-kpi/greencart/utils.py
"""
Utility functions for the GreenCart delivery KPI engine.

Provides half-up rounding for currency values, zero-safe ratios and
time parsing for run requests.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Union

from . import config

Number = Union[int, float]

_CLOCK_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


def round_half_up(value: Number, digits: int = 0) -> float:
    """
    Round a number half away from zero.

    Rounds the shortest decimal representation of the float, unlike the
    built-in round() (banker's rounding, round(2.675, 2) == 2.67).

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded value as a float

    Example:
        >>> round_half_up(58.5)
        59.0
        >>> round_half_up(2.675, 2)
        2.68
    """
    if not math.isfinite(value):
        return float(value)
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_currency(value: Number) -> float:
    """Round a currency amount (Rs) to CURRENCY_DECIMALS places."""
    return round_half_up(value, config.CURRENCY_DECIMALS)


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """
    Divide, returning 0.0 when the denominator is zero.

    KPI ratios are persisted and displayed; NaN or Infinity must never
    leak out of an empty run.
    """
    if denominator == 0:
        return 0.0
    return numerator / denominator


def parse_clock_time(value: str) -> time:
    """
    Parse a 24-hour 'HH:MM' string (hour may be a single digit).

    Raises:
        ValueError: If the string is not a valid 24-hour clock time
    """
    if not isinstance(value, str) or not _CLOCK_PATTERN.match(value):
        raise ValueError(f"Route start time must be in HH:MM format (24-hour), got {value!r}")
    return datetime.strptime(value, "%H:%M").time()


def parse_bool(value: Any) -> bool:
    """Parse a CSV boolean cell ('true', 'false', '1', '0', 'yes', 'no')."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "y"):
        return True
    if text in ("false", "0", "no", "n"):
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


def sanitize_for_json(obj: Any) -> Any:
    """
    Make output JSON strictly valid:
    - convert NaN/Inf to None (JSON null)
    - recursively sanitize dicts/lists
    """
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        return None
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    return obj
