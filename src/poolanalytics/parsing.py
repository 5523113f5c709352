"""Tolerant conversion of indexer values (numberish fields, timestamps)."""

import math
from datetime import datetime, timezone
from typing import Any, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def to_number(value: Any) -> float:
    """Convert a number or numeric string to float; anything else is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def sum_numberish(*values: Any) -> float:
    return sum(to_number(value) for value in values)


def pct_of(part: float, total: float) -> float:
    """Share of total as a percentage in [0, 100]; 0 when total is not positive."""
    if not math.isfinite(part) or not math.isfinite(total) or total <= 0:
        return 0.0
    return clamp(part / total * 100, 0, 100)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime, or None."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def timestamp_or_epoch(value: Optional[str]) -> datetime:
    """Missing or unparseable timestamps sort as the oldest possible event."""
    return parse_timestamp(value) or EPOCH


def short_address(value: str) -> str:
    if len(value) < 12:
        return value
    return f"{value[:4]}…{value[-4:]}"
