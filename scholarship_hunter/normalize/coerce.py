from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Any, Iterable, Mapping, Sized

import pandas as pd


def is_unconstrained(value: Any) -> bool:
    """Return True when a criterion value means "no constraint specified".

    `None`, NaN, blank strings and empty collections all count as absent, so an
    unset criterion never penalizes a profile.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def normalize_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    normalized = str(value).strip().lower()
    return normalized or None


def as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        cleaned = value.strip()
        return [cleaned] if cleaned else []
    if isinstance(value, Mapping):
        return [str(key).strip() for key in value if str(key).strip()]
    if isinstance(value, Iterable):
        values: list[str] = []
        for item in value:
            if item is None:
                continue
            text = str(item).strip()
            if text:
                values.append(text)
        return values
    text = str(value).strip()
    return [text] if text else []


def normalized_list(value: Any) -> list[str]:
    return [item for item in (normalize_text(v) for v in as_list(value)) if item]


def collection_size(value: Any) -> int:
    if value is None or isinstance(value, str):
        return 0
    if isinstance(value, Sized):
        return len(value)
    return 0


def coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(numeric):
        return None
    return numeric


def coerce_int(value: Any) -> int | None:
    numeric = coerce_float(value)
    if numeric is None:
        return None
    return int(numeric)


def coerce_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return bool(value)
    text = normalize_text(value)
    if text in {"true", "yes", "y", "1"}:
        return True
    if text in {"false", "no", "n", "0"}:
        return False
    return None


def coerce_datetime(value: Any) -> datetime | None:
    """Parse a deadline-like value into an aware UTC datetime."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        if isinstance(value, float) and math.isnan(value):
            return None
        timestamp = pd.Timestamp(value)
        if pd.isna(timestamp):
            return None
        parsed = timestamp.to_pydatetime()
    return as_utc(parsed)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round_half_up(value: float) -> int:
    # Built-in round() is banker's rounding; scores round .5 upward.
    return int(math.floor(value + 0.5))


def pick(payload: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present, non-null value among `keys`.

    Records arrive either with snake_case keys or with the camelCase field
    names used by the application database, so loaders list both spellings.
    """
    for key in keys:
        if key not in payload:
            continue
        value = payload[key]
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        return value
    return None
