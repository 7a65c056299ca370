from __future__ import annotations

from typing import Any

import pandas as pd

from scholarship_hunter.normalize.coerce import coerce_float, round_half_up

DIMENSION_LABELS = {
    "academic_score": "Strong academic fit",
    "major_field_score": "Major or field of study matches",
    "demographic_score": "Demographic criteria satisfied",
    "experience_score": "Experience requirements covered",
    "financial_score": "Financial profile fits",
    "special_criteria_score": "Special criteria satisfied",
}


def format_usd(amount: float) -> str:
    """Whole-dollar currency with thousands separators, e.g. ``$5,000``."""
    dollars = round_half_up(abs(amount))
    sign = "-" if amount < 0 and dollars else ""
    return f"{sign}${dollars:,}"


def format_amount(value: Any) -> str:
    amount = coerce_float(value)
    if amount is None:
        return "Unknown"
    return format_usd(max(amount, 0.0))


def format_number(value: float) -> str:
    """Render a number the way it was entered: `4.0` as `4`, `3.5` as `3.5`."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def explain_match_row(row: pd.Series, *, max_signals: int = 3, threshold: float = 80.0) -> list[str]:
    """Short human-readable reasons for a ranked row, strongest dimensions first."""
    signal_scores: list[tuple[float, str]] = []
    for column, label in DIMENSION_LABELS.items():
        score = coerce_float(row.get(column))
        if score is not None and score >= threshold:
            signal_scores.append((score, label))

    strategic_value = coerce_float(row.get("strategic_value")) or 0.0
    if strategic_value >= 3.0:
        signal_scores.append((strategic_value * 10, "High expected return for the effort"))
    if row.get("application_effort") == "LOW":
        signal_scores.append((threshold, "Lower effort application"))

    ranked = [label for score, label in sorted(signal_scores, key=lambda item: item[0], reverse=True)]
    if not ranked:
        return ["Partial fit, review eligibility details"]
    return ranked[:max_signals]
