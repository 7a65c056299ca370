from __future__ import annotations

from scholarship_hunter.probability.competition import calculate_competition_factor
from scholarship_hunter.probability.historical import (
    HistoricalComparison,
    adjust_probability_for_historical_data,
    compare_to_historical_winners,
)
from scholarship_hunter.probability.success import (
    calculate_success_probability,
    calculate_success_probability_detailed,
)
from scholarship_hunter.probability.tiers import (
    SuccessTierResult,
    classify_success_tier,
    format_tier_display,
    get_tier_color,
)

__all__ = [
    "HistoricalComparison",
    "SuccessTierResult",
    "adjust_probability_for_historical_data",
    "calculate_competition_factor",
    "calculate_success_probability",
    "calculate_success_probability_detailed",
    "classify_success_tier",
    "compare_to_historical_winners",
    "format_tier_display",
    "get_tier_color",
]
