from __future__ import annotations

from scholarship_hunter.strategy.effort import (
    EFFORT_MULTIPLIERS,
    EffortBreakdown,
    EffortEstimation,
    estimate_effort_level,
    estimate_time_investment,
)
from scholarship_hunter.strategy.priority import assign_priority_tier, get_tier_rationale
from scholarship_hunter.strategy.value import (
    StrategicValueResult,
    calculate_strategic_value,
    calculate_strategic_value_with_match_boost,
    classify_strategic_value,
    format_strategic_value_display,
)

__all__ = [
    "EFFORT_MULTIPLIERS",
    "EffortBreakdown",
    "EffortEstimation",
    "StrategicValueResult",
    "assign_priority_tier",
    "calculate_strategic_value",
    "calculate_strategic_value_with_match_boost",
    "classify_strategic_value",
    "estimate_effort_level",
    "estimate_time_investment",
    "format_strategic_value_display",
    "get_tier_rationale",
]
