"""Eligibility: per-criterion breakdown for display and the pass/fail hard filter."""

from scholarship_hunter.eligibility.compare import EligibilityItem, compare_eligibility
from scholarship_hunter.eligibility.hard_filter import (
    FailedCriterion,
    FilterDimension,
    FilterStatistics,
    HardFilterResult,
    apply_hard_filters,
    filter_scholarships,
    get_filter_statistics,
)

__all__ = [
    "EligibilityItem",
    "FailedCriterion",
    "FilterDimension",
    "FilterStatistics",
    "HardFilterResult",
    "apply_hard_filters",
    "compare_eligibility",
    "filter_scholarships",
    "get_filter_statistics",
]
