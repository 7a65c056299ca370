from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from scholarship_hunter.normalize.coerce import coerce_int, collection_size
from scholarship_hunter.normalize.schema import EffortLevel

EFFORT_MULTIPLIERS: dict[EffortLevel, float] = {
    EffortLevel.LOW: 1.0,
    EffortLevel.MEDIUM: 0.7,
    EffortLevel.HIGH: 0.4,
}

TIME_INVESTMENT_HOURS: dict[EffortLevel, tuple[int, int]] = {
    EffortLevel.LOW: (2, 3),
    EffortLevel.MEDIUM: (4, 6),
    EffortLevel.HIGH: (8, 12),
}

# (essays, documents, recommendations) minimums, checked HIGH first.
EFFORT_THRESHOLDS: tuple[tuple[EffortLevel, int, int, int], ...] = (
    (EffortLevel.HIGH, 3, 5, 2),
    (EffortLevel.MEDIUM, 2, 3, 1),
)


@dataclass(frozen=True, slots=True)
class EffortBreakdown:
    essays: int = 0
    documents: int = 0
    recommendations: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "essays": self.essays,
            "documents": self.documents,
            "recommendations": self.recommendations,
        }


@dataclass(frozen=True, slots=True)
class EffortEstimation:
    level: EffortLevel
    multiplier: float
    breakdown: EffortBreakdown


@dataclass(frozen=True, slots=True)
class TimeInvestment:
    min_hours: int
    max_hours: int


def count_essays(essay_prompts: Any) -> int:
    if essay_prompts is None or isinstance(essay_prompts, str):
        return 0
    if isinstance(essay_prompts, Mapping):
        return collection_size(essay_prompts.get("prompts"))
    return collection_size(essay_prompts)


def estimate_effort_level(
    essay_prompts: Any = None,
    required_documents: Any = None,
    recommendation_count: Any = None,
) -> EffortEstimation:
    breakdown = EffortBreakdown(
        essays=count_essays(essay_prompts),
        documents=collection_size(required_documents),
        recommendations=coerce_int(recommendation_count) or 0,
    )

    level = EffortLevel.LOW
    for candidate, min_essays, min_documents, min_recommendations in EFFORT_THRESHOLDS:
        if (
            breakdown.essays >= min_essays
            or breakdown.documents >= min_documents
            or breakdown.recommendations >= min_recommendations
        ):
            level = candidate
            break

    return EffortEstimation(level=level, multiplier=EFFORT_MULTIPLIERS[level], breakdown=breakdown)


def estimate_time_investment(level: EffortLevel) -> TimeInvestment:
    min_hours, max_hours = TIME_INVESTMENT_HOURS[level]
    return TimeInvestment(min_hours=min_hours, max_hours=max_hours)
