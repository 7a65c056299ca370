from __future__ import annotations

from dataclasses import dataclass

from scholarship_hunter.display import format_usd, pluralize
from scholarship_hunter.normalize.coerce import clamp, round_half_up
from scholarship_hunter.normalize.schema import EffortLevel, StrategicValueTier
from scholarship_hunter.strategy.effort import EFFORT_MULTIPLIERS, EffortBreakdown

MAX_STRATEGIC_VALUE = 10.0
DOLLARS_PER_POINT = 1000.0
MATCH_BOOST = 0.1

VALUE_THRESHOLDS: tuple[tuple[float, StrategicValueTier], ...] = (
    (5.0, StrategicValueTier.BEST_BET),
    (3.0, StrategicValueTier.HIGH_VALUE),
    (1.5, StrategicValueTier.MEDIUM_VALUE),
)

VALUE_TIER_CONFIG: dict[StrategicValueTier, dict[str, str]] = {
    StrategicValueTier.BEST_BET: {
        "label": "Best Bet",
        "color": "gold",
        "recommendation": "Apply immediately - highest expected return per hour invested",
    },
    StrategicValueTier.HIGH_VALUE: {
        "label": "High Value",
        "color": "green",
        "recommendation": "Strong opportunity worth pursuing after best bets",
    },
    StrategicValueTier.MEDIUM_VALUE: {
        "label": "Medium Value",
        "color": "blue",
        "recommendation": "Apply if time permits after higher priorities",
    },
    StrategicValueTier.LOW_VALUE: {
        "label": "Low Value",
        "color": "gray",
        "recommendation": "Consider skipping unless special circumstances apply",
    },
}


@dataclass(frozen=True, slots=True)
class StrategicValueResult:
    strategic_value: float
    expected_value: float
    effort_adjusted_value: float


@dataclass(frozen=True, slots=True)
class StrategicValueClassification:
    tier: StrategicValueTier
    value: float
    label: str
    color: str
    recommendation: str


def calculate_strategic_value(
    match_score: float,
    success_probability: float,
    award_amount: float,
    effort_level: EffortLevel,
) -> StrategicValueResult:
    """Expected award per unit of effort, on a 0-10 scale ($1,000 per point).

    `success_probability` is a percent. `match_score` is accepted for symmetry
    with the boosted variant and does not affect the base value.
    """
    if award_amount <= 0 or success_probability <= 0:
        return StrategicValueResult(strategic_value=0.0, expected_value=0.0, effort_adjusted_value=0.0)

    expected_value = award_amount * (success_probability / 100)
    effort_adjusted_value = expected_value * EFFORT_MULTIPLIERS[effort_level]
    return StrategicValueResult(
        strategic_value=clamp(effort_adjusted_value / DOLLARS_PER_POINT, 0.0, MAX_STRATEGIC_VALUE),
        expected_value=expected_value,
        effort_adjusted_value=effort_adjusted_value,
    )


def calculate_strategic_value_with_match_boost(
    match_score: float,
    success_probability: float,
    award_amount: float,
    effort_level: EffortLevel,
) -> StrategicValueResult:
    base = calculate_strategic_value(match_score, success_probability, award_amount, effort_level)
    boost = 1 + (match_score / 100) * MATCH_BOOST
    return StrategicValueResult(
        strategic_value=clamp(base.strategic_value * boost, 0.0, MAX_STRATEGIC_VALUE),
        expected_value=base.expected_value,
        effort_adjusted_value=base.effort_adjusted_value * boost,
    )


def classify_strategic_value(strategic_value: float) -> StrategicValueClassification:
    tier = StrategicValueTier.LOW_VALUE
    for threshold, candidate in VALUE_THRESHOLDS:
        if strategic_value >= threshold:
            tier = candidate
            break

    config = VALUE_TIER_CONFIG[tier]
    return StrategicValueClassification(
        tier=tier,
        value=strategic_value,
        label=config["label"],
        color=config["color"],
        recommendation=config["recommendation"],
    )


def format_strategic_value_display(
    tier: StrategicValueTier,
    award_amount: float,
    success_probability: float,
    effort_level: EffortLevel,
    breakdown: EffortBreakdown,
) -> str:
    parts: list[str] = []
    if breakdown.essays > 0:
        parts.append(pluralize(breakdown.essays, "essay"))
    if breakdown.documents > 0:
        parts.append(pluralize(breakdown.documents, "doc"))
    if breakdown.recommendations > 0:
        parts.append(pluralize(breakdown.recommendations, "rec"))
    requirements = ", ".join(parts) if parts else "no requirements"

    label = VALUE_TIER_CONFIG[tier]["label"]
    return (
        f"Strategic Value: {label} - {format_usd(award_amount)} award, "
        f"{round_half_up(success_probability)}% success probability, "
        f"{EffortLevel(effort_level).value} effort ({requirements})"
    )
