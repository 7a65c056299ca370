from __future__ import annotations

from typing import Callable

from scholarship_hunter.display import format_usd
from scholarship_hunter.normalize.coerce import round_half_up
from scholarship_hunter.normalize.schema import PriorityTier

# (match_score, success_probability as 0-1 fraction, strategic_value, award_amount)
TierPredicate = Callable[[float, float, float, float], bool]

HIGH_VALUE_AWARD = 10_000

# Evaluated top to bottom, first match wins. SHOULD_APPLY must precede
# HIGH_VALUE_REACH so a strong match on a large award is not demoted.
PRIORITY_RULES: tuple[tuple[TierPredicate, PriorityTier], ...] = (
    (lambda match, prob, value, award: match >= 90 and prob >= 0.7 and value >= 3.0, PriorityTier.MUST_APPLY),
    (lambda match, prob, value, award: match >= 75 and prob >= 0.4, PriorityTier.SHOULD_APPLY),
    (lambda match, prob, value, award: award >= HIGH_VALUE_AWARD and prob < 0.25, PriorityTier.HIGH_VALUE_REACH),
    (lambda match, prob, value, award: True, PriorityTier.IF_TIME_PERMITS),
)

PRIORITY_ORDER: tuple[PriorityTier, ...] = (
    PriorityTier.MUST_APPLY,
    PriorityTier.SHOULD_APPLY,
    PriorityTier.HIGH_VALUE_REACH,
    PriorityTier.IF_TIME_PERMITS,
)

TIER_PHRASES: dict[PriorityTier, str] = {
    PriorityTier.MUST_APPLY: "Exceptional match with high probability and strong ROI",
    PriorityTier.SHOULD_APPLY: "Strong match with competitive probability",
    PriorityTier.HIGH_VALUE_REACH: "High-value opportunity worth the calculated risk",
    PriorityTier.IF_TIME_PERMITS: "Decent match, apply if time allows",
}


def assign_priority_tier(
    match_score: float,
    success_probability: float,
    strategic_value: float,
    award_amount: float,
) -> PriorityTier:
    """Bucket a scholarship. `success_probability` is a fraction in [0, 1]."""
    for predicate, tier in PRIORITY_RULES:
        if predicate(match_score, success_probability, strategic_value, award_amount):
            return tier
    return PriorityTier.IF_TIME_PERMITS


def get_tier_rationale(
    tier: PriorityTier,
    match_score: float,
    success_probability: float,
    strategic_value: float,
    award_amount: float,
) -> str:
    tier = PriorityTier(tier)
    base = (
        f"{round_half_up(match_score)} match, {format_usd(award_amount)} award, "
        f"{round_half_up(success_probability * 100)}% success probability"
    )
    if tier is PriorityTier.MUST_APPLY:
        base = f"{base}, {strategic_value:.1f} strategic value"
    return f"{tier.value}: {base} - {TIER_PHRASES[tier]}"
