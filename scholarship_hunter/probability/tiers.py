from __future__ import annotations

from dataclasses import dataclass

from scholarship_hunter.display import format_number
from scholarship_hunter.normalize.schema import SuccessTier

# Inclusive lower bounds, highest first.
TIER_THRESHOLDS: tuple[tuple[float, SuccessTier], ...] = (
    (70.0, SuccessTier.STRONG_MATCH),
    (40.0, SuccessTier.COMPETITIVE_MATCH),
    (10.0, SuccessTier.REACH),
)

TIER_METADATA: dict[SuccessTier, dict[str, str]] = {
    SuccessTier.STRONG_MATCH: {
        "label": "Strong Match",
        "description": "Apply immediately, high confidence",
        "color": "green",
    },
    SuccessTier.COMPETITIVE_MATCH: {
        "label": "Competitive Match",
        "description": "Solid opportunity, worth effort",
        "color": "blue",
    },
    SuccessTier.REACH: {
        "label": "Reach",
        "description": "Long shot, but possible",
        "color": "orange",
    },
    SuccessTier.LONG_SHOT: {
        "label": "Long-Shot",
        "description": "Very competitive, consider if high value",
        "color": "red",
    },
}


@dataclass(frozen=True, slots=True)
class SuccessTierResult:
    tier: SuccessTier
    probability: float
    label: str
    description: str
    color: str


def classify_success_tier(probability: float) -> SuccessTierResult:
    """Bucket a percent probability. The probability is reported back unclamped."""
    tier = SuccessTier.LONG_SHOT
    for threshold, candidate in TIER_THRESHOLDS:
        if probability >= threshold:
            tier = candidate
            break

    metadata = TIER_METADATA[tier]
    return SuccessTierResult(
        tier=tier,
        probability=probability,
        label=metadata["label"],
        description=metadata["description"],
        color=metadata["color"],
    )


def format_tier_display(result: SuccessTierResult) -> str:
    return f"{format_number(result.probability)}% success probability - {result.label}"


def get_tier_color(tier: SuccessTier) -> str:
    return TIER_METADATA[tier]["color"]
