from __future__ import annotations

from scholarship_hunter.normalize.schema import PriorityTier
from scholarship_hunter.strategy.priority import (
    PRIORITY_RULES,
    assign_priority_tier,
    get_tier_rationale,
)


def test_priority_tier_boundaries() -> None:
    assert assign_priority_tier(90, 0.7, 3.0, 5000) == PriorityTier.MUST_APPLY
    assert assign_priority_tier(89, 0.7, 3.0, 5000) == PriorityTier.SHOULD_APPLY
    assert assign_priority_tier(60, 0.2, 1.5, 20000) == PriorityTier.HIGH_VALUE_REACH
    assert assign_priority_tier(0, 0, 0, 0) == PriorityTier.IF_TIME_PERMITS


def test_earlier_rules_win_over_later_ones() -> None:
    assert assign_priority_tier(95, 0.8, 5.0, 20000) == PriorityTier.MUST_APPLY
    assert assign_priority_tier(95, 0.8, 2.9, 5000) == PriorityTier.SHOULD_APPLY
    assert assign_priority_tier(74, 0.2, 0.5, 10000) == PriorityTier.HIGH_VALUE_REACH
    assert assign_priority_tier(74, 0.25, 0.5, 10000) == PriorityTier.IF_TIME_PERMITS


def test_priority_rules_are_evaluated_in_declared_order() -> None:
    assert [tier for _, tier in PRIORITY_RULES] == [
        PriorityTier.MUST_APPLY,
        PriorityTier.SHOULD_APPLY,
        PriorityTier.HIGH_VALUE_REACH,
        PriorityTier.IF_TIME_PERMITS,
    ]


def test_tier_rationale_templates() -> None:
    assert get_tier_rationale(PriorityTier.MUST_APPLY, 94, 0.72, 5.0, 5000) == (
        "MUST_APPLY: 94 match, $5,000 award, 72% success probability, 5.0 strategic value"
        " - Exceptional match with high probability and strong ROI"
    )
    assert get_tier_rationale(PriorityTier.SHOULD_APPLY, 80.4, 0.45, 1.2, 2500) == (
        "SHOULD_APPLY: 80 match, $2,500 award, 45% success probability"
        " - Strong match with competitive probability"
    )
    assert "High-value opportunity" in get_tier_rationale(
        PriorityTier.HIGH_VALUE_REACH, 60, 0.1, 1.0, 25000
    )
    assert get_tier_rationale("IF_TIME_PERMITS", 50, 0.3, 0.4, 1000).endswith(
        "Decent match, apply if time allows"
    )
