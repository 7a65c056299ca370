from __future__ import annotations

import pytest

from scholarship_hunter.match.score import evaluate_match
from scholarship_hunter.normalize.schema import (
    EffortLevel,
    PriorityTier,
    Scholarship,
    StrategicValueTier,
    StudentProfile,
    SuccessTier,
)


def test_unconstrained_generous_scholarship_is_must_apply() -> None:
    scholarship = Scholarship(scholarship_id="s1", award_amount=10000, acceptance_rate=0.95)

    match = evaluate_match(StudentProfile(), scholarship)

    assert match.overall_match_score == 100
    assert match.success_probability == 95
    assert match.success_tier == SuccessTier.STRONG_MATCH
    assert match.competition_factor == pytest.approx(0.95)
    assert match.application_effort == EffortLevel.LOW
    assert match.strategic_value == pytest.approx(9.5)
    assert match.strategic_value_tier == StrategicValueTier.BEST_BET
    assert match.priority_tier == PriorityTier.MUST_APPLY


def test_large_award_with_low_odds_is_high_value_reach() -> None:
    scholarship = Scholarship.from_mapping(
        {
            "id": "s2",
            "awardAmount": 20000,
            "acceptanceRate": 0.05,
            "essayPrompts": ["a", "b", "c"],
            "eligibilityCriteria": {"minGPA": 3.9},
        }
    )

    match = evaluate_match(StudentProfile(gpa=3.0), scholarship)

    assert match.academic_score == 77
    assert match.overall_match_score == 93
    assert match.success_probability == 5
    assert match.application_effort == EffortLevel.HIGH
    assert match.strategic_value == pytest.approx(0.4)
    assert match.priority_tier == PriorityTier.HIGH_VALUE_REACH


def test_evaluate_match_is_idempotent_and_serializable() -> None:
    profile = StudentProfile(gpa=3.6, strength_score=70)
    scholarship = Scholarship(scholarship_id="s3", award_amount=2500, applicant_pool_size=400, number_of_awards=4)

    first = evaluate_match(profile, scholarship, reference_year=2026)
    second = evaluate_match(profile, scholarship, reference_year=2026)

    assert first == second
    payload = first.to_dict()
    assert payload["priority_tier"] in {tier.value for tier in PriorityTier}
    assert payload["effort_breakdown"] == {"essays": 0, "documents": 0, "recommendations": 0}
