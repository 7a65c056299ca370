from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scholarship_hunter.match.dimensions import (
    score_academic,
    score_demographic,
    score_experience,
    score_financial,
    score_major_field,
    score_special,
)
from scholarship_hunter.match.weights import MatchWeights
from scholarship_hunter.normalize.coerce import clamp, round_half_up
from scholarship_hunter.normalize.schema import (
    DimensionCriteria,
    EffortLevel,
    PriorityTier,
    Scholarship,
    StrategicValueTier,
    StudentProfile,
    SuccessTier,
)
from scholarship_hunter.probability.competition import calculate_competition_factor
from scholarship_hunter.probability.success import calculate_success_probability
from scholarship_hunter.probability.tiers import classify_success_tier
from scholarship_hunter.strategy.effort import EffortBreakdown, estimate_effort_level
from scholarship_hunter.strategy.priority import assign_priority_tier
from scholarship_hunter.strategy.value import calculate_strategic_value, classify_strategic_value


@dataclass(frozen=True, slots=True)
class DimensionScores:
    academic: int
    demographic: int
    major_field: int
    experience: int
    financial: int
    special_criteria: int
    overall: int


@dataclass(frozen=True, slots=True)
class MatchScore:
    overall_match_score: int
    academic_score: int
    demographic_score: int
    major_field_score: int
    experience_score: int
    financial_score: int
    special_criteria_score: int
    success_probability: int
    success_tier: SuccessTier
    competition_factor: float
    application_effort: EffortLevel
    effort_breakdown: EffortBreakdown
    strategic_value: float
    strategic_value_tier: StrategicValueTier
    priority_tier: PriorityTier

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_match_score": self.overall_match_score,
            "academic_score": self.academic_score,
            "demographic_score": self.demographic_score,
            "major_field_score": self.major_field_score,
            "experience_score": self.experience_score,
            "financial_score": self.financial_score,
            "special_criteria_score": self.special_criteria_score,
            "success_probability": self.success_probability,
            "success_tier": self.success_tier.value,
            "competition_factor": self.competition_factor,
            "application_effort": self.application_effort.value,
            "effort_breakdown": self.effort_breakdown.to_dict(),
            "strategic_value": self.strategic_value,
            "strategic_value_tier": self.strategic_value_tier.value,
            "priority_tier": self.priority_tier.value,
        }


def weighted_overall(
    academic: float,
    major_field: float,
    demographic: float,
    experience: float,
    financial: float,
    special: float,
    weights: MatchWeights | None = None,
) -> int:
    active = weights or MatchWeights.baseline()
    total = (
        academic * active.academic
        + major_field * active.major_field
        + demographic * active.demographic
        + experience * active.experience
        + financial * active.financial
        + special * active.special
    )
    return int(clamp(round_half_up(total), 0, 100))


def score_dimensions(
    profile: StudentProfile,
    criteria: DimensionCriteria | None,
    weights: MatchWeights | None = None,
    *,
    reference_year: int | None = None,
) -> DimensionScores:
    """Score all six dimensions and their weighted composite."""
    bundle = criteria or DimensionCriteria()
    academic = score_academic(profile, bundle.academic)
    demographic = score_demographic(profile, bundle.demographic, reference_year=reference_year)
    major_field = score_major_field(profile, bundle.major_field)
    experience = score_experience(profile, bundle.experience)
    financial = score_financial(profile, bundle.financial)
    special = score_special(profile, bundle.special)
    return DimensionScores(
        academic=academic,
        demographic=demographic,
        major_field=major_field,
        experience=experience,
        financial=financial,
        special_criteria=special,
        overall=weighted_overall(
            academic, major_field, demographic, experience, financial, special, weights
        ),
    )


def evaluate_match(
    profile: StudentProfile,
    scholarship: Scholarship,
    *,
    weights: MatchWeights | None = None,
    reference_year: int | None = None,
) -> MatchScore:
    scores = score_dimensions(profile, scholarship.criteria, weights, reference_year=reference_year)
    success_probability = calculate_success_probability(
        scores.overall, profile.strength_score, scholarship
    )
    effort = estimate_effort_level(
        scholarship.essay_prompts,
        scholarship.required_documents,
        scholarship.recommendation_count,
    )
    value = calculate_strategic_value(
        scores.overall, success_probability, scholarship.award_amount, effort.level
    )
    return MatchScore(
        overall_match_score=scores.overall,
        academic_score=scores.academic,
        demographic_score=scores.demographic,
        major_field_score=scores.major_field,
        experience_score=scores.experience,
        financial_score=scores.financial,
        special_criteria_score=scores.special_criteria,
        success_probability=success_probability,
        success_tier=classify_success_tier(success_probability).tier,
        competition_factor=calculate_competition_factor(scholarship),
        application_effort=effort.level,
        effort_breakdown=effort.breakdown,
        strategic_value=value.strategic_value,
        strategic_value_tier=classify_strategic_value(value.strategic_value).tier,
        priority_tier=assign_priority_tier(
            scores.overall,
            success_probability / 100,
            value.strategic_value,
            scholarship.award_amount,
        ),
    )
