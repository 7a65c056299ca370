"""Pass/fail eligibility filter applied before match scoring.

Every active criterion is a must-have: a missing profile value fails it.
Text criteria compare case-insensitively and "Any" means unrestricted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable

from scholarship_hunter.display import format_number
from scholarship_hunter.match.dimensions import (
    activity_names,
    efc_upper_bound,
    estimated_age,
    work_experience_months,
)
from scholarship_hunter.normalize.coerce import collection_size, normalize_text, normalized_list
from scholarship_hunter.normalize.schema import (
    NEED_LEVEL_RANK,
    AcademicCriteria,
    DemographicCriteria,
    DimensionCriteria,
    ExperienceCriteria,
    FinancialCriteria,
    FinancialNeed,
    MajorFieldCriteria,
    Scholarship,
    SpecialCriteria,
    StudentProfile,
)


class FilterDimension(str, Enum):
    ACADEMIC = "academic"
    DEMOGRAPHIC = "demographic"
    MAJOR_FIELD = "major_field"
    EXPERIENCE = "experience"
    FINANCIAL = "financial"
    SPECIAL = "special"


@dataclass(frozen=True, slots=True)
class FailedCriterion:
    dimension: FilterDimension
    criterion: str
    required: Any
    actual: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension.value,
            "criterion": self.criterion,
            "required": self.required,
            "actual": self.actual,
        }


@dataclass(frozen=True, slots=True)
class HardFilterResult:
    eligible: bool
    failed_criteria: list[FailedCriterion] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FilterStatistics:
    total_scholarships: int
    eligible_count: int
    rejected_count: int
    rejections_by_dimension: dict[str, int]


def _allowed(value: Any) -> list[str]:
    allowed = normalized_list(value)
    if "any" in allowed:
        return []
    return allowed


def _minimum(
    failed: list[FailedCriterion],
    dimension: FilterDimension,
    criterion: str,
    required: float | None,
    actual: float | None,
) -> None:
    if required is None:
        return
    if actual is None or actual < required:
        failed.append(FailedCriterion(dimension, criterion, required, actual))


def _maximum(
    failed: list[FailedCriterion],
    dimension: FilterDimension,
    criterion: str,
    required: float | None,
    actual: float | None,
) -> None:
    # An unknown value never exceeds a ceiling.
    if required is not None and actual is not None and actual > required:
        failed.append(FailedCriterion(dimension, criterion, required, actual))


def _one_of(
    failed: list[FailedCriterion],
    dimension: FilterDimension,
    criterion: str,
    required: Any,
    actual: str | None,
) -> None:
    allowed = _allowed(required)
    if allowed and normalize_text(actual) not in allowed:
        failed.append(FailedCriterion(dimension, criterion, required, actual))


def filter_academic(profile: StudentProfile, criteria: AcademicCriteria | None) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.ACADEMIC
    _minimum(failed, dimension, "min_gpa", criteria.min_gpa, profile.gpa)
    _maximum(failed, dimension, "max_gpa", criteria.max_gpa, profile.gpa)
    _minimum(failed, dimension, "min_sat", criteria.min_sat, profile.sat_score)
    _maximum(failed, dimension, "max_sat", criteria.max_sat, profile.sat_score)
    _minimum(failed, dimension, "min_act", criteria.min_act, profile.act_score)
    _maximum(failed, dimension, "max_act", criteria.max_act, profile.act_score)
    if criteria.class_rank_percentile is not None:
        percentile = None
        if profile.class_rank and profile.class_size and profile.class_size > 0:
            percentile = profile.class_rank / profile.class_size * 100
        # Rank 1 is the top of the class; "top 10%" means percentile <= 10.
        if percentile is None or percentile > criteria.class_rank_percentile:
            failed.append(
                FailedCriterion(dimension, "class_rank_percentile", criteria.class_rank_percentile, percentile)
            )
    return failed


def filter_demographic(
    profile: StudentProfile,
    criteria: DemographicCriteria | None,
    *,
    reference_year: int | None = None,
) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.DEMOGRAPHIC
    _one_of(failed, dimension, "required_gender", criteria.required_gender, profile.gender)

    required_ethnicity = set(normalized_list(criteria.required_ethnicity))
    if required_ethnicity and not required_ethnicity & set(normalized_list(profile.ethnicity)):
        failed.append(FailedCriterion(dimension, "required_ethnicity", criteria.required_ethnicity, profile.ethnicity))

    if criteria.age_min is not None or criteria.age_max is not None:
        if profile.graduation_year is None:
            bounds = "-".join(
                "any" if bound is None else format_number(bound) for bound in (criteria.age_min, criteria.age_max)
            )
            failed.append(FailedCriterion(dimension, "age", bounds, None))
        else:
            age = estimated_age(profile.graduation_year, reference_year or date.today().year)
            _minimum(failed, dimension, "age_min", criteria.age_min, age)
            _maximum(failed, dimension, "age_max", criteria.age_max, age)

    _one_of(failed, dimension, "required_state", criteria.required_state, profile.state)
    _one_of(failed, dimension, "required_city", criteria.required_city, profile.city)
    return failed


def filter_major_field(profile: StudentProfile, criteria: MajorFieldCriteria | None) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.MAJOR_FIELD
    _one_of(failed, dimension, "eligible_majors", criteria.eligible_majors, profile.intended_major)

    excluded = normalized_list(criteria.excluded_majors)
    if excluded and normalize_text(profile.intended_major) in excluded:
        required = f"Not in: {', '.join(criteria.excluded_majors or [])}"
        failed.append(FailedCriterion(dimension, "excluded_majors", required, profile.intended_major))

    _one_of(failed, dimension, "required_field_of_study", criteria.required_field_of_study, profile.field_of_study)

    keywords = normalized_list(criteria.career_goals_keywords)
    if keywords:
        goals = normalize_text(profile.career_goals)
        if goals is None or not any(keyword in goals for keyword in keywords):
            failed.append(
                FailedCriterion(dimension, "career_goals_keywords", criteria.career_goals_keywords, profile.career_goals)
            )
    return failed


def filter_experience(profile: StudentProfile, criteria: ExperienceCriteria | None) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.EXPERIENCE
    _minimum(failed, dimension, "min_volunteer_hours", criteria.min_volunteer_hours, profile.volunteer_hours or 0.0)

    if criteria.leadership_required and collection_size(profile.leadership_roles) == 0:
        failed.append(FailedCriterion(dimension, "leadership_required", True, False))

    required_activities = normalized_list(criteria.required_extracurriculars)
    if required_activities:
        names = activity_names(profile.extracurriculars)
        if not any(required in name for required in required_activities for name in names):
            failed.append(
                FailedCriterion(dimension, "required_extracurriculars", criteria.required_extracurriculars, names)
            )

    if criteria.min_work_experience is not None:
        _minimum(
            failed,
            dimension,
            "min_work_experience",
            criteria.min_work_experience,
            work_experience_months(profile.work_experience),
        )

    if criteria.awards_honors_required and collection_size(profile.awards_honors) == 0:
        failed.append(FailedCriterion(dimension, "awards_honors_required", True, False))
    return failed


def _need_rank(level: FinancialNeed | None) -> int:
    return 0 if level is None else NEED_LEVEL_RANK[level]


def filter_financial(profile: StudentProfile, criteria: FinancialCriteria | None) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.FINANCIAL
    need = profile.financial_need
    need_text = need.value if need is not None else None

    if criteria.requires_financial_need and (need is None or need is FinancialNeed.LOW):
        failed.append(FailedCriterion(dimension, "requires_financial_need", True, need_text))

    if criteria.max_efc is not None:
        if not profile.efc_range:
            failed.append(FailedCriterion(dimension, "max_efc", criteria.max_efc, None))
        else:
            _maximum(failed, dimension, "max_efc", criteria.max_efc, efc_upper_bound(profile.efc_range))

    if criteria.pell_grant_required and not profile.pell_grant_eligible:
        failed.append(FailedCriterion(dimension, "pell_grant_required", True, False))

    level = criteria.financial_need_level
    if level is not None and _need_rank(need) < _need_rank(level):
        failed.append(FailedCriterion(dimension, "financial_need_level", level.value, need_text))
    return failed


def filter_special(profile: StudentProfile, criteria: SpecialCriteria | None) -> list[FailedCriterion]:
    failed: list[FailedCriterion] = []
    if criteria is None:
        return failed
    dimension = FilterDimension.SPECIAL
    if criteria.first_generation_required and not profile.first_generation:
        failed.append(FailedCriterion(dimension, "first_generation_required", True, False))
    _one_of(failed, dimension, "military_affiliation", criteria.military_affiliation, profile.military_affiliation)
    _one_of(failed, dimension, "citizenship_required", criteria.citizenship_required, profile.citizenship)
    if criteria.disability_required and not (profile.disabilities or "").strip():
        failed.append(FailedCriterion(dimension, "disability_required", True, False))
    return failed


DimensionFilter = Callable[[StudentProfile, DimensionCriteria, int | None], list[FailedCriterion]]

# Evaluation order; academic first since it rejects most often.
DIMENSION_FILTERS: tuple[tuple[FilterDimension, DimensionFilter], ...] = (
    (FilterDimension.ACADEMIC, lambda profile, criteria, year: filter_academic(profile, criteria.academic)),
    (
        FilterDimension.DEMOGRAPHIC,
        lambda profile, criteria, year: filter_demographic(profile, criteria.demographic, reference_year=year),
    ),
    (FilterDimension.MAJOR_FIELD, lambda profile, criteria, year: filter_major_field(profile, criteria.major_field)),
    (FilterDimension.EXPERIENCE, lambda profile, criteria, year: filter_experience(profile, criteria.experience)),
    (FilterDimension.FINANCIAL, lambda profile, criteria, year: filter_financial(profile, criteria.financial)),
    (FilterDimension.SPECIAL, lambda profile, criteria, year: filter_special(profile, criteria.special)),
)


def apply_hard_filters(
    profile: StudentProfile,
    criteria: DimensionCriteria | None,
    *,
    enabled_dimensions: Iterable[FilterDimension] | None = None,
    early_exit: bool = True,
    reference_year: int | None = None,
) -> HardFilterResult:
    """Check every enabled dimension; with `early_exit` stop at the first failing one."""
    bundle = criteria or DimensionCriteria()
    enabled = set(FilterDimension) if enabled_dimensions is None else {FilterDimension(d) for d in enabled_dimensions}
    failed: list[FailedCriterion] = []
    for dimension, check in DIMENSION_FILTERS:
        if dimension not in enabled:
            continue
        dimension_failures = check(profile, bundle, reference_year)
        failed.extend(dimension_failures)
        if dimension_failures and early_exit:
            break
    return HardFilterResult(eligible=not failed, failed_criteria=failed)


def filter_scholarships(
    profile: StudentProfile,
    scholarships: Iterable[Scholarship],
    *,
    reference_year: int | None = None,
) -> list[Scholarship]:
    return [
        scholarship
        for scholarship in scholarships
        if apply_hard_filters(profile, scholarship.criteria, reference_year=reference_year).eligible
    ]


def get_filter_statistics(
    profile: StudentProfile,
    scholarships: Iterable[Scholarship],
    *,
    reference_year: int | None = None,
) -> FilterStatistics:
    rejections = {dimension.value: 0 for dimension in FilterDimension}
    total = 0
    eligible_count = 0
    for scholarship in scholarships:
        total += 1
        result = apply_hard_filters(profile, scholarship.criteria, reference_year=reference_year)
        if result.eligible:
            eligible_count += 1
            continue
        for failure in result.failed_criteria:
            rejections[failure.dimension.value] += 1
    return FilterStatistics(
        total_scholarships=total,
        eligible_count=eligible_count,
        rejected_count=total - eligible_count,
        rejections_by_dimension=rejections,
    )
