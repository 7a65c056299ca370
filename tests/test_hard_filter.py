from __future__ import annotations

import pytest

from scholarship_hunter.eligibility.hard_filter import (
    FilterDimension,
    apply_hard_filters,
    filter_academic,
    filter_demographic,
    filter_experience,
    filter_financial,
    filter_major_field,
    filter_scholarships,
    filter_special,
    get_filter_statistics,
)
from scholarship_hunter.normalize.schema import (
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


def test_unconstrained_scholarship_passes_empty_profile() -> None:
    result = apply_hard_filters(StudentProfile(), DimensionCriteria())

    assert result.eligible is True
    assert result.failed_criteria == []
    assert apply_hard_filters(StudentProfile(), None).eligible is True


def test_academic_minimums_fail_on_missing_or_low_values_and_ceilings_ignore_missing() -> None:
    criteria = AcademicCriteria(min_gpa=3.5, max_sat=1400, min_act=28)
    profile = StudentProfile(gpa=3.2, sat_score=None, act_score=None)

    failures = filter_academic(profile, criteria)

    assert [(f.criterion, f.required, f.actual) for f in failures] == [
        ("min_gpa", 3.5, 3.2),
        ("min_act", 28, None),
    ]


def test_class_rank_percentile_requires_rank_data() -> None:
    criteria = AcademicCriteria(class_rank_percentile=10)

    assert filter_academic(StudentProfile(class_rank=5, class_size=100), criteria) == []
    top_quarter = filter_academic(StudentProfile(class_rank=25, class_size=100), criteria)
    assert top_quarter[0].actual == pytest.approx(25.0)
    assert filter_academic(StudentProfile(), criteria)[0].actual is None


def test_demographic_accepts_any_listed_value_and_any_wildcard() -> None:
    criteria = DemographicCriteria(required_gender=["Female", "Non-binary"], required_state=["CA"])

    assert filter_demographic(StudentProfile(gender="non-binary", state="ca"), criteria) == []
    failures = filter_demographic(StudentProfile(gender="Male", state="CA"), criteria)
    assert [f.criterion for f in failures] == ["required_gender"]
    assert filter_demographic(StudentProfile(), DemographicCriteria(required_gender="Any")) == []


def test_demographic_age_uses_graduation_year() -> None:
    criteria = DemographicCriteria(age_min=17, age_max=19)

    assert filter_demographic(StudentProfile(graduation_year=2026), criteria, reference_year=2026) == []
    too_old = filter_demographic(StudentProfile(graduation_year=2020), criteria, reference_year=2026)
    assert [(f.criterion, f.actual) for f in too_old] == [("age_max", 24)]
    missing = filter_demographic(StudentProfile(), criteria, reference_year=2026)
    assert [(f.criterion, f.required) for f in missing] == [("age", "17-19")]


def test_major_field_exclusions_and_career_keywords() -> None:
    criteria = MajorFieldCriteria(excluded_majors=["Business"], career_goals_keywords=["research"])
    profile = StudentProfile(intended_major="business", career_goals="Run a startup")

    failures = filter_major_field(profile, criteria)

    assert [f.criterion for f in failures] == ["excluded_majors", "career_goals_keywords"]
    assert failures[0].required == "Not in: Business"


def test_experience_requirements() -> None:
    criteria = ExperienceCriteria(
        min_volunteer_hours=50,
        leadership_required=True,
        required_extracurriculars=["robotics"],
        min_work_experience=6,
        awards_honors_required=True,
    )
    profile = StudentProfile(
        volunteer_hours=60,
        leadership_roles=["Captain"],
        extracurriculars=[{"name": "Robotics Club"}],
        work_experience=[{"months": 3}],
    )

    failures = filter_experience(profile, criteria)

    assert [(f.criterion, f.actual) for f in failures] == [
        ("min_work_experience", 3.0),
        ("awards_honors_required", False),
    ]


def test_financial_need_level_and_low_need() -> None:
    criteria = FinancialCriteria(
        requires_financial_need=True,
        financial_need_level=FinancialNeed.HIGH,
        pell_grant_required=True,
    )

    assert filter_financial(
        StudentProfile(financial_need=FinancialNeed.VERY_HIGH, pell_grant_eligible=True), criteria
    ) == []
    failures = filter_financial(StudentProfile(financial_need=FinancialNeed.LOW), criteria)
    assert [f.criterion for f in failures] == [
        "requires_financial_need",
        "pell_grant_required",
        "financial_need_level",
    ]


def test_financial_efc_ceiling() -> None:
    criteria = FinancialCriteria(max_efc=5000)

    assert filter_financial(StudentProfile(efc_range="0-4000"), criteria) == []
    assert filter_financial(StudentProfile(efc_range="5000-10000"), criteria)[0].actual == 10000.0
    assert filter_financial(StudentProfile(), criteria)[0].actual is None


def test_special_requirements() -> None:
    criteria = SpecialCriteria(
        first_generation_required=True,
        military_affiliation=["Veteran", "Active Duty"],
        citizenship_required="US Citizen",
        disability_required=True,
    )
    profile = StudentProfile(
        first_generation=True,
        military_affiliation="Active Duty",
        citizenship="Permanent Resident",
        disabilities="  ",
    )

    failures = filter_special(profile, criteria)

    assert [f.criterion for f in failures] == ["citizenship_required", "disability_required"]


def test_early_exit_stops_after_first_failing_dimension() -> None:
    criteria = DimensionCriteria(
        academic=AcademicCriteria(min_gpa=3.9),
        special=SpecialCriteria(first_generation_required=True),
    )
    profile = StudentProfile(gpa=3.0)

    early = apply_hard_filters(profile, criteria)
    full = apply_hard_filters(profile, criteria, early_exit=False)
    special_only = apply_hard_filters(profile, criteria, enabled_dimensions=[FilterDimension.SPECIAL])

    assert early.eligible is False
    assert [f.dimension for f in early.failed_criteria] == [FilterDimension.ACADEMIC]
    assert [f.dimension for f in full.failed_criteria] == [FilterDimension.ACADEMIC, FilterDimension.SPECIAL]
    assert [f.criterion for f in special_only.failed_criteria] == ["first_generation_required"]


def test_filter_scholarships_and_statistics() -> None:
    scholarships = [
        Scholarship.from_mapping({"id": "open"}),
        Scholarship.from_mapping({"id": "gpa", "eligibility": {"minGPA": 3.9}}),
        Scholarship.from_mapping({"id": "pell", "eligibility": {"pellGrantRequired": True}}),
    ]
    profile = StudentProfile(gpa=3.0)

    eligible = filter_scholarships(profile, scholarships)
    stats = get_filter_statistics(profile, scholarships)

    assert [item.scholarship_id for item in eligible] == ["open"]
    assert stats.total_scholarships == 3
    assert stats.eligible_count == 1
    assert stats.rejected_count == 2
    assert stats.rejections_by_dimension["academic"] == 1
    assert stats.rejections_by_dimension["financial"] == 1
    assert stats.rejections_by_dimension["special"] == 0
