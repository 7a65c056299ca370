from __future__ import annotations

from scholarship_hunter.match.dimensions import (
    score_academic,
    score_demographic,
    score_experience,
    score_financial,
    score_major_field,
    score_special,
)
from scholarship_hunter.match.score import score_dimensions, weighted_overall
from scholarship_hunter.match.weights import MatchWeights
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


def test_unconstrained_dimensions_score_full_marks() -> None:
    scores = score_dimensions(StudentProfile(), DimensionCriteria())

    assert scores.academic == 100
    assert scores.demographic == 100
    assert scores.major_field == 100
    assert scores.experience == 100
    assert scores.financial == 100
    assert scores.special_criteria == 100
    assert scores.overall == 100
    assert score_dimensions(StudentProfile(), None) == scores


def test_academic_minimums_are_proportional_below_threshold() -> None:
    criteria = AcademicCriteria(min_gpa=3.5)

    assert score_academic(StudentProfile(gpa=3.8), criteria) == 100
    assert score_academic(StudentProfile(gpa=3.0), criteria) == 86
    assert score_academic(StudentProfile(), criteria) == 0


def test_academic_maximum_penalizes_overage() -> None:
    assert score_academic(StudentProfile(gpa=3.5), AcademicCriteria(max_gpa=3.0)) == 90
    assert score_academic(StudentProfile(act_score=30), AcademicCriteria(max_act=28)) == 80


def test_academic_class_rank_alone_uses_rank_score() -> None:
    criteria = AcademicCriteria(class_rank_percentile=10)

    assert score_academic(StudentProfile(class_rank=5, class_size=100), criteria) == 100
    assert score_academic(StudentProfile(class_rank=20, class_size=100), criteria) == 50
    assert score_academic(StudentProfile(class_rank=5), criteria) == 0


def test_major_field_exact_substring_and_family_matches() -> None:
    eligible = MajorFieldCriteria(eligible_majors=["Computer Science and Engineering"])
    assert score_major_field(StudentProfile(intended_major="Computer Science and Engineering"), eligible) == 100
    assert score_major_field(StudentProfile(intended_major="Computer Science"), eligible) == 75

    family = MajorFieldCriteria(eligible_majors=["Chemistry"])
    assert score_major_field(StudentProfile(intended_major="Biology"), family) == 50
    assert score_major_field(StudentProfile(intended_major="History"), family) == 0


def test_excluded_major_short_circuits_to_zero() -> None:
    criteria = MajorFieldCriteria(eligible_majors=["Biology"], excluded_majors=["biology"])

    assert score_major_field(StudentProfile(intended_major="Biology"), criteria) == 0


def test_demographic_mean_over_active_criteria() -> None:
    criteria = DemographicCriteria(required_gender="Female", required_state=["CA"])

    assert score_demographic(StudentProfile(gender="female", state="ca"), criteria) == 100
    assert score_demographic(StudentProfile(gender="female", state="TX"), criteria) == 50
    assert score_demographic(StudentProfile(state="CA"), DemographicCriteria(required_gender="Any")) == 100


def test_demographic_age_estimated_from_graduation_year() -> None:
    profile = StudentProfile(graduation_year=2026)

    assert score_demographic(profile, DemographicCriteria(age_min=18), reference_year=2026) == 100
    assert score_demographic(profile, DemographicCriteria(age_max=16), reference_year=2026) == 80
    assert score_demographic(StudentProfile(), DemographicCriteria(age_min=18), reference_year=2026) == 0


def test_experience_weighted_mean() -> None:
    criteria = ExperienceCriteria(min_volunteer_hours=100, leadership_required=True)

    assert score_experience(StudentProfile(volunteer_hours=50), criteria) == 29
    assert (
        score_experience(StudentProfile(volunteer_hours=120, leadership_roles=["Captain"]), criteria)
        == 100
    )


def test_financial_need_ladder_and_pell_match() -> None:
    criteria = FinancialCriteria(
        requires_financial_need=True,
        financial_need_level=FinancialNeed.HIGH,
        pell_grant_required=True,
    )
    profile = StudentProfile(financial_need=FinancialNeed.MODERATE, pell_grant_eligible=True)

    assert score_financial(profile, criteria) == 79
    assert score_financial(StudentProfile(), criteria) == 0


def test_financial_efc_range_upper_bound() -> None:
    criteria = FinancialCriteria(max_efc=10000)

    assert score_financial(StudentProfile(efc_range="0-5000"), criteria) == 100
    assert score_financial(StudentProfile(efc_range="10,000-20,000"), criteria) == 50
    assert score_financial(StudentProfile(), criteria) == 0


def test_special_related_affiliation_and_citizenship() -> None:
    criteria = SpecialCriteria(military_affiliation="Veteran", citizenship_required="US Citizen")
    profile = StudentProfile(military_affiliation="Active Duty", citizenship="Permanent Resident")

    assert score_special(profile, criteria) == 63
    assert (
        score_special(
            StudentProfile(citizenship="US Citizen"),
            SpecialCriteria(citizenship_required="Permanent Resident"),
        )
        == 100
    )


def test_overall_uses_configured_weights() -> None:
    assert weighted_overall(0, 100, 100, 100, 100, 100) == 70

    academic_only = MatchWeights(
        academic=1.0, major_field=0.0, demographic=0.0, experience=0.0, financial=0.0, special=0.0
    )
    scores = score_dimensions(
        StudentProfile(gpa=3.0),
        DimensionCriteria(academic=AcademicCriteria(min_gpa=3.5)),
        academic_only,
    )
    assert scores.overall == 86


def test_score_dimensions_is_idempotent() -> None:
    profile = StudentProfile(gpa=3.2, intended_major="Nursing", volunteer_hours=40)
    criteria = DimensionCriteria(
        academic=AcademicCriteria(min_gpa=3.5, min_sat=1200),
        major_field=MajorFieldCriteria(eligible_majors=["Public Health"]),
        experience=ExperienceCriteria(min_volunteer_hours=60),
    )

    first = score_dimensions(profile, criteria, reference_year=2026)
    second = score_dimensions(profile, criteria, reference_year=2026)

    assert first == second
    assert 0 <= first.overall <= 100


def test_multi_valued_gender_requirement_scores_any_overlap() -> None:
    scholarship = Scholarship.from_mapping({"id": "s1", "eligibility": {"gender": ["Female", "Non-binary"]}})

    assert score_demographic(StudentProfile(gender="Male"), scholarship.criteria.demographic) == 0
    assert score_demographic(StudentProfile(gender="Non-binary"), scholarship.criteria.demographic) == 100


def test_multi_valued_military_requirement_takes_best_affiliation() -> None:
    scholarship = Scholarship.from_mapping(
        {"id": "s1", "eligibility": {"militaryAffiliation": ["Veteran", "Active Duty"]}}
    )

    assert score_special(StudentProfile(military_affiliation="Active Duty"), scholarship.criteria.special) == 100
    assert score_special(StudentProfile(), scholarship.criteria.special) == 0


def test_free_text_financial_need_still_requires_need() -> None:
    scholarship = Scholarship.from_mapping({"id": "s1", "eligibility": {"financialNeed": ["Demonstrated"]}})
    financial = scholarship.criteria.financial

    assert financial is not None
    assert financial.requires_financial_need is True
    assert financial.financial_need_level is None
    assert score_financial(StudentProfile(), financial) == 0
    assert score_financial(StudentProfile(financial_need=FinancialNeed.HIGH), financial) == 100


def test_known_need_levels_survive_alongside_free_text() -> None:
    scholarship = Scholarship.from_mapping(
        {"id": "s1", "eligibility": {"financialNeed": ["Demonstrated", "Very High", "High"]}}
    )

    assert scholarship.criteria.financial.financial_need_level == FinancialNeed.HIGH
