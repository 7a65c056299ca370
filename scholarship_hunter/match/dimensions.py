"""Per-dimension match scorers.

Each scorer maps a profile and one dimension's criteria to a 0-100 score. A
`None` criteria object means the scholarship does not constrain that dimension
and scores 100. A missing profile value against an active criterion scores 0.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterable

from scholarship_hunter.normalize.coerce import (
    as_list,
    clamp,
    collection_size,
    normalize_text,
    normalized_list,
    round_half_up,
)
from scholarship_hunter.normalize.schema import (
    NEED_LEVEL_RANK,
    AcademicCriteria,
    DemographicCriteria,
    ExperienceCriteria,
    FinancialCriteria,
    FinancialNeed,
    MajorFieldCriteria,
    SpecialCriteria,
    StudentProfile,
)

FULL_SCORE = 100

MAJOR_FAMILIES: dict[str, tuple[str, ...]] = {
    "stem": ("biology", "chemistry", "physics", "mathematics", "engineering", "computer science", "science"),
    "engineering": ("mechanical", "electrical", "civil", "chemical", "computer", "aerospace", "biomedical"),
    "business": ("business", "finance", "accounting", "economics", "marketing", "management"),
    "health": ("nursing", "medicine", "pharmacy", "public health", "healthcare", "medical"),
    "arts": ("art", "music", "theater", "dance", "design", "fine arts", "performing arts"),
    "humanities": ("english", "history", "philosophy", "literature", "languages", "liberal arts"),
}

RELATED_AFFILIATIONS: dict[str, tuple[str, ...]] = {
    "veteran": ("active duty",),
    "dependent": ("veteran", "active duty"),
}


def _bounded(value: float) -> int:
    return int(clamp(round_half_up(value), 0, FULL_SCORE))


def _proportional(actual: float, required: float) -> int:
    if required <= 0:
        return FULL_SCORE
    if actual >= required:
        return FULL_SCORE
    return _bounded(actual / required * 100)


def _weighted_mean(parts: Iterable[tuple[float, float]]) -> int:
    items = list(parts)
    if not items:
        return FULL_SCORE
    total_weight = sum(weight for _, weight in items)
    if total_weight <= 0:
        return FULL_SCORE
    return _bounded(sum(score * weight for score, weight in items) / total_weight)


def _mean(scores: list[float]) -> int:
    if not scores:
        return FULL_SCORE
    return _bounded(sum(scores) / len(scores))


def _bound_score(
    value: float | None,
    minimum: float | None,
    maximum: float | None,
    overage_penalty: Callable[[float], float],
) -> int:
    if value is None:
        return 0
    if minimum is not None:
        return _proportional(value, minimum)
    if maximum is not None:
        if value <= maximum:
            return FULL_SCORE
        return _bounded(100 - overage_penalty(value - maximum))
    return FULL_SCORE


# Academic


def _gpa_score(profile: StudentProfile, criteria: AcademicCriteria) -> int:
    return _bound_score(profile.gpa, criteria.min_gpa, criteria.max_gpa, lambda over: over * 20)


def _sat_score(profile: StudentProfile, criteria: AcademicCriteria) -> int:
    return _bound_score(profile.sat_score, criteria.min_sat, criteria.max_sat, lambda over: over / 10)


def _act_score(profile: StudentProfile, criteria: AcademicCriteria) -> int:
    return _bound_score(profile.act_score, criteria.min_act, criteria.max_act, lambda over: over * 10)


def _class_rank_score(profile: StudentProfile, required_percentile: float) -> int:
    if profile.class_rank is None or not profile.class_size:
        return 0
    student_percentile = profile.class_rank / profile.class_size * 100
    if student_percentile <= required_percentile:
        return FULL_SCORE
    return _bounded(required_percentile / student_percentile * 100)


def score_academic(profile: StudentProfile, criteria: AcademicCriteria | None) -> int:
    """GPA 40%, SAT 30%, ACT 30%; class rank redistributes when present."""
    if criteria is None:
        return FULL_SCORE

    has_gpa = criteria.min_gpa is not None or criteria.max_gpa is not None
    has_sat = criteria.min_sat is not None or criteria.max_sat is not None
    has_act = criteria.min_act is not None or criteria.max_act is not None

    parts: list[tuple[float, float]] = []
    if has_gpa:
        parts.append((_gpa_score(profile, criteria), 0.4))
    if has_sat:
        parts.append((_sat_score(profile, criteria), 0.3))
    if has_act:
        parts.append((_act_score(profile, criteria), 0.3))

    if criteria.class_rank_percentile is not None:
        rank_score = _class_rank_score(profile, criteria.class_rank_percentile)
        if not parts:
            return rank_score
        best_test = max(
            _sat_score(profile, criteria) if has_sat else 0,
            _act_score(profile, criteria) if has_act else 0,
        )
        if profile.gpa is not None:
            return _bounded(_gpa_score(profile, criteria) * 0.4 + rank_score * 0.3 + best_test * 0.3)
        return _bounded(rank_score * 0.5 + best_test * 0.5)

    return _weighted_mean(parts)


# Demographic


def estimated_age(graduation_year: int, reference_year: int) -> int:
    return reference_year - (graduation_year - 18)


def _age_score(
    profile: StudentProfile, criteria: DemographicCriteria, reference_year: int
) -> int | None:
    if criteria.age_min is None and criteria.age_max is None:
        return None
    if profile.graduation_year is None:
        return 0
    age = estimated_age(profile.graduation_year, reference_year)
    if criteria.age_min is not None and age < criteria.age_min:
        return _proportional(age, criteria.age_min)
    if criteria.age_max is not None and age > criteria.age_max:
        return _bounded(100 - (age - criteria.age_max) * 10)
    return FULL_SCORE


def _is_any(value: Any) -> bool:
    return normalize_text(value) in (None, "any")


def _allowed_values(value: Any) -> list[str]:
    """Allowed values of a one-or-many requirement; empty when unconstrained."""
    allowed = normalized_list(value)
    if "any" in allowed:
        return []
    return allowed


def score_demographic(
    profile: StudentProfile,
    criteria: DemographicCriteria | None,
    *,
    reference_year: int | None = None,
) -> int:
    """Unweighted mean over gender, ethnicity, state, city, age and residency."""
    if criteria is None:
        return FULL_SCORE

    scores: list[float] = []
    allowed_genders = _allowed_values(criteria.required_gender)
    if allowed_genders:
        scores.append(FULL_SCORE if normalize_text(profile.gender) in allowed_genders else 0)

    required_ethnicity = set(normalized_list(criteria.required_ethnicity))
    if required_ethnicity:
        student_ethnicity = set(normalized_list(profile.ethnicity))
        scores.append(FULL_SCORE if student_ethnicity & required_ethnicity else 0)

    required_states = set(normalized_list(criteria.required_state))
    if required_states:
        scores.append(FULL_SCORE if normalize_text(profile.state) in required_states else 0)

    required_cities = set(normalized_list(criteria.required_city))
    if required_cities:
        scores.append(FULL_SCORE if normalize_text(profile.city) in required_cities else 0)

    age_score = _age_score(profile, criteria, reference_year or date.today().year)
    if age_score is not None:
        scores.append(age_score)

    if not _is_any(criteria.residency_required):
        # Residency status is not captured on the profile; treated as in-state.
        scores.append(FULL_SCORE)

    return _mean(scores)


# Major / field


def _related_major(student_major: str, eligible_majors: list[str]) -> bool:
    for family_members in MAJOR_FAMILIES.values():
        if any(member in student_major for member in family_members):
            return any(
                member in eligible for eligible in eligible_majors for member in family_members
            )
    return False


def _eligible_major_score(student_major: str | None, eligible_majors: list[str]) -> int:
    major = normalize_text(student_major)
    if major is None:
        return 0
    if major in eligible_majors:
        return FULL_SCORE
    if any(major in eligible or eligible in major for eligible in eligible_majors):
        return 75
    if _related_major(major, eligible_majors):
        return 50
    return 0


def _field_of_study_score(student_field: str | None, required_fields: list[str]) -> int:
    field_of_study = normalize_text(student_field)
    if field_of_study is None:
        return 0
    if field_of_study in required_fields:
        return FULL_SCORE
    if any(field_of_study in required or required in field_of_study for required in required_fields):
        return 80
    return 0


def _career_goals_score(career_goals: str | None, keywords: list[str]) -> int:
    goals = normalize_text(career_goals)
    if goals is None:
        return 0
    matches = sum(1 for keyword in keywords if keyword in goals)
    if matches == 0:
        return 0
    return _bounded(min(100.0, matches / len(keywords) * 100 * 1.2))


# Normalizer applied to the summed partial weights, keyed by active criteria count.
_MAJOR_NORMALIZERS = {1: 0.5, 2: 0.8, 3: 1.0}


def score_major_field(profile: StudentProfile, criteria: MajorFieldCriteria | None) -> int:
    if criteria is None:
        return FULL_SCORE

    excluded = normalized_list(criteria.excluded_majors)
    if excluded and normalize_text(profile.intended_major) in excluded:
        return 0

    weighted: list[float] = []
    eligible = normalized_list(criteria.eligible_majors)
    if eligible:
        weighted.append(_eligible_major_score(profile.intended_major, eligible) * 0.5)
    fields = normalized_list(criteria.required_field_of_study)
    if fields:
        weighted.append(_field_of_study_score(profile.field_of_study, fields) * 0.3)
    keywords = normalized_list(criteria.career_goals_keywords)
    if keywords:
        weighted.append(_career_goals_score(profile.career_goals, keywords) * 0.2)

    if not weighted:
        return FULL_SCORE
    return _bounded(sum(weighted) / _MAJOR_NORMALIZERS[len(weighted)])


# Experience


def activity_names(activities: list[Any]) -> list[str]:
    names: list[str] = []
    for activity in activities or []:
        if isinstance(activity, dict):
            name = normalize_text(activity.get("name"))
        else:
            name = normalize_text(activity)
        if name:
            names.append(name)
    return names


def _extracurricular_score(activities: list[Any], required: list[str]) -> int:
    names = activity_names(activities)
    if not names:
        return 0
    matches = sum(
        1 for item in required if any(item in name or name in item for name in names)
    )
    return _bounded(matches / len(required) * 100)


def work_experience_months(work_experience: list[Any]) -> float:
    total = 0.0
    for job in work_experience or []:
        if isinstance(job, dict):
            months = job.get("months") or 0
            try:
                total += float(months)
            except (TypeError, ValueError):
                continue
    return total


def score_experience(profile: StudentProfile, criteria: ExperienceCriteria | None) -> int:
    """Volunteer 35%, leadership 25%, extracurriculars 20%, work 15%, awards 5%."""
    if criteria is None:
        return FULL_SCORE

    parts: list[tuple[float, float]] = []
    if criteria.min_volunteer_hours is not None:
        parts.append((_proportional(profile.volunteer_hours or 0.0, criteria.min_volunteer_hours), 0.35))
    if criteria.leadership_required is not None:
        if criteria.leadership_required:
            score = FULL_SCORE if collection_size(profile.leadership_roles) > 0 else 0
        else:
            score = FULL_SCORE
        parts.append((score, 0.25))
    required_activities = normalized_list(criteria.required_extracurriculars)
    if required_activities:
        parts.append((_extracurricular_score(profile.extracurriculars, required_activities), 0.2))
    if criteria.min_work_experience is not None:
        months = work_experience_months(profile.work_experience)
        score = _proportional(months, criteria.min_work_experience) if months > 0 else 0
        parts.append((score, 0.15))
    if criteria.awards_honors_required is not None:
        if criteria.awards_honors_required:
            score = FULL_SCORE if collection_size(profile.awards_honors) > 0 else 0
        else:
            score = FULL_SCORE
        parts.append((score, 0.05))

    return _weighted_mean(parts)


# Financial


def _need_score(
    student_need: FinancialNeed | None,
    requires_need: bool,
    required_level: FinancialNeed | None,
) -> int:
    if not requires_need:
        return FULL_SCORE
    if student_need is None:
        return 0
    if required_level is None:
        return FULL_SCORE
    return _proportional(NEED_LEVEL_RANK[student_need], NEED_LEVEL_RANK[required_level])


def efc_upper_bound(efc_range: str) -> float:
    parts = [part.strip().replace(",", "") for part in efc_range.split("-")]
    if len(parts) < 2:
        return 0.0
    try:
        return float(parts[1])
    except ValueError:
        return 0.0


def _efc_score(efc_range: str | None, max_efc: float) -> int:
    if not efc_range:
        return 0
    upper = efc_upper_bound(efc_range)
    if upper <= max_efc:
        return FULL_SCORE
    return _bounded(max_efc / upper * 100)


def score_financial(profile: StudentProfile, criteria: FinancialCriteria | None) -> int:
    """Need level 50%, Pell Grant 30%, EFC ceiling 20%."""
    if criteria is None:
        return FULL_SCORE

    parts: list[tuple[float, float]] = []
    if criteria.requires_financial_need is not None:
        parts.append(
            (
                _need_score(
                    profile.financial_need,
                    criteria.requires_financial_need,
                    criteria.financial_need_level,
                ),
                0.5,
            )
        )
    if criteria.pell_grant_required is not None:
        matched = bool(profile.pell_grant_eligible) == criteria.pell_grant_required
        parts.append((FULL_SCORE if matched else 0, 0.3))
    if criteria.max_efc is not None:
        parts.append((_efc_score(profile.efc_range, criteria.max_efc), 0.2))

    return _weighted_mean(parts)


# Special


def _military_score(student: str | None, required: str) -> int:
    student_affiliation = normalize_text(student)
    required_affiliation = normalize_text(required) or ""
    if student_affiliation is None:
        return FULL_SCORE if required_affiliation == "none" else 0
    if student_affiliation == required_affiliation:
        return FULL_SCORE
    if student_affiliation in RELATED_AFFILIATIONS.get(required_affiliation, ()):
        return 75
    return 0


def _citizenship_score(student: str | None, required: str) -> int:
    student_citizenship = normalize_text(student)
    required_citizenship = normalize_text(required)
    if student_citizenship is None:
        return 0
    if student_citizenship == required_citizenship:
        return FULL_SCORE
    if required_citizenship == "permanent resident" and student_citizenship == "us citizen":
        return FULL_SCORE
    if required_citizenship == "us citizen" and student_citizenship == "permanent resident":
        return 50
    return 0


def score_special(profile: StudentProfile, criteria: SpecialCriteria | None) -> int:
    """Unweighted mean over first-gen, military, disability and citizenship."""
    if criteria is None:
        return FULL_SCORE

    scores: list[float] = []
    if criteria.first_generation_required is not None:
        matched = bool(profile.first_generation) == criteria.first_generation_required
        scores.append(FULL_SCORE if matched else 0)
    allowed_affiliations = _allowed_values(criteria.military_affiliation)
    if allowed_affiliations:
        scores.append(
            max(_military_score(profile.military_affiliation, required) for required in allowed_affiliations)
        )
    if criteria.disability_required is not None:
        has_disability = bool(as_list(profile.disabilities))
        if criteria.disability_required:
            scores.append(FULL_SCORE if has_disability else 0)
        else:
            scores.append(FULL_SCORE)
    if not _is_any(criteria.citizenship_required):
        scores.append(_citizenship_score(profile.citizenship, str(criteria.citizenship_required)))

    return _mean(scores)
