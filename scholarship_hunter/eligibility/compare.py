from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from scholarship_hunter.display import format_number
from scholarship_hunter.normalize.coerce import collection_size, normalize_text
from scholarship_hunter.normalize.schema import (
    EligibilityCategory,
    EligibilityStatus,
    ScholarshipCriteria,
    StudentProfile,
)

DEFAULT_GPA_SCALE = 4.0
PARTIAL_THRESHOLD = 0.7
NOT_PROVIDED = "Not provided"


@dataclass(frozen=True, slots=True)
class EligibilityItem:
    category: EligibilityCategory
    requirement: str
    student_value: str
    status: EligibilityStatus
    partial_percentage: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "category": self.category.value,
            "requirement": self.requirement,
            "student_value": self.student_value,
            "status": self.status.value,
        }
        if self.partial_percentage is not None:
            payload["partial_percentage"] = self.partial_percentage
        return payload


def _status(met: bool) -> EligibilityStatus:
    return EligibilityStatus.MET if met else EligibilityStatus.NOT_MET


def _enum_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def _token(value: Any) -> str | None:
    # "Very High", "very-high" and "very_high" compare equal.
    text = normalize_text(value)
    if text is None:
        return None
    return text.replace("-", " ").replace("_", " ")


def _exact_any(student_value: Any, allowed: list[str]) -> bool:
    student = _token(_enum_text(student_value))
    if student is None:
        return False
    return any(_token(option) == student for option in allowed)


def _contains_any(student_value: Any, allowed: list[str]) -> bool:
    student = normalize_text(student_value)
    if student is None:
        return False
    return any((normalize_text(option) or "") in student for option in allowed)


def _minimum_item(label: str, threshold: float, value: float | int | None) -> EligibilityItem:
    return EligibilityItem(
        category=EligibilityCategory.ACADEMIC,
        requirement=f"{label}: {format_number(threshold)}+",
        student_value=NOT_PROVIDED if value is None else f"You: {format_number(value)}",
        status=_status(value is not None and value >= threshold),
    )


def _academic(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.min_gpa is not None:
        scale = criteria.gpa_scale or DEFAULT_GPA_SCALE
        scaled_gpa = None
        if profile.gpa is not None:
            scaled_gpa = profile.gpa / (profile.gpa_scale or DEFAULT_GPA_SCALE) * scale
        items.append(
            EligibilityItem(
                category=EligibilityCategory.ACADEMIC,
                requirement=f"GPA: {format_number(criteria.min_gpa)}+ ({format_number(scale)} scale)",
                student_value=NOT_PROVIDED if scaled_gpa is None else f"You: {scaled_gpa:.2f}",
                status=_status(scaled_gpa is not None and scaled_gpa >= criteria.min_gpa),
            )
        )
    if criteria.min_sat is not None:
        items.append(_minimum_item("SAT", criteria.min_sat, profile.sat_score))
    if criteria.min_act is not None:
        items.append(_minimum_item("ACT", criteria.min_act, profile.act_score))
    return items


def _demographic(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.gender:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.DEMOGRAPHIC,
                requirement=f"Gender: {' or '.join(criteria.gender)}",
                student_value=profile.gender or NOT_PROVIDED,
                status=_status(_exact_any(profile.gender, criteria.gender)),
            )
        )
    if criteria.ethnicity:
        student_ethnicities = profile.ethnicity or []
        met = any(_contains_any(ethnicity, criteria.ethnicity) for ethnicity in student_ethnicities)
        items.append(
            EligibilityItem(
                category=EligibilityCategory.DEMOGRAPHIC,
                requirement=f"Ethnicity: {' or '.join(criteria.ethnicity)}",
                student_value=", ".join(student_ethnicities) if student_ethnicities else NOT_PROVIDED,
                status=_status(met),
            )
        )
    if criteria.state:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.DEMOGRAPHIC,
                requirement=f"State: {', '.join(criteria.state)}",
                student_value=profile.state or NOT_PROVIDED,
                status=_status(_exact_any(profile.state, criteria.state)),
            )
        )
    return items


def _major_field(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.intended_major:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.MAJOR_FIELD,
                requirement=f"Major: {' or '.join(criteria.intended_major)}",
                student_value=profile.intended_major or NOT_PROVIDED,
                status=_status(_contains_any(profile.intended_major, criteria.intended_major)),
            )
        )
    if criteria.field_of_study:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.MAJOR_FIELD,
                requirement=f"Field of Study: {' or '.join(criteria.field_of_study)}",
                student_value=profile.field_of_study or NOT_PROVIDED,
                status=_status(_contains_any(profile.field_of_study, criteria.field_of_study)),
            )
        )
    return items


def _volunteer_item(hours: float, required: float) -> EligibilityItem:
    ratio = hours / required if required > 0 else 1.0
    if ratio >= 1.0:
        status = EligibilityStatus.MET
    elif ratio >= PARTIAL_THRESHOLD:
        status = EligibilityStatus.PARTIALLY_MET
    else:
        status = EligibilityStatus.NOT_MET
    return EligibilityItem(
        category=EligibilityCategory.EXPERIENCE,
        requirement=f"Volunteer Hours: {format_number(required)}+",
        student_value=f"You: {format_number(hours)} hours",
        status=status,
        partial_percentage=ratio * 100,
    )


def _experience(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.min_volunteer_hours is not None:
        items.append(_volunteer_item(profile.volunteer_hours or 0, criteria.min_volunteer_hours))
    if criteria.leadership_required:
        has_leadership = collection_size(profile.leadership_roles) > 0
        items.append(
            EligibilityItem(
                category=EligibilityCategory.EXPERIENCE,
                requirement="Leadership experience required",
                student_value="Yes" if has_leadership else "None listed",
                status=_status(has_leadership),
            )
        )
    return items


def _financial(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.financial_need:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.FINANCIAL,
                requirement=f"Financial Need: {' or '.join(criteria.financial_need)}",
                student_value=_enum_text(profile.financial_need) or NOT_PROVIDED,
                status=_status(_exact_any(profile.financial_need, criteria.financial_need)),
            )
        )
    if criteria.pell_grant_required:
        eligible = bool(profile.pell_grant_eligible)
        items.append(
            EligibilityItem(
                category=EligibilityCategory.FINANCIAL,
                requirement="Pell Grant eligible",
                student_value="Yes" if eligible else "No",
                status=_status(eligible),
            )
        )
    return items


def _special(profile: StudentProfile, criteria: ScholarshipCriteria) -> list[EligibilityItem]:
    items: list[EligibilityItem] = []
    if criteria.first_generation_required:
        first_generation = bool(profile.first_generation)
        items.append(
            EligibilityItem(
                category=EligibilityCategory.SPECIAL,
                requirement="First-generation college student",
                student_value="Yes" if first_generation else "No",
                status=_status(first_generation),
            )
        )
    if criteria.military_affiliation:
        items.append(
            EligibilityItem(
                category=EligibilityCategory.SPECIAL,
                requirement=f"Military Affiliation: {' or '.join(criteria.military_affiliation)}",
                student_value=profile.military_affiliation or "None",
                status=_status(_exact_any(profile.military_affiliation, criteria.military_affiliation)),
            )
        )
    return items


CATEGORY_CHECKS = (_academic, _demographic, _major_field, _experience, _financial, _special)


def compare_eligibility(
    profile: StudentProfile, criteria: ScholarshipCriteria | None
) -> list[EligibilityItem]:
    """One item per criterion the scholarship sets, grouped in display order.

    Boolean requirements only produce an item when they are required (true).
    """
    if criteria is None:
        return []
    items: list[EligibilityItem] = []
    for check in CATEGORY_CHECKS:
        items.extend(check(profile, criteria))
    return items
