from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from scholarship_hunter.normalize.coerce import (
    as_list,
    coerce_bool,
    coerce_datetime,
    coerce_float,
    coerce_int,
    pick,
)


class FinancialNeed(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class ApplicationStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    READY_FOR_REVIEW = "READY_FOR_REVIEW"
    SUBMITTED = "SUBMITTED"
    AWARDED = "AWARDED"
    DENIED = "DENIED"
    WITHDRAWN = "WITHDRAWN"


class PriorityTier(str, Enum):
    MUST_APPLY = "MUST_APPLY"
    SHOULD_APPLY = "SHOULD_APPLY"
    IF_TIME_PERMITS = "IF_TIME_PERMITS"
    HIGH_VALUE_REACH = "HIGH_VALUE_REACH"


class SuccessTier(str, Enum):
    STRONG_MATCH = "STRONG_MATCH"
    COMPETITIVE_MATCH = "COMPETITIVE_MATCH"
    REACH = "REACH"
    LONG_SHOT = "LONG_SHOT"


class EffortLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class StrategicValueTier(str, Enum):
    BEST_BET = "BEST_BET"
    HIGH_VALUE = "HIGH_VALUE"
    MEDIUM_VALUE = "MEDIUM_VALUE"
    LOW_VALUE = "LOW_VALUE"


class EligibilityStatus(str, Enum):
    MET = "met"
    PARTIALLY_MET = "partially_met"
    NOT_MET = "not_met"


class EligibilityCategory(str, Enum):
    ACADEMIC = "Academic"
    DEMOGRAPHIC = "Demographic"
    MAJOR_FIELD = "Major/Field"
    EXPERIENCE = "Experience"
    FINANCIAL = "Financial"
    SPECIAL = "Special"


class Severity(str, Enum):
    WARNING = "WARNING"
    URGENT = "URGENT"
    CRITICAL = "CRITICAL"


class AtRiskReason(str, Enum):
    SEVEN_DAY_LOW_PROGRESS = "SEVEN_DAY_LOW_PROGRESS"
    THREE_DAY_INCOMPLETE = "THREE_DAY_INCOMPLETE"
    ONE_DAY_NOT_READY = "ONE_DAY_NOT_READY"


TERMINAL_STATUSES = frozenset(
    {
        ApplicationStatus.SUBMITTED,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.AWARDED,
        ApplicationStatus.DENIED,
    }
)


def _coerce_enum(enum_cls: type[Enum], value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().upper().replace(" ", "_").replace("-", "_")
    if not normalized:
        return None
    try:
        return enum_cls(normalized)
    except ValueError as exc:
        raise ValueError(f"Unsupported {enum_cls.__name__} value: {value!r}") from exc


def _optional_list(value: Any) -> list[str] | None:
    values = as_list(value)
    return values or None


def _raw_list(value: Any) -> list[Any]:
    if value is None or isinstance(value, str):
        return []
    if isinstance(value, Mapping):
        return [{"name": key, **(item if isinstance(item, Mapping) else {})} for key, item in value.items()]
    try:
        return list(value)
    except TypeError:
        return []


@dataclass(slots=True)
class StudentProfile:
    """Student attributes consumed by the scorers. Every field is optional."""

    gpa: Optional[float] = None
    gpa_scale: Optional[float] = None
    sat_score: Optional[int] = None
    act_score: Optional[int] = None
    class_rank: Optional[int] = None
    class_size: Optional[int] = None
    graduation_year: Optional[int] = None
    gender: Optional[str] = None
    ethnicity: list[str] = field(default_factory=list)
    state: Optional[str] = None
    city: Optional[str] = None
    citizenship: Optional[str] = None
    intended_major: Optional[str] = None
    field_of_study: Optional[str] = None
    career_goals: Optional[str] = None
    volunteer_hours: Optional[float] = None
    extracurriculars: list[Any] = field(default_factory=list)
    leadership_roles: list[Any] = field(default_factory=list)
    work_experience: list[Any] = field(default_factory=list)
    awards_honors: list[Any] = field(default_factory=list)
    financial_need: Optional[FinancialNeed] = None
    pell_grant_eligible: Optional[bool] = None
    first_generation: Optional[bool] = None
    efc_range: Optional[str] = None
    military_affiliation: Optional[str] = None
    disabilities: Optional[str] = None
    strength_score: float = 50.0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> StudentProfile:
        values = payload or {}
        strength = coerce_float(pick(values, "strength_score", "strengthScore"))
        return cls(
            gpa=coerce_float(pick(values, "gpa")),
            gpa_scale=coerce_float(pick(values, "gpa_scale", "gpaScale")),
            sat_score=coerce_int(pick(values, "sat_score", "satScore")),
            act_score=coerce_int(pick(values, "act_score", "actScore")),
            class_rank=coerce_int(pick(values, "class_rank", "classRank")),
            class_size=coerce_int(pick(values, "class_size", "classSize")),
            graduation_year=coerce_int(pick(values, "graduation_year", "graduationYear")),
            gender=pick(values, "gender"),
            ethnicity=as_list(pick(values, "ethnicity")),
            state=pick(values, "state"),
            city=pick(values, "city"),
            citizenship=pick(values, "citizenship"),
            intended_major=pick(values, "intended_major", "intendedMajor"),
            field_of_study=pick(values, "field_of_study", "fieldOfStudy"),
            career_goals=pick(values, "career_goals", "careerGoals"),
            volunteer_hours=coerce_float(pick(values, "volunteer_hours", "volunteerHours")),
            extracurriculars=_raw_list(pick(values, "extracurriculars")),
            leadership_roles=_raw_list(pick(values, "leadership_roles", "leadershipRoles")),
            work_experience=_raw_list(pick(values, "work_experience", "workExperience")),
            awards_honors=_raw_list(pick(values, "awards_honors", "awardsHonors")),
            financial_need=_coerce_enum(FinancialNeed, pick(values, "financial_need", "financialNeed")),
            pell_grant_eligible=coerce_bool(pick(values, "pell_grant_eligible", "pellGrantEligible")),
            first_generation=coerce_bool(pick(values, "first_generation", "firstGeneration")),
            efc_range=pick(values, "efc_range", "efcRange"),
            military_affiliation=pick(values, "military_affiliation", "militaryAffiliation"),
            disabilities=pick(values, "disabilities"),
            strength_score=50.0 if strength is None else strength,
        )


@dataclass(frozen=True, slots=True)
class AcademicCriteria:
    min_gpa: Optional[float] = None
    max_gpa: Optional[float] = None
    min_sat: Optional[float] = None
    max_sat: Optional[float] = None
    min_act: Optional[float] = None
    max_act: Optional[float] = None
    class_rank_percentile: Optional[float] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> AcademicCriteria:
        return cls(
            min_gpa=coerce_float(pick(payload, "min_gpa", "minGPA")),
            max_gpa=coerce_float(pick(payload, "max_gpa", "maxGPA")),
            min_sat=coerce_float(pick(payload, "min_sat", "minSAT")),
            max_sat=coerce_float(pick(payload, "max_sat", "maxSAT")),
            min_act=coerce_float(pick(payload, "min_act", "minACT")),
            max_act=coerce_float(pick(payload, "max_act", "maxACT")),
            class_rank_percentile=coerce_float(
                pick(payload, "class_rank_percentile", "classRankPercentile")
            ),
        )


@dataclass(frozen=True, slots=True)
class DemographicCriteria:
    required_gender: Optional[str | list[str]] = None
    required_ethnicity: Optional[list[str]] = None
    required_state: Optional[list[str]] = None
    required_city: Optional[list[str]] = None
    age_min: Optional[float] = None
    age_max: Optional[float] = None
    residency_required: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> DemographicCriteria:
        return cls(
            required_gender=pick(payload, "required_gender", "requiredGender"),
            required_ethnicity=_optional_list(pick(payload, "required_ethnicity", "requiredEthnicity")),
            required_state=_optional_list(pick(payload, "required_state", "requiredState")),
            required_city=_optional_list(pick(payload, "required_city", "requiredCity")),
            age_min=coerce_float(pick(payload, "age_min", "ageMin")),
            age_max=coerce_float(pick(payload, "age_max", "ageMax")),
            residency_required=pick(payload, "residency_required", "residencyRequired"),
        )


@dataclass(frozen=True, slots=True)
class MajorFieldCriteria:
    eligible_majors: Optional[list[str]] = None
    required_field_of_study: Optional[list[str]] = None
    career_goals_keywords: Optional[list[str]] = None
    excluded_majors: Optional[list[str]] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> MajorFieldCriteria:
        return cls(
            eligible_majors=_optional_list(pick(payload, "eligible_majors", "eligibleMajors")),
            required_field_of_study=_optional_list(
                pick(payload, "required_field_of_study", "requiredFieldOfStudy")
            ),
            career_goals_keywords=_optional_list(
                pick(payload, "career_goals_keywords", "careerGoalsKeywords")
            ),
            excluded_majors=_optional_list(pick(payload, "excluded_majors", "excludedMajors")),
        )


@dataclass(frozen=True, slots=True)
class ExperienceCriteria:
    min_volunteer_hours: Optional[float] = None
    leadership_required: Optional[bool] = None
    required_extracurriculars: Optional[list[str]] = None
    min_work_experience: Optional[float] = None
    awards_honors_required: Optional[bool] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> ExperienceCriteria:
        return cls(
            min_volunteer_hours=coerce_float(pick(payload, "min_volunteer_hours", "minVolunteerHours")),
            leadership_required=coerce_bool(pick(payload, "leadership_required", "leadershipRequired")),
            required_extracurriculars=_optional_list(
                pick(payload, "required_extracurriculars", "requiredExtracurriculars")
            ),
            min_work_experience=coerce_float(pick(payload, "min_work_experience", "minWorkExperience")),
            awards_honors_required=coerce_bool(
                pick(payload, "awards_honors_required", "awardsHonorsRequired")
            ),
        )


@dataclass(frozen=True, slots=True)
class FinancialCriteria:
    requires_financial_need: Optional[bool] = None
    financial_need_level: Optional[FinancialNeed] = None
    pell_grant_required: Optional[bool] = None
    max_efc: Optional[float] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> FinancialCriteria:
        return cls(
            requires_financial_need=coerce_bool(
                pick(payload, "requires_financial_need", "requiresFinancialNeed")
            ),
            financial_need_level=_coerce_enum(
                FinancialNeed, pick(payload, "financial_need_level", "financialNeedLevel")
            ),
            pell_grant_required=coerce_bool(pick(payload, "pell_grant_required", "pellGrantRequired")),
            max_efc=coerce_float(pick(payload, "max_efc", "maxEFC")),
        )


@dataclass(frozen=True, slots=True)
class SpecialCriteria:
    first_generation_required: Optional[bool] = None
    military_affiliation: Optional[str | list[str]] = None
    disability_required: Optional[bool] = None
    citizenship_required: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> SpecialCriteria:
        return cls(
            first_generation_required=coerce_bool(
                pick(payload, "first_generation_required", "firstGenerationRequired")
            ),
            military_affiliation=pick(payload, "military_affiliation", "militaryAffiliation"),
            disability_required=coerce_bool(pick(payload, "disability_required", "disabilityRequired")),
            citizenship_required=pick(payload, "citizenship_required", "citizenshipRequired"),
        )


@dataclass(frozen=True, slots=True)
class ScholarshipCriteria:
    """Flat eligibility criteria, one field per displayed requirement."""

    min_gpa: Optional[float] = None
    gpa_scale: Optional[float] = None
    min_sat: Optional[float] = None
    min_act: Optional[float] = None
    gender: Optional[list[str]] = None
    ethnicity: Optional[list[str]] = None
    state: Optional[list[str]] = None
    intended_major: Optional[list[str]] = None
    field_of_study: Optional[list[str]] = None
    min_volunteer_hours: Optional[float] = None
    leadership_required: Optional[bool] = None
    financial_need: Optional[list[str]] = None
    pell_grant_required: Optional[bool] = None
    first_generation_required: Optional[bool] = None
    military_affiliation: Optional[list[str]] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> ScholarshipCriteria:
        values = payload or {}
        return cls(
            min_gpa=coerce_float(pick(values, "min_gpa", "minGPA")),
            gpa_scale=coerce_float(pick(values, "gpa_scale", "gpaScale")),
            min_sat=coerce_float(pick(values, "min_sat", "minSAT")),
            min_act=coerce_float(pick(values, "min_act", "minACT")),
            gender=_optional_list(pick(values, "gender")),
            ethnicity=_optional_list(pick(values, "ethnicity")),
            state=_optional_list(pick(values, "state")),
            intended_major=_optional_list(pick(values, "intended_major", "intendedMajor")),
            field_of_study=_optional_list(pick(values, "field_of_study", "fieldOfStudy")),
            min_volunteer_hours=coerce_float(pick(values, "min_volunteer_hours", "minVolunteerHours")),
            leadership_required=coerce_bool(pick(values, "leadership_required", "leadershipRequired")),
            financial_need=_optional_list(pick(values, "financial_need", "financialNeed")),
            pell_grant_required=coerce_bool(pick(values, "pell_grant_required", "pellGrantRequired")),
            first_generation_required=coerce_bool(
                pick(values, "first_generation_required", "firstGenerationRequired")
            ),
            military_affiliation=_optional_list(pick(values, "military_affiliation", "militaryAffiliation")),
        )


@dataclass(frozen=True, slots=True)
class DimensionCriteria:
    """Eligibility criteria grouped by scoring dimension. `None` means unconstrained."""

    academic: Optional[AcademicCriteria] = None
    demographic: Optional[DemographicCriteria] = None
    major_field: Optional[MajorFieldCriteria] = None
    experience: Optional[ExperienceCriteria] = None
    financial: Optional[FinancialCriteria] = None
    special: Optional[SpecialCriteria] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> DimensionCriteria:
        values = payload or {}

        def _section(cls_: Any, *keys: str) -> Any:
            section = pick(values, *keys)
            if not isinstance(section, Mapping):
                return None
            return cls_.from_mapping(section)

        return cls(
            academic=_section(AcademicCriteria, "academic"),
            demographic=_section(DemographicCriteria, "demographic"),
            major_field=_section(MajorFieldCriteria, "major_field", "majorField"),
            experience=_section(ExperienceCriteria, "experience"),
            financial=_section(FinancialCriteria, "financial"),
            special=_section(SpecialCriteria, "special"),
        )

    @classmethod
    def from_eligibility(cls, criteria: ScholarshipCriteria) -> DimensionCriteria:
        """Derive per-dimension criteria from the flat eligibility vocabulary."""
        academic = None
        if any(v is not None for v in (criteria.min_gpa, criteria.min_sat, criteria.min_act)):
            academic = AcademicCriteria(
                min_gpa=criteria.min_gpa,
                min_sat=criteria.min_sat,
                min_act=criteria.min_act,
            )

        demographic = None
        if criteria.gender or criteria.ethnicity or criteria.state:
            demographic = DemographicCriteria(
                required_gender=criteria.gender,
                required_ethnicity=criteria.ethnicity,
                required_state=criteria.state,
            )

        major_field = None
        if criteria.intended_major or criteria.field_of_study:
            major_field = MajorFieldCriteria(
                eligible_majors=criteria.intended_major,
                required_field_of_study=criteria.field_of_study,
            )

        experience = None
        if criteria.min_volunteer_hours is not None or criteria.leadership_required is not None:
            experience = ExperienceCriteria(
                min_volunteer_hours=criteria.min_volunteer_hours,
                leadership_required=criteria.leadership_required,
            )

        financial = None
        if criteria.financial_need or criteria.pell_grant_required is not None:
            # Free-text needs such as "Demonstrated" still require need, without a level.
            need_levels = [
                level
                for level in (_known_need_level(value) for value in (criteria.financial_need or []))
                if level is not None
            ]
            financial = FinancialCriteria(
                requires_financial_need=True if criteria.financial_need else None,
                financial_need_level=min(need_levels, key=_need_rank) if need_levels else None,
                pell_grant_required=criteria.pell_grant_required,
            )

        special = None
        if criteria.first_generation_required is not None or criteria.military_affiliation:
            special = SpecialCriteria(
                first_generation_required=criteria.first_generation_required,
                military_affiliation=criteria.military_affiliation,
            )

        return cls(
            academic=academic,
            demographic=demographic,
            major_field=major_field,
            experience=experience,
            financial=financial,
            special=special,
        )


NEED_LEVEL_RANK: dict[FinancialNeed, int] = {
    FinancialNeed.LOW: 1,
    FinancialNeed.MODERATE: 2,
    FinancialNeed.HIGH: 3,
    FinancialNeed.VERY_HIGH: 4,
}


def _need_rank(level: FinancialNeed) -> int:
    return NEED_LEVEL_RANK[level]


def _known_need_level(value: str) -> FinancialNeed | None:
    try:
        return _coerce_enum(FinancialNeed, value)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class HistoricalWinnerProfile:
    """Aggregates over past winners of one scholarship."""

    average_gpa: Optional[float] = None
    average_sat: Optional[float] = None
    average_act: Optional[float] = None
    common_majors: list[str] = field(default_factory=list)
    average_strength: Optional[float] = None
    sample_size: Optional[int] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> HistoricalWinnerProfile:
        return cls(
            average_gpa=coerce_float(pick(payload, "average_gpa", "averageGpa")),
            average_sat=coerce_float(pick(payload, "average_sat", "averageSat")),
            average_act=coerce_float(pick(payload, "average_act", "averageAct")),
            common_majors=as_list(pick(payload, "common_majors", "commonMajors")),
            average_strength=coerce_float(pick(payload, "average_strength", "averageStrength")),
            sample_size=coerce_int(pick(payload, "sample_size", "sampleSize")),
        )


def _criteria_section(payload: Mapping[str, Any], *keys: str) -> Mapping[str, Any] | None:
    section = pick(payload, *keys)
    if section is None or isinstance(section, Mapping):
        return section
    raise ValueError(f"Scholarship '{keys[0]}' must be an object, got {type(section).__name__}.")


@dataclass(slots=True)
class Scholarship:
    scholarship_id: str
    name: str = ""
    award_amount: float = 0.0
    deadline: Optional[datetime] = None
    number_of_awards: Optional[int] = None
    acceptance_rate: Optional[float] = None
    applicant_pool_size: Optional[int] = None
    essay_prompts: Any = None
    required_documents: Optional[list[str]] = None
    recommendation_count: Optional[int] = None
    criteria: DimensionCriteria = field(default_factory=DimensionCriteria)
    eligibility: ScholarshipCriteria = field(default_factory=ScholarshipCriteria)
    historical_winners: Optional[HistoricalWinnerProfile] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Scholarship:
        eligibility_payload = _criteria_section(
            payload, "eligibility", "eligibility_criteria", "eligibilityCriteria"
        )
        eligibility = ScholarshipCriteria.from_mapping(eligibility_payload)
        criteria_payload = _criteria_section(payload, "criteria", "dimension_criteria", "dimensionCriteria")
        if criteria_payload is not None:
            criteria = DimensionCriteria.from_mapping(criteria_payload)
        else:
            criteria = DimensionCriteria.from_eligibility(eligibility)

        winners_payload = _criteria_section(
            payload, "historical_winner_profiles", "historicalWinnerProfiles"
        )
        award = coerce_float(pick(payload, "award_amount", "awardAmount"))
        return cls(
            scholarship_id=str(pick(payload, "scholarship_id", "id") or ""),
            name=str(pick(payload, "name", "title") or ""),
            award_amount=0.0 if award is None else award,
            deadline=coerce_datetime(pick(payload, "deadline")),
            number_of_awards=coerce_int(pick(payload, "number_of_awards", "numberOfAwards")),
            acceptance_rate=coerce_float(pick(payload, "acceptance_rate", "acceptanceRate")),
            applicant_pool_size=coerce_int(pick(payload, "applicant_pool_size", "applicantPoolSize")),
            essay_prompts=pick(payload, "essay_prompts", "essayPrompts"),
            required_documents=_optional_list(pick(payload, "required_documents", "requiredDocuments")),
            recommendation_count=coerce_int(pick(payload, "recommendation_count", "recommendationCount")),
            criteria=criteria,
            eligibility=eligibility,
            historical_winners=(
                HistoricalWinnerProfile.from_mapping(winners_payload) if winners_payload is not None else None
            ),
        )


@dataclass(slots=True)
class Application:
    application_id: str
    status: ApplicationStatus = ApplicationStatus.NOT_STARTED
    deadline: Optional[datetime] = None
    scholarship_id: Optional[str] = None
    scholarship_name: Optional[str] = None
    essay_count: int = 0
    essay_complete: int = 0
    documents_required: int = 0
    documents_uploaded: int = 0
    recs_required: int = 0
    recs_received: int = 0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Application:
        scholarship = pick(payload, "scholarship")
        scholarship_values: Mapping[str, Any] = scholarship if isinstance(scholarship, Mapping) else {}

        def _count(*keys: str) -> int:
            value = coerce_int(pick(payload, *keys))
            return 0 if value is None else value

        status = _coerce_enum(ApplicationStatus, pick(payload, "status"))
        return cls(
            application_id=str(pick(payload, "application_id", "id") or ""),
            status=status or ApplicationStatus.NOT_STARTED,
            deadline=coerce_datetime(
                pick(payload, "deadline") or pick(scholarship_values, "deadline")
            ),
            scholarship_id=pick(payload, "scholarship_id", "scholarshipId") or pick(scholarship_values, "id"),
            scholarship_name=pick(payload, "scholarship_name") or pick(scholarship_values, "name"),
            essay_count=_count("essay_count", "essayCount"),
            essay_complete=_count("essay_complete", "essayComplete"),
            documents_required=_count("documents_required", "documentsRequired"),
            documents_uploaded=_count("documents_uploaded", "documentsUploaded"),
            recs_required=_count("recs_required", "recsRequired"),
            recs_received=_count("recs_received", "recsReceived"),
        )
