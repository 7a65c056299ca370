from __future__ import annotations

from dataclasses import dataclass, field

from scholarship_hunter.display import format_number
from scholarship_hunter.normalize.coerce import clamp, round_half_up
from scholarship_hunter.normalize.schema import HistoricalWinnerProfile, StudentProfile

NO_DATA_SUMMARY = "Historical winner data unavailable for this scholarship"

# Full range of each metric, used to express differences as a 0-1 share.
GPA_RANGE = 4.0
SAT_RANGE = 1600.0
ACT_RANGE = 36.0
STRENGTH_RANGE = 100.0

# (minimum similarity, probability points added), checked top down.
SIMILARITY_ADJUSTMENTS: tuple[tuple[int, int], ...] = (
    (90, 5),
    (70, 2),
    (50, 0),
)
LOW_SIMILARITY_PENALTY = -2


@dataclass(frozen=True, slots=True)
class MetricComparison:
    student: float
    average: float
    difference: float
    is_above: bool


@dataclass(frozen=True, slots=True)
class HistoricalComparison:
    has_data: bool
    gpa: MetricComparison | None = None
    sat: MetricComparison | None = None
    act: MetricComparison | None = None
    strength: MetricComparison | None = None
    overall_similarity: int | None = None
    summary: list[str] = field(default_factory=list)


def _compare(student: float, average: float) -> MetricComparison:
    difference = student - average
    return MetricComparison(student=student, average=average, difference=difference, is_above=difference >= 0)


def compare_to_historical_winners(
    profile: StudentProfile, historical: HistoricalWinnerProfile | None
) -> HistoricalComparison:
    """Compare the profile against past winners' averages.

    Metrics are only compared when both sides are known and non-zero, except
    strength, which every profile has.
    """
    if historical is None or not historical.sample_size:
        return HistoricalComparison(has_data=False, summary=[NO_DATA_SUMMARY])

    summary: list[str] = []
    normalized_differences: list[float] = []

    gpa = None
    if profile.gpa and historical.average_gpa:
        gpa = _compare(profile.gpa, historical.average_gpa)
        summary.append(f"Past winners had average GPA {historical.average_gpa:.1f} (yours: {profile.gpa:.1f})")
        normalized_differences.append(abs(gpa.difference) / GPA_RANGE)

    sat = None
    if profile.sat_score and historical.average_sat:
        sat = _compare(profile.sat_score, historical.average_sat)
        summary.append(
            f"Past winners had average SAT {format_number(historical.average_sat)} (yours: {profile.sat_score})"
        )
        normalized_differences.append(abs(sat.difference) / SAT_RANGE)

    act = None
    if profile.act_score and historical.average_act:
        act = _compare(profile.act_score, historical.average_act)
        summary.append(
            f"Past winners had average ACT {format_number(historical.average_act)} (yours: {profile.act_score})"
        )
        normalized_differences.append(abs(act.difference) / ACT_RANGE)

    strength = None
    if historical.average_strength:
        strength = _compare(profile.strength_score, historical.average_strength)
        summary.append(
            "Past winners had average profile strength "
            f"{round_half_up(historical.average_strength)} (yours: {round_half_up(profile.strength_score)})"
        )
        normalized_differences.append(abs(strength.difference) / STRENGTH_RANGE)

    similarity = None
    if normalized_differences:
        average_difference = sum(normalized_differences) / len(normalized_differences)
        similarity = round_half_up((1 - average_difference) * 100)

    summary.append(f"Based on {historical.sample_size} past winners")
    return HistoricalComparison(
        has_data=True,
        gpa=gpa,
        sat=sat,
        act=act,
        strength=strength,
        overall_similarity=similarity,
        summary=summary,
    )


def adjust_probability_for_historical_data(base_probability: int, comparison: HistoricalComparison) -> int:
    """Nudge a success percentage by similarity to past winners, kept within 5-95."""
    if not comparison.has_data or not comparison.overall_similarity:
        return base_probability

    adjustment = LOW_SIMILARITY_PENALTY
    for minimum, points in SIMILARITY_ADJUSTMENTS:
        if comparison.overall_similarity >= minimum:
            adjustment = points
            break
    return int(clamp(base_probability + adjustment, 5, 95))
