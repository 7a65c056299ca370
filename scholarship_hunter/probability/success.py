from __future__ import annotations

from dataclasses import dataclass

from scholarship_hunter.normalize.coerce import clamp, round_half_up
from scholarship_hunter.normalize.schema import Scholarship
from scholarship_hunter.probability.competition import calculate_competition_factor

MIN_PROBABILITY = 0.05
MAX_PROBABILITY = 0.95
NEUTRAL_STRENGTH = 50.0


@dataclass(frozen=True, slots=True)
class SuccessProbabilityBreakdown:
    final_probability: int
    base_probability: float
    after_competition: int
    after_strength_adjustment: int
    competition_factor: float
    strength_adjustment: int


def _blend(match_score: float, strength_score: float, competition_factor: float) -> tuple[float, float, float]:
    after_competition = match_score / 100 * competition_factor
    strength_adjustment = (strength_score - NEUTRAL_STRENGTH) / 100
    return after_competition, strength_adjustment, after_competition + strength_adjustment


def calculate_success_probability(
    match_score: float,
    strength_score: float,
    scholarship: Scholarship,
) -> int:
    """Percent chance of winning: match scaled by competition, shifted by profile strength."""
    _, _, probability = _blend(match_score, strength_score, calculate_competition_factor(scholarship))
    return round_half_up(clamp(probability, MIN_PROBABILITY, MAX_PROBABILITY) * 100)


def calculate_success_probability_detailed(
    match_score: float,
    strength_score: float,
    scholarship: Scholarship,
) -> SuccessProbabilityBreakdown:
    competition_factor = calculate_competition_factor(scholarship)
    after_competition, strength_adjustment, adjusted = _blend(
        match_score, strength_score, competition_factor
    )
    return SuccessProbabilityBreakdown(
        final_probability=round_half_up(clamp(adjusted, MIN_PROBABILITY, MAX_PROBABILITY) * 100),
        base_probability=match_score,
        after_competition=round_half_up(after_competition * 100),
        after_strength_adjustment=round_half_up(adjusted * 100),
        competition_factor=round_half_up(competition_factor * 100) / 100,
        strength_adjustment=round_half_up(strength_adjustment * 100),
    )
