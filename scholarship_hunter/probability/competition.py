from __future__ import annotations

from scholarship_hunter.normalize.coerce import clamp
from scholarship_hunter.normalize.schema import Scholarship

MIN_COMPETITION_FACTOR = 0.05
MAX_COMPETITION_FACTOR = 0.95
DEFAULT_COMPETITION_FACTOR = 0.30
MAX_POOL_ESTIMATE = 0.8


def clamp_competition_factor(factor: float) -> float:
    return clamp(factor, MIN_COMPETITION_FACTOR, MAX_COMPETITION_FACTOR)


def estimate_rate_from_pool(pool_size: int, number_of_awards: int | None) -> float:
    if pool_size <= 0:
        return DEFAULT_COMPETITION_FACTOR
    awards = 1 if number_of_awards is None else number_of_awards
    if awards <= 0:
        return MIN_COMPETITION_FACTOR
    return clamp_competition_factor(min(MAX_POOL_ESTIMATE, awards * 100 / pool_size))


def calculate_competition_factor(scholarship: Scholarship) -> float:
    """Expected acceptance probability in [0.05, 0.95].

    Historical acceptance rate wins when known; otherwise the rate is estimated
    from the applicant pool size, falling back to 0.30.
    """
    if scholarship.acceptance_rate is not None:
        return clamp_competition_factor(scholarship.acceptance_rate)
    if scholarship.applicant_pool_size is not None:
        return estimate_rate_from_pool(scholarship.applicant_pool_size, scholarship.number_of_awards)
    return DEFAULT_COMPETITION_FACTOR
