from __future__ import annotations

import pytest

from scholarship_hunter.normalize.schema import Scholarship, SuccessTier
from scholarship_hunter.probability.competition import calculate_competition_factor
from scholarship_hunter.probability.success import (
    calculate_success_probability,
    calculate_success_probability_detailed,
)
from scholarship_hunter.probability.tiers import (
    classify_success_tier,
    format_tier_display,
    get_tier_color,
)


def _scholarship(**kwargs: object) -> Scholarship:
    return Scholarship(scholarship_id="s1", **kwargs)


def test_acceptance_rate_takes_precedence_and_is_clamped() -> None:
    assert calculate_competition_factor(_scholarship(acceptance_rate=0.5, applicant_pool_size=10)) == 0.5
    assert calculate_competition_factor(_scholarship(acceptance_rate=-0.3)) == 0.05
    assert calculate_competition_factor(_scholarship(acceptance_rate=0.0)) == 0.05
    assert calculate_competition_factor(_scholarship(acceptance_rate=2.0)) == 0.95


def test_pool_size_estimate_is_capped() -> None:
    assert calculate_competition_factor(
        _scholarship(applicant_pool_size=1000, number_of_awards=5)
    ) == pytest.approx(0.5)
    assert calculate_competition_factor(
        _scholarship(applicant_pool_size=100, number_of_awards=10)
    ) == pytest.approx(0.8)
    assert calculate_competition_factor(
        _scholarship(applicant_pool_size=100000, number_of_awards=1)
    ) == pytest.approx(0.05)
    assert calculate_competition_factor(_scholarship(applicant_pool_size=200)) == pytest.approx(0.5)


def test_zero_awards_yield_minimum_and_bad_pool_falls_back() -> None:
    assert calculate_competition_factor(_scholarship(applicant_pool_size=500, number_of_awards=0)) == 0.05
    assert calculate_competition_factor(_scholarship(applicant_pool_size=0)) == 0.30
    assert calculate_competition_factor(_scholarship(applicant_pool_size=-5)) == 0.30
    assert calculate_competition_factor(_scholarship()) == 0.30


@pytest.mark.parametrize(
    "kwargs",
    [
        {"acceptance_rate": 1e9},
        {"acceptance_rate": -1e9},
        {"applicant_pool_size": 1, "number_of_awards": 10**6},
        {"applicant_pool_size": 10**9, "number_of_awards": 1},
        {"applicant_pool_size": 10, "number_of_awards": -3},
    ],
)
def test_competition_factor_always_within_bounds(kwargs: dict[str, float]) -> None:
    factor = calculate_competition_factor(_scholarship(**kwargs))

    assert 0.05 <= factor <= 0.95


def test_success_probability_blends_match_competition_and_strength() -> None:
    scholarship = _scholarship(acceptance_rate=0.5)

    assert calculate_success_probability(80, 50, scholarship) == 40
    assert calculate_success_probability(100, 100, _scholarship(acceptance_rate=0.95)) == 95
    assert calculate_success_probability(0, 0, scholarship) == 5


def test_success_probability_detailed_reports_intermediate_factors() -> None:
    breakdown = calculate_success_probability_detailed(80, 60, _scholarship(acceptance_rate=0.5))

    assert breakdown.final_probability == 50
    assert breakdown.base_probability == 80
    assert breakdown.after_competition == 40
    assert breakdown.strength_adjustment == 10
    assert breakdown.after_strength_adjustment == 50
    assert breakdown.competition_factor == pytest.approx(0.5)


@pytest.mark.parametrize(
    ("probability", "tier"),
    [
        (70, SuccessTier.STRONG_MATCH),
        (69.5, SuccessTier.COMPETITIVE_MATCH),
        (40, SuccessTier.COMPETITIVE_MATCH),
        (39.99, SuccessTier.REACH),
        (10, SuccessTier.REACH),
        (9.9, SuccessTier.LONG_SHOT),
        (-5, SuccessTier.LONG_SHOT),
    ],
)
def test_success_tier_boundaries(probability: float, tier: SuccessTier) -> None:
    assert classify_success_tier(probability).tier == tier


def test_success_tier_passes_probability_through_unclamped() -> None:
    result = classify_success_tier(150)

    assert result.tier == SuccessTier.STRONG_MATCH
    assert result.probability == 150
    assert result.label == "Strong Match"
    assert result.color == "green"
    assert result.description == "Apply immediately, high confidence"


def test_format_tier_display_does_not_round() -> None:
    assert format_tier_display(classify_success_tier(72)) == "72% success probability - Strong Match"
    assert (
        format_tier_display(classify_success_tier(69.5))
        == "69.5% success probability - Competitive Match"
    )
    assert format_tier_display(classify_success_tier(5)) == "5% success probability - Long-Shot"


def test_get_tier_color_lookup() -> None:
    assert get_tier_color(SuccessTier.COMPETITIVE_MATCH) == "blue"
    assert get_tier_color(SuccessTier.REACH) == "orange"
    assert get_tier_color(SuccessTier.LONG_SHOT) == "red"
