from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from scholarship_hunter.eligibility.hard_filter import apply_hard_filters
from scholarship_hunter.match.score import MatchScore, evaluate_match
from scholarship_hunter.match.weights import MatchWeights
from scholarship_hunter.normalize.schema import PriorityTier, Scholarship, StudentProfile
from scholarship_hunter.strategy.priority import PRIORITY_ORDER, get_tier_rationale

logger = logging.getLogger(__name__)

MATCH_COLUMNS = [
    "overall_match_score",
    "academic_score",
    "demographic_score",
    "major_field_score",
    "experience_score",
    "financial_score",
    "special_criteria_score",
    "success_probability",
    "success_tier",
    "competition_factor",
    "application_effort",
    "effort_essays",
    "effort_documents",
    "effort_recommendations",
    "strategic_value",
    "strategic_value_tier",
    "priority_tier",
    "priority_rationale",
]

_TIER_RANK = {tier.value: index for index, tier in enumerate(PRIORITY_ORDER)}


def _row_payload(row: pd.Series) -> dict[str, Any]:
    payload = row.to_dict()
    if not payload.get("scholarship_id") and payload.get("id") is not None:
        payload["scholarship_id"] = payload["id"]
    return payload


def _match_columns(scholarship: Scholarship, match: MatchScore) -> dict[str, Any]:
    breakdown = match.effort_breakdown
    return {
        "overall_match_score": match.overall_match_score,
        "academic_score": match.academic_score,
        "demographic_score": match.demographic_score,
        "major_field_score": match.major_field_score,
        "experience_score": match.experience_score,
        "financial_score": match.financial_score,
        "special_criteria_score": match.special_criteria_score,
        "success_probability": match.success_probability,
        "success_tier": match.success_tier.value,
        "competition_factor": match.competition_factor,
        "application_effort": match.application_effort.value,
        "effort_essays": breakdown.essays,
        "effort_documents": breakdown.documents,
        "effort_recommendations": breakdown.recommendations,
        "strategic_value": match.strategic_value,
        "strategic_value_tier": match.strategic_value_tier.value,
        "priority_tier": match.priority_tier.value,
        "priority_rationale": get_tier_rationale(
            match.priority_tier,
            match.overall_match_score,
            match.success_probability / 100,
            match.strategic_value,
            scholarship.award_amount,
        ),
    }


def split_eligible(
    scholarships_df: pd.DataFrame,
    profile: StudentProfile,
    *,
    reference_year: int | None = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Split rows into (eligible, ineligible); ineligible rows carry `failed_criteria`."""
    with_reasons_df = scholarships_df.copy().reset_index(drop=True)
    failures: list[list[dict[str, Any]]] = []
    for _, row in with_reasons_df.iterrows():
        scholarship = Scholarship.from_mapping(_row_payload(row))
        result = apply_hard_filters(
            profile, scholarship.criteria, early_exit=False, reference_year=reference_year
        )
        failures.append([failure.to_dict() for failure in result.failed_criteria])
    with_reasons_df["failed_criteria"] = pd.Series(failures, index=with_reasons_df.index, dtype=object)

    is_ineligible = with_reasons_df["failed_criteria"].map(bool).astype(bool)
    eligible_df = with_reasons_df[~is_ineligible].drop(columns=["failed_criteria"]).reset_index(drop=True)
    ineligible_df = with_reasons_df[is_ineligible].reset_index(drop=True)
    return eligible_df, ineligible_df


def rank_scholarships(
    scholarships_df: pd.DataFrame,
    profile: StudentProfile,
    *,
    weights: MatchWeights | None = None,
    reference_year: int | None = None,
    hard_filter: bool = True,
) -> pd.DataFrame:
    """Evaluate every eligible scholarship row for one profile and sort by priority.

    With `hard_filter`, rows failing a must-have criterion are dropped first.
    Order: priority tier (MUST_APPLY first), strategic value and overall match
    descending, deadline ascending, then scholarship id.
    """
    ranked_df = scholarships_df.copy().reset_index(drop=True)
    if hard_filter and not ranked_df.empty:
        ranked_df, ineligible_df = split_eligible(ranked_df, profile, reference_year=reference_year)
        logger.info("Hard filter removed %s of %s scholarships", len(ineligible_df), len(scholarships_df))
    if ranked_df.empty:
        for column in MATCH_COLUMNS:
            ranked_df[column] = pd.Series(dtype=object)
        return ranked_df

    records: list[dict[str, Any]] = []
    for _, row in ranked_df.iterrows():
        scholarship = Scholarship.from_mapping(_row_payload(row))
        match = evaluate_match(profile, scholarship, weights=weights, reference_year=reference_year)
        records.append(_match_columns(scholarship, match))

    scores_df = pd.DataFrame.from_records(records, columns=MATCH_COLUMNS)
    for column in MATCH_COLUMNS:
        ranked_df[column] = scores_df[column].to_numpy()

    if "scholarship_id" not in ranked_df.columns:
        ranked_df["scholarship_id"] = ranked_df["id"] if "id" in ranked_df.columns else np.arange(len(ranked_df))

    ranked_df["_tier_sort"] = ranked_df["priority_tier"].map(_TIER_RANK)
    ranked_df["_deadline_sort"] = pd.to_datetime(ranked_df.get("deadline"), errors="coerce", utc=True)
    ranked_df = ranked_df.sort_values(
        by=["_tier_sort", "strategic_value", "overall_match_score", "_deadline_sort", "scholarship_id"],
        ascending=[True, False, False, True, True],
        na_position="last",
        kind="mergesort",
    ).drop(columns=["_tier_sort", "_deadline_sort"])

    logger.info("Ranked %s scholarships for profile", ranked_df.shape[0])
    return ranked_df.reset_index(drop=True)


def count_by_tier(ranked_df: pd.DataFrame) -> dict[str, int]:
    counts = {tier.value: 0 for tier in PRIORITY_ORDER}
    if ranked_df.empty or "priority_tier" not in ranked_df.columns:
        return counts
    for tier, count in ranked_df["priority_tier"].value_counts().items():
        if tier in counts:
            counts[str(tier)] = int(count)
    return counts


def filter_by_tier(ranked_df: pd.DataFrame, tier: PriorityTier | str) -> pd.DataFrame:
    wanted = PriorityTier(tier).value
    if "priority_tier" not in ranked_df.columns:
        return ranked_df.iloc[0:0].copy()
    return ranked_df[ranked_df["priority_tier"] == wanted].reset_index(drop=True)
