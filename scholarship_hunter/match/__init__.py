from __future__ import annotations

from scholarship_hunter.match.score import (
    DimensionScores,
    MatchScore,
    evaluate_match,
    score_dimensions,
)
from scholarship_hunter.match.weights import MatchWeights

__all__ = [
    "DimensionScores",
    "MatchScore",
    "MatchWeights",
    "evaluate_match",
    "score_dimensions",
]
