from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

WEIGHT_TOLERANCE = 1e-6
DIMENSIONS = ("academic", "major_field", "demographic", "experience", "financial", "special")


@dataclass(frozen=True, slots=True)
class MatchWeights:
    """Share of each dimension in the overall match score; must sum to 1.0."""

    academic: float
    major_field: float
    demographic: float
    experience: float
    financial: float
    special: float

    def __post_init__(self) -> None:
        for field_name in DIMENSIONS:
            value = float(getattr(self, field_name))
            if not math.isfinite(value):
                raise ValueError(f"Match weight '{field_name}' must be finite.")
            if value < 0.0 or value > 1.0:
                raise ValueError(f"Match weight '{field_name}' must be between 0.0 and 1.0.")

        total = sum(float(getattr(self, field_name)) for field_name in DIMENSIONS)
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_TOLERANCE):
            raise ValueError(
                "Match weights must sum to 1.0 "
                f"(received {total:.6f}, tolerance={WEIGHT_TOLERANCE})."
            )

    @classmethod
    def baseline(cls) -> MatchWeights:
        return cls(
            academic=0.30,
            major_field=0.20,
            demographic=0.15,
            experience=0.15,
            financial=0.10,
            special=0.10,
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> MatchWeights:
        values = payload or {}
        baseline = cls.baseline()
        return cls(
            academic=float(values.get("academic", baseline.academic)),
            major_field=float(values.get("major_field", baseline.major_field)),
            demographic=float(values.get("demographic", baseline.demographic)),
            experience=float(values.get("experience", baseline.experience)),
            financial=float(values.get("financial", baseline.financial)),
            special=float(values.get("special", baseline.special)),
        )

    def to_dict(self) -> dict[str, float]:
        return {field_name: float(getattr(self, field_name)) for field_name in DIMENSIONS}
