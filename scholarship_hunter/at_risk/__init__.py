from __future__ import annotations

from scholarship_hunter.at_risk.detection import (
    AtRiskApplication,
    calculate_progress,
    detect_at_risk_applications,
    get_at_risk_message,
)
from scholarship_hunter.at_risk.recovery import (
    RecoveryRecommendation,
    RequiredPace,
    calculate_required_pace,
    generate_recovery_plan,
)

__all__ = [
    "AtRiskApplication",
    "RecoveryRecommendation",
    "RequiredPace",
    "calculate_progress",
    "calculate_required_pace",
    "detect_at_risk_applications",
    "generate_recovery_plan",
    "get_at_risk_message",
]
