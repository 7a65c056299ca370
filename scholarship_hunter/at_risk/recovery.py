from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from scholarship_hunter.display import format_number, pluralize
from scholarship_hunter.normalize.coerce import as_utc
from scholarship_hunter.normalize.schema import Application

HOURS_PER_ESSAY = 3
HOURS_PER_DOCUMENT = 0.5
REVIEW_BUFFER_HOURS = 24


class RecommendationType(str, Enum):
    ESSAY = "ESSAY"
    DOCUMENT = "DOCUMENT"
    RECOMMENDATION = "RECOMMENDATION"


class BlockerLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True, slots=True)
class RecoveryRecommendation:
    priority: int
    type: RecommendationType
    message: str
    blocker_level: BlockerLevel
    estimated_hours: float
    deadline: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority,
            "type": self.type.value,
            "message": self.message,
            "blocker_level": self.blocker_level.value,
            "estimated_hours": self.estimated_hours,
            "deadline": self.deadline.isoformat() if self.deadline else None,
        }


@dataclass(frozen=True, slots=True)
class RequiredPace:
    hours_remaining: int
    hours_needed: float
    feasible: bool
    pace_description: str


def _format_weekday_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{moment:%A} {hour}:{moment:%M} {moment:%p}"


def _remaining(required: int, done: int) -> int:
    return max(required - max(done, 0), 0)


def generate_recovery_plan(app: Application) -> list[RecoveryRecommendation]:
    """Actions for each incomplete requirement, essays first."""
    plan: list[RecoveryRecommendation] = []

    essays = _remaining(app.essay_count, app.essay_complete)
    if essays:
        hours = essays * HOURS_PER_ESSAY
        suggested = None
        message = f"Complete {pluralize(essays, 'essay')}"
        if app.deadline is not None:
            suggested = as_utc(app.deadline) - timedelta(hours=hours + REVIEW_BUFFER_HOURS)
            message = f"{message} by {_format_weekday_time(suggested)}"
        plan.append(
            RecoveryRecommendation(
                priority=1,
                type=RecommendationType.ESSAY,
                message=message,
                blocker_level=BlockerLevel.HIGH,
                estimated_hours=hours,
                deadline=suggested,
            )
        )

    documents = _remaining(app.documents_required, app.documents_uploaded)
    if documents:
        plan.append(
            RecoveryRecommendation(
                priority=2,
                type=RecommendationType.DOCUMENT,
                message=f"Upload {documents} remaining document{'s' if documents > 1 else ''} as soon as possible",
                blocker_level=BlockerLevel.MEDIUM,
                estimated_hours=HOURS_PER_DOCUMENT,
            )
        )

    recommendations = _remaining(app.recs_required, app.recs_received)
    if recommendations:
        # Outside the student's control, so flagged as a hard blocker with no hours.
        plan.append(
            RecoveryRecommendation(
                priority=3,
                type=RecommendationType.RECOMMENDATION,
                message=f"Follow up with {pluralize(recommendations, 'recommender')} immediately",
                blocker_level=BlockerLevel.HIGH,
                estimated_hours=0,
            )
        )

    return sorted(plan, key=lambda item: item.priority)


def calculate_required_pace(app: Application, now: datetime | None = None) -> RequiredPace:
    current = as_utc(now) if now is not None else datetime.now(tz=UTC)
    hours_remaining = 0
    if app.deadline is not None:
        hours_remaining = max(0, int((as_utc(app.deadline) - current).total_seconds() // 3600))

    hours_needed = (
        _remaining(app.essay_count, app.essay_complete) * HOURS_PER_ESSAY
        + _remaining(app.documents_required, app.documents_uploaded) * HOURS_PER_DOCUMENT
    )
    feasible = hours_needed <= hours_remaining

    if hours_needed == 0:
        description = "All work completed"
    elif not feasible:
        description = (
            f"Critical: {format_number(float(hours_needed))} hours needed "
            f"but only {hours_remaining} hours remaining"
        )
    elif hours_remaining < 24:
        description = f"Urgent: Complete all work within {hours_remaining} hours"
    else:
        per_day = hours_needed / (hours_remaining / 24)
        description = f"Work at {per_day:.1f} hours per day to stay on track"

    return RequiredPace(
        hours_remaining=hours_remaining,
        hours_needed=hours_needed,
        feasible=feasible,
        pace_description=description,
    )
