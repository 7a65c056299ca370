from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Callable, Iterable

from scholarship_hunter.normalize.coerce import as_utc, clamp, round_half_up
from scholarship_hunter.normalize.schema import (
    TERMINAL_STATUSES,
    Application,
    ApplicationStatus,
    AtRiskReason,
    Severity,
)

SECONDS_PER_DAY = 86_400
LOW_PROGRESS_THRESHOLD = 50.0


@dataclass(frozen=True, slots=True)
class AtRiskApplication:
    application: Application
    reason: AtRiskReason
    severity: Severity
    days_until_deadline: int
    progress: float

    @property
    def message(self) -> str:
        return get_at_risk_message(self.reason, self.days_until_deadline, self.progress)


def _ratio(done: int, required: int) -> float:
    if required <= 0:
        return 100.0
    return clamp(done, 0, required) / required * 100


def calculate_progress(app: Application) -> float:
    """Weighted completion: essays 50%, documents 30%, recommendations 20%."""
    return (
        _ratio(app.essay_complete, app.essay_count) * 0.5
        + _ratio(app.documents_uploaded, app.documents_required) * 0.3
        + _ratio(app.recs_received, app.recs_required) * 0.2
    )


def has_incomplete_requirements(app: Application) -> bool:
    return (
        app.essay_complete < app.essay_count
        or app.documents_uploaded < app.documents_required
        or app.recs_received < app.recs_required
    )


def days_until(deadline: datetime, now: datetime) -> int:
    """Whole days between `now` and `deadline`, truncated toward zero."""
    seconds = (as_utc(deadline) - as_utc(now)).total_seconds()
    return int(seconds / SECONDS_PER_DAY)


# (predicate over (app, days, progress), severity, reason); first match wins.
AtRiskRule = Callable[[Application, int, float], bool]

AT_RISK_RULES: tuple[tuple[AtRiskRule, Severity, AtRiskReason], ...] = (
    (
        lambda app, days, progress: days <= 1 and app.status is not ApplicationStatus.READY_FOR_REVIEW,
        Severity.CRITICAL,
        AtRiskReason.ONE_DAY_NOT_READY,
    ),
    (
        lambda app, days, progress: 1 < days <= 3 and has_incomplete_requirements(app),
        Severity.URGENT,
        AtRiskReason.THREE_DAY_INCOMPLETE,
    ),
    (
        lambda app, days, progress: 3 < days <= 7 and progress < LOW_PROGRESS_THRESHOLD,
        Severity.WARNING,
        AtRiskReason.SEVEN_DAY_LOW_PROGRESS,
    ),
)


def classify_application(app: Application, now: datetime | None = None) -> AtRiskApplication | None:
    if app.deadline is None or app.status in TERMINAL_STATUSES:
        return None
    current = as_utc(now) if now is not None else datetime.now(tz=UTC)
    if as_utc(app.deadline) < current:
        return None

    days = days_until(app.deadline, current)
    progress = calculate_progress(app)
    for predicate, severity, reason in AT_RISK_RULES:
        if predicate(app, days, progress):
            return AtRiskApplication(
                application=app,
                reason=reason,
                severity=severity,
                days_until_deadline=days,
                progress=progress,
            )
    return None


def detect_at_risk_applications(
    applications: Iterable[Application], now: datetime | None = None
) -> list[AtRiskApplication]:
    """Flag open applications that are behind for their deadline, in input order.

    Passed deadlines, missing deadlines and terminal statuses are skipped.
    """
    current = as_utc(now) if now is not None else datetime.now(tz=UTC)
    flagged: list[AtRiskApplication] = []
    for app in applications:
        result = classify_application(app, current)
        if result is not None:
            flagged.append(result)
    return flagged


def get_at_risk_message(reason: AtRiskReason, days_until_deadline: int, progress: float) -> str:
    reason = AtRiskReason(reason)
    if reason is AtRiskReason.SEVEN_DAY_LOW_PROGRESS:
        return f"Deadline in {days_until_deadline} days with only {round_half_up(progress)}% complete"
    if reason is AtRiskReason.THREE_DAY_INCOMPLETE:
        return f"Deadline in {days_until_deadline} days with incomplete requirements"
    suffix = "" if days_until_deadline == 1 else "s"
    return f"Deadline in {days_until_deadline} day{suffix} - not ready for review"


def get_severity_guidance(days_until_deadline: int, severity: Severity) -> str:
    severity = Severity(severity)
    if severity is Severity.CRITICAL:
        return (
            "This application needs immediate attention! The deadline is in less than 24 hours. "
            "Can I help you prioritize what to complete first?"
        )
    if severity is Severity.URGENT:
        return (
            f"This application is at risk with only {days_until_deadline} days remaining. "
            "Let's create an action plan to get you back on track."
        )
    return (
        f"This application has {days_until_deadline} days until deadline but is behind schedule. "
        "Let's review your timeline to ensure timely completion."
    )
