from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from scholarship_hunter.at_risk.detection import (
    AtRiskApplication,
    detect_at_risk_applications,
    get_severity_guidance,
)
from scholarship_hunter.at_risk.recovery import calculate_required_pace, generate_recovery_plan
from scholarship_hunter.io.records import load_applications, write_json_atomic
from scholarship_hunter.normalize.coerce import coerce_datetime
from scholarship_hunter.normalize.schema import Severity

logger = logging.getLogger("scan_at_risk")

SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.URGENT: 1, Severity.WARNING: 2}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Flag in-progress applications at risk of missing their deadline.")
    parser.add_argument("--applications", type=Path, required=True, help="Applications JSON.")
    parser.add_argument("--reports-dir", type=Path, default=ROOT_DIR / "reports")
    parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="Evaluation time as ISO-8601. Defaults to the current UTC time.",
    )
    return parser.parse_args(argv)


def _resolve_path(path: Path) -> Path:
    return path if path.is_absolute() else ROOT_DIR / path


def _flag_record(flag: AtRiskApplication, now: datetime) -> dict[str, Any]:
    app = flag.application
    pace = calculate_required_pace(app, now)
    return {
        "application_id": app.application_id,
        "scholarship_id": app.scholarship_id,
        "scholarship_name": app.scholarship_name,
        "status": app.status.value,
        "deadline": app.deadline,
        "severity": flag.severity.value,
        "reason": flag.reason.value,
        "days_until_deadline": flag.days_until_deadline,
        "progress": round(flag.progress, 1),
        "message": flag.message,
        "guidance": get_severity_guidance(flag.days_until_deadline, flag.severity),
        "pace": {
            "hours_remaining": pace.hours_remaining,
            "hours_needed": pace.hours_needed,
            "feasible": pace.feasible,
            "pace_description": pace.pace_description,
        },
        "recovery_plan": [item.to_dict() for item in generate_recovery_plan(app)],
    }


def _markdown_report(*, generated_at: str, applications_path: Path, total: int, flags: list[dict[str, Any]]) -> str:
    lines: list[str] = []
    lines.append("# At-Risk Applications")
    lines.append("")
    lines.append(f"- Generated at (UTC): {generated_at}")
    lines.append(f"- Applications: `{applications_path}`")
    lines.append(f"- Scanned: {total}")
    lines.append(f"- Flagged: {len(flags)}")
    lines.append("")
    if not flags:
        lines.append("No applications at risk.")
        return "\n".join(lines) + "\n"
    for record in flags:
        title = record.get("scholarship_name") or record.get("application_id")
        lines.append(f"## [{record['severity']}] {title}")
        lines.append("")
        lines.append(f"- {record['message']}")
        lines.append(f"- Pace: {record['pace']['pace_description']}")
        for item in record["recovery_plan"]:
            lines.append(f"- {item['priority']}. {item['message']} ({item['blocker_level']} blocker)")
        lines.append("")
    return "\n".join(lines)


def run_scan(*, applications_path: Path, reports_dir: Path, now: datetime | None = None) -> dict[str, Any]:
    current = now or datetime.now(tz=UTC)
    applications = load_applications(applications_path)
    flagged = detect_at_risk_applications(applications, current)
    flagged.sort(key=lambda flag: (SEVERITY_ORDER[flag.severity], flag.days_until_deadline))
    records = [_flag_record(flag, current) for flag in flagged]
    logger.info("Flagged %s of %s applications", len(records), len(applications))

    timestamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    generated_at = current.strftime("%Y-%m-%dT%H:%M:%SZ")
    markdown_path = reports_dir / f"at_risk_{timestamp}.md"
    json_path = reports_dir / "artifacts" / f"at_risk_{timestamp}.json"
    markdown_path.parent.mkdir(parents=True, exist_ok=True)
    markdown_path.write_text(
        _markdown_report(
            generated_at=generated_at,
            applications_path=applications_path,
            total=len(applications),
            flags=records,
        ),
        encoding="utf-8",
    )
    write_json_atomic(
        {
            "generated_at": generated_at,
            "applications_path": str(applications_path),
            "scanned": len(applications),
            "flagged": records,
        },
        json_path,
    )
    return {
        "markdown_path": markdown_path,
        "json_path": json_path,
        "scanned": len(applications),
        "flagged": len(records),
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    now = None
    if args.now is not None:
        try:
            now = coerce_datetime(args.now)
        except ValueError:
            now = None
        if now is None:
            raise SystemExit(f"Invalid --now value: {args.now!r}")

    try:
        result = run_scan(
            applications_path=_resolve_path(args.applications),
            reports_dir=_resolve_path(args.reports_dir),
            now=now,
        )
    except (FileNotFoundError, ValueError):
        logger.exception("At-risk scan failed.")
        return 1

    print(f"Wrote markdown report: {result['markdown_path']}")
    print(f"Wrote JSON artifact: {result['json_path']}")
    print(f"Flagged {result['flagged']} of {result['scanned']} applications")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
