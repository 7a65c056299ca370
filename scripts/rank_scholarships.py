from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from scholarship_hunter.display import explain_match_row, format_amount
from scholarship_hunter.io.records import (
    load_profile,
    load_scholarships_df,
    load_weight_overrides,
    write_json_atomic,
)
from scholarship_hunter.match.weights import MatchWeights
from scholarship_hunter.rank.batch import count_by_tier, rank_scholarships, split_eligible

logger = logging.getLogger("rank_scholarships")

DEFAULT_TOP_K = 20
REPORT_COLUMNS = [
    "scholarship_id",
    "name",
    "award_amount",
    "deadline",
    "overall_match_score",
    "success_probability",
    "success_tier",
    "application_effort",
    "strategic_value",
    "strategic_value_tier",
    "priority_tier",
    "priority_rationale",
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank scholarships for one student profile.")
    parser.add_argument("--scholarships", type=Path, required=True, help="Scholarship records (.json, .csv, .parquet).")
    parser.add_argument("--profile", type=Path, required=True, help="Student profile JSON.")
    parser.add_argument("--weights", type=Path, default=None, help="Optional JSON with match weight overrides.")
    parser.add_argument("--reports-dir", type=Path, default=ROOT_DIR / "reports")
    parser.add_argument(
        "--top-k",
        type=int,
        default=DEFAULT_TOP_K,
        help=f"Rows listed in the markdown report. Defaults to {DEFAULT_TOP_K}.",
    )
    parser.add_argument(
        "--no-hard-filter",
        action="store_true",
        help="Rank every scholarship, including ones the student is ineligible for.",
    )
    parser.add_argument(
        "--reference-year",
        type=int,
        default=None,
        help="Year used to estimate age from graduation year. Defaults to the current year.",
    )
    return parser.parse_args(argv)


def _resolve_path(path: Path) -> Path:
    return path if path.is_absolute() else ROOT_DIR / path


def _ranked_records(ranked_df: pd.DataFrame, limit: int | None = None) -> list[dict[str, Any]]:
    subset = ranked_df if limit is None else ranked_df.head(limit)
    records: list[dict[str, Any]] = []
    for _, row in subset.iterrows():
        record = {column: row.get(column) for column in REPORT_COLUMNS if column in subset.columns}
        record["reasons"] = explain_match_row(row)
        records.append(record)
    return records


def _rejections_by_dimension(ineligible_df: pd.DataFrame) -> dict[str, int]:
    counts: dict[str, int] = {}
    if "failed_criteria" not in ineligible_df.columns:
        return counts
    for failures in ineligible_df["failed_criteria"]:
        for failure in failures:
            counts[failure["dimension"]] = counts.get(failure["dimension"], 0) + 1
    return dict(sorted(counts.items()))


def _markdown_report(
    *,
    generated_at: str,
    scholarships_path: Path,
    profile_path: Path,
    weights: MatchWeights,
    weights_path: Path | None,
    tier_counts: dict[str, int],
    ineligible_count: int,
    rejections: dict[str, int],
    top_records: list[dict[str, Any]],
) -> str:
    lines: list[str] = []
    lines.append("# Scholarship Ranking Report")
    lines.append("")
    lines.append(f"- Generated at (UTC): {generated_at}")
    lines.append(f"- Scholarships: `{scholarships_path}`")
    lines.append(f"- Profile: `{profile_path}`")
    if weights_path is None:
        lines.append("- Weights: baseline defaults")
    else:
        lines.append(f"- Weights file: `{weights_path}`")
    lines.append(
        "- Match weights: "
        + ", ".join(f"{name}={value:.2f}" for name, value in weights.to_dict().items())
    )
    lines.append("")
    lines.append("## Priority Tiers")
    lines.append("")
    lines.append("| Tier | Count |")
    lines.append("| --- | ---: |")
    for tier, count in tier_counts.items():
        lines.append(f"| {tier} | {count} |")
    lines.append("")
    lines.append("## Hard Filter")
    lines.append("")
    lines.append(f"- Ineligible scholarships removed: {ineligible_count}")
    for dimension, count in rejections.items():
        lines.append(f"- {dimension}: {count} failed criteria")
    lines.append("")
    lines.append("## Top Scholarships")
    lines.append("")
    if not top_records:
        lines.append("No scholarships to rank.")
        return "\n".join(lines) + "\n"
    lines.append("| # | Scholarship | Award | Match | Success | Effort | Value | Tier |")
    lines.append("| ---: | --- | ---: | ---: | ---: | --- | ---: | --- |")
    for index, record in enumerate(top_records, start=1):
        name = str(record.get("name") or record.get("scholarship_id") or "").replace("|", "/")
        lines.append(
            f"| {index} | {name} | {format_amount(record.get('award_amount'))} | "
            f"{record.get('overall_match_score')} | {record.get('success_probability')}% | "
            f"{record.get('application_effort')} | {float(record.get('strategic_value') or 0.0):.1f} | "
            f"{record.get('priority_tier')} |"
        )
    lines.append("")
    lines.append("## Rationale")
    lines.append("")
    for record in top_records:
        lines.append(f"- {record.get('priority_rationale')}")
        for reason in record.get("reasons", []):
            lines.append(f"  - {reason}")
    return "\n".join(lines) + "\n"


def run_ranking(
    *,
    scholarships_path: Path,
    profile_path: Path,
    reports_dir: Path,
    weights_path: Path | None = None,
    top_k: int = DEFAULT_TOP_K,
    reference_year: int | None = None,
    hard_filter: bool = True,
) -> dict[str, Any]:
    scholarships_df = load_scholarships_df(scholarships_path)
    profile = load_profile(profile_path)
    weights = load_weight_overrides(weights_path) or MatchWeights.baseline()

    ineligible_df = scholarships_df.iloc[0:0]
    if hard_filter:
        scholarships_df, ineligible_df = split_eligible(scholarships_df, profile, reference_year=reference_year)
    rejections = _rejections_by_dimension(ineligible_df)

    ranked_df = rank_scholarships(
        scholarships_df, profile, weights=weights, reference_year=reference_year, hard_filter=False
    )
    tier_counts = count_by_tier(ranked_df)

    timestamp = datetime.now(tz=UTC).strftime("%Y%m%d_%H%M%S")
    generated_at = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    markdown_path = reports_dir / f"ranking_{timestamp}.md"
    json_path = reports_dir / "artifacts" / f"ranking_{timestamp}.json"

    markdown_path.parent.mkdir(parents=True, exist_ok=True)
    markdown_path.write_text(
        _markdown_report(
            generated_at=generated_at,
            scholarships_path=scholarships_path,
            profile_path=profile_path,
            weights=weights,
            weights_path=weights_path,
            tier_counts=tier_counts,
            ineligible_count=int(len(ineligible_df)),
            rejections=rejections,
            top_records=_ranked_records(ranked_df, top_k),
        ),
        encoding="utf-8",
    )
    write_json_atomic(
        {
            "generated_at": generated_at,
            "scholarships_path": str(scholarships_path),
            "profile_path": str(profile_path),
            "weights_path": str(weights_path) if weights_path is not None else None,
            "match_weights": weights.to_dict(),
            "scholarship_count": int(len(ranked_df)),
            "tier_counts": tier_counts,
            "ineligible_count": int(len(ineligible_df)),
            "rejections_by_dimension": rejections,
            "ineligible": [
                {
                    "scholarship_id": row.get("scholarship_id", row.get("id")),
                    "name": row.get("name"),
                    "failed_criteria": row["failed_criteria"],
                }
                for _, row in ineligible_df.iterrows()
            ],
            "ranked": _ranked_records(ranked_df),
        },
        json_path,
    )
    return {
        "markdown_path": markdown_path,
        "json_path": json_path,
        "scholarship_count": int(len(ranked_df)),
        "ineligible_count": int(len(ineligible_df)),
        "tier_counts": tier_counts,
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.top_k <= 0:
        raise SystemExit("--top-k must be greater than 0.")

    try:
        result = run_ranking(
            scholarships_path=_resolve_path(args.scholarships),
            profile_path=_resolve_path(args.profile),
            reports_dir=_resolve_path(args.reports_dir),
            weights_path=_resolve_path(args.weights) if args.weights is not None else None,
            top_k=args.top_k,
            reference_year=args.reference_year,
            hard_filter=not args.no_hard_filter,
        )
    except (FileNotFoundError, ValueError):
        logger.exception("Ranking failed.")
        return 1

    print(f"Wrote markdown report: {result['markdown_path']}")
    print(f"Wrote JSON artifact: {result['json_path']}")
    print(
        "Tier counts: "
        + ", ".join(f"{tier}={count}" for tier, count in result["tier_counts"].items())
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
