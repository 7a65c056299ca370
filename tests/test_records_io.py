from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pandas as pd
import pytest

from scholarship_hunter.io.records import (
    load_applications,
    load_profile,
    load_scholarships_df,
    load_weight_overrides,
    scholarships_from_df,
    write_json_atomic,
)
from scholarship_hunter.normalize.schema import (
    ApplicationStatus,
    FinancialNeed,
    PriorityTier,
    Scholarship,
    StudentProfile,
)
from scholarship_hunter.rank.batch import rank_scholarships

RECORDS = [
    {"scholarship_id": "s1", "name": "First", "award_amount": 1000.0, "acceptance_rate": 0.4},
    {"scholarship_id": "s2", "name": "Second", "award_amount": 2500.0, "acceptance_rate": 0.1},
]


def test_load_scholarships_from_json_list_and_wrapped_object(tmp_path: Path) -> None:
    list_path = tmp_path / "list.json"
    list_path.write_text(json.dumps(RECORDS), encoding="utf-8")
    wrapped_path = tmp_path / "wrapped.json"
    wrapped_path.write_text(json.dumps({"scholarships": RECORDS}), encoding="utf-8")

    assert load_scholarships_df(list_path)["scholarship_id"].tolist() == ["s1", "s2"]
    assert load_scholarships_df(wrapped_path)["scholarship_id"].tolist() == ["s1", "s2"]


def test_load_scholarships_from_csv_and_parquet(tmp_path: Path) -> None:
    csv_path = tmp_path / "records.csv"
    parquet_path = tmp_path / "records.parquet"
    pd.DataFrame(RECORDS).to_csv(csv_path, index=False)
    pd.DataFrame(RECORDS).to_parquet(parquet_path, index=False, engine="pyarrow")

    csv_df = load_scholarships_df(csv_path)
    parquet_df = load_scholarships_df(parquet_path)

    assert csv_df["award_amount"].tolist() == [1000.0, 2500.0]
    assert parquet_df["name"].tolist() == ["First", "Second"]
    scholarships = scholarships_from_df(parquet_df)
    assert [item.scholarship_id for item in scholarships] == ["s1", "s2"]
    assert scholarships[1].acceptance_rate == pytest.approx(0.1)


def test_load_scholarships_rejects_unknown_format_and_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unsupported scholarship file format"):
        load_scholarships_df(tmp_path / "records.txt")
    with pytest.raises(FileNotFoundError):
        load_scholarships_df(tmp_path / "missing.json")


def test_load_profile_accepts_camel_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    path.write_text(
        json.dumps(
            {
                "profile": {
                    "gpa": 3.7,
                    "satScore": 1300,
                    "financialNeed": "very high",
                    "pellGrantEligible": "yes",
                    "leadershipRoles": ["Captain"],
                }
            }
        ),
        encoding="utf-8",
    )

    profile = load_profile(path)

    assert profile.gpa == pytest.approx(3.7)
    assert profile.sat_score == 1300
    assert profile.financial_need == FinancialNeed.VERY_HIGH
    assert profile.pell_grant_eligible is True
    assert profile.leadership_roles == ["Captain"]
    assert profile.strength_score == pytest.approx(50.0)


def test_load_profile_rejects_unknown_enum_value(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"financialNeed": "enormous"}), encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported FinancialNeed"):
        load_profile(path)


def test_load_applications_reads_nested_scholarship_deadline(tmp_path: Path) -> None:
    path = tmp_path / "applications.json"
    path.write_text(
        json.dumps(
            {
                "applications": [
                    {
                        "id": "a1",
                        "status": "IN_PROGRESS",
                        "essayCount": 2,
                        "essayComplete": 1,
                        "scholarship": {"id": "s1", "name": "First", "deadline": "2026-03-05T00:00:00Z"},
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    applications = load_applications(path)

    assert len(applications) == 1
    app = applications[0]
    assert app.application_id == "a1"
    assert app.status == ApplicationStatus.IN_PROGRESS
    assert app.deadline == datetime(2026, 3, 5, tzinfo=UTC)
    assert app.scholarship_name == "First"
    assert (app.essay_count, app.essay_complete) == (2, 1)


def test_load_weight_overrides(tmp_path: Path) -> None:
    path = tmp_path / "weights.json"
    path.write_text(json.dumps({"match_weights": {"academic": 0.40, "special": 0.0}}), encoding="utf-8")

    weights = load_weight_overrides(path)

    assert weights is not None
    assert weights.academic == pytest.approx(0.40)
    assert load_weight_overrides(None) is None


def test_write_json_atomic_serializes_enums_and_datetimes(tmp_path: Path) -> None:
    output_path = tmp_path / "nested" / "artifact.json"

    write_json_atomic(
        {
            "tier": PriorityTier.MUST_APPLY,
            "deadline": datetime(2026, 3, 5, tzinfo=UTC),
            "missing": float("nan"),
        },
        output_path,
    )

    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload == {"deadline": "2026-03-05T00:00:00+00:00", "missing": None, "tier": "MUST_APPLY"}
    assert list(output_path.parent.glob("*.tmp")) == []


def test_parquet_list_columns_rank_with_effort(tmp_path: Path) -> None:
    path = tmp_path / "records.parquet"
    pd.DataFrame(
        [
            {
                "scholarship_id": "essays",
                "award_amount": 4000.0,
                "essay_prompts": ["e1", "e2", "e3"],
                "required_documents": ["transcript", "resume"],
            },
            {
                "scholarship_id": "quick",
                "award_amount": 4000.0,
                "essay_prompts": [],
                "required_documents": [],
            },
        ]
    ).to_parquet(path, index=False, engine="pyarrow")

    ranked_df = rank_scholarships(load_scholarships_df(path), StudentProfile())

    by_id = ranked_df.set_index("scholarship_id")
    assert by_id.loc["essays", "application_effort"] == "HIGH"
    assert by_id.loc["essays", "effort_essays"] == 3
    assert by_id.loc["essays", "effort_documents"] == 2
    assert by_id.loc["quick", "application_effort"] == "LOW"


def test_csv_json_encoded_criteria_are_decoded(tmp_path: Path) -> None:
    path = tmp_path / "records.csv"
    pd.DataFrame(
        [
            {"scholarship_id": "gated", "award_amount": 1000.0, "eligibility": json.dumps({"min_gpa": 3.9})},
            {"scholarship_id": "open", "award_amount": 1000.0, "eligibility": None},
        ]
    ).to_csv(path, index=False)

    df = load_scholarships_df(path)
    ranked_df = rank_scholarships(df, StudentProfile(gpa=2.0), hard_filter=False)

    assert df.loc[0, "eligibility"] == {"min_gpa": 3.9}
    scores = dict(zip(ranked_df["scholarship_id"], ranked_df["academic_score"]))
    assert scores == {"gated": 51, "open": 100}
    assert rank_scholarships(df, StudentProfile(gpa=2.0))["scholarship_id"].tolist() == ["open"]


def test_csv_malformed_json_criteria_raise(tmp_path: Path) -> None:
    path = tmp_path / "records.csv"
    pd.DataFrame([{"scholarship_id": "bad", "eligibility": "{min_gpa: 3.9"}]).to_csv(path, index=False)

    with pytest.raises(ValueError, match="malformed JSON"):
        load_scholarships_df(path)


def test_non_object_criteria_are_rejected() -> None:
    with pytest.raises(ValueError, match="must be an object"):
        Scholarship.from_mapping({"id": "s1", "eligibility": "min_gpa=3.9"})
