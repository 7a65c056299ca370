from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

import pandas as pd

from scholarship_hunter.match.weights import MatchWeights
from scholarship_hunter.normalize.schema import Application, Scholarship, StudentProfile

logger = logging.getLogger(__name__)

SCHOLARSHIP_SUFFIXES = (".json", ".csv", ".parquet")
# CSV cells that carry JSON-encoded objects or lists.
NESTED_CSV_COLUMNS = (
    "eligibility",
    "eligibility_criteria",
    "eligibilityCriteria",
    "criteria",
    "dimension_criteria",
    "dimensionCriteria",
    "essay_prompts",
    "essayPrompts",
    "required_documents",
    "requiredDocuments",
    "historical_winner_profiles",
    "historicalWinnerProfiles",
)


def _require_file(path: Path) -> Path:
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: '{path}'.")
    return path


def _read_json(path: Path) -> Any:
    return json.loads(_require_file(path).read_text(encoding="utf-8"))


def _records_payload(payload: Any, key: str) -> list[Mapping[str, Any]]:
    if isinstance(payload, Mapping):
        payload = payload.get(key, [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of records (or an object with a '{key}' list).")
    return [record for record in payload if isinstance(record, Mapping)]


def _decode_json_cell(value: Any, column: str) -> Any:
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text.startswith(("{", "[")):
        return value
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Column '{column}' holds malformed JSON: {text[:80]!r}") from exc


def _decode_nested_columns(df: pd.DataFrame) -> pd.DataFrame:
    for column in NESTED_CSV_COLUMNS:
        if column in df.columns:
            df[column] = df[column].map(lambda value, column=column: _decode_json_cell(value, column))
    return df


def load_scholarships_df(path: Path) -> pd.DataFrame:
    """Read scholarship records from JSON, CSV or parquet into a DataFrame."""
    suffix = path.suffix.lower()
    if suffix not in SCHOLARSHIP_SUFFIXES:
        raise ValueError(
            f"Unsupported scholarship file format '{path.suffix}' for '{path}'. "
            f"Expected one of: {', '.join(SCHOLARSHIP_SUFFIXES)}."
        )
    _require_file(path)
    if suffix == ".json":
        df = pd.DataFrame.from_records(_records_payload(_read_json(path), "scholarships"))
    elif suffix == ".csv":
        df = _decode_nested_columns(pd.read_csv(path))
    else:
        df = pd.read_parquet(path, engine="pyarrow")
    logger.info("Loaded %s scholarship records from %s", len(df), path)
    return df


def scholarships_from_df(df: pd.DataFrame) -> list[Scholarship]:
    return [Scholarship.from_mapping(row.to_dict()) for _, row in df.iterrows()]


def load_profile(path: Path) -> StudentProfile:
    payload = _read_json(path)
    if not isinstance(payload, Mapping):
        raise ValueError(f"Profile file '{path}' must contain a JSON object.")
    profile_payload = payload.get("profile", payload)
    return StudentProfile.from_mapping(profile_payload if isinstance(profile_payload, Mapping) else {})


def load_applications(path: Path) -> list[Application]:
    applications = [
        Application.from_mapping(record)
        for record in _records_payload(_read_json(path), "applications")
    ]
    logger.info("Loaded %s applications from %s", len(applications), path)
    return applications


def load_weight_overrides(path: Path | None) -> MatchWeights | None:
    if path is None:
        return None
    payload = _read_json(path)
    if not isinstance(payload, Mapping):
        raise ValueError(f"Weights file '{path}' must contain a JSON object.")
    section = payload.get("match_weights", payload)
    return MatchWeights.from_mapping(section if isinstance(section, Mapping) else None)


def jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(item) for item in value]
    if hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        return jsonable(value.tolist())
    if isinstance(value, float) and pd.isna(value):
        return None
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        if value.tzinfo is not None:
            return value.tz_convert("UTC").isoformat()
        return value.isoformat()
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


def write_json_atomic(payload: Mapping[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(json.dumps(jsonable(payload), indent=2, sort_keys=True), encoding="utf-8")
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    logger.info("Wrote JSON artifact: %s", output_path)
