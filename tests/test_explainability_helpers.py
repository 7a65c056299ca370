from __future__ import annotations

import pandas as pd

from scholarship_hunter.display import explain_match_row, format_amount, format_number, format_usd


def test_explain_match_row_is_stable_and_prioritizes_strong_signals() -> None:
    row = pd.Series(
        {
            "academic_score": 95,
            "major_field_score": 100,
            "demographic_score": 50,
            "strategic_value": 4.0,
            "application_effort": "HIGH",
        }
    )

    assert explain_match_row(row) == [
        "Major or field of study matches",
        "Strong academic fit",
        "High expected return for the effort",
    ]


def test_explain_match_row_falls_back_when_nothing_stands_out() -> None:
    assert explain_match_row(pd.Series({"academic_score": 40})) == ["Partial fit, review eligibility details"]


def test_currency_and_number_formatting() -> None:
    assert format_usd(5000) == "$5,000"
    assert format_usd(1234.5) == "$1,235"
    assert format_usd(-250) == "-$250"
    assert format_amount(None) == "Unknown"
    assert format_amount("2500") == "$2,500"
    assert format_number(4.0) == "4"
    assert format_number(3.5) == "3.5"
