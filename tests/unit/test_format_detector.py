from __future__ import annotations

import pytest

from scorecard_import.excel.format_detector import UnknownFormatError, detect_format, require_format
from scorecard_import.models.scorecard import ScorecardFormat


@pytest.mark.parametrize(
    "names, expected",
    [
        (["KEV Score Cards Cover Sheet", "Abuse & Griev"], ScorecardFormat.KEV_MINI),
        (["Cover Sheet", "Abuse & Grievances", "Skin Integrity & Wounds"], ScorecardFormat.KEV_HYBRID),
        (["Clinical Systems Overview", "Skin"], ScorecardFormat.SNF),
        (["Summary", "1. Change of Condition"], ScorecardFormat.SNF),
        (["Sheet1", "Sheet2"], ScorecardFormat.UNKNOWN),
        ([], ScorecardFormat.UNKNOWN),
    ],
)
def test_detect_format(names, expected):
    assert detect_format(names) == expected


def test_detect_format_is_case_insensitive():
    assert detect_format(["kev score cards COVER sheet"]) == ScorecardFormat.KEV_MINI
    assert detect_format(["CLINICAL SYSTEMS OVERVIEW"]) == ScorecardFormat.SNF


def test_kev_mini_wins_over_snf_regardless_of_order():
    assert detect_format(["Clinical Systems Overview", "KEV Score Cards Cover Sheet"]) == ScorecardFormat.KEV_MINI
    assert detect_format(["KEV Score Cards Cover Sheet", "Clinical Systems Overview"]) == ScorecardFormat.KEV_MINI


def test_cover_sheet_without_marker_is_not_hybrid():
    assert detect_format(["Cover Sheet", "Skin"]) == ScorecardFormat.UNKNOWN


def test_require_format_raises_for_unknown():
    with pytest.raises(UnknownFormatError, match="book.xlsx"):
        require_format(["Sheet1"], "book.xlsx")


def test_require_format_returns_detected():
    assert require_format(["Clinical Systems Overview"]) == ScorecardFormat.SNF
