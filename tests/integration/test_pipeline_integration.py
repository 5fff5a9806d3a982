from __future__ import annotations

import pytest

from conftest import build_workbook, kev_mini_sheets, snf_sheets
from scorecard_import import compute_scores, parse_batch, parse_scorecard, validate, validate_batch
from scorecard_import.models.file_result import FileStatus
from scorecard_import.models.scorecard import ScorecardFormat
from scorecard_import.models.validation import Facility, ValidationOverrides
from scorecard_import.services.validator import ScoreConsistencyWarning

DIRECTORY = [
    Facility(1, "Sunrise Manor Care Center"),
    Facility(2, "Harbor View Health and Rehabilitation"),
]


def test_snf_end_to_end(snf_bytes: bytes):
    parsed = parse_scorecard(snf_bytes, "Sunrise March.xlsx")
    assert parsed.format == ScorecardFormat.SNF
    assert parsed.facility_name == "Sunrise Manor"
    assert (parsed.month, parsed.year) == (3, 2024)
    assert [s.points_earned for s in parsed.sections] == [80.0] * 7
    assert parsed.total_score == 560.0
    assert parsed.score_percentage == 80.0
    # scoring is idempotent
    assert compute_scores(parsed) == parsed

    result = validate(parsed, facilities=DIRECTORY)
    assert result.is_valid
    assert result.matched_facility == "Sunrise Manor Care Center"
    # one item per system is far below the usual counts
    assert len(result.warnings) == 7


def test_snf_na_and_binary_rows():
    rows = [
        ["1) Assessment", 10, 4, 5, None, None],
        ["2) Not applicable", 10, "N/A", "N/A", None, None],
        ["3) Policy posted", 10, "Y", "Y=1/N=0", None, None],
    ]
    parsed = parse_scorecard(build_workbook(snf_sheets(item_rows=rows)), "a.xlsx")
    section = parsed.sections[0]
    assert [i.points_earned for i in section.items] == [8.0, 0.0, 10.0]
    assert section.items[1].charts_met is None
    assert section.points_earned == 18.0
    assert section.max_points == 30.0


def test_snf_missing_month_needs_override():
    parsed = parse_scorecard(build_workbook(snf_sheets(month=None)), "sunrise.xlsx")
    assert parsed.month is None
    first = validate(parsed, facilities=DIRECTORY)
    assert first.needs_date_override and not first.is_valid
    second = validate(parsed, ValidationOverrides(month=3), DIRECTORY)
    assert second.is_valid


def test_kev_mini_declared_scores_and_mismatch(kev_mini_bytes: bytes):
    parsed = parse_scorecard(kev_mini_bytes, "harbor.xlsx")
    assert parsed.format == ScorecardFormat.KEV_MINI
    assert parsed.facility_name == "Harbor View"
    assert (parsed.month, parsed.year, parsed.date_source) == (10, 2024, "review_period")
    assert [s.points_earned for s in parsed.sections] == [105.0, 140.0, 140.0, 140.0]
    assert [s.computed_points for s in parsed.sections] == [47.5] * 4
    assert parsed.total_source == "declared"
    assert (parsed.total_score, parsed.total_max_points) == (600.0, 750.0)
    assert parsed.score_percentage == 80.0
    assert parsed.score_mismatch.to_dict() == {"overall": 80.0, "categoryAvg": 70.0, "difference": 10.0}
    # category sheets score 95% against the declared 80%
    assert parsed.item_mismatch.to_dict() == {"declared": 80.0, "computed": 95.0, "difference": 15.0}
    assert parsed.cover.date_of_completion == "2024-11-05"

    result = validate(parsed, facilities=DIRECTORY)
    assert result.is_valid
    assert result.matched_facility_id == 2
    assert len(result.consistency_flags) == 2


def test_kev_mini_consistent_cover_has_no_mismatch():
    parsed = parse_scorecard(build_workbook(kev_mini_sheets(category_pct=0.80, overall=0.80)), "hv.xlsx")
    assert parsed.score_mismatch is None


def test_kev_mini_declared_cover_is_checked_against_category_sheets():
    parsed = parse_scorecard(build_workbook(kev_mini_sheets(category_pct=0.80, overall=0.80)), "hv.xlsx")
    assert parsed.score_percentage == 80.0
    assert parsed.item_mismatch is not None
    result = validate(parsed, facilities=DIRECTORY)
    message = "Declared score 80.0% differs from item-level score 95.0% by 15.0 points"
    assert result.is_valid
    assert result.warnings == [message]
    assert result.consistency_flags == [message]


def test_batch_isolates_corrupt_file(snf_bytes: bytes, kev_mini_bytes: bytes):
    files = [("sunrise.xlsx", snf_bytes), ("corrupt.xlsx", b"PK\x03\x04 truncated"), ("harbor.xlsx", kev_mini_bytes)]
    results = parse_batch(files)
    assert len(results) == 3
    assert [r.status for r in results] == [FileStatus.SUCCESS, FileStatus.ERROR, FileStatus.SUCCESS]
    assert results[1].error_type == "UNREADABLE_FILE"

    with pytest.warns(ScoreConsistencyWarning):
        validations = validate_batch(results, facilities=DIRECTORY)
    assert [v.is_valid for v in validations] == [True, False, True]
    # one bad file does not change the others
    assert results[0].scorecard == parse_scorecard(snf_bytes, "sunrise.xlsx")
