from __future__ import annotations

from scorecard_import.models.validation import ValidationResult
from scorecard_import.services.duplicates import assign_duplicate_groups, duplicate_key


def _result(filename, facility_id=1, month=3, year=2024, name=None) -> ValidationResult:
    return ValidationResult(
        filename=filename,
        is_valid=True,
        matched_facility_id=facility_id,
        facility_name=name,
        month=month,
        year=year,
    )


def test_duplicate_key_requires_all_parts():
    assert duplicate_key(_result("a.xlsx")) == (("id", 1), 3, 2024)
    assert duplicate_key(_result("a.xlsx", month=None)) is None
    assert duplicate_key(_result("a.xlsx", year=None)) is None
    assert duplicate_key(_result("a.xlsx", facility_id=None)) is None


def test_groups_share_id_and_name_each_other():
    results = [
        _result("a.xlsx"),
        _result("other.xlsx", facility_id=2),
        _result("b.xlsx"),
        _result("c.xlsx"),
    ]
    out = assign_duplicate_groups(results)
    assert [r.duplicate_group for r in out] == ["dup-1", None, "dup-1", "dup-1"]
    assert out[0].warnings == ["Duplicate of b.xlsx, c.xlsx (same facility and period)"]
    assert out[2].warnings == ["Duplicate of a.xlsx, c.xlsx (same facility and period)"]
    assert out[1].warnings == []
    # inputs are untouched
    assert results[0].duplicate_group is None


def test_group_numbers_follow_first_appearance():
    results = [
        _result("march-1.xlsx", facility_id=5),
        _result("april-1.xlsx", month=4),
        _result("march-2.xlsx", facility_id=5),
        _result("april-2.xlsx", month=4),
    ]
    groups = [r.duplicate_group for r in assign_duplicate_groups(results)]
    assert groups == ["dup-1", "dup-2", "dup-1", "dup-2"]


def test_different_period_is_not_duplicate():
    out = assign_duplicate_groups([_result("a.xlsx", month=3), _result("b.xlsx", month=4)])
    assert all(r.duplicate_group is None for r in out)


def test_unresolved_facility_groups_by_extracted_name():
    results = [
        _result("a.xlsx", facility_id=None, name="Sunrise  Manor"),
        _result("b.xlsx", facility_id=None, name="sunrise manor"),
    ]
    assert [r.duplicate_group for r in assign_duplicate_groups(results)] == ["dup-1", "dup-1"]


def test_same_filename_twice_still_lists_the_other_copy():
    out = assign_duplicate_groups([_result("a.xlsx"), _result("a.xlsx")])
    assert out[0].warnings == ["Duplicate of a.xlsx (same facility and period)"]
