from __future__ import annotations

from scorecard_import.extract import SnfExtractor, get_extractor
from scorecard_import.models.scorecard import ParseOptions, ScorecardFormat
from scorecard_import.models.workbook import Sheet, Workbook

HEADER = ("Category", "Max Points", "Charts Met", "Sample Size", "Points", "Notes")

SYSTEM_SHEETS = (
    "1. Change of Condition",
    "2. Accidents, Falls, Incidents",
    "3. Skin",
    "4. Med Management",
    "5. Infection Control",
    "6. Transfer-Discharge",
    "7. Abuse & Grievance",
)


def _workbook(facility="Sunrise Manor", month="March", year=2024, systems=SYSTEM_SHEETS) -> Workbook:
    overview = [("Clinical Systems Overview",)]
    if facility:
        overview.append(("Facility Name", facility))
    sheets = [Sheet("Clinical Systems Overview", tuple(overview))]
    for name in systems:
        sheets.append(Sheet(name, (
            ("Month", month),
            ("Year", year),
            HEADER,
            ("1) Item", 100, 8, 10),
        )))
    return Workbook(tuple(sheets))


def test_registry_returns_snf_extractor():
    assert isinstance(get_extractor(ScorecardFormat.SNF), SnfExtractor)


def test_extracts_facility_period_and_sections():
    parsed = SnfExtractor().extract(_workbook(), "audit.xlsx", ParseOptions())
    assert parsed.format == ScorecardFormat.SNF
    assert parsed.facility_name == "Sunrise Manor"
    assert (parsed.month, parsed.year, parsed.date_source) == (3, 2024, "sheet")
    assert [s.number for s in parsed.sections] == [1, 2, 3, 4, 5, 6, 7]
    assert parsed.sections[0].name == "Change of Condition"
    assert all(len(s.items) == 1 for s in parsed.sections)
    assert parsed.sheet_names[0] == "Clinical Systems Overview"


def test_missing_facility_is_none():
    parsed = SnfExtractor().extract(_workbook(facility=None), "audit.xlsx", ParseOptions())
    assert parsed.facility_name is None


def test_options_take_precedence():
    options = ParseOptions(facility_name="Override Home", month=11, year=2023)
    parsed = SnfExtractor().extract(_workbook(), "audit.xlsx", options)
    assert (parsed.facility_name, parsed.month, parsed.year) == ("Override Home", 11, 2023)
    assert parsed.date_source == "options"


def test_year_falls_back_to_filename_then_default():
    wb = _workbook(year=None)
    assert SnfExtractor().extract(wb, "Sunrise 2022.xlsx", ParseOptions(default_year=2020)).year == 2022
    assert SnfExtractor().extract(wb, "Sunrise.xlsx", ParseOptions(default_year=2020)).year == 2020
    assert SnfExtractor().extract(wb, "Sunrise.xlsx", ParseOptions()).year is None


def test_month_falls_back_to_filename():
    parsed = SnfExtractor().extract(_workbook(month=None), "Sunrise April 2024.xlsx", ParseOptions())
    assert (parsed.month, parsed.date_source) == (4, "filename")


def test_missing_system_sheets_are_skipped():
    parsed = SnfExtractor().extract(_workbook(systems=SYSTEM_SHEETS[:5]), "a.xlsx", ParseOptions())
    assert [s.number for s in parsed.sections] == [1, 2, 3, 4, 5]


def test_system_sheets_matched_by_name_pattern_not_position():
    renamed = ("Skin", "Change of Condition", "Infection", "Falls", "Medication", "Transfer", "Abuse")
    parsed = SnfExtractor().extract(_workbook(systems=renamed), "a.xlsx", ParseOptions())
    assert [s.number for s in parsed.sections] == [1, 2, 3, 4, 5, 6, 7]
