from __future__ import annotations

from types import MappingProxyType

"""Immutable lookup tables shared by the detector and the extractors.

Nothing in here is mutated at runtime; dict tables are wrapped in
MappingProxyType.
"""

MONTHS = MappingProxyType({
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
})

# Sheet titles used by the format detector (compared case-insensitively).
KEV_MINI_COVER_SHEET = "KEV Score Cards Cover Sheet"
KEV_HYBRID_COVER_SHEET = "Cover Sheet"
KEV_HYBRID_MARKER_SHEET = "Abuse & Grievances"
SNF_OVERVIEW_SHEET = "Clinical Systems Overview"
SNF_FIRST_SYSTEM_PREFIX = "1. Change of Condition"

# Sheets searched for the facility name on SNF workbooks, in order.
SNF_OVERVIEW_SHEETS = (SNF_OVERVIEW_SHEET, "Overview", "Summary", "Cover")

SNF_SYSTEM_NAMES = MappingProxyType({
    1: "Change of Condition",
    2: "Accidents, Falls, Incidents",
    3: "Skin",
    4: "Med Management & Weight Loss",
    5: "Infection Control",
    6: "Transfer/Discharge",
    7: "Abuse/Self Report/Grievance Review",
})

# Substrings identifying each system's sheet; first sheet (workbook order)
# containing any of them wins.
SNF_SYSTEM_SHEET_PATTERNS = MappingProxyType({
    1: ("change of condition", "1.", "system 1"),
    2: ("accidents", "falls", "incidents", "2.", "system 2"),
    3: ("skin", "3.", "system 3"),
    4: ("med", "medication", "weight", "4.", "system 4"),
    5: ("infection", "5.", "system 5"),
    6: ("transfer", "discharge", "6.", "system 6"),
    7: ("abuse", "grievance", "self-report", "7.", "system 7"),
})

SNF_EXPECTED_ITEM_COUNTS = MappingProxyType({1: 8, 2: 15, 3: 8, 4: 16, 5: 10, 6: 10, 7: 8})
SNF_DEFAULT_EXPECTED_ITEMS = 10
ITEM_COUNT_TOLERANCE = 2

SNF_NOMINAL_MAX_POINTS = 700.0
SNF_SECTION_COUNT = 7

KEV_CATEGORIES = (
    "Abuse & Grievances",
    "Accidents & Incidents",
    "Infection Prevention & Control",
    "Skin Integrity & Wounds",
)
KEV_SECTION_COUNT = 4

# Category sheet name -> (category, nominal max points)
KEV_MINI_SHEETS = MappingProxyType({
    "Abuse & Griev": ("Abuse & Grievances", 150.0),
    "Accidents & Incidents": ("Accidents & Incidents", 200.0),
    "Inf Prev & Cont": ("Infection Prevention & Control", 200.0),
    "Skin Integrity & Wounds": ("Skin Integrity & Wounds", 200.0),
})
KEV_HYBRID_SHEETS = MappingProxyType({
    "Abuse & Grievances": ("Abuse & Grievances", 50.0),
    "Accidents & Incidents": ("Accidents & Incidents", 60.0),
    "Infection Prevention & Control": ("Infection Prevention & Control", 130.0),
    "Skin Integrity & Wounds": ("Skin Integrity & Wounds", 130.0),
})
KEV_MINI_NOMINAL_MAX_POINTS = 750.0
KEV_HYBRID_NOMINAL_MAX_POINTS = 370.0

# Keyword sets identifying cover-sheet quality table rows. All words must
# appear in the label cell.
KEV_COVER_LABELS = (
    (("abuse", "grievance"), "Abuse & Grievances"),
    (("accident", "incident"), "Accidents & Incidents"),
    (("infection", "prevention"), "Infection Prevention & Control"),
    (("skin", "integrity"), "Skin Integrity & Wounds"),
)
KEV_TOTAL_LABEL = ("total", "quality", "review")
KEV_RATING_SCALE = 4  # each KEV rating column is scored 0..4
KEV_MAX_RATING_COLUMNS = 5

# Scan windows (rows from the top of a sheet).
FACILITY_SCAN_ROWS = 10
COVER_SCAN_ROWS = 20
KEV_MINI_COVER_SCAN_ROWS = 25
MONTH_SCAN_ROWS = 5
HEADER_SCAN_ROWS = 15

CRITERIA_MAX_LENGTH = 200
DEFAULT_SAMPLE_SIZE = 3
BINARY_MIN_MAX_POINTS = 5.0

# Column layouts used when no header row is found. Row index is the header
# row; items start on the next row.
SNF_DEFAULT_LAYOUT = MappingProxyType({
    "header_row": 2,
    "criteria": 0,
    "max_points": 1,
    "charts_met": 2,
    "sample_size": 3,
    "points": 4,
    "notes": 5,
})
KEV_DEFAULT_LAYOUT = MappingProxyType({
    "header_row": -1,
    "criteria": 0,
    "max_points": 4,
})
