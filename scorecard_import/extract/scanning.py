from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..models.workbook import Sheet
from .patterns import MONTHS

"""Cell scanning helpers shared by every extractor.

Scorecard workbooks are filled in by hand, so labels move around. The helpers
here look for a labelled cell inside a window of rows and read the value
next to it, detect header rows, map header text to fields, and coerce loose
cell values into numbers and months. "Not found" is always None, never an
exception.
"""

__all__ = [
    "ColumnRule",
    "COLUMN_RULES",
    "cell_label",
    "cell_text",
    "contains_all",
    "find_header_row",
    "find_labeled_value",
    "is_header_label",
    "map_columns",
    "month_from_text",
    "month_from_value",
    "normalize_text",
    "parse_int",
    "parse_number",
    "year_from_text",
    "year_from_value",
]

_NA_STRINGS = frozenset({"n/a", "na", "-", "--", "n.a."})
_YEAR_RE = re.compile(r"20\d{2}")
# Longest names first so "september" wins over "sep".
_MONTH_RE = re.compile(
    r"(?<![a-z])(" + "|".join(sorted(MONTHS, key=len, reverse=True)) + r")(?![a-z])"
)


def cell_text(value: Any) -> str:
    """Render a cell as trimmed text; integral floats lose their ".0"."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.date().isoformat()
    return str(value).strip()


def cell_label(value: Any) -> str:
    """Lower-cased text with whitespace collapsed, for keyword matching."""
    return " ".join(cell_text(value).lower().split())


def normalize_text(value: Any) -> str:
    """Lower-case, strip punctuation and collapse whitespace."""
    text = re.sub(r"[^\w\s]", "", cell_text(value).lower())
    return " ".join(text.split())


def contains_all(*words: str) -> Callable[[str], bool]:
    def _match(label: str) -> bool:
        return all(w in label for w in words)
    return _match


def parse_number(value: Any) -> float | None:
    """Numeric value of a cell, or None for blanks, "N/A" and junk text.

    Percent signs and thousands separators are tolerated in text cells.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if value != value else float(value)
    text = cell_text(value).lower()
    if not text or text in _NA_STRINGS:
        return None
    text = text.replace("%", "").replace(",", "").strip()
    try:
        return float(text)
    except ValueError:
        return None


def parse_int(value: Any) -> int | None:
    number = parse_number(value)
    if number is None:
        return None
    return int(number)


def month_from_value(value: Any) -> int | None:
    """Month of a cell holding a month name, an abbreviation, 1-12 or a date."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (datetime, date)):
        return value.month
    if isinstance(value, (int, float)):
        return int(value) if float(value).is_integer() and 1 <= value <= 12 else None
    text = cell_label(value).rstrip(".")
    if not text:
        return None
    if text.isdigit():
        number = int(text)
        return number if 1 <= number <= 12 else None
    return MONTHS.get(text) or MONTHS.get(text[:3])


def month_from_text(text: Any) -> int | None:
    """First month name or abbreviation appearing in free text."""
    match = _MONTH_RE.search(cell_label(text))
    if match is None:
        return None
    return MONTHS[match.group(1)]


def year_from_text(text: Any) -> int | None:
    """First 4-digit 20xx year appearing in free text."""
    match = _YEAR_RE.search(cell_text(text))
    return int(match.group(0)) if match else None


def year_from_value(value: Any) -> int | None:
    if isinstance(value, (datetime, date)):
        return value.year
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value) if 2000 <= value <= 2099 else None
    return year_from_text(value)


def find_labeled_value(
    sheet: Sheet,
    matches: Callable[[str], bool],
    *,
    max_rows: int,
    convert: Callable[[Any], Any] | None = None,
) -> Any:
    """Value of the cell right of the first label accepted by ``matches``.

    Scans the first ``max_rows`` rows left to right. ``convert`` turns the
    adjacent cell into the result; a None result keeps the scan going, so a
    label with an empty or unusable neighbour does not stop the search.
    """
    convert = convert or _non_empty_text
    for r in range(min(max_rows, sheet.row_count)):
        for c, cell in enumerate(sheet.row(r)):
            if cell is None or not matches(cell_label(cell)):
                continue
            value = convert(sheet.cell(r, c + 1))
            if value is not None:
                return value
    return None


def _non_empty_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


@dataclass(frozen=True)
class ColumnRule:
    """Header keyword rule: every ``all_of`` word, at least one ``any_of``
    word (when given) and no ``none_of`` word must occur in the header."""
    field: str
    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    none_of: tuple[str, ...] = ()

    def matches(self, label: str) -> bool:
        if not all(w in label for w in self.all_of):
            return False
        if self.any_of and not any(w in label for w in self.any_of):
            return False
        return not any(w in label for w in self.none_of)


# Evaluated in order for each header cell; the first matching rule decides the
# cell's field, and the leftmost cell wins when two cells map to one field.
COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule("criteria", all_of=("category",)),
    ColumnRule("max_points", all_of=("max",), any_of=("point", "score")),
    ColumnRule("charts_met", all_of=("met",)),
    ColumnRule("sample_size", all_of=("sample",)),
    ColumnRule("points", all_of=("point",), none_of=("max",)),
    ColumnRule("notes", all_of=("note",)),
)


def is_header_label(label: str) -> bool:
    return "category" in label or ("max" in label and ("point" in label or "score" in label))


def find_header_row(sheet: Sheet, *, max_rows: int) -> int | None:
    """Index of the first row holding a recognisable item-table header."""
    for r in range(min(max_rows, sheet.row_count)):
        if any(is_header_label(cell_label(cell)) for cell in sheet.row(r) if cell is not None):
            return r
    return None


def map_columns(header: tuple[Any, ...], rules: tuple[ColumnRule, ...] = COLUMN_RULES) -> dict[str, int]:
    """Map field names to column indexes from one header row."""
    mapping: dict[str, int] = {}
    for c, cell in enumerate(header):
        label = cell_label(cell)
        if not label:
            continue
        for rule in rules:
            if rule.matches(label):
                mapping.setdefault(rule.field, c)
                break
    return mapping
