from __future__ import annotations

import re
from typing import Any, NamedTuple

from .scanning import cell_label, month_from_text, year_from_text

"""Month / year extraction from free text.

Used for the KEV "review period" field and, as a fallback, for filenames.
Handled shapes:

- "January 2025", "Jan 2025", "Review period: Oct 1 - Oct 31, 2024"
- "OCT'25", "Oct-25", "December25CDA"
- "9.2025", "09/2025", "9-2025"
- "Q4 2025", "4th quarter 2025" (middle month of the quarter)
"""

__all__ = [
    "MonthYear",
    "extract_month_year",
]

_ABBREV_YEAR_RE = re.compile(r"[a-z]{3,9}['’\-]?(2\d)(?!\d)")
_MONTH_DOT_YEAR_RE = re.compile(r"(?<!\d)(1[0-2]|0?[1-9])[./-](20\d{2})(?!\d)")
_QUARTER_RE = re.compile(r"\b(q[1-4]|1st|2nd|3rd|4th|first|second|third|fourth)\s*(?:quarter|qtr)?\b")
_QUARTER_MONTHS = {
    "q1": 2, "1st": 2, "first": 2,
    "q2": 5, "2nd": 5, "second": 5,
    "q3": 8, "3rd": 8, "third": 8,
    "q4": 11, "4th": 11, "fourth": 11,
}


class MonthYear(NamedTuple):
    month: int | None
    year: int | None


def extract_month_year(text: Any) -> MonthYear:
    """Best-effort (month, year) from a free-text cell or filename."""
    lower = cell_label(text)
    if not lower:
        return MonthYear(None, None)

    month = month_from_text(lower)
    year = year_from_text(lower)

    if month is not None and year is None:
        m = _ABBREV_YEAR_RE.search(lower)
        if m:
            year = 2000 + int(m.group(1))

    if month is None:
        m = _MONTH_DOT_YEAR_RE.search(lower)
        if m:
            month = int(m.group(1))
            year = int(m.group(2))

    if month is None:
        m = _QUARTER_RE.search(lower)
        if m:
            month = _QUARTER_MONTHS.get(m.group(1))

    return MonthYear(month, year)
