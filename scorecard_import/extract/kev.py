from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from ..models.scorecard import (
    CategoryScore,
    CoverSheetSummary,
    ParsedScorecard,
    ParseOptions,
    ScorecardFormat,
    SectionResult,
)
from ..models.workbook import Sheet, Workbook
from .base import Extractor, register_extractor, resolve_period
from .dates import extract_month_year
from .items import parse_item_table
from .patterns import (
    COVER_SCAN_ROWS,
    KEV_COVER_LABELS,
    KEV_DEFAULT_LAYOUT,
    KEV_HYBRID_COVER_SHEET,
    KEV_HYBRID_SHEETS,
    KEV_MINI_COVER_SCAN_ROWS,
    KEV_MINI_COVER_SHEET,
    KEV_MINI_SHEETS,
    KEV_TOTAL_LABEL,
)
from .scanning import cell_label, cell_text, parse_number

"""KEV scorecard extractor (Mini and Hybrid variants).

A KEV workbook has a cover sheet declaring the facility, the review period and
a quality table (possible / met / percentage per category plus a total row),
followed by one sheet per quality category holding the item rows. The two
variants differ only in sheet names, scan depth and nominal point values.
"""

__all__ = [
    "KevExtractor",
    "parse_cover_sheet",
]

logger = logging.getLogger(__name__)

_EXCEL_EPOCH = datetime(1899, 12, 30)
_EXCEL_SERIAL_MIN = 40000  # 2009-07-06; smaller numbers are not dates here


def _adjacent_text(sheet: Sheet, r: int, c: int) -> str | None:
    text = cell_text(sheet.cell(r, c + 1))
    return text or None


def _date_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    number = parse_number(value)
    if number is not None and number > _EXCEL_SERIAL_MIN:
        return (_EXCEL_EPOCH + timedelta(days=int(number))).date().isoformat()
    return cell_text(value) or None


def _as_percent(value: float | None) -> float | None:
    """Cover sheets store percentages either as 0..1 fractions or whole numbers."""
    if value is None:
        return None
    # 1 reads as 100%, never as 1%: a full-marks cell formatted as a percent holds 1.0
    if 0 < value <= 1:
        return round(value * 100, 2)
    return value


def _row_score(row: tuple[Any, ...], label_col: int, category: str) -> CategoryScore | None:
    """Read (possible, met, percentage) from the cells right of a label.

    The adjacent three cells are tried first; otherwise the numeric cells to
    the right of the label are taken in order, skipping spacer columns.
    """
    values = [parse_number(v) for v in row[label_col + 1:label_col + 4]]
    values += [None] * (3 - len(values))
    if values[0] is None:
        numbers = [n for n in (parse_number(v) for v in row[label_col + 1:]) if n is not None]
        if len(numbers) < 2:
            return None
        values = (numbers + [None])[:3]
    possible, met, pct = values
    if possible is None or possible <= 0:
        return None
    return CategoryScore(category=category, possible=possible, met=met, percentage=_as_percent(pct))


def _is_total_label(label: str, mini: bool) -> bool:
    if all(w in label for w in KEV_TOTAL_LABEL) or "total score" in label:
        return True
    return mini and label.startswith("total") and "overall" not in label


def parse_cover_sheet(sheet: Sheet, *, mini: bool) -> CoverSheetSummary:
    """Read the declared values of a KEV cover sheet.

    Every field is optional; labels are matched by keyword and the first
    usable occurrence wins.
    """
    max_rows = KEV_MINI_COVER_SCAN_ROWS if mini else COVER_SCAN_ROWS
    facility = review = completed = auditor = None
    overall = None
    total = None
    categories: dict[str, CategoryScore] = {}

    for r in range(min(max_rows, sheet.row_count)):
        row = sheet.row(r)
        for c, cell in enumerate(row):
            label = cell_label(cell)
            if not label:
                continue
            if facility is None and "facility" in label and "name" in label:
                facility = _adjacent_text(sheet, r, c)
            elif review is None and (
                "review period" in label or (mini and label.rstrip(":") == "month")
            ):
                review = _adjacent_text(sheet, r, c)
            elif completed is None and "date of completion" in label:
                completed = _date_text(sheet.cell(r, c + 1))
            elif auditor is None and "completed by" in label:
                auditor = _adjacent_text(sheet, r, c)
            elif overall is None and "overall" in label:
                overall = _as_percent(parse_number(sheet.cell(r, c + 1)))
                if overall is None:
                    overall = _as_percent(parse_number(sheet.cell(r, c + 2)))
            elif total is None and _is_total_label(label, mini):
                total = _row_score(row, c, "Total")
            else:
                for words, category in KEV_COVER_LABELS:
                    if category not in categories and all(w in label for w in words):
                        score = _row_score(row, c, category)
                        if score is not None:
                            categories[category] = score
                        break

    ordered = tuple(categories[name] for _, name in KEV_COVER_LABELS if name in categories)
    logger.debug(
        "cover sheet=%s facility=%s review=%s categories=%d total=%s overall=%s",
        sheet.name, facility, review, len(ordered), total, overall,
    )
    return CoverSheetSummary(
        facility_name=facility,
        review_period=review,
        date_of_completion=completed,
        audit_completed_by=auditor,
        categories=ordered,
        total=total,
        overall_score=overall,
    )


class KevExtractor(Extractor):
    """Extractor for one KEV variant."""

    def __init__(
        self,
        fmt: ScorecardFormat,
        cover_sheet: str,
        category_sheets: Mapping[str, tuple[str, float]],
    ) -> None:
        self.format = fmt
        self.cover_sheet = cover_sheet
        self.category_sheets = category_sheets

    @property
    def mini(self) -> bool:
        return self.format == ScorecardFormat.KEV_MINI

    def find_cover(self, workbook: Workbook) -> Sheet | None:
        sheet = workbook.find(self.cover_sheet)
        if sheet is not None:
            return sheet
        wanted = cell_label(self.cover_sheet)
        for candidate in workbook.sheets:
            if wanted in cell_label(candidate.name):
                return candidate
        return None

    def find_category_sheet(self, workbook: Workbook, sheet_name: str, category: str) -> Sheet | None:
        for name in (sheet_name, category):
            sheet = workbook.find(name)
            if sheet is not None:
                return sheet
        return None

    def extract(self, workbook: Workbook, filename: str, options: ParseOptions) -> ParsedScorecard:
        cover_sheet = self.find_cover(workbook)
        if cover_sheet is None:
            logger.warning("file=%s cover sheet %r not found", filename, self.cover_sheet)
            cover = CoverSheetSummary()
        else:
            cover = parse_cover_sheet(cover_sheet, mini=self.mini)

        sections: list[SectionResult] = []
        for number, (sheet_name, (category, _nominal)) in enumerate(self.category_sheets.items(), start=1):
            sheet = self.find_category_sheet(workbook, sheet_name, category)
            if sheet is None:
                logger.warning("file=%s category sheet %r not found", filename, sheet_name)
                continue
            items = parse_item_table(sheet, default_layout=KEV_DEFAULT_LAYOUT)
            declared = cover.category(category)
            logger.debug("file=%s category=%s items=%d declared=%s", filename, category, len(items), declared)
            sections.append(
                SectionResult(
                    number=number,
                    name=category,
                    items=tuple(items),
                    declared_points=declared.met if declared else None,
                    declared_max_points=declared.possible if declared else None,
                    declared_percentage=declared.percentage if declared else None,
                )
            )

        month, year, date_source = resolve_period(
            options, extract_month_year(cover.review_period), filename, source="review_period"
        )
        return ParsedScorecard(
            format=self.format,
            source_filename=filename,
            facility_name=options.facility_name or cover.facility_name,
            month=month,
            year=year,
            sections=tuple(sections),
            date_source=date_source,
            cover=cover,
            sheet_names=tuple(workbook.sheet_names),
        )


register_extractor(KevExtractor(ScorecardFormat.KEV_MINI, KEV_MINI_COVER_SHEET, KEV_MINI_SHEETS))
register_extractor(KevExtractor(ScorecardFormat.KEV_HYBRID, KEV_HYBRID_COVER_SHEET, KEV_HYBRID_SHEETS))
