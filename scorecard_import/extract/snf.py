from __future__ import annotations

import logging

from ..models.scorecard import ParsedScorecard, ParseOptions, ScorecardFormat, SectionResult
from ..models.workbook import Sheet, Workbook
from .base import Extractor, register_extractor, resolve_period
from .dates import MonthYear
from .items import parse_item_table
from .patterns import (
    FACILITY_SCAN_ROWS,
    MONTH_SCAN_ROWS,
    SNF_DEFAULT_LAYOUT,
    SNF_OVERVIEW_SHEETS,
    SNF_SECTION_COUNT,
    SNF_SYSTEM_NAMES,
    SNF_SYSTEM_SHEET_PATTERNS,
)
from .scanning import cell_label, contains_all, find_labeled_value, month_from_value, year_from_value

"""SNF clinical-systems workbook extractor.

Layout: an overview sheet carrying the facility name, then one sheet per
clinical system (seven in total), each with a small month/year block at the
top and an item table below it. System sheets are located by name pattern,
so renamed or re-ordered tabs still resolve.
"""

__all__ = ["SnfExtractor"]

logger = logging.getLogger(__name__)


class SnfExtractor(Extractor):
    format = ScorecardFormat.SNF

    def extract(self, workbook: Workbook, filename: str, options: ParseOptions) -> ParsedScorecard:
        facility = options.facility_name or self.facility_name(workbook)

        claimed = {cell_label(name) for name in SNF_OVERVIEW_SHEETS}
        sections: list[SectionResult] = []
        month = year = None
        for number in range(1, SNF_SECTION_COUNT + 1):
            sheet = self.system_sheet(workbook, number, claimed)
            if sheet is None:
                logger.warning("file=%s no sheet found for system %d", filename, number)
                continue
            claimed.add(cell_label(sheet.name))

            if month is None:
                month = find_labeled_value(
                    sheet, lambda l: "month" in l, max_rows=MONTH_SCAN_ROWS, convert=month_from_value
                )
            if year is None:
                year = find_labeled_value(
                    sheet, lambda l: "year" in l, max_rows=MONTH_SCAN_ROWS, convert=year_from_value
                )

            items = parse_item_table(sheet, default_layout=SNF_DEFAULT_LAYOUT)
            logger.debug("file=%s system=%d sheet=%s items=%d", filename, number, sheet.name, len(items))
            sections.append(
                SectionResult(number=number, name=SNF_SYSTEM_NAMES[number], items=tuple(items))
            )

        month, year, date_source = resolve_period(options, MonthYear(month, year), filename, source="sheet")
        return ParsedScorecard(
            format=self.format,
            source_filename=filename,
            facility_name=facility,
            month=month,
            year=year,
            sections=tuple(sections),
            date_source=date_source,
            sheet_names=tuple(workbook.sheet_names),
        )

    @staticmethod
    def facility_name(workbook: Workbook) -> str | None:
        for name in SNF_OVERVIEW_SHEETS:
            sheet = workbook.find(name)
            if sheet is None:
                continue
            value = find_labeled_value(sheet, contains_all("facility", "name"), max_rows=FACILITY_SCAN_ROWS)
            if value:
                return value
        return None

    @staticmethod
    def system_sheet(workbook: Workbook, number: int, claimed: set[str]) -> Sheet | None:
        """First unclaimed sheet, in workbook order, matching a system's name patterns."""
        patterns = SNF_SYSTEM_SHEET_PATTERNS[number]
        for sheet in workbook.sheets:
            label = cell_label(sheet.name)
            if label in claimed:
                continue
            if any(p in label for p in patterns):
                return sheet
        return None


register_extractor(SnfExtractor())
