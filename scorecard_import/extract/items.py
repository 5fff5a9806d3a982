from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..models.scorecard import AuditItem
from ..models.workbook import Sheet
from .patterns import (
    BINARY_MIN_MAX_POINTS,
    CRITERIA_MAX_LENGTH,
    DEFAULT_SAMPLE_SIZE,
    HEADER_SCAN_ROWS,
    KEV_MAX_RATING_COLUMNS,
    KEV_RATING_SCALE,
)
from .scanning import cell_label, cell_text, find_header_row, map_columns, parse_int, parse_number

"""Item-table parsing.

An item table is a header row followed by one row per audit criterion. Column
positions come from the header text (see scanning.COLUMN_RULES); when no
header can be found the caller's default layout is assumed. Rows without
criteria text or without a positive max-points value are separators or
headings and are skipped.

Two row shapes exist:

* charts-met / sample-size rows (SNF, and KEV sheets laid out the same way),
  which may be binary Y/N criteria;
* KEV rating rows: a max-score column followed by up to five 0-4 ratings.
"""

__all__ = [
    "is_binary_item",
    "parse_item_table",
    "split_item_number",
]

logger = logging.getLogger(__name__)

_ITEM_NUMBER_RE = re.compile(r"^(\d+[a-zA-Z]?)(?:\)|[.:](?=\s|$))\s*(.*)$", re.S)
_YES_VALUES = frozenset({"1", "y", "yes"})


def split_item_number(text: str) -> tuple[str | None, str]:
    """Split "2a) Criteria text" into ("2a", "Criteria text")."""
    m = _ITEM_NUMBER_RE.match(text)
    if m is None:
        return None, text
    return m.group(1), m.group(2).strip()


def is_binary_item(sample_cell: Any, max_points: float) -> bool:
    """Whether a row is a yes/no criterion rather than a chart sample.

    Binary when the sample-size cell spells out the Y=1 / N=0 convention, or
    when it reads exactly "1" on an item worth at least 5 points.
    """
    text = cell_text(sample_cell)
    compact = text.lower().replace(" ", "")
    if "y=1" in compact or "n=0" in compact:
        return True
    return text == "1" and max_points >= BINARY_MIN_MAX_POINTS


def _binary_met(value: Any) -> int | None:
    if value is None:
        return None
    return 1 if cell_label(value) in _YES_VALUES else 0


def _resolve_columns(sheet: Sheet, default_layout: Mapping[str, int]) -> tuple[int, dict[str, int]]:
    header_row = find_header_row(sheet, max_rows=HEADER_SCAN_ROWS)
    if header_row is None:
        columns = {k: v for k, v in default_layout.items() if k != "header_row"}
        logger.debug("sheet=%s no header row, default layout %s", sheet.name, columns)
        return default_layout["header_row"], columns
    columns = map_columns(sheet.row(header_row))
    columns.setdefault("criteria", default_layout["criteria"])
    columns.setdefault("max_points", default_layout["max_points"])
    logger.debug("sheet=%s header_row=%d columns=%s", sheet.name, header_row, columns)
    return header_row, columns


def _rating_columns(columns: dict[str, int], width: int) -> list[int]:
    start = columns["max_points"] + 1
    taken = set(columns.values())
    candidates = [c for c in range(start, max(start, width)) if c not in taken]
    return candidates[:KEV_MAX_RATING_COLUMNS]


def parse_item_table(sheet: Sheet, *, default_layout: Mapping[str, int]) -> list[AuditItem]:
    """Parse every scored row of an item table into AuditItems.

    Points are left at 0; the calculator fills them in.
    """
    header_row, columns = _resolve_columns(sheet, default_layout)
    rating_mode = "charts_met" not in columns and "sample_size" not in columns

    items: list[AuditItem] = []
    for r in range(header_row + 1, sheet.row_count):
        raw_criteria = cell_text(sheet.cell(r, columns["criteria"]))
        if not raw_criteria or cell_label(raw_criteria).startswith("total"):
            continue
        max_points = parse_number(sheet.cell(r, columns["max_points"]))
        if max_points is None or max_points <= 0:
            continue

        number, criteria = split_item_number(raw_criteria)
        # Rating tables mix numbered criteria with subtotal and heading rows.
        if rating_mode and number is None:
            continue
        notes = cell_text(sheet.cell(r, columns["notes"])) if "notes" in columns else ""

        if rating_mode:
            ratings = [
                n for n in (parse_number(sheet.cell(r, c)) for c in _rating_columns(columns, len(sheet.row(r))))
                if n is not None
            ]
            charts_met = round(sum(ratings)) if ratings else None
            sample_size = KEV_RATING_SCALE * len(ratings) if ratings else None
            binary = False
        else:
            sample_cell = sheet.cell(r, columns["sample_size"]) if "sample_size" in columns else None
            met_cell = sheet.cell(r, columns["charts_met"]) if "charts_met" in columns else None
            binary = is_binary_item(sample_cell, max_points)
            if binary:
                charts_met = _binary_met(met_cell)
                sample_size = 1
            else:
                charts_met = parse_int(met_cell)
                sample_size = parse_int(sample_cell)
                if sample_size is None and charts_met is not None:
                    sample_size = DEFAULT_SAMPLE_SIZE

        items.append(
            AuditItem(
                item_number=number or str(len(items) + 1),
                criteria_text=criteria[:CRITERIA_MAX_LENGTH],
                max_points=max_points,
                charts_met=charts_met,
                sample_size=sample_size,
                notes=notes,
                is_binary=binary,
            )
        )
    return items
