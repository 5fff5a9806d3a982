from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""In-memory workbook model.

Sheets are row-major grids of raw cell values. Blank cells are None; numbers
and text keep the type the spreadsheet stored so "N/A", blank and 0 remain
distinguishable. Rows may be ragged; out-of-range lookups return None.
"""

__all__ = [
    "Sheet",
    "Workbook",
]


@dataclass(frozen=True)
class Sheet:
    name: str
    rows: tuple[tuple[Any, ...], ...]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row(self, index: int) -> tuple[Any, ...]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return ()

    def cell(self, row: int, col: int) -> Any:
        values = self.row(row)
        if 0 <= col < len(values):
            return values[col]
        return None


@dataclass(frozen=True)
class Workbook:
    sheets: tuple[Sheet, ...]

    @property
    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    def get(self, name: str) -> Sheet | None:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None

    def find(self, name: str) -> Sheet | None:
        """Case-insensitive, whitespace-tolerant sheet lookup."""
        wanted = " ".join(name.lower().split())
        for sheet in self.sheets:
            if " ".join(sheet.name.lower().split()) == wanted:
                return sheet
        return None
