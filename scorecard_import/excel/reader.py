from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from ..models.workbook import Sheet, Workbook

"""Workbook reader.

Loads a spreadsheet container (xlsx / xlsm) fully into memory as a Workbook.
Sheets are read without a header row and without pandas' default NA
conversion, so the text "N/A" survives as text while truly blank cells become
None. Numbers stay numeric.
"""

__all__ = [
    "UnreadableFileError",
    "read_workbook",
    "read_workbook_file",
    "normalize_cell",
]

logger = logging.getLogger(__name__)


class UnreadableFileError(Exception):
    """Raised when the bytes are not a readable spreadsheet container."""


def normalize_cell(value: Any) -> Any:
    """Convert a raw pandas cell into a plain Python value.

    - NaN / NaT / "" -> None
    - numpy scalars -> int / float / bool
    - pandas Timestamp -> datetime
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, str):
        return value if value != "" else None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and value != value:  # NaN
        return None
    return value


def _frame_to_rows(df: pd.DataFrame) -> tuple[tuple[Any, ...], ...]:
    rows: list[tuple[Any, ...]] = []
    for raw in df.itertuples(index=False, name=None):
        cells = [normalize_cell(v) for v in raw]
        # Sparse rows: drop trailing blanks but keep the row itself so row
        # positions match the spreadsheet.
        while cells and cells[-1] is None:
            cells.pop()
        rows.append(tuple(cells))
    while rows and not rows[-1]:
        rows.pop()
    return tuple(rows)


def read_workbook(data: bytes) -> Workbook:
    """Read workbook bytes into an immutable Workbook.

    Parameters
    ----------
    data: raw file content (xlsx / xlsm container)

    Raises
    ------
    UnreadableFileError: the bytes are empty, corrupt or not a spreadsheet
    """
    if not data:
        raise UnreadableFileError("file is empty")
    try:
        xls = pd.ExcelFile(io.BytesIO(data), engine="openpyxl")
    except Exception as e:
        raise UnreadableFileError(f"not a readable spreadsheet: {e}") from e

    sheets: list[Sheet] = []
    try:
        for name in xls.sheet_names:
            df = xls.parse(
                name,
                header=None,
                dtype=object,
                keep_default_na=False,
                na_values=[],
            )
            sheets.append(Sheet(name=str(name), rows=_frame_to_rows(df)))
    except Exception as e:
        raise UnreadableFileError(f"failed to read sheet data: {e}") from e
    finally:
        xls.close()

    logger.debug("read workbook sheets=%s", [s.name for s in sheets])
    return Workbook(sheets=tuple(sheets))


def read_workbook_file(path: Path) -> Workbook:
    """Convenience wrapper reading a workbook from disk."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise UnreadableFileError(f"cannot open {path}: {e}") from e
    return read_workbook(data)
