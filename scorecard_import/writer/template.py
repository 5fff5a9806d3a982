from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from ..extract.patterns import SNF_SYSTEM_NAMES
from ..models.validation import Facility

"""Blank import template for the summary (one row per facility-month) import.

default_template_data() assembles the column headers, system names, a sample
row and the valid facility names; build_template_workbook() serializes them
into an xlsx with three sheets: "Historical Data", "Instructions" and
"Facilities".
"""

__all__ = [
    "DATA_SHEET",
    "FACILITIES_SHEET",
    "INSTRUCTIONS_SHEET",
    "TemplateData",
    "build_template_workbook",
    "default_template_data",
]

DATA_SHEET = "Historical Data"
INSTRUCTIONS_SHEET = "Instructions"
FACILITIES_SHEET = "Facilities"

_SAMPLE_SCORES = (85, 90, 88, 92, 95, 87, 100)


@dataclass(frozen=True)
class TemplateData:
    columns: list[str]
    system_names: list[str]
    facilities: list[str]
    sample_row: dict[str, Any] = field(default_factory=dict)

    def sample_values(self) -> list[Any]:
        """Sample row values in column order."""
        return list(self.sample_row.values())


def default_template_data(facilities: Iterable[Facility | str] | None = None) -> TemplateData:
    """Template content for the given facility directory (names sorted)."""
    names = sorted(f.name if isinstance(f, Facility) else str(f) for f in (facilities or ()))
    systems = [SNF_SYSTEM_NAMES[n] for n in sorted(SNF_SYSTEM_NAMES)]

    columns = ["Facility Name", "Month", "Year"]
    columns += [f"System {n} Score" for n in range(1, len(systems) + 1)]
    columns.append("Total Score")

    sample: dict[str, Any] = {
        "facilityName": names[0] if names else "Example Facility",
        "month": 6,
        "year": 2024,
    }
    for n, score in enumerate(_SAMPLE_SCORES, start=1):
        sample[f"system{n}Score"] = score
    sample["totalScore"] = sum(_SAMPLE_SCORES)

    return TemplateData(columns=columns, system_names=systems, facilities=names, sample_row=sample)


def _instructions(data: TemplateData) -> list[list[str]]:
    lines = [
        "Historical Data Import Template",
        "",
        "Instructions:",
        "1. Enter one row per facility per month",
        "2. Facility Name must match exactly (see Facilities sheet for valid names)",
        "3. Month should be 1-12",
        "4. Year should be the 4-digit year (e.g., 2024)",
        "5. Each system score should be 0-100",
        "6. Total Score is optional (will be calculated if omitted)",
        "",
        "System Names:",
    ]
    lines += [f"System {i}: {name}" for i, name in enumerate(data.system_names, start=1)]
    return [[line] for line in lines]


def build_template_workbook(data: TemplateData) -> bytes:
    """Serialize ``data`` into xlsx bytes."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame([data.sample_values()], columns=data.columns).to_excel(
            writer, sheet_name=DATA_SHEET, index=False
        )
        pd.DataFrame(_instructions(data)).to_excel(
            writer, sheet_name=INSTRUCTIONS_SHEET, header=False, index=False
        )
        pd.DataFrame({"Valid Facility Names": data.facilities}).to_excel(
            writer, sheet_name=FACILITIES_SHEET, index=False
        )
    return buf.getvalue()
