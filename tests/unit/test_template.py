from __future__ import annotations

import io

import pandas as pd

from scorecard_import.excel.reader import read_workbook
from scorecard_import.models.validation import Facility
from scorecard_import.writer.template import (
    DATA_SHEET,
    FACILITIES_SHEET,
    INSTRUCTIONS_SHEET,
    build_template_workbook,
    default_template_data,
)


def test_default_template_data():
    data = default_template_data([Facility(2, "Harbor View"), Facility(1, "Aspen Court"), "Birch Lane"])
    assert data.columns == [
        "Facility Name", "Month", "Year",
        "System 1 Score", "System 2 Score", "System 3 Score", "System 4 Score",
        "System 5 Score", "System 6 Score", "System 7 Score",
        "Total Score",
    ]
    assert data.facilities == ["Aspen Court", "Birch Lane", "Harbor View"]
    assert data.system_names[0] == "Change of Condition"
    assert len(data.system_names) == 7
    assert data.sample_row["facilityName"] == "Aspen Court"
    assert data.sample_row["totalScore"] == 637
    assert len(data.sample_values()) == len(data.columns)


def test_template_without_facilities_uses_placeholder():
    data = default_template_data()
    assert data.facilities == []
    assert data.sample_row["facilityName"] == "Example Facility"


def test_build_template_workbook_sheets():
    content = build_template_workbook(default_template_data([Facility(1, "Aspen Court")]))
    frames = pd.read_excel(io.BytesIO(content), sheet_name=None, engine="openpyxl")
    assert list(frames) == [DATA_SHEET, INSTRUCTIONS_SHEET, FACILITIES_SHEET]

    data = frames[DATA_SHEET]
    assert list(data.columns)[:3] == ["Facility Name", "Month", "Year"]
    assert data.iloc[0]["Facility Name"] == "Aspen Court"
    assert data.iloc[0]["Total Score"] == 637

    assert frames[FACILITIES_SHEET]["Valid Facility Names"].tolist() == ["Aspen Court"]


def test_template_instructions_list_systems():
    workbook = read_workbook(build_template_workbook(default_template_data()))
    sheet = workbook.get(INSTRUCTIONS_SHEET)
    lines = [sheet.cell(r, 0) for r in range(sheet.row_count)]
    assert lines[0] == "Historical Data Import Template"
    assert "System 7: Abuse/Self Report/Grievance Review" in lines
