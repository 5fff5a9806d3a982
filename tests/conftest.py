# Shared pytest fixtures and workbook builders
from __future__ import annotations

import io
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from scorecard_import.logging.init import reset_logging

SNF_SYSTEM_SHEETS = [
    "1. Change of Condition",
    "2. Accidents, Falls, Incidents",
    "3. Skin",
    "4. Med Management",
    "5. Infection Control",
    "6. Transfer-Discharge",
    "7. Abuse & Grievance",
]

ITEM_HEADER = ["Category", "Max Points", "Charts Met", "Sample Size", "Points", "Notes"]

KEV_MINI_CATEGORY_SHEETS = [
    "Abuse & Griev",
    "Accidents & Incidents",
    "Inf Prev & Cont",
    "Skin Integrity & Wounds",
]

KEV_CATEGORY_NAMES = [
    "Abuse & Grievances",
    "Accidents & Incidents",
    "Infection Prevention & Control",
    "Skin Integrity & Wounds",
]


def build_workbook(sheets: dict[str, list[list[object]]]) -> bytes:
    """Write {sheet name: rows} into xlsx bytes, no header row, no index."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet_name, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return buf.getvalue()


def snf_sheets(
    facility: str | None = "Sunrise Manor",
    month: object = "March",
    year: object = 2024,
    item_rows: list[list[object]] | None = None,
) -> dict[str, list[list[object]]]:
    """Minimal SNF workbook: overview plus seven system sheets with the same items."""
    overview: list[list[object]] = [["Clinical Systems Overview", None]]
    if facility is not None:
        overview.append(["Facility Name", facility])
    sheets = {"Clinical Systems Overview": overview}
    rows = item_rows if item_rows is not None else [["X", 100, 8, 10, None, None]]
    for name in SNF_SYSTEM_SHEETS:
        sheets[name] = [
            ["Month", month],
            ["Year", year],
            ITEM_HEADER,
            *rows,
        ]
    return sheets


def kev_mini_sheets(
    facility: str = "Harbor View",
    review_period: str = "October 2024",
    category_pct: float = 0.70,
    overall: float | None = 0.80,
) -> dict[str, list[list[object]]]:
    """KEV Mini workbook whose cover declares every category at ``category_pct``."""
    possible = [150, 200, 200, 200]
    cover: list[list[object]] = [
        ["Facility Name", facility, None, None],
        ["Review Period", review_period, None, None],
        ["Date of Completion", "2024-11-05", None, None],
        ["Audit Completed By", "J. Smith", None, None],
        [None, None, None, None],
        ["Quality Area", "Total Possible Score", "Total Met Score", "Score"],
    ]
    for name, p in zip(KEV_CATEGORY_NAMES, possible):
        cover.append([name, p, round(p * category_pct), category_pct])
    cover.append(["Total Quality Review Score", 750, 600, 0.80])
    if overall is not None:
        cover.append(["Overall Score", overall, None, None])

    sheets = {"KEV Score Cards Cover Sheet": cover}
    for name in KEV_MINI_CATEGORY_SHEETS:
        sheets[name] = [
            [name, None, None, None, None],
            ["Criteria Category", "Max Score", "Res 1", "Res 2", "Res 3"],
            ["1) Policy reviewed with staff", 30, 4, 3, 4],
            ["2) Log complete", 20, 4, 4, 4],
        ]
    return sheets


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    monkeypatch.delenv("SCORECARD_IMPORT_CONFIG", raising=False)
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
default_year: 2024
facilities:
  - {id: 1, name: Sunrise Manor Care Center}
  - {id: 2, name: Harbor View Health and Rehabilitation}
  - {id: 3, name: Mt. Ascension Transitional Care}
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "scorecard_import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def snf_bytes() -> bytes:
    return build_workbook(snf_sheets())


@pytest.fixture()
def kev_mini_bytes() -> bytes:
    return build_workbook(kev_mini_sheets())
