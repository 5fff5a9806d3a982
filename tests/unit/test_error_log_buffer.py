from __future__ import annotations
import json
from pathlib import Path
from scorecard_import.logging.error_log import ErrorLogBuffer, ErrorRecord
from scorecard_import.models.error_record import FILE_LEVEL_SHEET

KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="file.xlsx",
        sheet="3. Skin",
        row=10,
        error_type="VALIDATION_ERROR",
        message="charts met exceeds sample size",
    )
    data = json.loads(rec.to_json_line())
    assert data["file"] == "file.xlsx"
    assert data["sheet"] == "3. Skin"
    assert data["row"] == 10
    assert data["error_type"] == "VALIDATION_ERROR"
    assert data["timestamp"].endswith("Z")
    assert set(data.keys()) == KEYS


def test_file_level_record():
    rec = ErrorRecord.file_level("broken.xlsx", "UNREADABLE_FILE", "not a spreadsheet")
    assert (rec.sheet, rec.row) == (FILE_LEVEL_SHEET, -1)


def test_non_ascii_is_kept():
    rec = ErrorRecord.create("Résidence.xlsx", "S", 1, "PROCESSING_ERROR", "é")
    assert "Résidence.xlsx" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.file_level("f1.xlsx", "UNREADABLE_FILE", "corrupt"))
    buf.append(ErrorRecord.file_level("f2.xlsx", "UNKNOWN_FORMAT", "unrecognized layout"))
    assert len(buf.records) == 2
    path = buf.flush()
    assert path.exists()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.file_level("f.xlsx", "UNREADABLE_FILE", "corrupt"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.file_level("g.xlsx", "UNREADABLE_FILE", "corrupt"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_empty_flush_creates_no_file(temp_workdir: Path):
    buf = ErrorLogBuffer(temp_workdir / "custom-logs")
    assert buf.flush() is None
    assert not (temp_workdir / "custom-logs").exists()
