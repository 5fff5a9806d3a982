from __future__ import annotations

import json
import re
from pathlib import Path

from scorecard_import.cli.__main__ import main as cli_main

REQUIRED_KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}
ERROR_TYPES = {"UNREADABLE_FILE", "UNKNOWN_FORMAT", "PROCESSING_ERROR", "VALIDATION_ERROR"}
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def test_error_log_lines_follow_schema(write_config, temp_workdir: Path, capsys):
    data = temp_workdir / "data"
    (data / "broken.xlsx").write_bytes(b"\x00\x01")
    (data / "empty.xlsm").write_bytes(b"")

    assert cli_main([]) == 2
    out = capsys.readouterr().out

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", logs[0].name)
    assert f"INFO error log written: {Path('logs') / logs[0].name}" in out

    lines = logs[0].read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for raw in lines:
        obj = json.loads(raw)
        assert set(obj) == REQUIRED_KEYS
        assert TIMESTAMP_RE.match(obj["timestamp"])
        assert obj["error_type"] in ERROR_TYPES
        assert obj["sheet"] == "<FILE_LEVEL>"
        assert obj["row"] == -1
        assert isinstance(obj["message"], str) and obj["message"]
