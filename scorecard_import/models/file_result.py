from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .scorecard import ParsedScorecard

"""Per-file batch entry and its status enum.

A batch is a map over its input files: every file gets exactly one FileResult,
either carrying the parsed scorecard or the error that stopped it.
"""

__all__ = [
    "FileStatus",
    "FileResult",
]


class FileStatus(Enum):
    """Outcome of parsing one file.

    - SUCCESS: workbook read, format detected, scorecard extracted
    - ERROR: unreadable bytes, unknown format or any other failure
    """
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FileResult:
    filename: str
    status: FileStatus
    scorecard: ParsedScorecard | None = None
    error: str | None = None
    error_type: str | None = None  # UPPER_SNAKE, mirrors ErrorRecord.error_type

    @property
    def ok(self) -> bool:
        return self.status == FileStatus.SUCCESS

    @staticmethod
    def success(filename: str, scorecard: ParsedScorecard) -> FileResult:
        return FileResult(filename=filename, status=FileStatus.SUCCESS, scorecard=scorecard)

    @staticmethod
    def failure(filename: str, error: str, error_type: str = "PROCESSING_ERROR") -> FileResult:
        return FileResult(
            filename=filename,
            status=FileStatus.ERROR,
            error=error,
            error_type=error_type,
        )
