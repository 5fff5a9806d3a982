"""Domain models for the scorecard import pipeline.

Workbook/Sheet hold raw spreadsheet cells, ParsedScorecard and friends hold the
extracted audit data, and ValidationResult/FileResult describe per-file
outcomes of a batch.
"""

from .batch_summary import BatchSummary
from .error_record import ErrorRecord
from .file_result import FileResult, FileStatus
from .scorecard import (
    AuditItem,
    CategoryScore,
    CoverSheetSummary,
    ParsedScorecard,
    ParseOptions,
    ItemScoreMismatch,
    ScoreMismatch,
    ScorecardFormat,
    SectionResult,
)
from .validation import Facility, FacilityMatch, ValidationOverrides, ValidationResult
from .workbook import Sheet, Workbook

__all__ = [
    # Workbook
    "Sheet",
    "Workbook",
    # Scorecard
    "AuditItem",
    "CategoryScore",
    "CoverSheetSummary",
    "ParsedScorecard",
    "ParseOptions",
    "ItemScoreMismatch",
    "ScoreMismatch",
    "ScorecardFormat",
    "SectionResult",
    # Validation / batch
    "BatchSummary",
    "ErrorRecord",
    "Facility",
    "FacilityMatch",
    "FileResult",
    "FileStatus",
    "ValidationOverrides",
    "ValidationResult",
]
