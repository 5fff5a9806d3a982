from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .file_result import FileResult
from .validation import ValidationResult

"""Aggregated outcome of one directory import run."""


@dataclass(frozen=True)
class BatchSummary:
    """Counts for the SUMMARY line plus the per-file details behind them."""
    total_files: int
    valid_files: int
    invalid_files: int
    error_files: int  # could not be parsed at all
    duplicate_files: int  # members of a duplicate group
    needs_override_files: int  # date or facility override requested
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_results: list[FileResult] = field(default_factory=list)
    validations: list[ValidationResult] = field(default_factory=list)

    @property
    def all_valid(self) -> bool:
        return self.invalid_files == 0
