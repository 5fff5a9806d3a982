from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..excel.format_detector import UnknownFormatError, require_format
from ..excel.reader import UnreadableFileError, read_workbook
from ..extract import get_extractor
from ..logging.error_log import ErrorLogBuffer
from ..models.batch_summary import BatchSummary
from ..models.error_record import ErrorRecord
from ..models.file_result import FileResult
from ..models.scorecard import ParsedScorecard, ParseOptions
from ..models.validation import Facility, ValidationOverrides, ValidationResult
from ..scoring.calculator import DEFAULT_MISMATCH_THRESHOLD, compute_scores
from .duplicates import assign_duplicate_groups
from .facility_matcher import DEFAULT_MATCH_THRESHOLD
from .progress import ImportProgress
from .validator import ScoreConsistencyWarning, validate

"""Import pipeline orchestration.

parse_scorecard() runs read -> detect -> extract -> score for one workbook.
parse_batch() maps it over many files: a failure is recorded in that file's
FileResult and never stops the others, so the result list always has one
entry per input. validate_batch() validates every entry and assigns duplicate
groups. process_directory() ties it together for a configured directory.
"""

__all__ = [
    "EXCEL_SUFFIXES",
    "ProcessingError",
    "parse_batch",
    "parse_scorecard",
    "process_directory",
    "scan_workbook_files",
    "validate_batch",
]

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = frozenset({".xlsx", ".xlsm"})


class ProcessingError(Exception):
    """Fatal directory-level error (missing or unreadable directory)."""


def parse_scorecard(
    data: bytes,
    filename: str = "",
    options: ParseOptions | None = None,
    *,
    mismatch_threshold: float = DEFAULT_MISMATCH_THRESHOLD,
) -> ParsedScorecard:
    """Parse and score one workbook.

    Args:
        data: Raw xlsx / xlsm bytes.
        filename: Original file name, used for traceability and as the
            last-resort source of month/year.
        options: Caller-supplied facility / month / year.

    Raises:
        UnreadableFileError: The bytes are not a spreadsheet.
        UnknownFormatError: No known scorecard layout matches.
    """
    options = options or ParseOptions()
    workbook = read_workbook(data)
    fmt = require_format(workbook.sheet_names, filename)
    logger.debug("file=%s format=%s", filename, fmt.value)
    parsed = get_extractor(fmt).extract(workbook, filename, options)
    return compute_scores(parsed, mismatch_threshold=mismatch_threshold)


def _error_type(exc: Exception) -> str:
    if isinstance(exc, UnreadableFileError):
        return "UNREADABLE_FILE"
    if isinstance(exc, UnknownFormatError):
        return "UNKNOWN_FORMAT"
    return "PROCESSING_ERROR"


def _parse_one(
    filename: str,
    data: bytes,
    options: ParseOptions | None,
    mismatch_threshold: float,
    error_log: ErrorLogBuffer | None,
) -> FileResult:
    try:
        parsed = parse_scorecard(data, filename, options, mismatch_threshold=mismatch_threshold)
    except Exception as e:
        error_type = _error_type(e)
        if error_type == "PROCESSING_ERROR":
            logger.exception("file=%s unexpected failure", filename)
        else:
            logger.warning("file=%s %s", filename, e)
        if error_log is not None:
            error_log.append(ErrorRecord.file_level(filename, error_type, str(e)))
        return FileResult.failure(filename, str(e), error_type)
    return FileResult.success(filename, parsed)


def parse_batch(
    files: Iterable[tuple[str, bytes]],
    options: ParseOptions | None = None,
    *,
    mismatch_threshold: float = DEFAULT_MISMATCH_THRESHOLD,
    error_log: ErrorLogBuffer | None = None,
) -> list[FileResult]:
    """Parse (filename, bytes) pairs in order; one FileResult per pair."""
    return [
        _parse_one(filename, data, options, mismatch_threshold, error_log)
        for filename, data in files
    ]


def _failed_validation(result: FileResult) -> ValidationResult:
    return ValidationResult(
        filename=result.filename,
        is_valid=False,
        errors=[result.error or "could not be parsed"],
    )


def validate_batch(
    results: Iterable[FileResult],
    overrides: Mapping[str, ValidationOverrides] | None = None,
    facilities: Iterable[Facility] | None = None,
    *,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    require_year: bool = False,
) -> list[ValidationResult]:
    """Validate every parsed file and assign batch duplicate groups.

    Files that failed to parse become invalid results carrying their error.
    A ScoreConsistencyWarning is emitted for every file with consistency flags.
    """
    overrides = overrides or {}
    directory = list(facilities) if facilities is not None else None

    validations: list[ValidationResult] = []
    for result in results:
        if not result.ok or result.scorecard is None:
            validations.append(_failed_validation(result))
            continue
        validations.append(
            validate(
                result.scorecard,
                overrides.get(result.filename),
                directory,
                threshold=threshold,
                require_year=require_year,
            )
        )

    validations = assign_duplicate_groups(validations)
    for v in validations:
        for flag in v.consistency_flags:
            warnings.warn(f"{v.filename}: {flag}", ScoreConsistencyWarning, stacklevel=2)
    return validations


def scan_workbook_files(directory: Path) -> list[Path]:
    """Workbooks directly inside ``directory`` (non-recursive), sorted by name.

    Office lock files (``~$name.xlsx``) are ignored.

    Raises:
        ProcessingError: The directory is missing or cannot be read.
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            (
                p for p in directory.iterdir()
                if p.is_file() and p.suffix.lower() in EXCEL_SUFFIXES and not p.name.startswith("~$")
            ),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def process_directory(config: ImportConfig, *, error_log: ErrorLogBuffer | None = None) -> BatchSummary:
    """Parse and validate every workbook in the configured directory.

    Per-file failures are buffered in the JSON Lines error log, which is
    flushed once at the end of the run.

    Raises:
        ProcessingError: The source directory is missing or unreadable.
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_paths = scan_workbook_files(Path(config.source_directory))
    options = ParseOptions(default_year=config.default_year)

    file_results: list[FileResult] = []
    with ImportProgress(len(file_paths)) as progress:
        for path in file_paths:
            progress.start(path.name)
            try:
                data = path.read_bytes()
            except OSError as e:
                logger.warning("file=%s cannot be read: %s", path.name, e)
                error_log.append(ErrorRecord.file_level(path.name, "UNREADABLE_FILE", str(e)))
                result = FileResult.failure(path.name, str(e), "UNREADABLE_FILE")
            else:
                result = _parse_one(path.name, data, options, config.mismatch_threshold, error_log)
            file_results.append(result)
            progress.record(result)

    overrides = {p.name: config.overrides_for(p.name) for p in file_paths}
    validations = validate_batch(
        file_results,
        overrides,
        config.facilities,
        threshold=config.facility_match_threshold,
        require_year=config.require_year,
    )
    for v in validations:
        if v.format is None:
            continue  # parse failure, already logged
        for message in v.errors:
            error_log.append(ErrorRecord.file_level(v.filename, "VALIDATION_ERROR", message))

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    valid = sum(1 for v in validations if v.is_valid)
    return BatchSummary(
        total_files=len(file_results),
        valid_files=valid,
        invalid_files=len(validations) - valid,
        error_files=sum(1 for r in file_results if not r.ok),
        duplicate_files=sum(1 for v in validations if v.duplicate_group is not None),
        needs_override_files=sum(
            1 for v in validations if v.needs_date_override or v.needs_facility_override
        ),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_results=file_results,
        validations=validations,
    )
