"""Clinical-audit scorecard import.

Reads SNF and KEV scorecard workbooks, extracts facility, period and
item-level audit data, computes point scores, reconciles them with declared
cover-sheet totals and validates whole import batches.

Typical use::

    from scorecard_import import parse_batch, validate_batch

    results = parse_batch([(path.name, path.read_bytes()) for path in paths])
    report = validate_batch(results, facilities=directory)
"""

from .config.loader import ConfigError
from .excel.format_detector import UnknownFormatError, detect_format
from .excel.reader import UnreadableFileError, read_workbook
from .models import (
    AuditItem,
    Facility,
    FileResult,
    FileStatus,
    ItemScoreMismatch,
    ParsedScorecard,
    ParseOptions,
    ScorecardFormat,
    ScoreMismatch,
    SectionResult,
    ValidationOverrides,
    ValidationResult,
)
from .scoring.calculator import compute_scores, item_points
from .services.duplicates import assign_duplicate_groups
from .services.facility_matcher import match_facility
from .services.orchestrator import (
    ProcessingError,
    parse_batch,
    parse_scorecard,
    process_directory,
    validate_batch,
)
from .services.payloads import PayloadError
from .services.validator import MissingRequiredFieldError, ScoreConsistencyWarning, validate
from .writer.template import build_template_workbook, default_template_data

__version__ = "0.1.0"

__all__ = [
    # Models
    "AuditItem",
    "Facility",
    "FileResult",
    "FileStatus",
    "ItemScoreMismatch",
    "ParsedScorecard",
    "ParseOptions",
    "ScorecardFormat",
    "ScoreMismatch",
    "SectionResult",
    "ValidationOverrides",
    "ValidationResult",
    # Pipeline
    "assign_duplicate_groups",
    "build_template_workbook",
    "compute_scores",
    "default_template_data",
    "detect_format",
    "item_points",
    "match_facility",
    "parse_batch",
    "parse_scorecard",
    "process_directory",
    "read_workbook",
    "validate",
    "validate_batch",
    # Errors
    "ConfigError",
    "MissingRequiredFieldError",
    "PayloadError",
    "ProcessingError",
    "ScoreConsistencyWarning",
    "UnknownFormatError",
    "UnreadableFileError",
]
