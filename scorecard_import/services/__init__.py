from .duplicates import assign_duplicate_groups
from .facility_matcher import match_facility
from .orchestrator import (
    ProcessingError,
    parse_batch,
    parse_scorecard,
    process_directory,
    validate_batch,
)
from .payloads import ImportResponse, PayloadError, build_override_maps, build_summary_payload
from .validator import MissingRequiredFieldError, ScoreConsistencyWarning, validate

__all__ = [
    "ImportResponse",
    "MissingRequiredFieldError",
    "PayloadError",
    "ProcessingError",
    "ScoreConsistencyWarning",
    "assign_duplicate_groups",
    "build_override_maps",
    "build_summary_payload",
    "match_facility",
    "parse_batch",
    "parse_scorecard",
    "process_directory",
    "validate",
    "validate_batch",
]
