from __future__ import annotations

import logging
from collections.abc import Iterable

from ..extract.patterns import (
    ITEM_COUNT_TOLERANCE,
    KEV_SECTION_COUNT,
    SNF_DEFAULT_EXPECTED_ITEMS,
    SNF_EXPECTED_ITEM_COUNTS,
    SNF_SECTION_COUNT,
)
from ..models.scorecard import ParsedScorecard, ScorecardFormat
from ..models.validation import Facility, ValidationOverrides, ValidationResult
from .facility_matcher import DEFAULT_MATCH_THRESHOLD, match_facility

"""Per-file validation.

validate() is a pure function of the parsed scorecard, the reviewer's
overrides and the facility directory. Errors block the import, warnings do
not. Missing facility or period is reported through needs_*_override so the
caller can prompt for a value and validate again.
"""

__all__ = [
    "MissingRequiredFieldError",
    "ScoreConsistencyWarning",
    "expected_section_count",
    "validate",
]

logger = logging.getLogger(__name__)


class MissingRequiredFieldError(Exception):
    """Raised when a record still lacking facility or month is turned into an import record."""

    def __init__(self, filename: str, fields: list[str]):
        super().__init__(f"{filename}: missing required field(s): {', '.join(fields)}")
        self.filename = filename
        self.fields = fields


class ScoreConsistencyWarning(UserWarning):
    """Item or total scores that do not add up; importable after human review."""


def expected_section_count(fmt: ScorecardFormat) -> int | None:
    if fmt == ScorecardFormat.SNF:
        return SNF_SECTION_COUNT
    if fmt.is_kev:
        return KEV_SECTION_COUNT
    return None


def _check_facility(
    parsed: ParsedScorecard,
    overrides: ValidationOverrides,
    facilities: list[Facility] | None,
    threshold: float,
    errors: list[str],
) -> dict:
    name = overrides.facility_name or parsed.facility_name
    if overrides.has_facility:
        return {
            "matched_facility": overrides.facility_name or name,
            "matched_facility_id": overrides.facility_id,
            "match_score": 1.0,
            "needs_facility_override": False,
        }
    if not name:
        errors.append("Missing facility name")
        return {"needs_facility_override": True}
    if facilities is None:
        return {"needs_facility_override": False}

    match = match_facility(name, facilities, threshold)
    if not match.matched:
        errors.append(f"Facility '{name}' not found in facility directory (best score {match.score:.2f})")
        return {"match_score": match.score, "needs_facility_override": True}
    return {
        "matched_facility": match.facility.name,
        "matched_facility_id": match.facility.id,
        "match_score": match.score,
        "needs_facility_override": False,
    }


def _check_sections(parsed: ParsedScorecard, warnings: list[str]) -> None:
    expected = expected_section_count(parsed.format)
    if expected is not None and len(parsed.sections) < expected:
        kind = "systems" if parsed.format == ScorecardFormat.SNF else "categories"
        warnings.append(f"Only {len(parsed.sections)} of {expected} {kind} found")

    for section in parsed.sections:
        if parsed.format == ScorecardFormat.SNF:
            want = SNF_EXPECTED_ITEM_COUNTS.get(section.number, SNF_DEFAULT_EXPECTED_ITEMS)
            if abs(len(section.items) - want) > ITEM_COUNT_TOLERANCE:
                warnings.append(
                    f"System {section.number} ({section.name}): found {len(section.items)} items, expected ~{want}"
                )
        elif parsed.format.is_kev and not section.items:
            warnings.append(f"Category '{section.name}' has no scored items")


def validate(
    parsed: ParsedScorecard,
    overrides: ValidationOverrides | None = None,
    facilities: Iterable[Facility] | None = None,
    *,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    require_year: bool = False,
) -> ValidationResult:
    """Validate one parsed scorecard.

    Args:
        parsed: Scored result of the extraction step.
        overrides: Reviewer-supplied facility / month / year.
        facilities: Facility directory; None skips facility matching.
        threshold: Minimum facility match score.
        require_year: Report a missing year as an error instead of a warning.

    Returns:
        A new ValidationResult; duplicate_group is assigned later at batch level.
    """
    overrides = overrides or ValidationOverrides()
    directory = list(facilities) if facilities is not None else None
    errors: list[str] = []
    warnings: list[str] = []
    flags: list[str] = []

    if parsed.format == ScorecardFormat.UNKNOWN:
        errors.append("Unknown scorecard format")

    facility = _check_facility(parsed, overrides, directory, threshold, errors)

    month = overrides.month if overrides.month is not None else parsed.month
    year = overrides.year if overrides.year is not None else parsed.year
    needs_date = False
    if month is None:
        errors.append("Could not determine month")
        needs_date = True
    elif not 1 <= month <= 12:
        errors.append(f"Invalid month: {month}")
        needs_date = True
    if year is None:
        needs_date = True
        if require_year:
            errors.append("Could not determine year")
        else:
            warnings.append("Could not determine year")

    _check_sections(parsed, warnings)

    for section, item in parsed.iter_items():
        if item.exceeds_sample:
            message = (
                f"{section.name} item {item.item_number}: charts met ({item.charts_met}) "
                f"exceeds sample size ({item.sample_size})"
            )
            errors.append(message)
            flags.append(message)

    if parsed.score_mismatch is not None:
        m = parsed.score_mismatch
        message = (
            f"Declared overall score {m.overall}% differs from category average "
            f"{m.category_avg}% by {m.difference} points"
        )
        warnings.append(message)
        flags.append(message)

    if parsed.item_mismatch is not None:
        m = parsed.item_mismatch
        message = (
            f"Declared score {m.declared}% differs from item-level score "
            f"{m.computed}% by {m.difference} points"
        )
        warnings.append(message)
        flags.append(message)

    logger.debug("file=%s errors=%d warnings=%d", parsed.source_filename, len(errors), len(warnings))
    return ValidationResult(
        filename=parsed.source_filename,
        is_valid=not errors,
        errors=errors,
        warnings=warnings,
        needs_date_override=needs_date,
        facility_name=overrides.facility_name or parsed.facility_name,
        month=month,
        year=year,
        format=parsed.format,
        consistency_flags=flags,
        **facility,
    )
