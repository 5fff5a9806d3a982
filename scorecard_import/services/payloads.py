from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models.scorecard import ParsedScorecard, ScorecardFormat
from ..models.validation import ValidationOverrides, ValidationResult
from .validator import MissingRequiredFieldError

"""Payloads for the scorecard backend import API.

Only the request and response bodies are built and read here; sending them is
the caller's job. Two import routes exist:

* summary import: JSON ``{"scorecards": [row, ...]}``, one row per file with
  per-section scores (SNF only; the summary table holds seven system
  scores of 0-100 each);
* item-level import: multipart upload of the workbooks plus the JSON maps
  ``dateOverrides`` and ``facilityOverrides`` keyed by filename.

Both respond with ``{success, failed, errors: [{filename, error}], batchId}``.
"""

__all__ = [
    "ImportFailure",
    "ImportResponse",
    "PayloadError",
    "build_override_maps",
    "build_summary_payload",
    "summary_row",
]


class PayloadError(Exception):
    """The selection cannot be imported as-is (unresolved duplicates, invalid or non-SNF files)."""


def summary_row(parsed: ParsedScorecard, validation: ValidationResult) -> dict[str, Any]:
    """One ``scorecards`` entry.

    Raises:
        MissingRequiredFieldError: facility, month or year is still unresolved.
    """
    facility = validation.matched_facility or validation.facility_name
    missing = [
        name for name, value in (
            ("facility", facility),
            ("month", validation.month),
            ("year", validation.year),
        )
        if value is None
    ]
    if missing:
        raise MissingRequiredFieldError(validation.filename, missing)

    row: dict[str, Any] = {
        "facilityName": facility,
        "month": validation.month,
        "year": validation.year,
    }
    if validation.matched_facility_id is not None:
        row["facilityId"] = validation.matched_facility_id
    for section in parsed.sections:
        row[f"system{section.number}Score"] = section.points_earned
    row["totalScore"] = parsed.total_score
    return row


def _check_duplicates(validations: list[ValidationResult]) -> None:
    seen: dict[str, str] = {}
    for v in validations:
        if v.duplicate_group is None:
            continue
        if v.duplicate_group in seen:
            raise PayloadError(
                f"{v.filename} and {seen[v.duplicate_group]} are duplicates "
                f"({v.duplicate_group}); keep exactly one"
            )
        seen[v.duplicate_group] = v.filename


def build_summary_payload(
    selected: Iterable[tuple[ParsedScorecard, ValidationResult]],
) -> dict[str, list[dict[str, Any]]]:
    """Build the summary-import body from (scorecard, validation) pairs.

    Raises:
        PayloadError: an invalid or non-SNF file is included, or two
            members of one duplicate group are.
        MissingRequiredFieldError: a file still lacks facility or period.
    """
    pairs = list(selected)
    invalid = [v.filename for _, v in pairs if not v.is_valid]
    if invalid:
        raise PayloadError(f"invalid files cannot be imported: {', '.join(invalid)}")
    not_snf = [v.filename for p, v in pairs if p.format != ScorecardFormat.SNF]
    if not_snf:
        raise PayloadError(f"summary import accepts SNF scorecards only: {', '.join(not_snf)}")
    _check_duplicates([v for _, v in pairs])
    return {"scorecards": [summary_row(p, v) for p, v in pairs]}


def build_override_maps(overrides: Mapping[str, ValidationOverrides]) -> dict[str, dict[str, dict[str, Any]]]:
    """Split per-file overrides into the two JSON maps of the item-level import."""
    date_overrides: dict[str, dict[str, Any]] = {}
    facility_overrides: dict[str, dict[str, Any]] = {}
    for filename, o in overrides.items():
        period = {k: v for k, v in (("month", o.month), ("year", o.year)) if v is not None}
        if period:
            date_overrides[filename] = period
        if o.has_facility:
            facility = {"id": o.facility_id}
            if o.facility_name:
                facility["name"] = o.facility_name
            facility_overrides[filename] = facility
    return {"dateOverrides": date_overrides, "facilityOverrides": facility_overrides}


@dataclass(frozen=True)
class ImportFailure:
    filename: str | None
    error: str


@dataclass(frozen=True)
class ImportResponse:
    success: int
    failed: int
    errors: list[ImportFailure] = field(default_factory=list)
    batch_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> ImportResponse:
        """Read a backend response body.

        Error entries from the summary route carry ``row`` instead of
        ``filename``; those are kept with filename None.
        """
        errors = [
            ImportFailure(filename=e.get("filename"), error=str(e.get("error", "")))
            for e in data.get("errors") or []
        ]
        return ImportResponse(
            success=int(data.get("success", 0)),
            failed=int(data.get("failed", 0)),
            errors=errors,
            batch_id=data.get("batchId"),
        )
