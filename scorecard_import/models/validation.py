from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .scorecard import ScorecardFormat

"""Validation domain models.

ValidationResult is created fresh for every validation pass. Because the
validator is a pure function of (ParsedScorecard, overrides, facilities),
callers re-run it with new overrides instead of re-reading the workbook.
"""

__all__ = [
    "Facility",
    "FacilityMatch",
    "ValidationOverrides",
    "ValidationResult",
]


@dataclass(frozen=True)
class Facility:
    """One entry of the caller-supplied facility directory."""
    id: Any
    name: str


@dataclass(frozen=True)
class FacilityMatch:
    facility: Facility | None
    score: float  # 0..1

    @property
    def matched(self) -> bool:
        return self.facility is not None


@dataclass(frozen=True)
class ValidationOverrides:
    """Manual corrections a reviewer supplies for one file."""
    facility_id: Any = None
    facility_name: str | None = None
    month: int | None = None
    year: int | None = None

    @property
    def has_facility(self) -> bool:
        return self.facility_id is not None

    @staticmethod
    def from_dict(data: dict[str, Any] | None) -> ValidationOverrides:
        """Build from the JSON shape used by the import API.

        Accepts {"month": 10, "year": 2025} and/or {"id": 7, "name": "..."}.
        """
        if not data:
            return ValidationOverrides()
        return ValidationOverrides(
            facility_id=data.get("id", data.get("facility_id")),
            facility_name=data.get("name", data.get("facility_name")),
            month=data.get("month"),
            year=data.get("year"),
        )


@dataclass(frozen=True)
class ValidationResult:
    filename: str
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    needs_date_override: bool = False
    needs_facility_override: bool = False
    duplicate_group: str | None = None
    matched_facility: str | None = None
    matched_facility_id: Any = None
    match_score: float | None = None
    facility_name: str | None = None  # as extracted from the file
    month: int | None = None  # after overrides
    year: int | None = None  # after overrides
    format: ScorecardFormat | None = None
    consistency_flags: list[str] = field(default_factory=list)

    @property
    def facility_key(self) -> Any:
        """Key used for batch duplicate grouping.

        The resolved directory id when there is one; otherwise the
        normalized extracted name so batches validated without a directory
        still group.
        """
        if self.matched_facility_id is not None:
            return ("id", self.matched_facility_id)
        if self.facility_name:
            return ("name", " ".join(self.facility_name.lower().split()))
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "needsDateOverride": self.needs_date_override,
            "needsFacilityOverride": self.needs_facility_override,
            "duplicateGroup": self.duplicate_group,
            "matchedFacility": self.matched_facility,
            "matchScore": self.match_score,
        }
