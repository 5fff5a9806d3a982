from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Scorecard domain models.

A ParsedScorecard is the result of extracting one workbook. Sections are the
seven clinical systems of an SNF audit or the four quality categories of a KEV
scorecard. Everything here is a frozen value object; the calculator returns
new instances instead of mutating.
"""

__all__ = [
    "ScorecardFormat",
    "AuditItem",
    "SectionResult",
    "CategoryScore",
    "CoverSheetSummary",
    "ScoreMismatch",
    "ItemScoreMismatch",
    "ParsedScorecard",
    "ParseOptions",
]


class ScorecardFormat(Enum):
    """Workbook layouts understood by the importer."""
    SNF = "snf"
    KEV_MINI = "kev-mini"
    KEV_HYBRID = "kev-hybrid"
    UNKNOWN = "unknown"

    @property
    def is_kev(self) -> bool:
        return self in (ScorecardFormat.KEV_MINI, ScorecardFormat.KEV_HYBRID)


@dataclass(frozen=True)
class AuditItem:
    """One scored criterion.

    charts_met / sample_size are None when the row was left unscored
    (blank or "N/A"). points_earned is filled in by the calculator.
    """
    item_number: str  # "3", "2a"
    criteria_text: str
    max_points: float
    charts_met: int | None = None
    sample_size: int | None = None
    notes: str = ""
    is_binary: bool = False
    points_earned: float = 0.0

    @property
    def exceeds_sample(self) -> bool:
        return (
            self.charts_met is not None
            and self.sample_size is not None
            and self.charts_met > self.sample_size
        )


@dataclass(frozen=True)
class SectionResult:
    """A clinical system (SNF) or quality category (KEV)."""
    number: int
    name: str
    items: tuple[AuditItem, ...] = ()
    points_earned: float = 0.0
    max_points: float = 0.0
    computed_points: float = 0.0  # bottom-up sum of item points
    declared_points: float | None = None  # cover sheet "met"
    declared_max_points: float | None = None  # cover sheet "possible"
    declared_percentage: float | None = None  # cover sheet "%", whole percent

    @property
    def percentage(self) -> float:
        if self.declared_percentage is not None:
            return self.declared_percentage
        if not self.max_points:
            return 0.0
        return self.points_earned / self.max_points * 100


@dataclass(frozen=True)
class CategoryScore:
    """Declared score for one row of the KEV cover sheet quality table."""
    category: str
    possible: float
    met: float | None = None
    percentage: float | None = None


@dataclass(frozen=True)
class CoverSheetSummary:
    """Values read from a KEV cover sheet, kept apart from item-level data."""
    facility_name: str | None = None
    review_period: str | None = None
    date_of_completion: str | None = None
    audit_completed_by: str | None = None
    categories: tuple[CategoryScore, ...] = ()
    total: CategoryScore | None = None
    overall_score: float | None = None

    def category(self, name: str) -> CategoryScore | None:
        for c in self.categories:
            if c.category == name:
                return c
        return None

    @property
    def declared_overall(self) -> float | None:
        """Overall percentage as declared, in priority order."""
        if self.overall_score is not None:
            return self.overall_score
        if self.total is not None:
            if self.total.percentage is not None:
                return self.total.percentage
            if self.total.met is not None and self.total.possible:
                return self.total.met / self.total.possible * 100
        return None


@dataclass(frozen=True)
class ScoreMismatch:
    """Declared overall percentage vs. the average of category percentages."""
    overall: float
    category_avg: float
    difference: float

    def to_dict(self) -> dict[str, float]:
        return {
            "overall": self.overall,
            "categoryAvg": self.category_avg,
            "difference": self.difference,
        }


@dataclass(frozen=True)
class ItemScoreMismatch:
    """Declared cover-sheet percentage vs. the percentage of the item rows."""
    declared: float
    computed: float
    difference: float

    def to_dict(self) -> dict[str, float]:
        return {
            "declared": self.declared,
            "computed": self.computed,
            "difference": self.difference,
        }


@dataclass(frozen=True)
class ParseOptions:
    """Caller-supplied values used before on-sheet extraction.

    facility_name / month / year take precedence over what the workbook says.
    default_year is only used when no year can be found anywhere.
    """
    facility_name: str | None = None
    month: int | None = None
    year: int | None = None
    default_year: int | None = None


@dataclass(frozen=True)
class ParsedScorecard:
    format: ScorecardFormat
    source_filename: str
    facility_name: str | None = None
    month: int | None = None
    year: int | None = None
    sections: tuple[SectionResult, ...] = ()
    total_score: float = 0.0
    total_max_points: float = 0.0
    score_percentage: float = 0.0
    score_mismatch: ScoreMismatch | None = None
    item_mismatch: ItemScoreMismatch | None = None  # set only when declared values were used
    total_source: str = "computed"  # computed | declared
    date_source: str | None = None  # options | sheet | review_period | filename | default
    cover: CoverSheetSummary | None = None
    sheet_names: tuple[str, ...] = field(default_factory=tuple)

    def iter_items(self):
        """Yield (section, item) pairs in sheet order."""
        for section in self.sections:
            for item in section.items:
                yield section, item
