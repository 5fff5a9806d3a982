from __future__ import annotations

import logging
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal

from ..extract.patterns import (
    KEV_HYBRID_NOMINAL_MAX_POINTS,
    KEV_MINI_NOMINAL_MAX_POINTS,
    SNF_NOMINAL_MAX_POINTS,
)
from ..models.scorecard import (
    AuditItem,
    ItemScoreMismatch,
    ParsedScorecard,
    ScoreMismatch,
    ScorecardFormat,
    SectionResult,
)

"""Score calculation.

Item points use a single formula everywhere (see item_points). Values are
rounded half-up to one decimal at the reporting boundaries only: each item's
points_earned, each section's points and the scorecard total. Section points
are summed from unrounded item points.

KEV cover sheets may declare category and total scores. Declared values win
over the bottom-up sums (the computed value is kept in
SectionResult.computed_points), and a ScoreMismatch is attached when the
declared overall percentage and the category average disagree by more than
the threshold. Whenever a declared value is used, the declared percentage is
also compared with the one the item rows give, and an ItemScoreMismatch is
attached when they disagree by more than the same threshold.
"""

__all__ = [
    "DEFAULT_MISMATCH_THRESHOLD",
    "NOMINAL_MAX_POINTS",
    "compute_scores",
    "detect_item_mismatch",
    "detect_mismatch",
    "item_points",
    "round_half_up",
    "score_item",
    "score_section",
]

logger = logging.getLogger(__name__)

DEFAULT_MISMATCH_THRESHOLD = 2.0

NOMINAL_MAX_POINTS = {
    ScorecardFormat.SNF: SNF_NOMINAL_MAX_POINTS,
    ScorecardFormat.KEV_MINI: KEV_MINI_NOMINAL_MAX_POINTS,
    ScorecardFormat.KEV_HYBRID: KEV_HYBRID_NOMINAL_MAX_POINTS,
}


def round_half_up(value: float, places: int = 1) -> float:
    """Round like a spreadsheet does (2.25 -> 2.3), not banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def item_points(max_points: float, charts_met: int | None, sample_size: int | None) -> float:
    """Unrounded points for one item.

    max / sample * met, clamped to [0, max]. Zero when the item is unscored
    or the sample is empty.
    """
    if charts_met is None or not sample_size or sample_size <= 0:
        return 0.0
    points = max_points / sample_size * charts_met
    return min(max(points, 0.0), max_points)


def score_item(item: AuditItem) -> AuditItem:
    return replace(
        item,
        points_earned=round_half_up(item_points(item.max_points, item.charts_met, item.sample_size)),
    )


def _uses_declared(section: SectionResult) -> bool:
    # A declared "met" of 0 means the category was left blank on the cover.
    return section.declared_points is not None and section.declared_points > 0


def score_section(section: SectionResult) -> SectionResult:
    """Score items and fold in any declared cover-sheet values."""
    items = tuple(score_item(i) for i in section.items)
    computed = round_half_up(
        sum(item_points(i.max_points, i.charts_met, i.sample_size) for i in section.items)
    )
    item_max = sum(i.max_points for i in section.items)

    points, max_points = computed, item_max
    if _uses_declared(section):
        points = round_half_up(section.declared_points)
        max_points = section.declared_max_points or item_max

    return replace(
        section,
        items=items,
        computed_points=computed,
        points_earned=points,
        max_points=max_points,
    )


def detect_mismatch(
    overall: float | None,
    sections: tuple[SectionResult, ...],
    threshold: float = DEFAULT_MISMATCH_THRESHOLD,
) -> ScoreMismatch | None:
    """Compare a declared overall percentage against the category average."""
    if overall is None or not sections:
        return None
    category_avg = sum(s.percentage for s in sections) / len(sections)
    difference = abs(overall - category_avg)
    if difference <= threshold:
        return None
    return ScoreMismatch(
        overall=round_half_up(overall),
        category_avg=round_half_up(category_avg),
        difference=round_half_up(difference),
    )


def detect_item_mismatch(
    declared_percentage: float,
    sections: tuple[SectionResult, ...],
    threshold: float = DEFAULT_MISMATCH_THRESHOLD,
) -> ItemScoreMismatch | None:
    """Compare a declared percentage against the scored item rows.

    Sections without items are left out; None when no section has items.
    """
    item_max = sum(i.max_points for s in sections for i in s.items)
    if not item_max:
        return None
    computed = sum(s.computed_points for s in sections if s.items) / item_max * 100
    difference = abs(declared_percentage - computed)
    if difference <= threshold:
        return None
    return ItemScoreMismatch(
        declared=round_half_up(declared_percentage),
        computed=round_half_up(computed),
        difference=round_half_up(difference),
    )


def compute_scores(
    parsed: ParsedScorecard,
    *,
    mismatch_threshold: float = DEFAULT_MISMATCH_THRESHOLD,
) -> ParsedScorecard:
    """Return a copy of ``parsed`` with every derived score filled in.

    Pure: the input is not modified and calling it on its own output gives
    the same result.
    """
    sections = tuple(score_section(s) for s in parsed.sections)

    total_score = round_half_up(sum(s.points_earned for s in sections))
    total_max = sum(s.max_points for s in sections) or NOMINAL_MAX_POINTS.get(parsed.format, 0.0)
    total_source = "computed"

    cover = parsed.cover
    declared_total = cover.total if cover is not None else None
    if declared_total is not None and declared_total.met is not None and declared_total.possible > 0:
        total_score = round_half_up(declared_total.met)
        total_max = declared_total.possible
        total_source = "declared"

    percentage = round_half_up(total_score / total_max * 100) if total_max else 0.0

    item_mismatch = None
    if total_max and (total_source == "declared" or any(_uses_declared(s) for s in parsed.sections)):
        item_mismatch = detect_item_mismatch(total_score / total_max * 100, sections, mismatch_threshold)
        if item_mismatch is not None:
            logger.warning(
                "file=%s declared score %.1f%% differs from item rows %.1f%% by %.1f",
                parsed.source_filename, item_mismatch.declared, item_mismatch.computed, item_mismatch.difference,
            )

    overall = cover.declared_overall if cover is not None else None
    if overall is not None:
        percentage = round_half_up(overall)

    mismatch = detect_mismatch(overall, sections, mismatch_threshold)
    if mismatch is not None:
        logger.warning(
            "file=%s declared overall %.1f%% differs from category average %.1f%% by %.1f",
            parsed.source_filename, mismatch.overall, mismatch.category_avg, mismatch.difference,
        )

    return replace(
        parsed,
        sections=sections,
        total_score=total_score,
        total_max_points=total_max,
        score_percentage=percentage,
        score_mismatch=mismatch,
        item_mismatch=item_mismatch,
        total_source=total_source,
    )
