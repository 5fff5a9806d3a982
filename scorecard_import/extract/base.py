from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import PurePath

from ..models.scorecard import ParsedScorecard, ParseOptions, ScorecardFormat
from ..models.workbook import Workbook
from .dates import MonthYear, extract_month_year

"""Extractor strategy base class and registry.

Every extractor is a pure function of (Workbook, filename, ParseOptions):
it reads facility, period and item tables and returns an unscored
ParsedScorecard. Scores are filled in afterwards by scoring.calculator.
"""

__all__ = [
    "Extractor",
    "get_extractor",
    "register_extractor",
    "resolve_period",
]

logger = logging.getLogger(__name__)

_REGISTRY: dict[ScorecardFormat, Extractor] = {}


class Extractor(ABC):
    """One workbook layout."""

    format: ScorecardFormat = ScorecardFormat.UNKNOWN

    @abstractmethod
    def extract(self, workbook: Workbook, filename: str, options: ParseOptions) -> ParsedScorecard:
        raise NotImplementedError


def register_extractor(extractor: Extractor) -> Extractor:
    _REGISTRY[extractor.format] = extractor
    return extractor


def get_extractor(fmt: ScorecardFormat) -> Extractor:
    """Extractor for a detected format.

    Raises:
        KeyError: no extractor handles ``fmt`` (UNKNOWN included).
    """
    try:
        return _REGISTRY[fmt]
    except KeyError:
        raise KeyError(f"no extractor registered for format {fmt.value!r}") from None


def resolve_period(
    options: ParseOptions,
    found: MonthYear,
    filename: str,
    *,
    source: str,
) -> tuple[int | None, int | None, str | None]:
    """Merge caller options, on-sheet values and the filename into (month, year, date_source).

    Precedence per field: options, workbook (``found``), filename, and for the
    year only, options.default_year. date_source names where the month came
    from, or the year when no month was found.
    """
    from_name = extract_month_year(PurePath(filename).stem) if filename else MonthYear(None, None)

    month, month_source = _first(
        (options.month, "options"),
        (found.month, source),
        (from_name.month, "filename"),
    )
    year, year_source = _first(
        (options.year, "options"),
        (found.year, source),
        (from_name.year, "filename"),
        (options.default_year, "default"),
    )
    if month is None:
        logger.debug("file=%s no month found", filename)
    return month, year, month_source or year_source


def _first(*candidates):
    for value, source in candidates:
        if value is not None:
            return value, source
    return None, None
