from __future__ import annotations

from collections.abc import Iterable

from ..extract.patterns import (
    KEV_HYBRID_COVER_SHEET,
    KEV_HYBRID_MARKER_SHEET,
    KEV_MINI_COVER_SHEET,
    SNF_FIRST_SYSTEM_PREFIX,
    SNF_OVERVIEW_SHEET,
)
from ..models.scorecard import ScorecardFormat

"""Workbook format detection from sheet names.

Rules are evaluated in a fixed priority order (KEV Mini, KEV Hybrid, SNF) and
the first match wins, so a workbook carrying both a KEV cover sheet and an SNF
overview resolves to KEV regardless of sheet order.
"""

__all__ = [
    "UnknownFormatError",
    "detect_format",
    "require_format",
]


class UnknownFormatError(Exception):
    """Raised when no known scorecard layout matches the workbook."""


def _norm(name: str) -> str:
    return " ".join(str(name).lower().split())


def _any_contains(names: list[str], needle: str) -> bool:
    n = _norm(needle)
    return any(n in name for name in names)


def detect_format(sheet_names: Iterable[str]) -> ScorecardFormat:
    """Classify a workbook by its sheet names."""
    names = [_norm(s) for s in sheet_names]

    if _any_contains(names, KEV_MINI_COVER_SHEET):
        return ScorecardFormat.KEV_MINI
    if _any_contains(names, KEV_HYBRID_COVER_SHEET) and _any_contains(names, KEV_HYBRID_MARKER_SHEET):
        return ScorecardFormat.KEV_HYBRID
    if _any_contains(names, SNF_OVERVIEW_SHEET) or _any_contains(names, SNF_FIRST_SYSTEM_PREFIX):
        return ScorecardFormat.SNF
    return ScorecardFormat.UNKNOWN


def require_format(sheet_names: Iterable[str], filename: str = "") -> ScorecardFormat:
    """detect_format() that raises instead of returning UNKNOWN."""
    names = list(sheet_names)
    fmt = detect_format(names)
    if fmt == ScorecardFormat.UNKNOWN:
        label = f" in {filename}" if filename else ""
        raise UnknownFormatError(f"unknown scorecard format{label}: sheets={names}")
    return fmt
