from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from rapidfuzz import fuzz

from ..extract.scanning import normalize_text
from ..models.validation import Facility, FacilityMatch

"""Fuzzy matching of extracted facility names against the facility directory.

Every directory entry is scored independently and the best score wins, so the
result does not depend on directory order. Ties go to the alphabetically
first name, then the smallest id.

Scores (0..1):
    1.0         normalized names identical
    0.95        identical core names (abbreviations expanded, suffixes such as
                "Care Center" or "of Cascadia" removed)
    0.8 - 0.9   the directory core name contains the extracted one
    0.7 - 0.8   the extracted core name contains the directory one
    overlap     share of shared words (> 0.5 only)
    fuzzy       0.9 * rapidfuzz token_sort_ratio, only for near-identical
                spellings (ratio >= 0.85) where every word of the shorter
                name is itself a near-identical spelling of a word in the
                other ("Sunrize Manor" matches "Sunrise Manor", "Sunset
                Manor" does not)
"""

__all__ = [
    "DEFAULT_MATCH_THRESHOLD",
    "core_name",
    "match_facility",
    "score_facility",
    "word_overlap",
]

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.5
MIN_CORE_LENGTH = 4
FUZZY_MIN_RATIO = 0.85

_ABBREVIATIONS = (
    (re.compile(r"\bmt\b\.?\s*"), "mount "),
    (re.compile(r"\bst\b\.?\s*"), "saint "),
    (re.compile(r"\bcda\b"), "coeur dalene"),
)
_SUFFIXES = re.compile(
    r"\s*\b(?:health\s*(?:and|&)\s*rehabilitation|of\s*cascadia|transitional\s*care"
    r"|care\s*center|retirement\s*living|snf|alf|ilf)\b\s*"
)


def core_name(name: str | None) -> str:
    """Distinctive part of a facility name: "Mt. Ascension Care Center" -> "mount ascension"."""
    text = str(name or "").lower()
    for pattern, replacement in _ABBREVIATIONS:
        text = pattern.sub(replacement, text)
    text = _SUFFIXES.sub(" ", text)
    return normalize_text(text)


def word_overlap(a: str, b: str) -> float:
    """Shared words over the smaller word set, ignoring words of two letters or less."""
    words_a = {w for w in a.split() if len(w) > 2}
    words_b = {w for w in b.split() if len(w) > 2}
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / min(len(words_a), len(words_b))


def _words_agree(a: str, b: str) -> bool:
    words, others = sorted((a.split(), b.split()), key=len)
    return all(max(fuzz.ratio(w, o) for o in others) / 100 >= FUZZY_MIN_RATIO for w in words)


def score_facility(name: str, candidate: str) -> float:
    """Similarity of an extracted name and a directory name in [0, 1]."""
    if normalize_text(name) == normalize_text(candidate):
        return 1.0

    core, core_candidate = core_name(name), core_name(candidate)
    if not core or not core_candidate:
        return 0.0
    if core == core_candidate and len(core) >= MIN_CORE_LENGTH:
        return 0.95

    score = 0.0
    if core in core_candidate and len(core) >= MIN_CORE_LENGTH:
        score = 0.8 + len(core) / len(core_candidate) * 0.1
    elif core_candidate in core and len(core_candidate) >= MIN_CORE_LENGTH:
        score = 0.7 + len(core_candidate) / len(core) * 0.1

    overlap = word_overlap(core, core_candidate)
    if overlap > 0.5:
        score = max(score, overlap)

    ratio = fuzz.token_sort_ratio(core, core_candidate) / 100
    if ratio >= FUZZY_MIN_RATIO and _words_agree(core, core_candidate):
        score = max(score, 0.9 * ratio)

    return min(score, 1.0)


def match_facility(
    name: str | None,
    directory: Iterable[Facility],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> FacilityMatch:
    """Best directory entry for ``name``, or an empty match below ``threshold``."""
    if not name or not name.strip():
        return FacilityMatch(facility=None, score=0.0)

    scored = [(score_facility(name, f.name), f) for f in directory]
    if not scored:
        return FacilityMatch(facility=None, score=0.0)

    score, best = min(scored, key=lambda pair: (-pair[0], pair[1].name, str(pair[1].id)))
    if score < threshold:
        logger.debug("facility=%r best=%r score=%.2f below threshold", name, best.name, score)
        return FacilityMatch(facility=None, score=round(score, 2))
    return FacilityMatch(facility=best, score=round(score, 2))
