from __future__ import annotations

import pytest

from scorecard_import.models.validation import Facility
from scorecard_import.services.facility_matcher import (
    core_name,
    match_facility,
    score_facility,
    word_overlap,
)

DIRECTORY = [
    Facility(1, "Sunrise Manor Care Center"),
    Facility(2, "Harbor View Health and Rehabilitation"),
    Facility(3, "Mt. Ascension Transitional Care"),
    Facility(4, "Mountain Valley of Cascadia"),
]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Mt. Ascension Transitional Care", "mount ascension"),
        ("St. Joseph Care Center", "saint joseph"),
        ("CDA Retirement Living", "coeur dalene"),
        ("Harbor View Health & Rehabilitation", "harbor view"),
        (None, ""),
    ],
)
def test_core_name(name, expected):
    assert core_name(name) == expected


def test_word_overlap_ignores_short_words():
    assert word_overlap("big house of", "big house now") == 1.0
    assert word_overlap("of at", "of at") == 0.0


def test_identical_names_score_one():
    assert score_facility("sunrise manor care center.", "Sunrise Manor Care Center") == 1.0


@pytest.mark.parametrize(
    "name, facility_id",
    [
        ("Sunrise Manor", 1),
        ("Harbor View", 2),
        ("Mount Ascension", 3),
        ("Mt Ascension", 3),
        ("Mountain Valley", 4),
    ],
)
def test_core_name_matches(name, facility_id):
    match = match_facility(name, DIRECTORY)
    assert match.matched
    assert match.facility.id == facility_id
    assert match.score == 0.95


def test_near_spelling_matches_through_fuzzy_ratio():
    match = match_facility("Sunrize Manor", DIRECTORY)
    assert match.facility.id == 1
    assert match.score == pytest.approx(0.83)


def test_below_threshold_reports_best_score():
    match = match_facility("Sunrize Manor", DIRECTORY, threshold=0.9)
    assert not match.matched
    assert match.score == pytest.approx(0.83)


def test_similar_but_different_names_do_not_match():
    assert not match_facility("Spokane Valley", [Facility(4, "Mountain Valley")]).matched


def test_one_shared_word_is_not_a_fuzzy_match():
    # token_sort_ratio alone puts these at 0.88
    match = match_facility("Sunrise Manor", [Facility(1, "Sunset Manor")])
    assert not match.matched
    assert match.score == 0.0
    assert score_facility("Sunset Manor", "Sunrise Manor Care Center") == 0.0


def test_unknown_and_empty():
    assert match_facility("Completely Different Place", DIRECTORY).facility is None
    assert match_facility("", DIRECTORY).score == 0.0
    assert match_facility(None, DIRECTORY).facility is None
    assert match_facility("Sunrise Manor", []).facility is None


def test_result_independent_of_directory_order():
    directory = [Facility(2, "Beta Home"), Facility(1, "Alpha Home")]
    first = match_facility("Home", directory)
    second = match_facility("Home", list(reversed(directory)))
    assert first == second
    assert first.facility.name == "Alpha Home"
