from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from ..models.validation import ValidationResult

"""Batch duplicate detection.

Runs after facility resolution: results are grouped by
(facility, month, year) and every group with more than one member gets a
shared id so the caller can make the user keep exactly one file.
"""

__all__ = [
    "assign_duplicate_groups",
    "duplicate_key",
]


def duplicate_key(result: ValidationResult):
    """(facility, month, year) or None when any part is unresolved."""
    facility = result.facility_key
    if facility is None or result.month is None or result.year is None:
        return None
    return facility, result.month, result.year


def assign_duplicate_groups(results: Sequence[ValidationResult]) -> list[ValidationResult]:
    """Return new results with duplicate_group set on every duplicated file.

    Group ids are dup-1, dup-2, ... in order of each group's first member.
    Input order is preserved.
    """
    groups: dict[object, list[int]] = {}
    for index, result in enumerate(results):
        key = duplicate_key(result)
        if key is not None:
            groups.setdefault(key, []).append(index)

    out = list(results)
    group_number = 0
    for members in groups.values():
        if len(members) < 2:
            continue
        group_number += 1
        group_id = f"dup-{group_number}"
        for i in members:
            others = ", ".join(results[j].filename for j in members if j != i)
            out[i] = replace(
                results[i],
                duplicate_group=group_id,
                warnings=[*results[i].warnings, f"Duplicate of {others} (same facility and period)"],
            )
    return out
