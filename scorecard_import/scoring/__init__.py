"""Point calculation and cover-sheet reconciliation."""

from .calculator import compute_scores, item_points, round_half_up

__all__ = [
    "compute_scores",
    "item_points",
    "round_half_up",
]
