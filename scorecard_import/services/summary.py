from __future__ import annotations

from ..models.batch_summary import BatchSummary

"""SUMMARY line rendering for directory imports.

Format:
    SUMMARY files=N valid=V invalid=I errors=E duplicates=D needs_override=O elapsed_sec=S
"""

__all__ = [
    "format_elapsed",
    "render_summary_line",
]


def format_elapsed(seconds: float) -> str:
    """Render seconds without scientific notation or a trailing ".0"."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(summary: BatchSummary) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 3, 1, tzinfo=timezone.utc)
        >>> s = BatchSummary(
        ...     total_files=3, valid_files=2, invalid_files=1, error_files=1,
        ...     duplicate_files=0, needs_override_files=0,
        ...     start_time=t, end_time=t, elapsed_seconds=1.5,
        ... )
        >>> render_summary_line(s)
        'SUMMARY files=3 valid=2 invalid=1 errors=1 duplicates=0 needs_override=0 elapsed_sec=1.5'
    """
    return (
        f"SUMMARY files={summary.total_files} "
        f"valid={summary.valid_files} "
        f"invalid={summary.invalid_files} "
        f"errors={summary.error_files} "
        f"duplicates={summary.duplicate_files} "
        f"needs_override={summary.needs_override_files} "
        f"elapsed_sec={format_elapsed(summary.elapsed_seconds)}"
    )
