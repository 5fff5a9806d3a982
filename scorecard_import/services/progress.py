from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

from ..models.file_result import FileResult

"""Import progress bar (tqdm, TTY only).

The bar advances once per workbook and shows how many scorecards parsed,
how many failed and how many parsed with a declared-score disagreement.
Redirected output gets no bar at all, so log files stay free of ANSI
control sequences.
"""

__all__ = ["ImportProgress"]


def _stdout_is_tty() -> bool:
    return sys.stdout.isatty()


def _is_flagged(result: FileResult) -> bool:
    card = result.scorecard
    return card is not None and (card.score_mismatch is not None or card.item_mismatch is not None)


class ImportProgress:
    """Counts per-file outcomes and mirrors them on a tqdm bar when one is shown."""

    def __init__(self, total_files: int, *, description: str = "Importing scorecards") -> None:
        self.description = description
        self.parsed = 0
        self.failed = 0
        self.flagged = 0
        self.bar: tqdm[Any] | None = None
        if _stdout_is_tty():
            self.bar = tqdm(total=total_files, desc=description, unit="file", ncols=80, ascii=True)

    def start(self, filename: str) -> None:
        if self.bar is not None:
            self.bar.set_description(f"{self.description} ({filename})")

    def record(self, result: FileResult) -> None:
        if result.ok:
            self.parsed += 1
            self.flagged += _is_flagged(result)
        else:
            self.failed += 1
        if self.bar is not None:
            self.bar.set_description(self.description)
            self.bar.set_postfix(parsed=self.parsed, failed=self.failed, flagged=self.flagged)
            self.bar.update(1)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None

    def __enter__(self) -> ImportProgress:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
