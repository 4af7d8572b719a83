"""Decide whether a trailing block stays on the current page."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from invoice_layout.model.errors import LayoutOverflowError
from invoice_layout.utils.logger import get_logger

LOGGER = get_logger(__name__)

NEW_PAGE_GAP_ROWS = 0


@dataclass(frozen=True, slots=True)
class FitDecision:
    """Where the trailing block starts and whether a page break precedes it."""

    gap_rows: int
    page_break: bool
    start_row: int
    required_height: float
    headroom: float


class SamePageFitPolicy:
    """Greedy choice of the largest gap that still fits on the current page.

    Candidates are tried in the given order; when none fits, the page breaks
    after the cut row and the block starts at the top of the next page.
    """

    def __init__(
        self,
        candidate_gaps: Sequence[int],
        safety_margin: float,
        printable_height: float,
        tolerance: float = 0.5,
        keep_on_same_page: bool = True,
        force_new_page: bool = False,
    ) -> None:
        self.candidate_gaps = tuple(max(0, gap) for gap in candidate_gaps)
        self.safety_margin = safety_margin
        self.printable_height = printable_height
        self.tolerance = tolerance
        self.keep_on_same_page = keep_on_same_page
        self.force_new_page = force_new_page

    def decide(
        self,
        cut_row: int,
        headroom: float,
        required_height: Callable[[int], float],
    ) -> FitDecision:
        if self.keep_on_same_page and not self.force_new_page:
            for gap in self.candidate_gaps:
                needed = required_height(gap)
                if needed + self.safety_margin <= headroom:
                    LOGGER.debug("Trailing block fits after row %d with gap %d (%.1f <= %.1f)",
                                 cut_row, gap, needed + self.safety_margin, headroom)
                    return FitDecision(
                        gap_rows=gap,
                        page_break=False,
                        start_row=cut_row + gap + 1,
                        required_height=needed,
                        headroom=headroom,
                    )

        needed = required_height(NEW_PAGE_GAP_ROWS)
        if needed > self.printable_height + self.tolerance:
            raise LayoutOverflowError(
                f"Trailing block needs {needed:.1f}pt but a page only holds {self.printable_height:.1f}pt"
            )

        LOGGER.debug("Trailing block moved to a new page after row %d (headroom %.1f)", cut_row, headroom)
        return FitDecision(
            gap_rows=NEW_PAGE_GAP_ROWS,
            page_break=True,
            start_row=cut_row + 1,
            required_height=needed,
            headroom=headroom,
        )
