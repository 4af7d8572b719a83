"""Replay committed row heights against the printable page budget."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from invoice_layout.model.grid_model import GridModel

DEFAULT_TOLERANCE = 0.5


@dataclass(slots=True)
class PageSlice:
    """Rows ``first_row..last_row`` that print on the same page."""

    index: int
    first_row: int
    last_row: int
    used_height: float


class PaginationSimulator:
    """Forward simulation of where a spreadsheet printer breaks pages.

    Nothing is persisted: every query walks the rows again from row 1.
    """

    def __init__(self, printable_height: float, tolerance: float = DEFAULT_TOLERANCE) -> None:
        self.printable_height = printable_height
        self.tolerance = tolerance

    def paginate(self, heights: Iterable[Tuple[int, float]], manual_breaks: Iterable[int] = ()) -> List[PageSlice]:
        """Split ``(row, height)`` pairs into pages.

        A row starts a new page when adding it would exceed the budget plus
        tolerance, or when the previous row carries a manual break.
        """
        breaks = set(manual_breaks)
        pages: List[PageSlice] = []
        current: Optional[PageSlice] = None
        previous_row: Optional[int] = None

        for row, height in heights:
            forced = previous_row is not None and previous_row in breaks
            if current is None:
                current = PageSlice(index=0, first_row=row, last_row=row, used_height=height)
            elif forced or current.used_height + height > self.printable_height + self.tolerance:
                pages.append(current)
                current = PageSlice(index=len(pages), first_row=row, last_row=row, used_height=height)
            else:
                current.used_height += height
                current.last_row = row
            previous_row = row

        if current is not None:
            pages.append(current)
        return pages

    def simulate(self, grid: GridModel, last_row: Optional[int] = None) -> List[PageSlice]:
        """Paginate rows 1..``last_row`` of ``grid`` (defaults to its last committed row)."""
        end = grid.last_row if last_row is None else last_row
        heights = ((row, grid.row_height(row)) for row in range(1, end + 1))
        return self.paginate(heights, grid.page_breaks)

    def headroom_at_row(self, grid: GridModel, row: int) -> float:
        """Vertical space left on the page that contains ``row``."""
        pages = self.simulate(grid, row)
        if not pages:
            return self.printable_height
        return self.printable_height - pages[-1].used_height
