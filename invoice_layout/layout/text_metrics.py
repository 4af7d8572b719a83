"""Estimate how many grid rows a wrapped cell value needs."""
from __future__ import annotations

import math
from typing import Optional, Sequence

from invoice_layout.utils.units import DEFAULT_CHAR_WIDTH_PX, column_width_to_px

CELL_HORIZONTAL_PADDING_PX = 12
MIN_USABLE_WIDTH_PX = 60


class TextMetrics:
    """Character-count wrapping model over merged column spans."""

    def __init__(self, column_widths: Sequence[float], char_width_px: float = DEFAULT_CHAR_WIDTH_PX) -> None:
        self._column_widths = list(column_widths)
        self._char_width_px = char_width_px

    def merged_width_px(self, first_column: int, last_column: int) -> int:
        """Rendered pixel width of columns ``first_column..last_column`` (1-based)."""
        return sum(column_width_to_px(self._column_widths[c - 1]) for c in range(first_column, last_column + 1))

    def usable_width_px(self, first_column: int, last_column: int) -> float:
        return max(MIN_USABLE_WIDTH_PX, self.merged_width_px(first_column, last_column) - CELL_HORIZONTAL_PADDING_PX)

    def text_width_px(self, text: str) -> float:
        if not text:
            return 0.0
        return len(text) * self._char_width_px

    def lines_needed(
        self,
        first_column: int,
        last_column: int,
        label: Optional[str],
        value: Optional[str],
    ) -> int:
        """Rows needed for ``label`` + ``value`` rendered as one rich-text cell.

        An absent value still occupies a single row.
        """
        if not value:
            return 1
        text = f"{label or ''}{value}"
        usable = self.usable_width_px(first_column, last_column)
        return max(1, math.ceil(self.text_width_px(text) / usable))
