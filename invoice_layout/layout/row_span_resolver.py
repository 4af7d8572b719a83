"""Align two side-by-side (label, value) columns on shared row boundaries."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from invoice_layout.layout.text_metrics import TextMetrics
from invoice_layout.utils.logger import get_logger

LOGGER = get_logger(__name__)

LEFT_COLUMNS = (1, 4)
RIGHT_COLUMNS = (5, 8)

PairEntry = Optional[Tuple[str, Optional[str]]]


@dataclass(frozen=True, slots=True)
class RowSpan:
    """Rows ``start..end`` jointly occupied by one paired entry."""

    start: int
    end: int
    rows: int
    left_rows: int = 1
    right_rows: int = 1

    @property
    def is_multi_row(self) -> bool:
        return self.rows > 1


def _entry_at(entries: Sequence[PairEntry], index: int) -> Tuple[Optional[str], Optional[str]]:
    if index >= len(entries) or entries[index] is None:
        return None, None
    label, value = entries[index]
    return label, value


class RowSpanResolver:
    """Compute contiguous row spans for a two-sided block.

    Both sides of index ``i`` always share the same ``start`` and ``end`` so
    merged cells on either side terminate on the same row boundary. A side with
    no entry at ``i`` simply inherits the span of the other side.
    """

    def __init__(
        self,
        metrics: TextMetrics,
        left_columns: Tuple[int, int] = LEFT_COLUMNS,
        right_columns: Tuple[int, int] = RIGHT_COLUMNS,
    ) -> None:
        self._metrics = metrics
        self._left_columns = left_columns
        self._right_columns = right_columns

    def resolve(
        self,
        left: Sequence[PairEntry],
        right: Sequence[PairEntry],
        first_row: int,
    ) -> List[RowSpan]:
        spans: List[RowSpan] = []
        next_row = first_row
        for index in range(max(len(left), len(right))):
            left_label, left_value = _entry_at(left, index)
            right_label, right_value = _entry_at(right, index)
            left_rows = self._metrics.lines_needed(*self._left_columns, left_label, left_value)
            right_rows = self._metrics.lines_needed(*self._right_columns, right_label, right_value)
            rows = max(left_rows, right_rows, 1)
            spans.append(
                RowSpan(
                    start=next_row,
                    end=next_row + rows - 1,
                    rows=rows,
                    left_rows=left_rows,
                    right_rows=right_rows,
                )
            )
            next_row += rows

        LOGGER.debug("Resolved %d paired spans starting at row %d", len(spans), first_row)
        return spans


def span_block_height(spans: Sequence[RowSpan], multi_row_height: float, single_row_height: float) -> float:
    """Total height of a paired block: multi-row spans use the compact row height."""
    return sum(span.rows * multi_row_height if span.is_multi_row else single_row_height for span in spans)
