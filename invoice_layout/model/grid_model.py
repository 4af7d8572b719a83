"""Addressable row/column surface that the section renderers write into."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from invoice_layout.model.style_model import CellStyle


@dataclass(frozen=True, slots=True)
class CellRange:
    """Inclusive rectangular span of 1-based rows and columns."""

    top: int
    left: int
    bottom: int
    right: int

    def __post_init__(self) -> None:
        if self.top < 1 or self.left < 1:
            raise ValueError(f"Grid coordinates are 1-based: {self}")
        if self.bottom < self.top or self.right < self.left:
            raise ValueError(f"Inverted cell range: {self}")

    @classmethod
    def single(cls, row: int, column: int) -> "CellRange":
        return cls(row, column, row, column)

    @property
    def is_merged(self) -> bool:
        return self.top != self.bottom or self.left != self.right

    def rows(self) -> range:
        return range(self.top, self.bottom + 1)


@dataclass(frozen=True, slots=True)
class TextRun:
    """Fragment of rich text with inline emphasis."""

    text: str
    bold: bool = False
    italic: bool = False


@dataclass(frozen=True, slots=True)
class RichText:
    """Cell value made of several styled runs."""

    runs: Tuple[TextRun, ...]

    @classmethod
    def labelled(cls, label: str, value: str) -> "RichText":
        """Bold label followed by a plain value, as used in paired blocks."""
        return cls((TextRun(label, bold=True), TextRun(value)))

    @property
    def plain_text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True, slots=True)
class FormulaValue:
    """Recomputable expression stored next to its precomputed result."""

    expression: str
    result: float


CellValue = Union[str, int, float, date, RichText, FormulaValue, None]


@dataclass(slots=True)
class CellWrite:
    """A value written to the anchor of a (possibly merged) range."""

    range: CellRange
    value: CellValue
    style: Optional[CellStyle] = None


@dataclass(slots=True)
class ImageAnchor:
    """Image placed with its top-left corner on a grid cell."""

    row: int
    column: int
    width_px: int
    height_px: int
    media_type: str
    data: bytes = field(repr=False)


class GridModel:
    """Row/column coordinate space with merges, row heights and page breaks.

    The grid does not guard against overlapping writes; callers advance a row
    cursor monotonically so later sections never land on committed rows.
    """

    def __init__(self, column_widths: Sequence[float], default_row_height: float) -> None:
        self.column_widths: List[float] = list(column_widths)
        self.default_row_height = default_row_height
        self._cells: Dict[Tuple[int, int], CellWrite] = {}
        self._writes: List[CellWrite] = []
        self._row_heights: Dict[int, float] = {}
        self._committed: set[int] = set()
        self._page_breaks: List[int] = []
        self.images: List[ImageAnchor] = []

    # ------------------------------------------------------------------
    # Writes
    def write_cell(
        self,
        cell_range: CellRange,
        value: CellValue = None,
        style: Optional[CellStyle] = None,
    ) -> CellWrite:
        """Write ``value`` to the anchor of ``cell_range`` and commit its rows."""
        if cell_range.right > len(self.column_widths):
            raise ValueError(f"Range {cell_range} exceeds {len(self.column_widths)} columns")
        write = CellWrite(range=cell_range, value=value, style=style)
        self._writes.append(write)
        self._cells[(cell_range.top, cell_range.left)] = write
        self._committed.update(cell_range.rows())
        return write

    def set_row_height(self, row: int, height: float) -> None:
        self._row_heights[row] = height
        self._committed.add(row)

    def set_row_height_range(self, start: int, end: int, height: float) -> None:
        for row in range(start, end + 1):
            self.set_row_height(row, height)

    def add_page_break(self, row: int) -> None:
        """Mark a manual page break after ``row``."""
        if row not in self._page_breaks:
            self._page_breaks.append(row)
            self._page_breaks.sort()

    def add_image(self, image: ImageAnchor) -> None:
        self.images.append(image)

    # ------------------------------------------------------------------
    # Queries
    def row_height(self, row: int) -> float:
        """Explicit height of ``row`` or the default one."""
        return self._row_heights.get(row, self.default_row_height)

    def explicit_row_height(self, row: int) -> Optional[float]:
        return self._row_heights.get(row)

    def cell(self, row: int, column: int) -> Optional[CellWrite]:
        """Return the write anchored exactly at ``(row, column)``."""
        return self._cells.get((row, column))

    def value_at(self, row: int, column: int) -> CellValue:
        write = self.cell(row, column)
        return write.value if write else None

    def committed_rows(self) -> List[int]:
        return sorted(self._committed)

    def is_committed(self, row: int) -> bool:
        return row in self._committed

    @property
    def last_row(self) -> int:
        return max(self._committed, default=0)

    @property
    def page_breaks(self) -> List[int]:
        return list(self._page_breaks)

    @property
    def merges(self) -> List[CellRange]:
        return [write.range for write in self._writes if write.range.is_merged]

    def writes(self) -> Iterator[CellWrite]:
        return iter(self._writes)

    def writes_in_row(self, row: int) -> List[CellWrite]:
        return [write for write in self._writes if write.range.top == row]
