"""Finished invoice document handed to the spreadsheet serializer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

from invoice_layout.model.grid_model import CellRange, GridModel

if TYPE_CHECKING:
    from invoice_layout.layout.fit_policy import FitDecision
    from invoice_layout.layout.pagination import PageSlice


@dataclass(slots=True)
class InvoiceTotals:
    """Precomputed aggregate values mirrored by the emitted formulas."""

    total_files: float
    subtotal: float
    discount: float
    sales_tax: float
    grand_total: float


@dataclass(slots=True)
class Document:
    """Committed grid plus page-break markers and print settings."""

    grid: GridModel
    page_breaks: List[int]
    pages: List["PageSlice"]
    totals: InvoiceTotals
    fit: "FitDecision"
    print_area: CellRange
    sheet_name: str = "INVOICE"
    tab_color: Optional[str] = None
    page_setup: Dict[str, object] = field(default_factory=dict)
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def last_row(self) -> int:
        return self.print_area.bottom
