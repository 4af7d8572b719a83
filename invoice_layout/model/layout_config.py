"""Page geometry and layout tuning for invoice generation."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Optional, Tuple

from invoice_layout.model.errors import ValidationError
from invoice_layout.utils.units import inches_to_points, px_to_column_width

PAGE_HEIGHT_INCHES = {
    "letter": 11.0,
    "a4": 11.69,
}

DEFAULT_COLUMN_WIDTHS_PX: Tuple[float, ...] = (48, 50, 93, 193, 75, 93.6848, 40, 80)

DEFAULT_PAYMENT_NOTE = (
    "Please make the payment available within 5 business days from the receipt of this Invoice."
)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class LayoutConfig:
    """Caller-tunable layout parameters; heights are in points."""

    page_type: str = "letter"
    margin_top_in: float = 0.75
    margin_bottom_in: float = 0.75
    printable_height_override: Optional[float] = None
    default_row_height: float = 15.0
    candidate_gaps: Tuple[int, ...] = (2, 1)
    gap_rows: Optional[int] = None
    safety_margin: float = 10.0
    keep_on_same_page: bool = True
    force_new_page: bool = False
    pagination_tolerance: float = 0.5
    column_widths_px: Tuple[float, ...] = DEFAULT_COLUMN_WIDTHS_PX
    min_bill_rows: int = 10
    logo_path: Optional[str] = "images/logo-grey.png"
    payment_note: str = DEFAULT_PAYMENT_NOTE

    def __post_init__(self) -> None:
        if self.page_type not in PAGE_HEIGHT_INCHES:
            raise ValidationError(
                f"Unsupported page type {self.page_type!r}; expected one of {sorted(PAGE_HEIGHT_INCHES)}"
            )
        if not isinstance(self.column_widths_px, (tuple, list)) or len(self.column_widths_px) != 8:
            raise ValidationError("Invoice layout requires exactly 8 column widths")
        if not _is_int(self.min_bill_rows) or self.min_bill_rows < 1:
            raise ValidationError(f"min_bill_rows must be a positive integer, got {self.min_bill_rows!r}")
        gaps = self.candidate_gaps
        if not isinstance(gaps, (tuple, list)) or not all(_is_int(gap) for gap in gaps):
            raise ValidationError(f"candidate_gaps must be a list of integers, got {self.candidate_gaps!r}")
        if self.gap_rows is not None and not _is_int(self.gap_rows):
            raise ValidationError(f"gap_rows must be an integer, got {self.gap_rows!r}")

    @property
    def page_height(self) -> float:
        return inches_to_points(PAGE_HEIGHT_INCHES[self.page_type])

    @property
    def printable_height(self) -> float:
        """Usable vertical space per page once the margins are removed."""
        if self.printable_height_override is not None:
            return self.printable_height_override
        return inches_to_points(
            PAGE_HEIGHT_INCHES[self.page_type] - (self.margin_top_in + self.margin_bottom_in)
        )

    @property
    def column_widths(self) -> Tuple[float, ...]:
        """Column widths converted to spreadsheet character units."""
        return tuple(px_to_column_width(px) for px in self.column_widths_px)

    @property
    def gap_candidates(self) -> Tuple[int, ...]:
        """Gaps to try in order; a pinned gap is the only candidate."""
        if self.gap_rows is not None:
            return (max(0, self.gap_rows),)
        return tuple(self.candidate_gaps)

    def with_overrides(self, **overrides) -> "LayoutConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValidationError(f"Unknown layout options: {', '.join(unknown)}")
        for key in ("candidate_gaps", "column_widths_px"):
            if key not in overrides:
                continue
            if not isinstance(overrides[key], (tuple, list)):
                raise ValidationError(f"{key} must be a list, got {overrides[key]!r}")
            overrides[key] = tuple(overrides[key])
        return replace(self, **overrides)
