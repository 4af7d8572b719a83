"""Unit conversion helpers for spreadsheet measurements."""
from __future__ import annotations

import math

POINTS_PER_INCH = 72
PX_PER_INCH = 96
DEFAULT_CHAR_WIDTH_PX = 7.0
DEFAULT_COLUMN_WIDTH = 8.43
# Cell padding the spreadsheet adds on top of the character grid.
COLUMN_PADDING_PX = 5


def px_to_points(pixels: float, dpi: int = PX_PER_INCH) -> float:
    """Convert screen pixels to typographic points."""
    return (pixels * POINTS_PER_INCH) / dpi


def inches_to_points(inches: float) -> float:
    return inches * POINTS_PER_INCH


def inches_to_px(inches: float) -> int:
    """Convert inches to whole pixels at 96 DPI."""
    return int(round(inches * PX_PER_INCH))


def px_to_column_width(px: float, char_width_px: float = DEFAULT_CHAR_WIDTH_PX) -> float:
    """Convert a pixel width into spreadsheet character-width units."""
    return (px - COLUMN_PADDING_PX) / char_width_px


def column_width_to_px(width: float | None) -> int:
    """Convert character-width units back to the pixels a spreadsheet renders."""
    w = DEFAULT_COLUMN_WIDTH if width is None else width
    return math.trunc(((256 * w + math.trunc(128 / 7)) / 256) * DEFAULT_CHAR_WIDTH_PX)
