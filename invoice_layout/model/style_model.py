"""Cell style presets shared by the section renderers."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

GREEN = "7BA541"
LIGHT_GREEN = "C4D79B"
DARK_TEXT = "595959"
WHITE = "FFFFFF"

DATE_FORMAT = "dd/mm/yyyy"


@dataclass(frozen=True, slots=True)
class CellStyle:
    """Font, alignment, border, fill and number format of a written range."""

    font_name: str = "Calibri"
    font_size: float = 9
    bold: bool = False
    italic: bool = False
    color: Optional[str] = None
    horizontal: Optional[str] = None
    vertical: Optional[str] = None
    wrap_text: bool = False
    border: Optional[str] = None
    fill: Optional[str] = None
    number_format: Optional[str] = None

    def with_number_format(self, number_format: str) -> "CellStyle":
        return replace(self, number_format=number_format)


def money_format(currency: str) -> str:
    """Return the signed currency number format used for money cells."""
    symbol = f'"{currency}"'
    return f"{symbol}#,##0.00;[Red]\\-{symbol}#,##0.00"


def _arial(size: float, **extra) -> CellStyle:
    return CellStyle(font_name="Arial", font_size=size, **extra)


def _calibri(size: float = 9, **extra) -> CellStyle:
    return CellStyle(font_name="Calibri", font_size=size, **extra)


_MID_CENTER = {"vertical": "middle", "horizontal": "center"}
_MID_LEFT_WRAP = {"vertical": "middle", "horizontal": "left", "wrap_text": True}


class StylesCatalog:
    """Collection of named cell styles."""

    def __init__(self, styles: Mapping[str, CellStyle]):
        self._styles = dict(styles)

    def get(self, style_id: Optional[str]) -> Optional[CellStyle]:
        """Return the style registered under ``style_id`` if any."""
        if style_id is None:
            return None
        return self._styles.get(style_id)

    def require(self, style_id: str) -> CellStyle:
        style = self.get(style_id)
        if style is None:
            raise KeyError(f"Unknown cell style: {style_id}")
        return style


def default_styles() -> StylesCatalog:
    """Build the invoice palette: green headers, light-green bank bars."""
    header = _arial(10, bold=True, color=WHITE, border="thin", fill=GREEN, **_MID_CENTER)
    styles: Dict[str, CellStyle] = {
        "title": CellStyle(
            font_name="Arial Black", font_size=27, color=DARK_TEXT, vertical="bottom", horizontal="center"
        ),
        "heading_meta": _arial(10, bold=True, **_MID_CENTER),
        "table_header": header,
        "contact_cell": _calibri(border="thin", **_MID_LEFT_WRAP),
        "item_center": _calibri(border="thin", **_MID_CENTER),
        "item_text": _calibri(border="thin", **_MID_LEFT_WRAP),
        "total_files_blank": _arial(10, color=WHITE, border="thin", fill=GREEN, **_MID_LEFT_WRAP),
        "total_files_label": header,
        "payment_note": _calibri(**_MID_LEFT_WRAP),
        "summary_label": _calibri(bold=True, color=DARK_TEXT, vertical="middle", horizontal="right"),
        "grand_total_label": _calibri(bold=True, vertical="middle", horizontal="right"),
        "summary_value": _calibri(border="thin", **_MID_CENTER),
        "grand_total_value": _calibri(bold=True, color=WHITE, border="thin", fill=GREEN, **_MID_CENTER),
        "bank_heading": header,
        "bank_subheading": _arial(9, bold=True, border="thin", fill=LIGHT_GREEN, **_MID_CENTER),
        "bank_cell": _calibri(border="divider", **_MID_LEFT_WRAP),
        "closing_bar": _arial(10, bold=True, border="thin", fill=LIGHT_GREEN, **_MID_CENTER),
        "footer_question": _calibri(bold=True, color=DARK_TEXT, wrap_text=True, **_MID_CENTER),
        "footer_line": _calibri(wrap_text=True, **_MID_CENTER),
    }
    return StylesCatalog(styles)
