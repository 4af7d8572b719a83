"""Section renderers that write the invoice into the grid in document order.

Each renderer receives the :class:`Cursor` of the first free row and returns
the cursor just past the rows it committed, so the order of sections is an
explicit composition in :mod:`invoice_layout.layout.layout_calculator`.
"""
from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import List, Optional, Sequence

from invoice_layout.layout import formulas
from invoice_layout.layout.row_span_resolver import PairEntry, RowSpan, RowSpanResolver, span_block_height
from invoice_layout.model.document_model import InvoiceTotals
from invoice_layout.model.grid_model import CellRange, GridModel, ImageAnchor, RichText, TextRun
from invoice_layout.model.invoice_model import BankAccount, BillLine, InvoiceParties
from invoice_layout.model.layout_config import LayoutConfig
from invoice_layout.model.style_model import DATE_FORMAT, CellStyle, StylesCatalog
from invoice_layout.utils.units import inches_to_px, px_to_points

COL_A, COL_B, COL_C, COL_D, COL_E, COL_F, COL_G, COL_H = range(1, 9)

ROW_HEIGHT_COMPACT = px_to_points(20)
ROW_HEIGHT_STANDARD = px_to_points(22)
ROW_HEIGHT_HEADER_GAP = px_to_points(8)
ROW_HEIGHT_ITEM = 26.0

FOOTER_LINE_COUNT = 3

LOGO_WIDTH_PX = inches_to_px(2.38 * 0.65)
LOGO_HEIGHT_PX = inches_to_px(1.44 * 0.73)


@dataclass(frozen=True, slots=True)
class Cursor:
    """First grid row not yet claimed by a rendered section."""

    row: int

    def advance(self, rows: int = 1) -> "Cursor":
        return Cursor(self.row + rows)


@dataclass(frozen=True, slots=True)
class LogoImage:
    """Decoded heading logo ready to be anchored on the grid."""

    path: str
    media_type: str
    data: bytes


@dataclass(slots=True)
class SectionContext:
    """Shared collaborators for one generation call."""

    grid: GridModel
    styles: StylesCatalog
    resolver: RowSpanResolver
    config: LayoutConfig
    money_format: str

    def style(self, style_id: str) -> CellStyle:
        return self.styles.require(style_id)

    def money(self, style_id: str) -> CellStyle:
        return self.style(style_id).with_number_format(self.money_format)


@dataclass(slots=True)
class LineItemsResult:
    cursor: Cursor
    first_item_row: int
    last_item_row: int
    total_files_row: int
    rendered_lines: List[BillLine]
    total_files: float
    subtotal: float


@dataclass(slots=True)
class SummaryResult:
    cursor: Cursor
    subtotal_row: int
    discount_row: int
    tax_row: int
    grand_total_row: int
    totals: InvoiceTotals


@dataclass(slots=True)
class BankDetailsResult:
    cursor: Cursor
    heading_row: int
    spans: List[RowSpan]
    closing_row: int


def format_issue_date(value: datetime.date) -> str:
    """``October 19, 2026`` style date used in the heading."""
    return f"{value:%B} {value.day}, {value.year}"


# ----------------------------------------------------------------------
# Heading
def render_heading(
    ctx: SectionContext,
    cursor: Cursor,
    parties: InvoiceParties,
    issued_on: datetime.date,
    logo: Optional[LogoImage] = None,
) -> Cursor:
    """Logo, the ``INVOICE`` title, date and invoice number, then a blank row."""
    top = cursor.row
    if logo is not None:
        ctx.grid.add_image(
            ImageAnchor(
                row=top,
                column=COL_C,
                width_px=LOGO_WIDTH_PX,
                height_px=LOGO_HEIGHT_PX,
                media_type=logo.media_type,
                data=logo.data,
            )
        )
    ctx.grid.write_cell(CellRange(top, COL_E, top + 2, COL_H), "INVOICE", ctx.style("title"))
    ctx.grid.write_cell(
        CellRange(top + 3, COL_E, top + 3, COL_H),
        f"DATE: {format_issue_date(issued_on)}",
        ctx.style("heading_meta"),
    )
    ctx.grid.write_cell(
        CellRange(top + 4, COL_E, top + 4, COL_H),
        f"INVOICE #: {parties.invoice_number}",
        ctx.style("heading_meta"),
    )
    return cursor.advance(6)


# ----------------------------------------------------------------------
# Paired blocks
def _labelled(entry: PairEntry) -> Optional[RichText]:
    if entry is None:
        return None
    label, value = entry
    if not value:
        return None
    return RichText.labelled(label, value)


def render_paired_rows(
    ctx: SectionContext,
    spans: Sequence[RowSpan],
    left: Sequence[PairEntry],
    right: Sequence[PairEntry],
    style: CellStyle,
) -> None:
    """Write both sides of every span over identical row ranges."""
    for index, span in enumerate(spans):
        if span.is_multi_row:
            ctx.grid.set_row_height_range(span.start, span.end, ROW_HEIGHT_COMPACT)
        else:
            ctx.grid.set_row_height(span.start, ROW_HEIGHT_STANDARD)
        left_entry = left[index] if index < len(left) else None
        right_entry = right[index] if index < len(right) else None
        ctx.grid.write_cell(CellRange(span.start, COL_A, span.end, COL_D), _labelled(left_entry), style)
        ctx.grid.write_cell(CellRange(span.start, COL_E, span.end, COL_H), _labelled(right_entry), style)


def render_contact_table(ctx: SectionContext, cursor: Cursor, parties: InvoiceParties) -> Cursor:
    header_row = cursor.row
    ctx.grid.write_cell(CellRange(header_row, COL_A, header_row, COL_D), "VENDOR", ctx.style("table_header"))
    ctx.grid.write_cell(CellRange(header_row, COL_E, header_row, COL_H), "CUSTOMER", ctx.style("table_header"))
    ctx.grid.set_row_height(header_row, ROW_HEIGHT_STANDARD)

    left = list(parties.issuer.entries)
    right = list(parties.recipient.entries)
    spans = ctx.resolver.resolve(left, right, header_row + 1)
    render_paired_rows(ctx, spans, left, right, ctx.style("contact_cell"))
    return Cursor(spans[-1].end + 1) if spans else cursor.advance()


# ----------------------------------------------------------------------
# Line items
def pad_bill_lines(bill_lines: Sequence[BillLine], floor: int) -> List[BillLine]:
    """Append blank lines until at least ``floor`` rows exist."""
    padded = list(bill_lines)
    padded.extend(BillLine.blank() for _ in range(floor - len(padded)))
    return padded


def render_line_items(ctx: SectionContext, cursor: Cursor, bill_lines: Sequence[BillLine]) -> LineItemsResult:
    """Spacer row, two-row header, the item rows and the TOTAL FILES row."""
    grid = ctx.grid
    header_top = cursor.row + 1
    header_bottom = cursor.row + 2
    header_style = ctx.style("table_header")
    for left, right, title in (
        (COL_A, COL_B, "DATE"),
        (COL_C, COL_D, "JOB NAME"),
        (COL_E, COL_E, "QUANTITY"),
        (COL_F, COL_F, "UNIT PRICE"),
        (COL_G, COL_H, "TOTAL"),
    ):
        grid.write_cell(CellRange(header_top, left, header_bottom, right), title, header_style)
    grid.set_row_height(header_top, ROW_HEIGHT_COMPACT)
    grid.set_row_height(header_bottom, ROW_HEIGHT_HEADER_GAP)

    lines = pad_bill_lines(bill_lines, ctx.config.min_bill_rows)
    first_row = header_bottom + 1
    total_files = 0.0
    subtotal = 0.0
    center = ctx.style("item_center")
    for offset, line in enumerate(lines):
        row = first_row + offset
        grid.set_row_height(row, ROW_HEIGHT_ITEM)
        grid.write_cell(CellRange(row, COL_A, row, COL_B), line.date, center.with_number_format(DATE_FORMAT))
        grid.write_cell(CellRange(row, COL_C, row, COL_D), line.description, ctx.style("item_text"))
        grid.write_cell(CellRange.single(row, COL_E), line.quantity, center)
        grid.write_cell(CellRange.single(row, COL_F), line.unit_price, ctx.money("item_center"))
        grid.write_cell(
            CellRange(row, COL_G, row, COL_H),
            formulas.product(row, COL_E, COL_F, line.quantity, line.unit_price),
            ctx.money("item_center"),
        )
        total_files += line.quantity
        subtotal += line.line_total

    last_row = first_row + len(lines) - 1
    totals_row = last_row + 1
    blank = ctx.style("total_files_blank")
    label = ctx.style("total_files_label")
    grid.write_cell(CellRange(totals_row, COL_A, totals_row, COL_B), None, blank)
    grid.write_cell(CellRange(totals_row, COL_C, totals_row, COL_D), "TOTAL FILES", label)
    grid.write_cell(
        CellRange.single(totals_row, COL_E),
        formulas.sum_range(CellRange(first_row, COL_E, last_row, COL_E), (line.quantity for line in lines)),
        label,
    )
    grid.write_cell(CellRange.single(totals_row, COL_F), None, blank)
    grid.write_cell(CellRange(totals_row, COL_G, totals_row, COL_H), None, blank)
    grid.set_row_height(totals_row, ROW_HEIGHT_STANDARD)

    return LineItemsResult(
        cursor=Cursor(totals_row + 1),
        first_item_row=first_row,
        last_item_row=last_row,
        total_files_row=totals_row,
        rendered_lines=lines,
        total_files=total_files,
        subtotal=subtotal,
    )


# ----------------------------------------------------------------------
# Summary
def render_summary(
    ctx: SectionContext,
    cursor: Cursor,
    items: LineItemsResult,
    parties: InvoiceParties,
) -> SummaryResult:
    """Subtotal, discount, sales tax and grand total beside the payment note."""
    subtotal_row = cursor.row
    discount_row = subtotal_row + 1
    tax_row = subtotal_row + 2
    grand_total_row = subtotal_row + 3

    subtotal_value = formulas.sum_range(
        CellRange(items.first_item_row, COL_G, items.last_item_row, COL_H),
        (line.line_total for line in items.rendered_lines),
    )
    subtotal = subtotal_value.result
    discount_value = formulas.scaled(subtotal_row, COL_G, subtotal, parties.discount_rate)
    tax_value = formulas.scaled(subtotal_row, COL_G, subtotal, parties.tax_rate)
    grand_value = formulas.net_total(
        COL_G, subtotal_row, discount_row, tax_row, subtotal, discount_value.result, tax_value.result
    )

    ctx.grid.write_cell(
        CellRange(discount_row, COL_A, grand_total_row, COL_D),
        ctx.config.payment_note,
        ctx.style("payment_note"),
    )
    rows = (
        (subtotal_row, "SUBTOTAL", subtotal_value, "summary_label", "summary_value"),
        (discount_row, "DISCOUNT", discount_value, "summary_label", "summary_value"),
        (tax_row, "SALES TAX.", tax_value, "summary_label", "summary_value"),
        (grand_total_row, "GRAND TOTAL", grand_value, "grand_total_label", "grand_total_value"),
    )
    for row, title, value, label_style, value_style in rows:
        ctx.grid.write_cell(CellRange.single(row, COL_F), title, ctx.style(label_style))
        ctx.grid.write_cell(CellRange(row, COL_G, row, COL_H), value, ctx.money(value_style))
    ctx.grid.set_row_height_range(subtotal_row, grand_total_row, ROW_HEIGHT_STANDARD)

    totals = InvoiceTotals(
        total_files=items.total_files,
        subtotal=subtotal,
        discount=discount_value.result,
        sales_tax=tax_value.result,
        grand_total=grand_value.result,
    )
    return SummaryResult(
        cursor=Cursor(grand_total_row + 1),
        subtotal_row=subtotal_row,
        discount_row=discount_row,
        tax_row=tax_row,
        grand_total_row=grand_total_row,
        totals=totals,
    )


# ----------------------------------------------------------------------
# Bank details and footer
def trailing_block_height(spans: Sequence[RowSpan], gap_rows: int, default_row_height: float) -> float:
    """Exact height of gap + bank block + footer for a given gap size."""
    return (
        gap_rows * default_row_height
        + ROW_HEIGHT_COMPACT  # heading
        + ROW_HEIGHT_COMPACT  # sub-heading
        + span_block_height(spans, ROW_HEIGHT_COMPACT, ROW_HEIGHT_STANDARD)
        + ROW_HEIGHT_STANDARD  # closing bar
        + ROW_HEIGHT_COMPACT  # spacer
        + ROW_HEIGHT_COMPACT * FOOTER_LINE_COUNT
    )


def bank_heading_text(parties: InvoiceParties) -> str:
    company = parties.issuer.company_name
    return f"{company} BANK DETAILS".upper() if company else "BANK DETAILS"


def render_bank_details(
    ctx: SectionContext,
    cursor: Cursor,
    parties: InvoiceParties,
    primary: BankAccount,
    secondary: BankAccount,
) -> BankDetailsResult:
    grid = ctx.grid
    heading_row = cursor.row
    grid.write_cell(
        CellRange(heading_row, COL_A, heading_row, COL_H), bank_heading_text(parties), ctx.style("bank_heading")
    )
    grid.set_row_height(heading_row, ROW_HEIGHT_COMPACT)

    sub_row = heading_row + 1
    sub_style = ctx.style("bank_subheading")
    grid.write_cell(CellRange(sub_row, COL_A, sub_row, COL_D), primary.header or "Bank Details", sub_style)
    grid.write_cell(CellRange(sub_row, COL_E, sub_row, COL_H), secondary.header or "Other Bank Details", sub_style)
    grid.set_row_height(sub_row, ROW_HEIGHT_COMPACT)

    left = primary.pairs()
    right = secondary.pairs()
    spans = ctx.resolver.resolve(left, right, sub_row + 1)
    render_paired_rows(ctx, spans, left, right, ctx.style("bank_cell"))

    closing_row = spans[-1].end + 1 if spans else sub_row + 1
    grid.write_cell(CellRange(closing_row, COL_A, closing_row, COL_H), None, ctx.style("closing_bar"))
    grid.set_row_height(closing_row, ROW_HEIGHT_STANDARD)

    return BankDetailsResult(
        cursor=Cursor(closing_row + 1),
        heading_row=heading_row,
        spans=spans,
        closing_row=closing_row,
    )


def _contact_line(parties: InvoiceParties) -> RichText:
    issuer = parties.issuer
    details = ", ".join(value for value in (issuer.email, issuer.contact_number) if value)
    runs: List[TextRun] = []
    if issuer.contact_person:
        runs.append(TextRun(issuer.contact_person, bold=True))
        if details:
            runs.append(TextRun(f", {details}"))
    elif details:
        runs.append(TextRun(details))
    return RichText(tuple(runs))


def render_footer(ctx: SectionContext, cursor: Cursor, parties: InvoiceParties) -> Cursor:
    """Spacer row followed by the questions, contact and thank-you lines."""
    grid = ctx.grid
    spacer_row = cursor.row
    grid.set_row_height(spacer_row, ROW_HEIGHT_COMPACT)

    lines = (
        ("If you have any questions about this invoice, please contact", "footer_question"),
        (_contact_line(parties), "footer_line"),
        (RichText((TextRun("Thank You For Your Business!", bold=True, italic=True),)), "footer_line"),
    )
    for offset, (value, style_id) in enumerate(lines, start=1):
        row = spacer_row + offset
        grid.write_cell(CellRange(row, COL_A, row, COL_H), value, ctx.style(style_id))
        grid.set_row_height(row, ROW_HEIGHT_COMPACT)
    return Cursor(spacer_row + len(lines) + 1)
