"""Compose the invoice sections into a paginated grid document."""
from __future__ import annotations

import datetime
from typing import Optional, Sequence

from invoice_layout.layout import sections
from invoice_layout.layout.fit_policy import FitDecision, SamePageFitPolicy
from invoice_layout.layout.pagination import PaginationSimulator
from invoice_layout.layout.row_span_resolver import RowSpanResolver
from invoice_layout.layout.sections import Cursor, LogoImage, SectionContext
from invoice_layout.layout.text_metrics import TextMetrics
from invoice_layout.model.document_model import Document
from invoice_layout.model.grid_model import CellRange, GridModel
from invoice_layout.model.invoice_model import BankAccount, BillLine, InvoiceParties, validate_inputs
from invoice_layout.model.layout_config import LayoutConfig
from invoice_layout.model.style_model import GREEN, StylesCatalog, default_styles, money_format
from invoice_layout.utils.logger import get_logger

LOGGER = get_logger(__name__)

PAGE_MARGINS_IN = {
    "left": 0.25,
    "right": 0.25,
    "top": 0.75,
    "bottom": 0.75,
    "header": 0.3,
    "footer": 0.3,
}


class InvoiceLayoutCalculator:
    """Transform billing data into a committed, paginated grid."""

    def __init__(self, config: Optional[LayoutConfig] = None, styles: Optional[StylesCatalog] = None) -> None:
        self.config = config or LayoutConfig()
        self._styles = styles or default_styles()
        self._pagination = PaginationSimulator(self.config.printable_height, self.config.pagination_tolerance)

    # ------------------------------------------------------------------
    # Public API
    def calculate(
        self,
        parties: InvoiceParties,
        bill_lines: Sequence[BillLine],
        bank_accounts: Sequence[BankAccount],
        logo: Optional[LogoImage] = None,
        today: Optional[datetime.date] = None,
    ) -> Document:
        """Lay out every section in document order and return the document.

        Raises ``ValidationError`` before touching the grid when input is
        incomplete and ``LayoutOverflowError`` when the trailing block cannot
        fit even on an empty page.
        """
        validate_inputs(parties, bill_lines, bank_accounts)
        primary, secondary = bank_accounts

        config = self.config
        grid = GridModel(config.column_widths, config.default_row_height)
        ctx = SectionContext(
            grid=grid,
            styles=self._styles,
            resolver=RowSpanResolver(TextMetrics(config.column_widths)),
            config=config,
            money_format=money_format(parties.currency),
        )
        issued_on = parties.issued_on or today or datetime.date.today()

        cursor = sections.render_heading(ctx, Cursor(1), parties, issued_on, logo)
        cursor = sections.render_contact_table(ctx, cursor, parties)
        items = sections.render_line_items(ctx, cursor, bill_lines)
        summary = sections.render_summary(ctx, items.cursor, items, parties)
        LOGGER.debug(
            "Rendered %d item rows (%d supplied); grand total on row %d",
            len(items.rendered_lines),
            len(bill_lines),
            summary.grand_total_row,
        )

        fit = self._place_trailing_block(grid, summary.grand_total_row, primary, secondary)
        if fit.page_break:
            grid.add_page_break(summary.grand_total_row)

        bank = sections.render_bank_details(ctx, Cursor(fit.start_row), parties, primary, secondary)
        cursor = sections.render_footer(ctx, bank.cursor, parties)

        last_row = cursor.row - 1
        pages = self._pagination.simulate(grid, last_row)
        LOGGER.info(
            "Laid out invoice %s: %d rows over %d page(s), trailing gap %d%s",
            parties.invoice_number or "<unnumbered>",
            last_row,
            len(pages),
            fit.gap_rows,
            " after page break" if fit.page_break else "",
        )

        return Document(
            grid=grid,
            page_breaks=grid.page_breaks,
            pages=pages,
            totals=summary.totals,
            fit=fit,
            print_area=CellRange(1, 1, last_row, len(config.column_widths)),
            tab_color=GREEN,
            page_setup=self._page_setup(),
            metadata={
                "invoiceNumber": parties.invoice_number,
                "issuedOn": issued_on.isoformat(),
                "itemRows": [items.first_item_row, items.last_item_row],
                "grandTotalRow": summary.grand_total_row,
                "bankHeadingRow": bank.heading_row,
            },
        )

    # ------------------------------------------------------------------
    # Trailing block placement
    def headroom_at_row(self, grid: GridModel, row: int) -> float:
        return self._pagination.headroom_at_row(grid, row)

    def _place_trailing_block(
        self,
        grid: GridModel,
        cut_row: int,
        primary: BankAccount,
        secondary: BankAccount,
    ) -> FitDecision:
        config = self.config
        # Span lengths do not depend on the start row, so any preview row works.
        preview = RowSpanResolver(TextMetrics(config.column_widths)).resolve(
            primary.pairs(), secondary.pairs(), cut_row + 1
        )
        policy = SamePageFitPolicy(
            candidate_gaps=config.gap_candidates,
            safety_margin=config.safety_margin,
            printable_height=config.printable_height,
            tolerance=config.pagination_tolerance,
            keep_on_same_page=config.keep_on_same_page,
            force_new_page=config.force_new_page,
        )
        headroom = self.headroom_at_row(grid, cut_row)
        return policy.decide(
            cut_row,
            headroom,
            lambda gap: sections.trailing_block_height(preview, gap, config.default_row_height),
        )

    def _page_setup(self) -> dict:
        return {
            "orientation": "portrait",
            "paperSize": self.config.page_type,
            "pageHeight": self.config.page_height,
            "printableHeight": self.config.printable_height,
            "fitToPage": True,
            "fitToWidth": 1,
            "fitToHeight": 0,
            "horizontalCentered": True,
            "verticalCentered": False,
            "margins": dict(PAGE_MARGINS_IN),
        }
