"""Entry-point for the invoice layout pipeline."""
from __future__ import annotations

import argparse
import datetime
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from invoice_layout.layout.layout_calculator import InvoiceLayoutCalculator
from invoice_layout.layout.sections import LogoImage
from invoice_layout.model.document_model import Document
from invoice_layout.model.errors import AssetLoadError, GenerationFailure, InvoiceLayoutError
from invoice_layout.model.invoice_model import BankAccount, BillLine, InvoiceParties, validate_inputs
from invoice_layout.model.layout_config import LayoutConfig
from invoice_layout.parser.asset_loader import AssetSource, FileAssetSource, load_logo, load_logo_async
from invoice_layout.parser.payload_parser import PayloadParser
from invoice_layout.utils.debug import DebugDumper
from invoice_layout.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)

GenerationResult = Union[Document, GenerationFailure]


def _failure(error: InvoiceLayoutError) -> GenerationFailure:
    LOGGER.warning("Invoice generation failed (%s): %s", error.kind, error)
    return GenerationFailure.from_error(error)


def _require_source(config: LayoutConfig, asset_source: Optional[AssetSource]) -> None:
    if config.logo_path is not None and asset_source is None:
        raise AssetLoadError(
            f"No asset source supplied for logo {config.logo_path!r}; set logo_path=None to omit the logo"
        )


def generate(
    parties: InvoiceParties,
    bill_lines: Sequence[BillLine],
    bank_accounts: Sequence[BankAccount],
    config: Optional[LayoutConfig] = None,
    *,
    asset_source: Optional[AssetSource] = None,
    today: Optional[datetime.date] = None,
) -> GenerationResult:
    """Lay out one invoice; failures come back as a ``GenerationFailure`` value."""
    config = config or LayoutConfig()
    try:
        validate_inputs(parties, bill_lines, bank_accounts)
        logo: Optional[LogoImage] = None
        if config.logo_path is not None:
            _require_source(config, asset_source)
            logo = load_logo(asset_source, config.logo_path)
        return InvoiceLayoutCalculator(config).calculate(parties, bill_lines, bank_accounts, logo, today)
    except InvoiceLayoutError as error:
        return _failure(error)


async def generate_async(
    parties: InvoiceParties,
    bill_lines: Sequence[BillLine],
    bank_accounts: Sequence[BankAccount],
    config: Optional[LayoutConfig] = None,
    *,
    asset_source: Optional[AssetSource] = None,
    today: Optional[datetime.date] = None,
    asset_timeout: Optional[float] = None,
) -> GenerationResult:
    """Same contract as :func:`generate`; only the logo fetch may suspend."""
    config = config or LayoutConfig()
    try:
        validate_inputs(parties, bill_lines, bank_accounts)
        logo: Optional[LogoImage] = None
        if config.logo_path is not None:
            _require_source(config, asset_source)
            logo = await load_logo_async(asset_source, config.logo_path, timeout=asset_timeout)
        return InvoiceLayoutCalculator(config).calculate(parties, bill_lines, bank_accounts, logo, today)
    except InvoiceLayoutError as error:
        return _failure(error)


def main(payload_file: str, output_dir: Optional[str] = None, assets_dir: Optional[str] = None) -> int:
    """Run payload → layout → JSON dump; returns a process exit code."""
    payload_path = Path(payload_file).resolve()
    if not payload_path.exists():
        raise FileNotFoundError(f"Payload file not found: {payload_path}")

    try:
        request = PayloadParser.from_file(payload_path).parse()
    except InvoiceLayoutError as error:
        LOGGER.error("Rejected payload %s: %s", payload_path.name, error)
        return 2

    source = FileAssetSource(assets_dir or payload_path.parent)
    LOGGER.info("Generating invoice from %s", payload_path.name)
    result = generate(
        request.parties,
        request.bill_lines,
        request.bank_accounts,
        request.config,
        asset_source=source,
    )
    if isinstance(result, GenerationFailure):
        LOGGER.error("%s: %s", result.kind, result.message)
        return 1

    output_path = Path(output_dir or payload_path.with_suffix("")).resolve()
    target = DebugDumper(output_path).dump(result)
    LOGGER.info("Wrote laid-out document to %s", target)
    return 0


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Lay out an invoice payload into a paginated grid document")
    parser.add_argument("payload_file", help="Path to the invoice JSON payload")
    parser.add_argument("--output", help="Directory to write the laid-out document JSON")
    parser.add_argument("--assets", help="Directory the logo path is resolved against")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log row spans and fit decisions")

    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    return main(args.payload_file, args.output, args.assets)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(cli())
