"""Tests for the public generate entry points and the CLI runner."""
import asyncio
import json
import tempfile
import unittest
from pathlib import Path

from invoice_layout.main import cli, generate, generate_async, main
from invoice_layout.model.document_model import Document
from invoice_layout.model.errors import GenerationFailure
from invoice_layout.model.invoice_model import BillLine
from invoice_layout.model.layout_config import LayoutConfig
from invoice_layout.parser.payload_parser import parse_payload
from invoice_layout.tests.sample_data import (
    PNG_BYTES,
    make_bank_accounts,
    make_bill_lines,
    make_parties,
    sample_payload,
)


class _MemorySource:
    def __init__(self, assets: dict) -> None:
        self.assets = assets

    def fetch_asset(self, path: str) -> bytes:
        return self.assets[path]


class GenerateTest(unittest.TestCase):
    """Failures come back as values, never as exceptions."""

    def test_document_without_logo(self) -> None:
        result = generate(make_parties(), make_bill_lines(), make_bank_accounts(), LayoutConfig(logo_path=None))

        self.assertIsInstance(result, Document)
        self.assertEqual(result.grid.images, [])

    def test_logo_is_anchored(self) -> None:
        source = _MemorySource({"images/logo-grey.png": PNG_BYTES})

        result = generate(make_parties(), make_bill_lines(), make_bank_accounts(), asset_source=source)

        self.assertIsInstance(result, Document)
        self.assertEqual(len(result.grid.images), 1)

    def test_missing_asset_source(self) -> None:
        result = generate(make_parties(), make_bill_lines(), make_bank_accounts())

        self.assertIsInstance(result, GenerationFailure)
        self.assertEqual(result.kind, "asset_load_error")
        self.assertFalse(result)

    def test_unreadable_logo(self) -> None:
        result = generate(
            make_parties(), make_bill_lines(), make_bank_accounts(), asset_source=_MemorySource({})
        )

        self.assertEqual(result.kind, "asset_load_error")

    def test_validation_failure(self) -> None:
        lines = [BillLine("", "Refund", -1, 10)]

        result = generate(make_parties(), lines, make_bank_accounts(), LayoutConfig(logo_path=None))

        self.assertEqual(result.kind, "validation_error")
        self.assertIn("negative", result.message)

    def test_numeric_contact_number_from_payload(self) -> None:
        payload = sample_payload()
        payload["vendor"]["contact_number"] = 5550100
        request = parse_payload(payload)

        result = generate(request.parties, request.bill_lines, request.bank_accounts, LayoutConfig(logo_path=None))

        self.assertIsInstance(result, Document)
        contact_line = result.grid.value_at(result.grid.last_row - 1, 1)
        self.assertIn("5550100", contact_line.plain_text)

    def test_negative_rate_failure(self) -> None:
        result = generate(
            make_parties(discount_rate=-0.1), make_bill_lines(), make_bank_accounts(), LayoutConfig(logo_path=None)
        )

        self.assertEqual(result.kind, "validation_error")
        self.assertIn("rates", result.message)

    def test_overflow_failure(self) -> None:
        config = LayoutConfig(logo_path=None, printable_height_override=100)

        result = generate(make_parties(), make_bill_lines(), make_bank_accounts(), config)

        self.assertEqual(result.kind, "layout_overflow_error")

    def test_async_generation_matches_sync(self) -> None:
        source = _MemorySource({"images/logo-grey.png": PNG_BYTES})

        sync_result = generate(make_parties(), make_bill_lines(), make_bank_accounts(), asset_source=source)
        async_result = asyncio.run(
            generate_async(make_parties(), make_bill_lines(), make_bank_accounts(), asset_source=source)
        )

        self.assertEqual(async_result.totals, sync_result.totals)
        self.assertEqual(async_result.page_breaks, sync_result.page_breaks)
        self.assertEqual(async_result.last_row, sync_result.last_row)

    def test_async_failure_is_a_value(self) -> None:
        result = asyncio.run(generate_async(make_parties(), make_bill_lines(), make_bank_accounts()[:1]))

        self.assertEqual(result.kind, "validation_error")


class MainTest(unittest.TestCase):
    def test_writes_document_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload = sample_payload()
            payload["config"] = {"logo_path": None}
            payload_path = Path(tmp) / "invoice.json"
            payload_path.write_text(json.dumps(payload), encoding="utf-8")

            code = main(str(payload_path), output_dir=str(Path(tmp) / "out"))

            self.assertEqual(code, 0)
            written = json.loads((Path(tmp) / "out" / "invoice_document.json").read_text(encoding="utf-8"))
            self.assertEqual(written["sheetName"], "INVOICE")
            self.assertEqual(written["metadata"]["invoiceNumber"], "INV-7")

    def test_logo_resolved_from_assets_dir(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            assets = Path(tmp) / "assets" / "images"
            assets.mkdir(parents=True)
            (assets / "logo-grey.png").write_bytes(PNG_BYTES)
            payload_path = Path(tmp) / "invoice.json"
            payload = sample_payload()
            payload["config"] = {}
            payload_path.write_text(json.dumps(payload), encoding="utf-8")

            code = main(str(payload_path), output_dir=str(Path(tmp) / "out"), assets_dir=str(Path(tmp) / "assets"))

            self.assertEqual(code, 0)

    def test_generation_failure_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload_path = Path(tmp) / "invoice.json"
            payload = sample_payload()
            payload["config"] = {}
            payload_path.write_text(json.dumps(payload), encoding="utf-8")

            self.assertEqual(main(str(payload_path), output_dir=str(Path(tmp) / "out")), 1)

    def test_invalid_layout_option_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload_path = Path(tmp) / "invoice.json"
            payload = sample_payload()
            payload["bill"] = []
            payload["config"] = {"logo_path": None, "min_bill_rows": 0}
            payload_path.write_text(json.dumps(payload), encoding="utf-8")

            self.assertEqual(main(str(payload_path), output_dir=str(Path(tmp) / "out")), 2)

    def test_rejected_payload_exit_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload_path = Path(tmp) / "invoice.json"
            payload_path.write_text("[]", encoding="utf-8")

            self.assertEqual(main(str(payload_path)), 2)

    def test_cli_arguments(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            payload = sample_payload()
            payload["config"] = {"logo_path": None}
            payload_path = Path(tmp) / "invoice.json"
            payload_path.write_text(json.dumps(payload), encoding="utf-8")

            code = cli([str(payload_path), "--output", str(Path(tmp) / "cli-out")])

            self.assertEqual(code, 0)
            self.assertTrue((Path(tmp) / "cli-out" / "invoice_document.json").exists())

    def test_missing_payload_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            main("/nonexistent/invoice.json")


if __name__ == "__main__":
    unittest.main()
