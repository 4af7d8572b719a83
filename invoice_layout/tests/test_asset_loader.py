"""Test cases for heading logo loading."""
import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest.mock import Mock

from invoice_layout.model.errors import AssetLoadError
from invoice_layout.parser.asset_loader import (
    FileAssetSource,
    decode_logo,
    detect_media_type,
    image_dimensions,
    load_logo,
    load_logo_async,
)
from invoice_layout.tests.sample_data import PNG_BYTES


class _SyncSource:
    def __init__(self, data: bytes) -> None:
        self.data = data

    def fetch_asset(self, path: str) -> bytes:
        return self.data


class _AsyncSource:
    def __init__(self, data: bytes) -> None:
        self.data = data

    async def fetch_asset(self, path: str) -> bytes:
        await asyncio.sleep(0)
        return self.data


class AssetLoaderTest(unittest.TestCase):
    """Logo bytes are fetched, sniffed and wrapped."""

    def test_media_type_from_signature(self) -> None:
        self.assertEqual(detect_media_type(PNG_BYTES), "image/png")
        self.assertEqual(detect_media_type(b"\xff\xd8\xff\xe0rest"), "image/jpeg")
        self.assertEqual(detect_media_type(b"GIF89a..."), "image/gif")
        self.assertIsNone(detect_media_type(b"<svg/>"))

    def test_png_dimensions(self) -> None:
        self.assertEqual(image_dimensions(PNG_BYTES), {"width": 149, "height": 101})
        self.assertEqual(image_dimensions(b"\xff\xd8"), {})

    def test_load_from_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "images").mkdir()
            (Path(tmp) / "images" / "logo.png").write_bytes(PNG_BYTES)

            logo = load_logo(FileAssetSource(tmp), "images/logo.png")

        self.assertEqual(logo.media_type, "image/png")
        self.assertEqual(logo.path, "images/logo.png")
        self.assertEqual(logo.data, PNG_BYTES)

    def test_missing_file_is_asset_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(AssetLoadError):
                load_logo(FileAssetSource(tmp), "images/absent.png")

    def test_unrecognised_bytes_rejected(self) -> None:
        with self.assertRaises(AssetLoadError):
            decode_logo("logo.bmp", b"BM\x00\x00")
        with self.assertRaises(AssetLoadError):
            decode_logo("logo.png", b"")
        with self.assertRaises(AssetLoadError):
            decode_logo("logo.png", "not bytes")

    def test_source_failure_is_wrapped(self) -> None:
        source = Mock()
        source.fetch_asset.side_effect = OSError("connection reset")

        with self.assertRaises(AssetLoadError) as ctx:
            load_logo(source, "images/logo.png")

        self.assertIn("connection reset", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_sync_loader_rejects_async_source(self) -> None:
        with self.assertRaises(AssetLoadError):
            load_logo(_AsyncSource(PNG_BYTES), "images/logo.png")

    def test_async_loader_accepts_both_kinds_of_source(self) -> None:
        sync_source = _SyncSource(PNG_BYTES)

        from_async = asyncio.run(load_logo_async(_AsyncSource(PNG_BYTES), "a.png"))
        from_sync = asyncio.run(load_logo_async(sync_source, "b.png"))

        self.assertEqual(from_async.media_type, "image/png")
        self.assertEqual(from_sync.path, "b.png")

    def test_async_timeout(self) -> None:
        class SlowSource:
            async def fetch_asset(self, path: str) -> bytes:
                await asyncio.sleep(1)
                return PNG_BYTES

        with self.assertRaises(AssetLoadError):
            asyncio.run(load_logo_async(SlowSource(), "slow.png", timeout=0.01))


if __name__ == "__main__":
    unittest.main()
