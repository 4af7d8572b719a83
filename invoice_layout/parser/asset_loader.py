"""
Heading asset loading.

Fetches the logo image through a caller-supplied asset source, checks that the
payload is an image we can embed, and wraps it for the heading renderer.
"""
from __future__ import annotations

import asyncio
import inspect
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from invoice_layout.layout.sections import LogoImage
from invoice_layout.model.errors import AssetLoadError
from invoice_layout.utils.logger import get_logger

LOGGER = get_logger(__name__)

_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


class AssetSource(Protocol):
    """Anything able to return the raw bytes stored under ``path``."""

    def fetch_asset(self, path: str) -> Union[bytes, Any]:
        ...


class FileAssetSource:
    """Asset source backed by a directory on disk."""

    def __init__(self, base_dir: Union[str, Path]) -> None:
        self.base_dir = Path(base_dir)

    def fetch_asset(self, path: str) -> bytes:
        return (self.base_dir / path).read_bytes()


def detect_media_type(data: bytes) -> Optional[str]:
    """Identify an embeddable image from its leading signature bytes."""
    for signature, media_type in _SIGNATURES:
        if data.startswith(signature):
            return media_type
    return None


def image_dimensions(data: bytes) -> Dict[str, int]:
    """Width/height read straight from a PNG IHDR chunk; empty for other formats."""
    if data.startswith(b"\x89PNG\r\n\x1a\n") and len(data) >= 24:
        return {
            "width": int.from_bytes(data[16:20], "big"),
            "height": int.from_bytes(data[20:24], "big"),
        }
    return {}


def decode_logo(path: str, data: Any) -> LogoImage:
    if not isinstance(data, (bytes, bytearray)) or not data:
        raise AssetLoadError(f"Logo asset {path!r} is empty or not binary data")
    media_type = detect_media_type(bytes(data))
    if media_type is None:
        raise AssetLoadError(f"Logo asset {path!r} is not a PNG, JPEG or GIF image")
    LOGGER.debug("Loaded logo %s (%s, %d bytes, %s)", path, media_type, len(data), image_dimensions(bytes(data)))
    return LogoImage(path=path, media_type=media_type, data=bytes(data))


def load_logo(source: AssetSource, path: str) -> LogoImage:
    """Fetch and decode the logo synchronously."""
    try:
        data = source.fetch_asset(path)
    except Exception as exc:
        raise AssetLoadError(f"Could not fetch logo asset {path!r}: {exc}") from exc
    if inspect.isawaitable(data):
        close = getattr(data, "close", None)
        if close is not None:
            close()
        raise AssetLoadError(f"Asset source returned an awaitable for {path!r}; use generate_async")
    return decode_logo(path, data)


async def load_logo_async(source: AssetSource, path: str, timeout: Optional[float] = None) -> LogoImage:
    """Fetch the logo from a sync or async source without blocking the event loop."""
    try:
        fetch = source.fetch_asset
        if inspect.iscoroutinefunction(fetch):
            data = await asyncio.wait_for(fetch(path), timeout)
        else:
            data = await asyncio.wait_for(asyncio.to_thread(fetch, path), timeout)
            if inspect.isawaitable(data):
                data = await asyncio.wait_for(data, timeout)
    except asyncio.TimeoutError as exc:
        raise AssetLoadError(f"Timed out fetching logo asset {path!r}") from exc
    except Exception as exc:
        raise AssetLoadError(f"Could not fetch logo asset {path!r}: {exc}") from exc
    return decode_logo(path, data)
