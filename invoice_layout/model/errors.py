"""Error taxonomy and the failure value returned across the public boundary."""
from __future__ import annotations

from dataclasses import dataclass


class InvoiceLayoutError(Exception):
    """Base class for failures the engine reports to callers."""

    kind = "layout_error"


class ValidationError(InvoiceLayoutError):
    """Required structural input is missing or malformed."""

    kind = "validation_error"


class AssetLoadError(InvoiceLayoutError):
    """The heading logo could not be fetched or decoded."""

    kind = "asset_load_error"


class LayoutOverflowError(InvoiceLayoutError):
    """The trailing block does not fit even on an empty page."""

    kind = "layout_overflow_error"


@dataclass(frozen=True, slots=True)
class GenerationFailure:
    """Typed failure result so callers never inspect stack traces."""

    kind: str
    message: str

    @classmethod
    def from_error(cls, error: InvoiceLayoutError) -> "GenerationFailure":
        return cls(kind=error.kind, message=str(error))

    def __bool__(self) -> bool:
        return False
