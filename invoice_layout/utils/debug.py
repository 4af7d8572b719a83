"""Helpers to persist the laid-out document for debugging."""
from __future__ import annotations

import base64
import datetime
import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict

from invoice_layout.model.document_model import Document
from invoice_layout.model.grid_model import CellRange, FormulaValue, GridModel, RichText


class DebugDumper:
    """Writes the committed grid and pagination data onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document) -> Path:
        """Persist the document as JSON and return the written path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "invoice_document.json"
        target.write_text(json.dumps(document_to_dict(document), indent=2), encoding="utf-8")
        return target


def document_to_dict(document: Document) -> Dict[str, Any]:
    return {
        "sheetName": document.sheet_name,
        "tabColor": document.tab_color,
        "printArea": _serialize(document.print_area),
        "pageSetup": document.page_setup,
        "pageBreaks": list(document.page_breaks),
        "pages": _serialize(document.pages),
        "fit": _serialize(document.fit),
        "totals": _serialize(document.totals),
        "metadata": _serialize(document.metadata),
        "grid": grid_to_dict(document.grid),
    }


def grid_to_dict(grid: GridModel) -> Dict[str, Any]:
    return {
        "columnWidths": list(grid.column_widths),
        "defaultRowHeight": grid.default_row_height,
        "rowHeights": {
            str(row): grid.explicit_row_height(row)
            for row in grid.committed_rows()
            if grid.explicit_row_height(row) is not None
        },
        "merges": [_serialize(cell_range) for cell_range in grid.merges],
        "cells": [
            {
                "range": _serialize(write.range),
                "value": _serialize_value(write.value),
                "style": asdict(write.style) if write.style else None,
            }
            for write in grid.writes()
        ],
        "images": [
            {
                "row": image.row,
                "column": image.column,
                "width": image.width_px,
                "height": image.height_px,
                "mediaType": image.media_type,
                "base64": base64.b64encode(image.data).decode("ascii"),
            }
            for image in grid.images
        ],
    }


def _serialize_value(value: Any) -> Any:
    if isinstance(value, FormulaValue):
        return {"formula": value.expression, "result": value.result}
    if isinstance(value, RichText):
        return {"richText": [asdict(run) for run in value.runs]}
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


def _serialize(value: Any) -> Any:
    if isinstance(value, CellRange):
        return [value.top, value.left, value.bottom, value.right]
    if is_dataclass(value):
        return {k: _serialize(v) for k, v in asdict(value).items()}
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value
