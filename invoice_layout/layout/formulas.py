"""Build aggregate formulas together with their precomputed results.

Every total-like cell carries a :class:`FormulaValue`: an A1-style expression a
spreadsheet can recompute, and the result accumulated while the contributing
rows were rendered. :func:`evaluate` re-derives the value from the grid so the
two can be compared.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from openpyxl.utils import column_index_from_string, get_column_letter
from openpyxl.utils.cell import coordinate_from_string, range_boundaries
from openpyxl.utils.exceptions import CellCoordinatesException

from invoice_layout.model.grid_model import CellRange, FormulaValue, GridModel

_TOKEN = re.compile(
    r"\s*(?:"
    r"(?P<func>[A-Z]+)\("
    r"|(?P<range>[A-Z]+\d+:[A-Z]+\d+)"
    r"|(?P<ref>[A-Z]+\d+)"
    r"|(?P<num>\d+(?:\.\d*)?(?:[eE][-+]?\d+)?)"
    r"|(?P<op>[-+*/(),])"
    r")"
)

def cell_ref(row: int, column: int) -> str:
    return f"{get_column_letter(column)}{row}"


def range_ref(cell_range: CellRange) -> str:
    return f"{cell_ref(cell_range.top, cell_range.left)}:{cell_ref(cell_range.bottom, cell_range.right)}"


def _literal(value: float) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else repr(number)


def product(row: int, left_column: int, right_column: int, left: float, right: float) -> FormulaValue:
    """``left × right`` for two cells on the same row."""
    return FormulaValue(f"{cell_ref(row, left_column)}*{cell_ref(row, right_column)}", left * right)


def sum_range(cell_range: CellRange, values: Iterable[float]) -> FormulaValue:
    return FormulaValue(f"SUM({range_ref(cell_range)})", sum(values))


def scaled(row: int, column: int, base: float, rate: float) -> FormulaValue:
    """A referenced amount multiplied by a constant rate."""
    return FormulaValue(f"{cell_ref(row, column)}*{_literal(rate)}", base * rate)


def net_total(
    column: int,
    subtotal_row: int,
    discount_row: int,
    tax_row: int,
    subtotal: float,
    discount: float,
    tax: float,
) -> FormulaValue:
    """``subtotal - discount + tax`` over three cells of one column."""
    expression = (
        f"({cell_ref(subtotal_row, column)}-{cell_ref(discount_row, column)}+{cell_ref(tax_row, column)})"
    )
    return FormulaValue(expression, subtotal - discount + tax)


# ----------------------------------------------------------------------
# Evaluation
def _tokenize(expression: str) -> List[tuple[str, str]]:
    tokens: List[tuple[str, str]] = []
    position = 0
    stripped = expression.strip()
    while position < len(stripped):
        match = _TOKEN.match(stripped, position)
        if not match or match.end() == position:
            raise ValueError(f"Unexpected input in formula {expression!r} at {position}")
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        position = match.end()
    return tokens


class _FormulaParser:
    """Recursive-descent evaluator for the small formula subset we emit."""

    def __init__(self, grid: GridModel, tokens: List[tuple[str, str]], depth: int) -> None:
        self._grid = grid
        self._tokens = tokens
        self._position = 0
        self._depth = depth

    def parse(self) -> float:
        value = self._expression()
        if self._peek() is not None:
            raise ValueError(f"Trailing tokens in formula: {self._tokens[self._position:]}")
        return value

    def _peek(self) -> Optional[tuple[str, str]]:
        return self._tokens[self._position] if self._position < len(self._tokens) else None

    def _take(self) -> tuple[str, str]:
        token = self._peek()
        if token is None:
            raise ValueError("Unexpected end of formula")
        self._position += 1
        return token

    def _expect(self, symbol: str) -> None:
        kind, text = self._take()
        if kind != "op" or text != symbol:
            raise ValueError(f"Expected {symbol!r}, got {text!r}")

    def _expression(self) -> float:
        value = self._term()
        while (token := self._peek()) and token[0] == "op" and token[1] in "+-":
            self._take()
            value = value + self._term() if token[1] == "+" else value - self._term()
        return value

    def _term(self) -> float:
        value = self._factor()
        while (token := self._peek()) and token[0] == "op" and token[1] in "*/":
            self._take()
            value = value * self._factor() if token[1] == "*" else value / self._factor()
        return value

    def _factor(self) -> float:
        kind, text = self._take()
        if kind == "op" and text in "+-":
            value = self._factor()
            return value if text == "+" else -value
        if kind == "op" and text == "(":
            value = self._expression()
            self._expect(")")
            return value
        if kind == "num":
            return float(text)
        if kind == "ref":
            return self._cell_value(text)
        if kind == "func":
            return self._function(text)
        raise ValueError(f"Unexpected token {text!r}")

    def _function(self, name: str) -> float:
        if name != "SUM":
            raise ValueError(f"Unsupported function {name}")
        total = 0.0
        while True:
            token = self._peek()
            if token and token[0] == "range":
                self._take()
                total += self._range_total(token[1])
            else:
                total += self._expression()
            kind, text = self._take()
            if kind == "op" and text == ")":
                return total
            if kind != "op" or text != ",":
                raise ValueError(f"Expected ',' or ')' in SUM, got {text!r}")

    def _range_total(self, text: str) -> float:
        min_column, min_row, max_column, max_row = range_boundaries(text)
        return sum(
            self._resolve(row, column)
            for row in range(min_row, max_row + 1)
            for column in range(min_column, max_column + 1)
        )

    def _cell_value(self, text: str) -> float:
        column, row = _split_ref(text)
        return self._resolve(row, column)

    def _resolve(self, row: int, column: int) -> float:
        value = self._grid.value_at(row, column)
        if isinstance(value, FormulaValue):
            return evaluate(self._grid, value.expression, _depth=self._depth + 1)
        if isinstance(value, bool):
            return float(value)
        if isinstance(value, (int, float)):
            return float(value)
        return 0.0


def _split_ref(text: str) -> tuple[int, int]:
    try:
        letters, row = coordinate_from_string(text)
    except CellCoordinatesException as error:
        raise ValueError(str(error)) from error
    return column_index_from_string(letters), row


def evaluate(grid: GridModel, expression: str, *, _depth: int = 0) -> float:
    """Evaluate ``expression`` against the values currently written in ``grid``.

    Supports ``SUM``, cell and range references, numeric literals, ``+ - * /``
    and parentheses. Text and empty cells count as zero.
    """
    if _depth > 32:
        raise ValueError("Formula references are nested too deeply")
    return _FormulaParser(grid, _tokenize(expression), _depth).parse()
