"""Tests for formula construction and evaluation."""
import unittest

from invoice_layout.layout import formulas
from invoice_layout.model.grid_model import CellRange, FormulaValue, GridModel


class ReferenceTest(unittest.TestCase):
    def test_cell_reference(self) -> None:
        self.assertEqual(formulas.cell_ref(16, 5), "E16")
        self.assertEqual(formulas.cell_ref(3, 27), "AA3")

    def test_invalid_column_rejected(self) -> None:
        with self.assertRaises(ValueError):
            formulas.cell_ref(1, 0)

    def test_range_reference(self) -> None:
        self.assertEqual(formulas.range_ref(CellRange(16, 5, 25, 5)), "E16:E25")


class BuilderTest(unittest.TestCase):
    """Builders pair the expression with the accumulated result."""

    def test_product(self) -> None:
        value = formulas.product(16, 5, 6, 3, 2.5)

        self.assertEqual(value, FormulaValue("E16*F16", 7.5))

    def test_sum_range(self) -> None:
        value = formulas.sum_range(CellRange(16, 7, 18, 7), [1.0, 2.0, 4.0])

        self.assertEqual(value.expression, "SUM(G16:G18)")
        self.assertEqual(value.result, 7.0)

    def test_scaled_keeps_integer_rates_short(self) -> None:
        self.assertEqual(formulas.scaled(27, 7, 40.0, 0.1).expression, "G27*0.1")
        self.assertEqual(formulas.scaled(27, 7, 40.0, 0).expression, "G27*0")

    def test_net_total(self) -> None:
        value = formulas.net_total(7, 27, 28, 29, 100.0, 10.0, 5.0)

        self.assertEqual(value.expression, "(G27-G28+G29)")
        self.assertEqual(value.result, 95.0)


class EvaluateTest(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = GridModel(column_widths=[10] * 8, default_row_height=15.0)
        self.grid.write_cell(CellRange.single(1, 5), 3)
        self.grid.write_cell(CellRange.single(1, 6), 2.5)
        self.grid.write_cell(CellRange.single(2, 5), 4)
        self.grid.write_cell(CellRange.single(2, 6), "n/a")
        self.grid.write_cell(CellRange(1, 7, 1, 8), formulas.product(1, 5, 6, 3, 2.5))
        self.grid.write_cell(CellRange(2, 7, 2, 8), formulas.product(2, 5, 6, 4, 0))

    def test_references_and_arithmetic(self) -> None:
        self.assertEqual(formulas.evaluate(self.grid, "E1*F1"), 7.5)
        self.assertEqual(formulas.evaluate(self.grid, "(E1+E2)/2 - 1"), 2.5)
        self.assertEqual(formulas.evaluate(self.grid, "-E1"), -3.0)

    def test_text_and_empty_cells_are_zero(self) -> None:
        self.assertEqual(formulas.evaluate(self.grid, "F2+A9"), 0.0)

    def test_sum_follows_nested_formulas(self) -> None:
        self.assertEqual(formulas.evaluate(self.grid, "SUM(G1:G2)"), 7.5)
        self.assertEqual(formulas.evaluate(self.grid, "SUM(E1:E2, 1)"), 8.0)

    def test_malformed_expression(self) -> None:
        with self.assertRaises(ValueError):
            formulas.evaluate(self.grid, "E1*")
        with self.assertRaises(ValueError):
            formulas.evaluate(self.grid, "MAX(E1:E2)")
        with self.assertRaises(ValueError):
            formulas.evaluate(self.grid, "E1 $ 2")
        with self.assertRaises(ValueError):
            formulas.evaluate(self.grid, "E0+1")


if __name__ == "__main__":
    unittest.main()
