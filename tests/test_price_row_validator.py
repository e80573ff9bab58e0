from __future__ import annotations

import unittest
from datetime import date
from decimal import Decimal

from app.domain.price_archive import ColumnLayout
from app.mappers.column_mapper import ColumnMapper
from app.validators.price_row_validator import PriceRowValidator


class TestPriceRowValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = PriceRowValidator(mapper=ColumnMapper(ColumnLayout.ID_FIRST))

    def _columns_in_error(self, record: list[str]) -> list[str | None]:
        row, errors = self.validator.validate_record(record, row_number=2)
        self.assertIsNone(row)
        return [error.column for error in errors]

    def test_valid_record_is_parsed(self) -> None:
        row, errors = self.validator.validate_record(
            ["1", "Widget", "Tools", "9.99", "2024-01-15"],
            row_number=2,
        )

        self.assertEqual(errors, [])
        self.assertIsNotNone(row)
        self.assertEqual(row.name, "Widget")
        self.assertEqual(row.category, "Tools")
        self.assertEqual(row.price, Decimal("9.99"))
        self.assertEqual(row.create_date, date(2024, 1, 15))
        self.assertEqual(row.product_id, 1)

    def test_fields_are_trimmed(self) -> None:
        row, _ = self.validator.validate_record(
            [" 3 ", "  Widget ", " Tools", " 4.50 ", " 2024-03-01 "],
            row_number=2,
        )

        self.assertIsNotNone(row)
        self.assertEqual((row.name, row.category), ("Widget", "Tools"))
        self.assertEqual(row.price, Decimal("4.50"))
        self.assertEqual(row.product_id, 3)

    def test_short_record_is_rejected(self) -> None:
        row, errors = self.validator.validate_record(["1", "Widget", "Tools", "9.99"], row_number=4)

        self.assertIsNone(row)
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].row_number, 4)
        self.assertIn("Expected at least 5 fields, got 4.", errors[0].message)

    def test_blank_name_and_category_are_rejected(self) -> None:
        columns = self._columns_in_error(["1", " ", "", "9.99", "2024-01-15"])
        self.assertEqual(columns, ["name", "category"])

    def test_non_numeric_price_is_rejected(self) -> None:
        for price in ("abc", "9,99", "1_000", "NaN", "Infinity", "", "0x10"):
            with self.subTest(price=price):
                self.assertEqual(
                    self._columns_in_error(["1", "Widget", "Tools", price, "2024-01-15"]),
                    ["price"],
                )

    def test_negative_price_is_rejected(self) -> None:
        row, errors = self.validator.validate_record(
            ["1", "Widget", "Tools", "-0.01", "2024-01-15"],
            row_number=2,
        )
        self.assertIsNone(row)
        self.assertIn("negative", errors[0].message)

    def test_zero_and_exponent_prices_are_accepted(self) -> None:
        for raw, expected in (("0", Decimal("0")), ("1e1", Decimal("10")), ("+5.5", Decimal("5.5"))):
            with self.subTest(price=raw):
                row, _ = self.validator.validate_record(
                    ["1", "Widget", "Tools", raw, "2024-01-15"],
                    row_number=2,
                )
                self.assertIsNotNone(row)
                self.assertEqual(row.price, expected)

    def test_invalid_dates_are_rejected(self) -> None:
        for raw in ("2024/01/15", "15-01-2024", "2024-1-5", "2024-02-30", "2024-13-01", "yesterday"):
            with self.subTest(create_date=raw):
                self.assertEqual(
                    self._columns_in_error(["1", "Widget", "Tools", "9.99", raw]),
                    ["create_date"],
                )

    def test_slash_dates_accepted_when_enabled(self) -> None:
        validator = PriceRowValidator(accept_slash_dates=True)

        row, errors = validator.validate_record(
            ["1", "Widget", "Tools", "9.99", "2024/01/15"],
            row_number=2,
        )
        self.assertEqual(errors, [])
        self.assertEqual(row.create_date, date(2024, 1, 15))

        row, _ = validator.validate_record(["1", "Widget", "Tools", "9.99", "2024/02/30"], row_number=3)
        self.assertIsNone(row)

    def test_every_failing_column_is_reported(self) -> None:
        columns = self._columns_in_error(["1", "", "Tools", "abc", "bad"])
        self.assertEqual(columns, ["name", "price", "create_date"])

    def test_non_integer_id_keeps_row_without_product_id(self) -> None:
        row, errors = self.validator.validate_record(
            ["A-17", "Widget", "Tools", "9.99", "2024-01-15"],
            row_number=2,
        )
        self.assertEqual(errors, [])
        self.assertIsNone(row.product_id)


class TestLayoutValidation(unittest.TestCase):
    def test_no_id_layout(self) -> None:
        validator = PriceRowValidator(mapper=ColumnMapper(ColumnLayout.NO_ID))

        row, errors = validator.validate_record(["Widget", "Tools", "9.99", "2024-01-15"], row_number=1)

        self.assertEqual(errors, [])
        self.assertEqual(row.name, "Widget")
        self.assertIsNone(row.product_id)

    def test_date_second_layout(self) -> None:
        validator = PriceRowValidator(mapper=ColumnMapper(ColumnLayout.DATE_SECOND))

        row, errors = validator.validate_record(
            ["5", "2024-01-15", "Widget", "Tools", "9.99"],
            row_number=1,
        )

        self.assertEqual(errors, [])
        self.assertEqual(row.create_date, date(2024, 1, 15))
        self.assertEqual(row.price, Decimal("9.99"))
        self.assertEqual(row.product_id, 5)

    def test_heuristic_short_record_reports_detected_width(self) -> None:
        validator = PriceRowValidator(mapper=ColumnMapper(ColumnLayout.HEURISTIC))

        row, errors = validator.validate_record(["Widget", "Tools", "9.99"], row_number=1)

        self.assertIsNone(row)
        self.assertIn("Expected at least 4 fields", errors[0].message)

    def test_validator_exposes_mapper_layout(self) -> None:
        self.assertIs(PriceRowValidator().layout, ColumnLayout.ID_FIRST)


if __name__ == "__main__":
    unittest.main()
