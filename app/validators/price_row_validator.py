"""
app/validators/price_row_validator.py

Row-level validation and type parsing for price archive ingestion.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Sequence

from app.domain.price_archive import ColumnLayout, PriceRow, RowValidationError
from app.mappers.column_mapper import ColumnMapper

DATE_FORMAT = "%Y-%m-%d"
SLASH_DATE_FORMAT = "%Y/%m/%d"

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SLASH_DATE_PATTERN = re.compile(r"^\d{4}/\d{2}/\d{2}$")


class PriceRowValidator:
    """
    Validates and parses one CSV record into a PriceRow.

    A record that fails any check is skipped, never raised: the caller gets
    ``(None, errors)`` and decides whether to log it.
    """

    def __init__(
        self,
        *,
        mapper: ColumnMapper | None = None,
        accept_slash_dates: bool = False,
    ) -> None:
        self._mapper = mapper or ColumnMapper()
        self._accept_slash_dates = accept_slash_dates

    @property
    def layout(self) -> ColumnLayout:
        return self._mapper.layout

    def validate_record(
        self,
        record: Sequence[str],
        *,
        row_number: int,
    ) -> tuple[PriceRow | None, list[RowValidationError]]:
        mapped = self._mapper.map_record(record)
        if mapped is None:
            expected = len(self._mapper.resolve_layout(record).columns)
            return None, [
                RowValidationError(
                    row_number=row_number,
                    message=f"Expected at least {expected} fields, got {len(record)}.",
                )
            ]
        return self.validate_mapped_row(
            mapped_row=mapped.fields,
            row_number=row_number,
        )

    def validate_mapped_row(
        self,
        *,
        mapped_row: Mapping[str, str | None],
        row_number: int,
    ) -> tuple[PriceRow | None, list[RowValidationError]]:
        errors: list[RowValidationError] = []

        name = self._parse_required_string(
            value=mapped_row.get("name"),
            row_number=row_number,
            column="name",
            errors=errors,
        )
        category = self._parse_required_string(
            value=mapped_row.get("category"),
            row_number=row_number,
            column="category",
            errors=errors,
        )
        price = self._parse_price(
            value=mapped_row.get("price"),
            row_number=row_number,
            errors=errors,
        )
        create_date = self._parse_date(
            value=mapped_row.get("create_date"),
            row_number=row_number,
            errors=errors,
        )

        if errors or price is None or create_date is None:
            return None, errors

        return (
            PriceRow(
                name=name,
                category=category,
                price=price,
                create_date=create_date,
                product_id=self._parse_optional_int(mapped_row.get("id")),
            ),
            [],
        )

    def _parse_required_string(
        self,
        *,
        value: Any,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> str:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column=column,
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return ""
        return str(value).strip()

    def _parse_price(
        self,
        *,
        value: str | None,
        row_number: int,
        errors: list[RowValidationError],
    ) -> Decimal | None:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="price",
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return None

        raw_value = str(value).strip()
        try:
            price = Decimal(raw_value)
        except (InvalidOperation, ValueError):
            price = None

        if price is None or not price.is_finite() or "_" in raw_value:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="price",
                    message="Price must be a base-10 decimal number.",
                    value=raw_value,
                )
            )
            return None
        if price < 0:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="price",
                    message="Price must not be negative.",
                    value=raw_value,
                )
            )
            return None
        return price

    def _parse_date(
        self,
        *,
        value: str | None,
        row_number: int,
        errors: list[RowValidationError],
    ) -> date | None:
        if self._is_blank(value):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="create_date",
                    message="Required value is missing.",
                    value=self._stringify_value(value),
                )
            )
            return None

        raw = str(value).strip()
        candidates = [(_DATE_PATTERN, DATE_FORMAT)]
        if self._accept_slash_dates:
            candidates.append((_SLASH_DATE_PATTERN, SLASH_DATE_FORMAT))

        for pattern, fmt in candidates:
            if not pattern.match(raw):
                continue
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                break

        errors.append(
            RowValidationError(
                row_number=row_number,
                column="create_date",
                message=f"Invalid date format, expected {DATE_FORMAT}.",
                value=raw,
            )
        )
        return None

    @staticmethod
    def _parse_optional_int(value: str | None) -> int | None:
        if value is None:
            return None
        try:
            return int(value.strip())
        except ValueError:
            return None

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)
