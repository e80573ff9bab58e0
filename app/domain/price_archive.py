"""
app/domain/price_archive.py

Domain models used by the price archive import/export flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class ColumnLayout(str, Enum):
    """
    Agreed ordering of semantic fields within one CSV record.

    HEURISTIC is a compatibility mode: the concrete layout is guessed per
    record and can misclassify rows whose fields look alike.
    """

    ID_FIRST = "id_first"
    DATE_SECOND = "date_second"
    NO_ID = "no_id"
    HEURISTIC = "heuristic"

    @property
    def columns(self) -> tuple[str, ...]:
        return _LAYOUT_COLUMNS[self]

    @property
    def has_id(self) -> bool:
        return "id" in self.columns


_LAYOUT_COLUMNS: dict[ColumnLayout, tuple[str, ...]] = {
    ColumnLayout.ID_FIRST: ("id", "name", "category", "price", "create_date"),
    ColumnLayout.DATE_SECOND: ("id", "create_date", "name", "category", "price"),
    ColumnLayout.NO_ID: ("name", "category", "price", "create_date"),
    # Exported and header-checked in the canonical order.
    ColumnLayout.HEURISTIC: ("id", "name", "category", "price", "create_date"),
}


class HeaderDetection(str, Enum):
    """
    Strategy used to decide whether record 0 is a header row.
    """

    MARKERS = "markers"
    FIRST_FIELD = "first_field"


class InsertFailurePolicy(str, Enum):
    """
    What an ingest call does when a single-row insert is rejected.
    """

    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True)
class PriceRow:
    """
    Typed price row prepared for persistence.
    """

    name: str
    category: str
    price: Decimal
    create_date: date
    product_id: int | None = None


@dataclass(frozen=True)
class StoredPrice:
    """
    One persisted price row as read back for export.
    """

    id: int
    name: str
    category: str
    price: Decimal
    create_date: date | datetime
    product_id: int | None = None


@dataclass(frozen=True)
class ParsedTable:
    """
    Raw CSV records plus the index of the first data record.
    """

    records: list[list[str]]
    data_start_index: int

    @property
    def has_header(self) -> bool:
        return self.data_start_index > 0


@dataclass(frozen=True)
class RowValidationError:
    """
    Reason one CSV record was skipped.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-run ingestion summary.
    """

    total_items: int
    total_categories: int
    total_price: Decimal


@dataclass
class SummaryAccumulator:
    """
    Builds an IngestionSummary incrementally from accepted rows.
    """

    total_items: int = 0
    total_price: Decimal = Decimal("0")
    categories: set[str] = field(default_factory=set)

    def add(self, row: PriceRow) -> None:
        self.total_items += 1
        self.total_price += row.price
        self.categories.add(row.category)

    def build(self) -> IngestionSummary:
        return IngestionSummary(
            total_items=self.total_items,
            total_categories=len(self.categories),
            total_price=self.total_price,
        )
