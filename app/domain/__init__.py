"""
app/domain package marker.
"""

from app.domain.errors import (
    ArchiveFormatError,
    ArchiveWriteError,
    EmptyInputError,
    NoValidRowsError,
    PriceArchiveError,
    PriceInsertError,
    PriceStoreError,
    TableFileNotFoundError,
)
from app.domain.price_archive import (
    ColumnLayout,
    HeaderDetection,
    IngestionSummary,
    InsertFailurePolicy,
    ParsedTable,
    PriceRow,
    RowValidationError,
    StoredPrice,
    SummaryAccumulator,
)

__all__ = [
    "ArchiveFormatError",
    "ArchiveWriteError",
    "ColumnLayout",
    "EmptyInputError",
    "HeaderDetection",
    "IngestionSummary",
    "InsertFailurePolicy",
    "NoValidRowsError",
    "ParsedTable",
    "PriceArchiveError",
    "PriceInsertError",
    "PriceRow",
    "PriceStoreError",
    "RowValidationError",
    "StoredPrice",
    "SummaryAccumulator",
    "TableFileNotFoundError",
]
