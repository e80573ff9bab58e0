"""
app/services/price_export_service.py

Price archive export service.

Rows are read in ascending id order, written as CSV in the active column
layout, and wrapped as the single entry of a new ZIP archive. The archive is
fully built in memory before it is returned, so a failure never produces a
truncated download.

Column order per layout:
    id_first, heuristic: id, name, category, price, create_date
    date_second:         id, create_date, name, category, price
    no_id:               name, category, price, create_date

The ``id`` column carries the stored identifier; prices are written with two
decimals and dates as YYYY-MM-DD, so an exported archive can be ingested
again under the same layout.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache

from app.config import get_price_export_settings
from app.domain.errors import ArchiveWriteError
from app.domain.price_archive import ColumnLayout, StoredPrice
from app.repositories.price_repository import PriceStore
from app.validators.price_row_validator import DATE_FORMAT

logger = logging.getLogger(__name__)

_PRICE_QUANTUM = Decimal("0.01")


def format_price(value: Decimal) -> str:
    return f"{Decimal(value).quantize(_PRICE_QUANTUM, rounding=ROUND_HALF_UP):.2f}"


class PriceExportService:
    """
    Serialize stored prices into a single-entry ZIP archive.

    Read-only; the caller owns the store's session lifecycle.
    """

    def __init__(
        self,
        *,
        layout: ColumnLayout = ColumnLayout.ID_FIRST,
        archive_entry_name: str = "data.csv",
    ) -> None:
        self._layout = layout
        self._archive_entry_name = archive_entry_name

    @property
    def columns(self) -> tuple[str, ...]:
        return self._layout.columns

    def export_archive(self, store: PriceStore) -> bytes:
        """
        Return ZIP bytes holding every stored row.

        Raises:
            PriceStoreError:  the stored rows could not be read.
            ArchiveWriteError: CSV or ZIP serialization failed.
        """
        table_text, row_count = self.serialize(store.iter_records())
        archive = self.build_archive(table_text)
        logger.info(
            "Price export built rows=%d entry=%r bytes=%d",
            row_count,
            self._archive_entry_name,
            len(archive),
        )
        return archive

    def serialize(self, records: Iterable[StoredPrice]) -> tuple[str, int]:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(self.columns)

        row_count = 0
        for record in records:
            try:
                writer.writerow(self._flatten(record))
            except (csv.Error, TypeError, ValueError, ArithmeticError) as exc:
                raise ArchiveWriteError(f"Unable to serialize stored row id={record.id}.") from exc
            row_count += 1
        return buf.getvalue(), row_count

    def build_archive(self, table_text: str) -> bytes:
        buf = io.BytesIO()
        try:
            with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(self._archive_entry_name, table_text.encode("utf-8"))
        except (OSError, ValueError, zipfile.LargeZipFile) as exc:
            raise ArchiveWriteError("Unable to build export archive.") from exc
        return buf.getvalue()

    def _flatten(self, record: StoredPrice) -> list[str]:
        values = {
            "id": str(record.id),
            "name": record.name,
            "category": record.category,
            "price": format_price(record.price),
            "create_date": record.create_date.strftime(DATE_FORMAT),
        }
        return [values[column] for column in self.columns]


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_price_export_service() -> PriceExportService:
    settings = get_price_export_settings()
    return PriceExportService(
        layout=settings.column_layout,
        archive_entry_name=settings.archive_entry_name,
    )
