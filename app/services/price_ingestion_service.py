"""
app/services/price_ingestion_service.py

Service layer for price archive ingestion.

One call runs the whole pipeline inside a single store transaction:

    ZIP payload -> table file -> CSV records -> typed rows -> inserts

Rejected records are skipped and never counted. The Summary only reflects
rows that were both valid and accepted by the store.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import lru_cache

from app.config import get_price_ingestion_settings
from app.domain.errors import NoValidRowsError, PriceInsertError, PriceStoreError
from app.domain.price_archive import (
    ColumnLayout,
    HeaderDetection,
    IngestionSummary,
    InsertFailurePolicy,
    RowValidationError,
    SummaryAccumulator,
)
from app.mappers.column_mapper import ColumnMapper
from app.parsing.archive_locator import ArchiveLocator
from app.parsing.record_parser import RecordParser
from app.repositories.price_repository import PriceStore
from app.validators.price_row_validator import PriceRowValidator

logger = logging.getLogger(__name__)


class PriceIngestionService:
    """
    Coordinates archive lookup, CSV parsing, validation, and persistence.
    """

    def __init__(
        self,
        *,
        locator: ArchiveLocator,
        parser: RecordParser,
        validator: PriceRowValidator,
        insert_failure_policy: InsertFailurePolicy = InsertFailurePolicy.SKIP,
        log_skipped_rows: bool = True,
    ) -> None:
        self._locator = locator
        self._parser = parser
        self._validator = validator
        self._insert_failure_policy = insert_failure_policy
        self._log_skipped_rows = log_skipped_rows

        if validator.layout is ColumnLayout.HEURISTIC:
            logger.warning(
                "Heuristic column layout enabled; the layout is guessed per record "
                "and ambiguous rows may be misread. Configure a fixed layout instead."
            )

    def ingest_archive(self, payload: bytes, store: PriceStore) -> IngestionSummary:
        """
        Ingest one ZIP payload.

        Raises:
            ArchiveFormatError:     payload or CSV is unreadable.
            TableFileNotFoundError: no allow-listed table file in the archive.
            EmptyInputError:        no records, or no record was accepted.
            PriceStoreError:        transaction could not be opened or committed,
                                    or an insert failed under the ABORT policy.
        """
        table_text = self._locator.locate(payload)
        parsed = self._parser.parse(table_text)
        return self.ingest_records(parsed.records, parsed.data_start_index, store)

    def ingest_records(
        self,
        records: Sequence[Sequence[str]],
        data_start_index: int,
        store: PriceStore,
    ) -> IngestionSummary:
        accumulator = SummaryAccumulator()
        rows_skipped = 0

        with store.transaction():
            for index in range(data_start_index, len(records)):
                row_number = index + 1
                row, errors = self._validator.validate_record(records[index], row_number=row_number)
                if row is None:
                    rows_skipped += 1
                    self._record_skip(errors)
                    continue

                try:
                    store.insert(row)
                except PriceInsertError as exc:
                    if self._insert_failure_policy is InsertFailurePolicy.ABORT:
                        raise PriceStoreError(
                            f"Insert failed for row {row_number}; ingest aborted."
                        ) from exc
                    rows_skipped += 1
                    self._record_skip(
                        [RowValidationError(row_number=row_number, message=str(exc))]
                    )
                    continue

                accumulator.add(row)

            if accumulator.total_items == 0:
                raise NoValidRowsError("No valid rows to insert.")

        summary = accumulator.build()
        logger.info(
            "Price ingestion committed items=%d categories=%d total_price=%s skipped=%d",
            summary.total_items,
            summary.total_categories,
            summary.total_price,
            rows_skipped,
        )
        return summary

    def _record_skip(self, errors: list[RowValidationError]) -> None:
        if not self._log_skipped_rows:
            return
        for error in errors:
            logger.warning(
                "Price row skipped row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )


def build_price_ingestion_service(
    *,
    column_layout: ColumnLayout = ColumnLayout.ID_FIRST,
    header_detection: HeaderDetection = HeaderDetection.FIRST_FIELD,
    table_file_names: Sequence[str] = ("data.csv", "test_data.csv"),
    accept_slash_dates: bool = False,
    insert_failure_policy: InsertFailurePolicy = InsertFailurePolicy.SKIP,
    log_skipped_rows: bool = True,
) -> PriceIngestionService:
    """
    Wire the pipeline components for one column layout.
    """
    return PriceIngestionService(
        locator=ArchiveLocator(table_file_names=table_file_names),
        parser=RecordParser(layout=column_layout, header_detection=header_detection),
        validator=PriceRowValidator(
            mapper=ColumnMapper(column_layout),
            accept_slash_dates=accept_slash_dates,
        ),
        insert_failure_policy=insert_failure_policy,
        log_skipped_rows=log_skipped_rows,
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_price_ingestion_service() -> PriceIngestionService:
    """
    Build and cache the ingestion service with env-driven settings.
    """
    settings = get_price_ingestion_settings()
    return build_price_ingestion_service(
        column_layout=settings.column_layout,
        header_detection=settings.header_detection,
        table_file_names=settings.table_file_names,
        accept_slash_dates=settings.accept_slash_dates,
        insert_failure_policy=settings.insert_failure_policy,
        log_skipped_rows=settings.log_skipped_rows,
    )
