"""
app/parsing/record_parser.py

Splits table text into CSV records and locates the first data record.
"""

from __future__ import annotations

import csv
import io
import logging

from app.domain.errors import ArchiveFormatError, EmptyInputError
from app.domain.price_archive import ColumnLayout, HeaderDetection, ParsedTable

logger = logging.getLogger(__name__)


class RecordParser:
    """
    Parses comma-delimited, quote-aware text for one column layout.

    The header strategy is fixed per instance:

    - ``MARKERS``: record 0 is a header when its lower-cased, space-joined
      text contains every column name of the layout.
    - ``FIRST_FIELD``: record 0 is a header when its first field equals the
      layout's first column name, ignoring case and surrounding whitespace.
    """

    def __init__(
        self,
        *,
        layout: ColumnLayout,
        header_detection: HeaderDetection = HeaderDetection.FIRST_FIELD,
    ) -> None:
        self._layout = layout
        self._header_detection = header_detection

    def parse(self, table_text: str) -> ParsedTable:
        records = self.split_records(table_text)
        if not records:
            raise EmptyInputError("Table file contains no records.")

        start = 1 if self.is_header(records[0]) else 0
        logger.debug(
            "Parsed table records=%d header=%s strategy=%s",
            len(records),
            start == 1,
            self._header_detection.value,
        )
        return ParsedTable(records=records, data_start_index=start)

    def split_records(self, table_text: str) -> list[list[str]]:
        reader = csv.reader(io.StringIO(table_text, newline=""), strict=True)
        try:
            # Blank lines yield [] and carry no record.
            return [record for record in reader if record]
        except csv.Error as exc:
            raise ArchiveFormatError(
                f"Invalid CSV format at line {reader.line_num}: {exc}"
            ) from exc

    def is_header(self, record: list[str]) -> bool:
        if not record:
            return False
        if self._header_detection is HeaderDetection.MARKERS:
            joined = " ".join(record).lower()
            return all(marker in joined for marker in self._layout.columns)
        return record[0].strip().lower() == self._layout.columns[0]
