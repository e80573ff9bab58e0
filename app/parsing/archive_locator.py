"""
app/parsing/archive_locator.py

Finds the CSV table file inside an uploaded ZIP payload.
"""

from __future__ import annotations

import io
import logging
import posixpath
import zipfile
from collections.abc import Sequence

from app.domain.errors import ArchiveFormatError, TableFileNotFoundError

logger = logging.getLogger(__name__)


class ArchiveLocator:
    """
    Opens a ZIP payload and returns the text of its table file.

    Only the final path segment of each entry is compared, exactly and
    case-sensitively, against ``table_file_names``. The first match in
    stored order wins.
    """

    def __init__(self, *, table_file_names: Sequence[str]) -> None:
        if not table_file_names:
            raise ValueError("table_file_names must not be empty.")
        self._table_file_names = tuple(table_file_names)

    @property
    def table_file_names(self) -> tuple[str, ...]:
        return self._table_file_names

    def locate(self, payload: bytes) -> str:
        try:
            archive = zipfile.ZipFile(io.BytesIO(payload))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as exc:
            raise ArchiveFormatError("Payload is not a valid ZIP archive.") from exc

        with archive:
            entry = self._find_entry(archive.infolist())
            if entry is None:
                raise TableFileNotFoundError(self._table_file_names)

            logger.info(
                "Table file located entry=%r size=%d entries=%d",
                entry.filename,
                entry.file_size,
                len(archive.infolist()),
            )
            try:
                raw = archive.read(entry)
            except (zipfile.BadZipFile, NotImplementedError, RuntimeError, OSError) as exc:
                raise ArchiveFormatError(f"Unable to read archive entry {entry.filename!r}.") from exc

        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ArchiveFormatError("Table file must be UTF-8 encoded.") from exc

    def _find_entry(self, entries: Sequence[zipfile.ZipInfo]) -> zipfile.ZipInfo | None:
        for entry in entries:
            if entry.is_dir():
                continue
            if posixpath.basename(entry.filename) in self._table_file_names:
                return entry
        return None
