"""
app/domain/errors.py

Exceptions raised by the price archive pipeline.
"""

from __future__ import annotations


class PriceArchiveError(Exception):
    """Base exception for price archive import/export failures."""


class ArchiveFormatError(PriceArchiveError, ValueError):
    """Raised when the payload is not a readable archive or its CSV is malformed."""


class TableFileNotFoundError(PriceArchiveError, LookupError):
    """Raised when no allow-listed table file exists inside the archive."""

    def __init__(self, allowed_names: tuple[str, ...]) -> None:
        super().__init__(
            f"No table file found in archive. Expected one of: {', '.join(allowed_names)}."
        )
        self.allowed_names = allowed_names


class EmptyInputError(PriceArchiveError, ValueError):
    """Raised when the table file holds no usable records."""


class NoValidRowsError(EmptyInputError):
    """Raised when every data record was skipped during ingest."""


class PriceStoreError(PriceArchiveError, RuntimeError):
    """Raised when the relational store cannot open, write, commit, or read."""


class PriceInsertError(PriceStoreError):
    """Raised when one row insert is rejected by the store."""


class ArchiveWriteError(PriceArchiveError, RuntimeError):
    """Raised when stored rows cannot be serialized into an export archive."""
