"""
app/mappers/column_mapper.py

Positional mapping from CSV records to semantic price fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from app.domain.price_archive import ColumnLayout


def is_integer_text(value: str) -> bool:
    try:
        int(value.strip())
    except ValueError:
        return False
    return True


def is_date_shaped(value: str) -> bool:
    """
    True for text with exactly two hyphens separating three non-empty segments.
    """

    segments = value.strip().split("-")
    return len(segments) == 3 and all(segments)


def detect_layout(record: Sequence[str]) -> ColumnLayout:
    """
    Guess the concrete layout of one record.

    Field 0 as an integer means an id column is present; a date-shaped
    field 1 then selects DATE_SECOND over ID_FIRST. Anything else falls
    back to NO_ID. Two records of the same file may resolve differently.
    """

    if record and is_integer_text(record[0]):
        if len(record) > 1 and is_date_shaped(record[1]):
            return ColumnLayout.DATE_SECOND
        return ColumnLayout.ID_FIRST
    return ColumnLayout.NO_ID


@dataclass(frozen=True)
class MappedRecord:
    """
    One record resolved into named raw fields.
    """

    layout: ColumnLayout
    fields: dict[str, str]


class ColumnMapper:
    """
    Maps raw CSV records onto price fields for a configured layout.
    """

    def __init__(self, layout: ColumnLayout = ColumnLayout.ID_FIRST) -> None:
        self._layout = layout

    @property
    def layout(self) -> ColumnLayout:
        return self._layout

    @property
    def is_heuristic(self) -> bool:
        return self._layout is ColumnLayout.HEURISTIC

    def resolve_layout(self, record: Sequence[str]) -> ColumnLayout:
        if self.is_heuristic:
            return detect_layout(record)
        return self._layout

    def map_record(self, record: Sequence[str]) -> MappedRecord | None:
        """
        Return named fields, or None when the record is shorter than its layout.

        Fields beyond the layout's width are ignored.
        """

        layout = self.resolve_layout(record)
        columns = layout.columns
        if len(record) < len(columns):
            return None
        return MappedRecord(
            layout=layout,
            fields={column: record[index] for index, column in enumerate(columns)},
        )
