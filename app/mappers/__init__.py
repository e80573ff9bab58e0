"""
app/mappers package marker.
"""

from app.mappers.column_mapper import ColumnMapper, MappedRecord, detect_layout

__all__ = [
    "ColumnMapper",
    "MappedRecord",
    "detect_layout",
]
