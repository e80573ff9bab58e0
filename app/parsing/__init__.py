"""
app/parsing package marker.
"""

from app.parsing.archive_locator import ArchiveLocator
from app.parsing.record_parser import RecordParser

__all__ = [
    "ArchiveLocator",
    "RecordParser",
]
