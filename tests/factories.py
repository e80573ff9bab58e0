"""
Builders for archive payloads used across tests.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Mapping, Sequence

HEADER = "id,name,category,price,create_date"


def make_archive(entries: Mapping[str, str | bytes]) -> bytes:
    """Return ZIP bytes with one entry per mapping item, in insertion order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buf.getvalue()


def make_csv(rows: Sequence[str], *, header: str | None = HEADER) -> str:
    lines = ([header] if header is not None else []) + list(rows)
    return "\n".join(lines) + "\n"


def make_price_archive(
    rows: Sequence[str],
    *,
    header: str | None = HEADER,
    entry_name: str = "data.csv",
) -> bytes:
    return make_archive({entry_name: make_csv(rows, header=header)})


def read_archive(payload: bytes) -> dict[str, str]:
    with zipfile.ZipFile(io.BytesIO(payload)) as archive:
        return {name: archive.read(name).decode("utf-8") for name in archive.namelist()}
