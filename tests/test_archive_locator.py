from __future__ import annotations

import pytest

from app.domain.errors import ArchiveFormatError, TableFileNotFoundError
from app.parsing.archive_locator import ArchiveLocator
from tests.factories import make_archive

DATA = "id,name,category,price,create_date\n1,Widget,Tools,9.99,2024-01-15\n"


@pytest.fixture()
def locator() -> ArchiveLocator:
    return ArchiveLocator(table_file_names=("data.csv", "test_data.csv"))


def test_returns_text_of_data_csv(locator: ArchiveLocator) -> None:
    payload = make_archive({"readme.txt": "ignore me", "data.csv": DATA})
    assert locator.locate(payload) == DATA


def test_accepts_alternate_table_file_name(locator: ArchiveLocator) -> None:
    payload = make_archive({"test_data.csv": DATA})
    assert locator.locate(payload) == DATA


def test_matches_final_path_segment_of_nested_entry(locator: ArchiveLocator) -> None:
    payload = make_archive({"export/2024/data.csv": DATA})
    assert locator.locate(payload) == DATA


def test_first_match_in_stored_order_wins(locator: ArchiveLocator) -> None:
    second = "id,name,category,price,create_date\n2,Gadget,Toys,5.00,2024-02-01\n"
    payload = make_archive({"a/test_data.csv": DATA, "b/data.csv": second})
    assert locator.locate(payload) == DATA


def test_strips_utf8_bom(locator: ArchiveLocator) -> None:
    payload = make_archive({"data.csv": "\ufeff" + DATA})
    assert locator.locate(payload) == DATA


@pytest.mark.parametrize("entry_name", ["DATA.CSV", "mydata.csv", "data.csv.bak", "data.txt"])
def test_name_match_is_exact_and_case_sensitive(locator: ArchiveLocator, entry_name: str) -> None:
    payload = make_archive({entry_name: DATA})
    with pytest.raises(TableFileNotFoundError) as exc_info:
        locator.locate(payload)
    assert exc_info.value.allowed_names == ("data.csv", "test_data.csv")
    assert "data.csv" in str(exc_info.value)


def test_directory_entry_named_like_table_file_is_ignored(locator: ArchiveLocator) -> None:
    payload = make_archive({"data.csv/": b"", "other.csv": DATA})
    with pytest.raises(TableFileNotFoundError):
        locator.locate(payload)


@pytest.mark.parametrize("payload", [b"", b"not a zip archive", b"PK\x03\x04truncated"])
def test_invalid_zip_raises_format_error(locator: ArchiveLocator, payload: bytes) -> None:
    with pytest.raises(ArchiveFormatError):
        locator.locate(payload)


def test_non_utf8_table_raises_format_error(locator: ArchiveLocator) -> None:
    payload = make_archive({"data.csv": "name\nCaf\xe9\n".encode("latin-1")})
    with pytest.raises(ArchiveFormatError, match="UTF-8"):
        locator.locate(payload)


def test_empty_allow_list_is_rejected() -> None:
    with pytest.raises(ValueError):
        ArchiveLocator(table_file_names=())


def test_custom_allow_list() -> None:
    locator = ArchiveLocator(table_file_names=("prices.csv",))
    assert locator.table_file_names == ("prices.csv",)
    assert locator.locate(make_archive({"prices.csv": DATA})) == DATA
    with pytest.raises(TableFileNotFoundError):
        locator.locate(make_archive({"data.csv": DATA}))
