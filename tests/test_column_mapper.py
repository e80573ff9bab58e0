from __future__ import annotations

import pytest

from app.domain.price_archive import ColumnLayout
from app.mappers.column_mapper import ColumnMapper, detect_layout, is_date_shaped, is_integer_text


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), (" 42 ", True), ("-3", True), ("1.5", False), ("", False), ("abc", False)],
)
def test_is_integer_text(value: str, expected: bool) -> None:
    assert is_integer_text(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-01-15", True),
        ("a-b-c", True),
        ("2024-01", False),
        ("2024--15", False),
        ("2024-01-15-1", False),
        ("2024/01/15", False),
    ],
)
def test_is_date_shaped(value: str, expected: bool) -> None:
    assert is_date_shaped(value) is expected


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        (["1", "Widget", "Tools", "9.99", "2024-01-15"], ColumnLayout.ID_FIRST),
        (["1", "2024-01-15", "Widget", "Tools", "9.99"], ColumnLayout.DATE_SECOND),
        (["Widget", "Tools", "9.99", "2024-01-15"], ColumnLayout.NO_ID),
        ([], ColumnLayout.NO_ID),
    ],
)
def test_detect_layout(record: list[str], expected: ColumnLayout) -> None:
    assert detect_layout(record) is expected


def test_fixed_layout_maps_by_position() -> None:
    mapped = ColumnMapper(ColumnLayout.DATE_SECOND).map_record(
        ["7", "2024-01-15", "Widget", "Tools", "9.99"]
    )

    assert mapped is not None
    assert mapped.layout is ColumnLayout.DATE_SECOND
    assert mapped.fields == {
        "id": "7",
        "create_date": "2024-01-15",
        "name": "Widget",
        "category": "Tools",
        "price": "9.99",
    }


def test_extra_fields_are_ignored() -> None:
    mapped = ColumnMapper(ColumnLayout.NO_ID).map_record(
        ["Widget", "Tools", "9.99", "2024-01-15", "unused"]
    )
    assert mapped is not None
    assert "unused" not in mapped.fields.values()


def test_short_record_is_not_mapped() -> None:
    assert ColumnMapper(ColumnLayout.ID_FIRST).map_record(["1", "Widget", "Tools", "9.99"]) is None


def test_fixed_layout_never_guesses() -> None:
    mapper = ColumnMapper(ColumnLayout.ID_FIRST)
    assert not mapper.is_heuristic
    assert mapper.resolve_layout(["Widget", "Tools", "9.99", "2024-01-15"]) is ColumnLayout.ID_FIRST


def test_heuristic_layout_resolves_each_record() -> None:
    mapper = ColumnMapper(ColumnLayout.HEURISTIC)

    first = mapper.map_record(["1", "Widget", "Tools", "9.99", "2024-01-15"])
    second = mapper.map_record(["Gadget", "Toys", "5.00", "2024-02-01"])

    assert mapper.is_heuristic
    assert first is not None and first.layout is ColumnLayout.ID_FIRST
    assert second is not None and second.layout is ColumnLayout.NO_ID
    assert second.fields["name"] == "Gadget"


def test_heuristic_misreads_date_shaped_name() -> None:
    # An id_first record whose name looks like a date is read as date_second.
    mapped = ColumnMapper(ColumnLayout.HEURISTIC).map_record(
        ["1", "A-B-C", "Tools", "9.99", "2024-01-15"]
    )

    assert mapped is not None
    assert mapped.layout is ColumnLayout.DATE_SECOND
    assert mapped.fields["create_date"] == "A-B-C"
