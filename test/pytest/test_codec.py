import pytest

from graide.database import codec
from graide.database.tables import registry

SAMPLE_CELLS = [
    "",
    "0",
    "-3",
    "8.5",
    "1e3",
    "a,b,c",
    'say "hi"',
    "O'Brien",
    "Matematică ✓",
    "  padded  ",
    "line\nbreak",
    "=SUM(A1:A3)",
]


def sample_records(headers):
    """Every cell sample lands in every column across the generated records."""
    for shift in range(len(SAMPLE_CELLS)):
        yield {h: SAMPLE_CELLS[(i + shift) % len(SAMPLE_CELLS)] for i, h in enumerate(headers)}


@pytest.mark.parametrize("table", registry.table_names)
def test_decode_of_encode_restores_every_column(table):
    headers = registry.headers(table)

    for record in sample_records(headers):
        cells = codec.encode(headers, record)

        assert len(cells) == len(headers)
        assert codec.decode(headers, cells) == record


@pytest.mark.parametrize("table", registry.table_names)
def test_non_string_values_come_back_as_their_text(table):
    headers = registry.headers(table)
    values = [7, 7.5, True, -0.25]
    record = {h: values[i % len(values)] for i, h in enumerate(headers)}

    decoded = codec.decode(headers, codec.encode(headers, record))

    assert decoded == {h: str(v) for h, v in record.items()}


def test_encode_writes_none_and_missing_as_empty_cells():
    headers = ["id", "name", "student_num"]
    assert codec.encode(headers, {"id": "s1", "student_num": None}) == ["s1", "", ""]


def test_encode_ignores_keys_outside_headers():
    assert codec.encode(["id"], {"id": "x", "extra": "y"}) == ["x"]


def test_decode_pads_rows_trimmed_by_the_api():
    headers = registry.headers("Submissions")
    record = codec.decode(headers, ["sub-1", "t1", "s1"])

    assert record["id"] == "sub-1"
    assert record["status"] == ""
    assert record["created_at"] == ""
    assert list(record) == headers


def test_blank_to_none_only_touches_optional_columns():
    nullable = registry.nullable_columns("Students")
    raw = codec.decode(registry.headers("Students"), ["s1", "5A", "", "Ana"])

    record = codec.blank_to_none(raw, nullable)

    assert record["student_num"] is None
    assert record["school_year"] == ""
