from __future__ import annotations
from typing import Any, Mapping, Sequence


def encode(headers: Sequence[str], record: Mapping[str, Any]) -> list[str]:
    """Record -> one cell per header, in header order. None/missing become ""."""
    cells = []
    for header in headers:
        value = record.get(header)
        cells.append("" if value is None else str(value))
    return cells


def decode(headers: Sequence[str], cells: Sequence[Any]) -> dict[str, str]:
    """Cells -> header-keyed strings. The API trims trailing blanks, so short rows pad with ""."""
    record = {}
    for index, header in enumerate(headers):
        value = cells[index] if index < len(cells) else ""
        record[header] = "" if value is None else str(value)
    return record


def blank_to_none(record: Mapping[str, str], nullable: set[str]) -> dict[str, Any]:
    """Empty cells of optional columns mean "unset"."""
    return {key: (None if key in nullable and value == "" else value) for key, value in record.items()}
