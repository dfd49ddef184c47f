"""Mapping between value grids and field-named records.

The first row of a grid holds the headers. Each following row becomes a
record keyed by those headers, in header column order::

    id   name            [
    1    Julie      ->     {"id": "1", "name": "Julie"},
    2    Julien            {"id": "2", "name": "Julien"},
                         ]
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sheetcrud.exceptions import MissingFieldError
from sheetcrud.utils import column_index_to_letter, loose_equals

Record = dict[str, Any]
Grid = list[list[Any]]

DUPLICATE_SUFFIX = "_"


def resolve_headers(header_row: Sequence[Any]) -> list[str]:
    """Build unique field names from a header row.

    Empty header cells are named after their zero-based column index. Any
    name already used earlier in the row, including an index name, gets
    ``_`` appended until it is unique, so the first occurrence keeps the
    bare name.
    """
    field_names: list[str] = []
    for index, header in enumerate(header_row):
        name = str(index) if header is None or header == "" else str(header)
        while name in field_names:
            name += DUPLICATE_SUFFIX
        field_names.append(name)
    return field_names


def records_from_grid(grid: Sequence[Sequence[Any]]) -> list[Record]:
    """Convert a grid whose first row is the header row into records.

    Cells missing at the end of a short row become empty strings. Cells
    beyond the last header column are dropped.
    """
    if not grid:
        return []

    field_names = resolve_headers(grid[0])
    records: list[Record] = []
    for row in grid[1:]:
        record: Record = {}
        for index, name in enumerate(field_names):
            record[name] = row[index] if index < len(row) else ""
        records.append(record)
    return records


def _check_field(records: Sequence[Record], field_name: str) -> None:
    for record in records:
        if field_name not in record:
            raise MissingFieldError(field_name)


def find_row_index_where(
    records: Sequence[Record], field_name: str, field_value: Any
) -> int | None:
    """Return the index of the first record whose field equals the value.

    Values are compared with loose_equals. Returns None if no record matches.

    Raises:
        MissingFieldError: If any record lacks the field.
    """
    _check_field(records, field_name)
    for index, record in enumerate(records):
        if loose_equals(record[field_name], field_value):
            return index
    return None


def find_row_indices_where(
    records: Sequence[Record], field_name: str, field_value: Any
) -> list[int]:
    """Return the indices of all records whose field equals the value.

    Raises:
        MissingFieldError: If any record lacks the field.
    """
    _check_field(records, field_name)
    return [
        index
        for index, record in enumerate(records)
        if loose_equals(record[field_name], field_value)
    ]


def get_column_letter(
    field_name: str, records: Sequence[Record], columns_before: int
) -> str | None:
    """Return the sheet column letter holding a field, or None if absent.

    The field order of the first record gives the column position inside the
    range; ``columns_before`` shifts it to an absolute sheet column. If the
    name occurs more than once, the last occurrence wins.
    """
    if not records:
        return None

    column_number = None
    for index, key in enumerate(records[0]):
        if key == field_name:
            column_number = index
    if column_number is None:
        return None

    return column_index_to_letter(column_number + columns_before)
