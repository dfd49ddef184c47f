"""Planning of batched cell updates.

An update "set these fields on every record where field == value" is turned
into one CellEdit per edited field per matching row. All edits are sent in a
single values.batchUpdate request, however many rows match.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sheetcrud.config import ValueInputOption
from sheetcrud.ranges import parse_range
from sheetcrud.records import Record, find_row_indices_where, get_column_letter
from sheetcrud.utils import remove_none

if TYPE_CHECKING:
    from sheetcrud.client import SheetsCRUD

logger = logging.getLogger(__name__)

# Sheet rows are 1-based and the header row sits above the first record
FIRST_RECORD_ROW = 2


@dataclass(frozen=True)
class CellEdit:
    """A new value for one absolute cell, e.g. ``People!C2``."""

    cell_ref: str
    value: Any

    def to_value_range(self) -> dict[str, Any]:
        """Render as a ValueRange for values.batchUpdate."""
        return {"range": self.cell_ref, "values": [[self.value]]}


def plan_update(
    records: Sequence[Record],
    rows_before: int,
    columns_before: int,
    sheet_name: str,
    field_name: str,
    field_value: Any,
    new_values: Mapping[str, Any],
) -> list[CellEdit]:
    """Compute the cell edits that apply new_values to every matching record.

    Fields of new_values that are not columns of the range are skipped.
    Returns an empty list if no record matches.

    Raises:
        MissingFieldError: If field_name is not a field of the records.
    """
    row_indices = find_row_indices_where(records, field_name, field_value)
    if not row_indices:
        return []

    columns: dict[str, str] = {}
    for field in new_values:
        letter = get_column_letter(field, records, columns_before)
        if letter is None:
            logger.debug("Skipping unknown field %r in %s", field, sheet_name)
            continue
        columns[field] = letter

    edits: list[CellEdit] = []
    for row_index in row_indices:
        row_number = row_index + FIRST_RECORD_ROW + rows_before
        for field, value in new_values.items():
            if field not in columns:
                continue
            edits.append(
                CellEdit(
                    cell_ref=f"{sheet_name}!{columns[field]}{row_number}",
                    value=remove_none(value),
                )
            )
    return edits


class MultipleRowsUpdate:
    """An update query spanning several conditions over one range.

    The range is read once when the query is created. Each update_where()
    call adds edits computed from that snapshot, and execute() writes them
    all in a single batched request.

    Example:
        >>> query = crud.update_query("People!A1:D10")
        >>> query.update_where("id", 1, {"country": "Belgium"})
        >>> query.update_where("id", 2, {"country": "Spain"})
        >>> query.execute()
    """

    def __init__(self, crud: SheetsCRUD, range_name: str) -> None:
        """Read the range and prepare an empty query.

        Args:
            crud: Facade used for the read and the final write
            range_name: Sheet name, optionally with a range (e.g. Sheet1!A1:D10)
        """
        self._crud = crud
        self._range_name = range_name
        self._range = parse_range(range_name)
        self._records = crud.read_all(range_name)
        self._edits: list[CellEdit] = []

    @property
    def edits(self) -> list[CellEdit]:
        return list(self._edits)

    def update_where(
        self, field_name: str, field_value: Any, new_values: Mapping[str, Any]
    ) -> None:
        """Add the edits for every row where field_name equals field_value."""
        edits = plan_update(
            self._records,
            self._range.rows_before(),
            self._range.columns_before(),
            self._range.sheet_name,
            field_name,
            field_value,
            new_values,
        )
        logger.debug(
            "Planned %d cell edits in %s where %s == %r",
            len(edits),
            self._range_name,
            field_name,
            field_value,
        )
        self._edits.extend(edits)

    def execute(
        self, value_input_option: ValueInputOption = ValueInputOption.RAW
    ) -> int:
        """Write all planned edits in one request.

        Returns:
            Number of cells written; 0 means no request was made.
        """
        if not self._edits:
            logger.debug("Nothing to update in %s", self._range_name)
            return 0

        self._crud.transport.batch_update_values(
            self._crud.file_id, value_input_option, self._edits
        )
        logger.info("Updated %d cells in %s", len(self._edits), self._range_name)
        count = len(self._edits)
        self._edits = []
        return count
