"""A1 range parsing.

A range is either a bare sheet name (``People``) or a sheet name followed by
a rectangular suffix (``People!B4:C11``, ``People!A:E``, ``People!H5:AL``).
Row numbers may be omitted on either side, which leaves the range open in
that direction.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from sheetcrud.utils import letter_to_column_index

RANGE_SUFFIX_RE = re.compile(r"!([A-Z]+)([0-9]*):([A-Z]+)([0-9]*)$")


@dataclass(frozen=True)
class RangeRef:
    """A parsed A1 range.

    Bounds that are absent from the range string are None.
    """

    sheet_name: str
    first_row: int | None = None
    last_row: int | None = None
    first_col: str | None = None
    last_col: str | None = None

    @property
    def is_whole_sheet(self) -> bool:
        return self.first_col is None and self.last_col is None

    def rows_before(self) -> int:
        """Number of sheet rows above the first row of the range."""
        if self.first_row is None and self.last_row is None:
            return 0
        first = math.inf if self.first_row is None else self.first_row
        last = math.inf if self.last_row is None else self.last_row
        return int(min(first, last)) - 1

    def columns_before(self) -> int:
        """Number of sheet columns left of the first column of the range."""
        if self.is_whole_sheet:
            return 0
        first = letter_to_column_index(self.first_col or "A")
        last = letter_to_column_index(self.last_col or "A")
        return min(first, last)


def parse_range(range_name: str) -> RangeRef:
    """Parse a range string into a RangeRef.

    Strings without a ``!COLS[ROWS]:COLS[ROWS]`` suffix denote a whole sheet.
    """
    match = RANGE_SUFFIX_RE.search(range_name)
    if not match:
        return RangeRef(sheet_name=range_name)

    first_col, first_row, last_col, last_row = match.groups()
    return RangeRef(
        sheet_name=range_name[: match.start()],
        first_row=int(first_row) if first_row else None,
        last_row=int(last_row) if last_row else None,
        first_col=first_col,
        last_col=last_col,
    )


def get_sheet_name(range_name: str) -> str:
    """Strip the range suffix from a range string.

    Examples:
        People -> People, People!A1:D10 -> People
    """
    return parse_range(range_name).sheet_name


def sheet_title(sheet_name: str) -> str:
    """Remove A1 quoting from a sheet name.

    Examples:
        'My Sheet' -> My Sheet, 'Bob''s' -> Bob's, People -> People
    """
    if len(sheet_name) >= 2 and sheet_name[0] == sheet_name[-1] == "'":
        return sheet_name[1:-1].replace("''", "'")
    return sheet_name


def rows_before_range(range_name: str) -> int:
    """Return the number of rows in the sheet before the start of the range.

    Examples:
        Sheet1 -> 0, Sheet1!A:E -> 0, Sheet1!B4:C11 -> 3, Sheet1!H5:AL -> 4
    """
    return parse_range(range_name).rows_before()


def columns_before_range(range_name: str) -> int:
    """Return the number of columns in the sheet before the start of the range.

    Examples:
        Sheet1 -> 0, Sheet1!C1:E10 -> 2, Sheet1!AA:AB -> 26
    """
    return parse_range(range_name).columns_before()
