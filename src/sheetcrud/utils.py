"""
Utility functions for sheetcrud.

Provides column letter conversion, cell value comparison, and null sanitation.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

# Columns A through ZZZ
MAX_COLUMNS: Final[int] = 18278

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def letter_to_column_index(letter: str) -> int:
    """Convert A1 notation letter(s) to a zero-based column index.

    Each letter is a digit valued 1-26 (there is no zero digit), so the
    result is rebased by one at the end.

    Examples:
        A -> 0, B -> 1, Z -> 25, AA -> 26, AB -> 27, AAA -> 702
    """
    if not letter or not letter.isalpha() or not letter.isascii():
        raise ValueError(f"Invalid column letters: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def column_index_to_letter(index: int) -> str:
    """Convert a zero-based column index to A1 notation letter(s).

    Examples:
        0 -> A, 1 -> B, 25 -> Z, 26 -> AA, 27 -> AB, 702 -> AAA
    """
    if index < 0 or index >= MAX_COLUMNS:
        raise ValueError(f"Column index out of range: {index}")
    result = ""
    while True:
        result = chr(ord("A") + (index % 26)) + result
        index = index // 26 - 1
        if index < 0:
            break
    return result


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        return float(value)
    return None


def loose_equals(left: Any, right: Any) -> bool:
    """Compare two cell values the way a spreadsheet user would.

    If both sides parse as numbers they are compared numerically, so
    ``"1"``, ``1`` and ``1.0`` are all equal. Otherwise both sides are
    compared as strings, with ``None`` standing for an empty cell.
    """
    left_number = _as_number(left)
    right_number = _as_number(right)
    if left_number is not None and right_number is not None:
        return left_number == right_number
    return _as_text(left) == _as_text(right)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def remove_none(values: Any) -> Any:
    """Replace every None with an empty string, recursing into containers.

    The Sheets API has no null cell value, so this runs before any write.
    Lists, tuples and mappings are rebuilt; other values pass through.
    """
    if values is None:
        return ""
    if isinstance(values, Mapping):
        return {key: remove_none(value) for key, value in values.items()}
    if isinstance(values, list | tuple):
        return [remove_none(value) for value in values]
    return values
