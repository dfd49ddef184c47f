"""Custom exceptions for sheetcrud."""

from __future__ import annotations


class SheetsCRUDError(Exception):
    """Base exception for sheetcrud errors."""

    pass


class MissingFieldError(SheetsCRUDError):
    """Raised when a lookup names a field that a record does not have.

    This points at a mismatch between the caller and the sheet's header
    row, so it is never swallowed.
    """

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"There is no field named {field_name}")
