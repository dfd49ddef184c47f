"""sheetcrud - Record-level CRUD for Google Sheets ranges.

This library treats a rectangular range of a Google Sheet as a table of
records keyed by its header row, and translates reads, appends, updates and
deletes into the cell coordinates the Sheets API expects.
"""

__version__ = "0.1.0"

from sheetcrud.batch_update import CellEdit, MultipleRowsUpdate, plan_update
from sheetcrud.client import SheetsCRUD
from sheetcrud.config import (
    DateTimeRenderOption,
    Settings,
    ValueInputOption,
    ValueRenderOption,
)
from sheetcrud.exceptions import MissingFieldError, SheetsCRUDError
from sheetcrud.ranges import (
    RangeRef,
    columns_before_range,
    get_sheet_name,
    parse_range,
    rows_before_range,
    sheet_title,
)
from sheetcrud.records import (
    find_row_index_where,
    find_row_indices_where,
    get_column_letter,
    records_from_grid,
)
from sheetcrud.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    Transport,
    TransportError,
)
from sheetcrud.utils import column_index_to_letter, letter_to_column_index

__all__ = [
    "APIError",
    "AuthenticationError",
    "CellEdit",
    "DateTimeRenderOption",
    "GoogleSheetsTransport",
    "LocalFileTransport",
    "MissingFieldError",
    "MultipleRowsUpdate",
    "NotFoundError",
    "RangeRef",
    "Settings",
    "SheetsCRUD",
    "SheetsCRUDError",
    "Transport",
    "TransportError",
    "ValueInputOption",
    "ValueRenderOption",
    "__version__",
    "column_index_to_letter",
    "columns_before_range",
    "find_row_index_where",
    "find_row_indices_where",
    "get_column_letter",
    "get_sheet_name",
    "letter_to_column_index",
    "parse_range",
    "plan_update",
    "records_from_grid",
    "rows_before_range",
    "sheet_title",
]
