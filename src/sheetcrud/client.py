"""SheetsCRUD - Main API for sheetcrud.

Treats a rectangular range of a Google Sheet as a table of records whose
field names come from the range's first row, and provides create, read,
update and delete operations on those records.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from sheetcrud.batch_update import FIRST_RECORD_ROW, MultipleRowsUpdate
from sheetcrud.config import (
    DEFAULT_TIMEOUT,
    DateTimeRenderOption,
    Settings,
    ValueInputOption,
    ValueRenderOption,
    get_settings,
)
from sheetcrud.credentials import CredentialsManager
from sheetcrud.ranges import (
    columns_before_range,
    get_sheet_name,
    rows_before_range,
    sheet_title,
)
from sheetcrud.records import (
    Record,
    find_row_index_where,
    find_row_indices_where,
    get_column_letter,
    records_from_grid,
)
from sheetcrud.transport import GoogleSheetsTransport, Transport
from sheetcrud.utils import remove_none

logger = logging.getLogger(__name__)


class SheetsCRUD:
    """CRUD access to the records of a Google Sheet.

    Every operation reads the current values before acting on them and no
    state is kept between calls apart from the file ID and render options.

    Example:
        >>> transport = GoogleSheetsTransport(access_token="ya29...")
        >>> crud = SheetsCRUD("1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgvE2upms", transport)
        >>> crud.get_row_where("People", "id", 1)
        {'id': '1', 'name': 'Julie', 'country': 'France'}
    """

    def __init__(
        self,
        file_id: str,
        transport: Transport,
        value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE,
        date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.FORMATTED_STRING,
    ) -> None:
        """Initialize the client.

        Args:
            file_id: ID of the spreadsheet (found in the URL of the sheet)
            transport: Transport implementation for reading and writing values
            value_render_option: How values are rendered by later reads
            date_time_render_option: How dates are rendered by later reads
        """
        self._file_id = file_id
        self._transport = transport
        self._value_render_option = value_render_option
        self._date_time_render_option = date_time_render_option

    @classmethod
    def from_service_account(
        cls,
        file_id: str,
        service_account: str | Path | dict[str, Any],
        value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE,
        date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.FORMATTED_STRING,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> SheetsCRUD:
        """Create a client authenticated with a service account key.

        The access token is renewed shortly before it expires, so the client
        can be kept open indefinitely.

        Args:
            file_id: ID of the spreadsheet
            service_account: Key as JSON text, decoded dict or file path
        """
        credentials = CredentialsManager(service_account)
        # Key errors surface at construction
        credentials.get_token()
        transport = GoogleSheetsTransport(
            access_token=credentials.access_token, timeout=timeout
        )
        return cls(file_id, transport, value_render_option, date_time_render_option)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SheetsCRUD:
        """Create a client from environment settings."""
        settings = settings or get_settings()
        if not settings.file_id:
            raise ValueError("SHEETCRUD_FILE_ID must be set")
        if not settings.credentials_source:
            raise ValueError(
                "SHEETCRUD_SERVICE_ACCOUNT_JSON or SHEETCRUD_SERVICE_ACCOUNT_PATH must be set"
            )
        return cls.from_service_account(
            settings.file_id,
            settings.credentials_source,
            settings.value_render_option,
            settings.date_time_render_option,
            settings.timeout,
        )

    def __enter__(self) -> SheetsCRUD:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def file_id(self) -> str:
        return self._file_id

    @property
    def transport(self) -> Transport:
        return self._transport

    def set_value_render_option(self, value_render_option: ValueRenderOption) -> None:
        self._value_render_option = value_render_option

    def set_date_time_render_option(
        self, date_time_render_option: DateTimeRenderOption
    ) -> None:
        self._date_time_render_option = date_time_render_option

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    # Range helpers

    def rows_before_range(self, range_name: str) -> int:
        return rows_before_range(range_name)

    def columns_before_range(self, range_name: str) -> int:
        return columns_before_range(range_name)

    def get_sheet_name(self, range_name: str) -> str:
        return get_sheet_name(range_name)

    def get_column_letter(
        self, field_name: str, records: Sequence[Record], columns_before: int
    ) -> str | None:
        return get_column_letter(field_name, records, columns_before)

    # Reads

    def _get_values(self, range_name: str) -> list[list[Any]]:
        values = self._transport.get_values(
            self._file_id,
            range_name,
            self._value_render_option,
            self._date_time_render_option,
        )
        logger.debug("Read %d rows from %s", len(values), range_name)
        return values

    def read_all(self, range_name: str, has_header: bool = True) -> list[Any]:
        """Read every row of a range.

        Args:
            range_name: Sheet name, optionally with a range (e.g. Sheet1!A1:D10)
            has_header: Whether the first row holds the field names

        Returns:
            Records keyed by field name, or the raw rows if has_header is False
        """
        values = self._get_values(range_name)
        if not has_header:
            return values
        return records_from_grid(values)

    def find_row_index_where(
        self, records: Sequence[Record], field_name: str, field_value: Any
    ) -> int | None:
        return find_row_index_where(records, field_name, field_value)

    def find_row_indices_where(
        self, records: Sequence[Record], field_name: str, field_value: Any
    ) -> list[int]:
        return find_row_indices_where(records, field_name, field_value)

    def get_row_where(
        self, range_name: str, field_name: str, field_value: Any
    ) -> Record | None:
        """Return the first record where a field has a value, or None."""
        records = self.read_all(range_name)
        index = find_row_index_where(records, field_name, field_value)
        if index is None:
            return None
        return records[index]

    def get_rows_where(
        self, range_name: str, field_name: str, field_value: Any
    ) -> list[Record]:
        """Return every record where a field has a value."""
        records = self.read_all(range_name)
        return [
            records[index]
            for index in find_row_indices_where(records, field_name, field_value)
        ]

    # Writes

    def update_query(self, range_name: str) -> MultipleRowsUpdate:
        """Start an update query that batches several conditions."""
        return MultipleRowsUpdate(self, range_name)

    def update_fields_where(
        self,
        range_name: str,
        field_name: str,
        field_value: Any,
        new_values: Mapping[str, Any],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> int:
        """Set new_values on every record where field_name equals field_value.

        Returns:
            Number of cells written.
        """
        query = self.update_query(range_name)
        query.update_where(field_name, field_value, new_values)
        return query.execute(value_input_option)

    def append_row(
        self,
        sheet_name: str,
        values: Sequence[Any] | Mapping[str, Any],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> None:
        """Append one row at the bottom of a sheet.

        Args:
            sheet_name: Name of the sheet; a specific range cannot be used
            values: Cell values in column order, or a mapping whose values
                are used in order
        """
        if isinstance(values, Mapping):
            values = list(values.values())
        self.append_rows(sheet_name, [values], value_input_option)

    def append_rows(
        self,
        sheet_name: str,
        rows: Sequence[Sequence[Any]],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> None:
        """Append several rows at the bottom of a sheet."""
        values = remove_none([list(row) for row in rows])
        self._transport.append_values(
            self._file_id, sheet_name, values, value_input_option
        )
        logger.info("Appended %d rows to %s", len(values), sheet_name)

    def find_sheet_id(self, name: str) -> int | None:
        """Return the internal ID of the sheet with the given name, or None."""
        for sheet in self._transport.get_sheet_metadata(self._file_id):
            if sheet.title == name:
                return sheet.sheet_id
        return None

    def delete_row_where(
        self, range_name: str, field_name: str, field_value: Any
    ) -> bool:
        """Delete the first row where a field has a value.

        Only the first match is deleted. Nothing happens if no record
        matches or the sheet cannot be found.

        Returns:
            True if a row was deleted.
        """
        records = self.read_all(range_name)
        index = find_row_index_where(records, field_name, field_value)
        if index is None:
            logger.debug("No row in %s where %s == %r", range_name, field_name, field_value)
            return False

        # Zero-based index of the sheet row
        row_index = index + FIRST_RECORD_ROW - 1 + rows_before_range(range_name)

        sheet_name = get_sheet_name(range_name)
        sheet_id = self.find_sheet_id(sheet_title(sheet_name))
        if sheet_id is None:
            logger.debug("Sheet %r not found, nothing deleted", sheet_name)
            return False

        self._transport.delete_rows(self._file_id, sheet_id, row_index, row_index + 1)
        logger.info("Deleted row %d of %s", row_index + 1, sheet_name)
        return True
