"""Transport layer for reading and writing spreadsheet values.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using Google Sheets API
- LocalFileTransport: Test transport reading from local golden files
"""

from __future__ import annotations

import json
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import TYPE_CHECKING, Any

import certifi
import httpx

from sheetcrud.config import (
    DEFAULT_TIMEOUT,
    DateTimeRenderOption,
    ValueInputOption,
    ValueRenderOption,
)
from sheetcrud.exceptions import SheetsCRUDError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sheetcrud.batch_update import CellEdit

# API constants
API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


class TransportError(SheetsCRUDError):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when the spreadsheet or range is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class SheetInfo:
    """Information about a single sheet within a spreadsheet."""

    sheet_id: int
    title: str


class Transport(ABC):
    """Abstract base class for spreadsheet value transport.

    Every call is synchronous and returns once the remote side has answered.
    Failures surface as TransportError and are never retried here.
    """

    @abstractmethod
    def get_values(
        self,
        file_id: str,
        range_name: str,
        value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE,
        date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.FORMATTED_STRING,
    ) -> list[list[Any]]:
        """Fetch the values of a range as a grid of rows.

        Args:
            file_id: The spreadsheet identifier
            range_name: A1 range, e.g. ``Sheet1`` or ``Sheet1!A1:D10``
            value_render_option: How values are rendered
            date_time_render_option: How dates are rendered

        Returns:
            List of rows; trailing empty cells and rows are omitted
        """
        ...

    @abstractmethod
    def append_values(
        self,
        file_id: str,
        sheet_name: str,
        values: list[list[Any]],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> None:
        """Append rows after the last populated row of a sheet."""
        ...

    @abstractmethod
    def batch_update_values(
        self,
        file_id: str,
        value_input_option: ValueInputOption,
        edits: Sequence[CellEdit],
    ) -> None:
        """Write several single-cell edits in one request."""
        ...

    @abstractmethod
    def get_sheet_metadata(self, file_id: str) -> tuple[SheetInfo, ...]:
        """Fetch the sheets of a spreadsheet in display order."""
        ...

    @abstractmethod
    def delete_rows(
        self, file_id: str, sheet_id: int, start_index: int, end_index: int
    ) -> None:
        """Delete the zero-based, half-open row range [start_index, end_index)."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport that talks to the Google Sheets API.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str | Callable[[], str],
        timeout: int = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with the spreadsheets scope, or
                a callable returning a currently valid one before each request
            timeout: Request timeout in seconds
            client: Preconfigured HTTP client, mostly for tests
        """
        self._access_token = access_token
        self._timeout = timeout
        if client is None:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            client = httpx.Client(timeout=timeout, verify=ssl_context)
        client.headers.update({"Accept": "application/json"})
        self._client = client

    def _auth_headers(self) -> dict[str, str]:
        token = self._access_token() if callable(self._access_token) else self._access_token
        return {"Authorization": f"Bearer {token}"}

    def __enter__(self) -> GoogleSheetsTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_values(
        self,
        file_id: str,
        range_name: str,
        value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE,
        date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.FORMATTED_STRING,
    ) -> list[list[Any]]:
        """Fetch range values from Google Sheets API."""
        url = f"{API_BASE}/{file_id}/values/{_quote(range_name)}"
        response = self._request(
            "GET",
            url,
            params={
                "valueRenderOption": value_render_option.value,
                "dateTimeRenderOption": date_time_render_option.value,
            },
        )
        values: list[list[Any]] = response.get("values", [])
        return values

    def append_values(
        self,
        file_id: str,
        sheet_name: str,
        values: list[list[Any]],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> None:
        """Append rows through the values.append endpoint."""
        url = f"{API_BASE}/{file_id}/values/{_quote(sheet_name)}:append"
        self._request(
            "POST",
            url,
            params={"valueInputOption": value_input_option.value},
            body={"values": values},
        )

    def batch_update_values(
        self,
        file_id: str,
        value_input_option: ValueInputOption,
        edits: Sequence[CellEdit],
    ) -> None:
        """Write all edits through a single values.batchUpdate call."""
        url = f"{API_BASE}/{file_id}/values:batchUpdate"
        self._request(
            "POST",
            url,
            body={
                "valueInputOption": value_input_option.value,
                "data": [edit.to_value_range() for edit in edits],
            },
        )

    def get_sheet_metadata(self, file_id: str) -> tuple[SheetInfo, ...]:
        """Fetch sheet ids and titles from the spreadsheet resource."""
        url = f"{API_BASE}/{file_id}"
        response = self._request("GET", url, params={"fields": "sheets.properties"})
        return _parse_sheets(response)

    def delete_rows(
        self, file_id: str, sheet_id: int, start_index: int, end_index: int
    ) -> None:
        """Delete rows with a deleteDimension request."""
        url = f"{API_BASE}/{file_id}:batchUpdate"
        self._request(
            "POST",
            url,
            body={
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": sheet_id,
                                "dimension": "ROWS",
                                "startIndex": start_index,
                                "endIndex": end_index,
                            }
                        }
                    }
                ]
            },
        )

    def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON body."""
        try:
            response = self._client.request(
                method, url, params=params, json=body, headers=self._auth_headers()
            )
            response.raise_for_status()
            result: dict[str, Any] = response.json() if response.content else {}
            return result
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired access token") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and sharing permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    "Spreadsheet not found. Check the ID and sharing permissions."
                ) from e
            body = e.response.text
            raise APIError(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()


class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            <file_id>/
                metadata.json   (spreadsheet resource with sheets.properties)
                values.json     (range string -> grid of rows)

    Writes are not applied; they are recorded in ``appended``,
    ``batch_updates`` and ``deleted_rows`` for inspection.
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden test files
        """
        self._golden_dir = golden_dir
        self.appended: list[tuple[str, list[list[Any]], ValueInputOption]] = []
        self.batch_updates: list[tuple[ValueInputOption, list[CellEdit]]] = []
        self.deleted_rows: list[tuple[int, int, int]] = []

    def get_values(
        self,
        file_id: str,
        range_name: str,
        value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE,  # noqa: ARG002
        date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.FORMATTED_STRING,  # noqa: ARG002
    ) -> list[list[Any]]:
        """Read range values from local file."""
        path = self._golden_dir / file_id / "values.json"
        if not path.exists():
            raise NotFoundError(f"No golden values for spreadsheet '{file_id}'")
        ranges: dict[str, list[list[Any]]] = json.loads(path.read_text())
        if range_name not in ranges:
            raise APIError(f"Unable to parse range: {range_name}", status_code=400)
        return ranges[range_name]

    def append_values(
        self,
        file_id: str,  # noqa: ARG002
        sheet_name: str,
        values: list[list[Any]],
        value_input_option: ValueInputOption = ValueInputOption.RAW,
    ) -> None:
        """Record an append."""
        self.appended.append((sheet_name, values, value_input_option))

    def batch_update_values(
        self,
        file_id: str,  # noqa: ARG002
        value_input_option: ValueInputOption,
        edits: Sequence[CellEdit],
    ) -> None:
        """Record a batch update."""
        self.batch_updates.append((value_input_option, list(edits)))

    def get_sheet_metadata(self, file_id: str) -> tuple[SheetInfo, ...]:
        """Read sheet metadata from local file."""
        path = self._golden_dir / file_id / "metadata.json"
        if not path.exists():
            raise NotFoundError(f"No golden metadata for spreadsheet '{file_id}'")
        return _parse_sheets(json.loads(path.read_text()))

    def delete_rows(
        self, file_id: str, sheet_id: int, start_index: int, end_index: int  # noqa: ARG002
    ) -> None:
        """Record a row deletion."""
        self.deleted_rows.append((sheet_id, start_index, end_index))

    def close(self) -> None:
        """No-op for local file transport."""
        pass


def _parse_sheets(response: dict[str, Any]) -> tuple[SheetInfo, ...]:
    sheets: list[SheetInfo] = []
    for sheet in response.get("sheets", []):
        props = sheet.get("properties", {})
        sheets.append(
            SheetInfo(
                sheet_id=props.get("sheetId", 0),
                title=props.get("title", "Sheet1"),
            )
        )
    return tuple(sheets)


def _quote(range_name: str) -> str:
    return urllib.parse.quote(range_name, safe="")
