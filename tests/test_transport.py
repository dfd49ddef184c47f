"""Tests for GoogleSheetsTransport request building and error mapping."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from sheetcrud.batch_update import CellEdit
from sheetcrud.config import (
    DateTimeRenderOption,
    ValueInputOption,
    ValueRenderOption,
)
from sheetcrud.transport import (
    API_BASE,
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    NotFoundError,
    SheetInfo,
    TransportError,
)


def make_transport(
    handler: Callable[[httpx.Request], httpx.Response],
) -> GoogleSheetsTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleSheetsTransport(access_token="ya29.test", client=client)


class Recorder:
    """Request handler that records requests and replies with a fixed body."""

    def __init__(self, status_code: int = 200, body: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


class TestGoogleSheetsTransport:
    """Tests for the Sheets API calls."""

    def test_get_values(self) -> None:
        recorder = Recorder(body={"range": "People!A1:C3", "values": [["id"], ["1"]]})
        with make_transport(recorder) as transport:
            values = transport.get_values(
                "file123",
                "People!A1:C3",
                ValueRenderOption.UNFORMATTED_VALUE,
                DateTimeRenderOption.SERIAL_NUMBER,
            )

        assert values == [["id"], ["1"]]
        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/v4/spreadsheets/file123/values/People!A1:C3"
        assert request.url.params["valueRenderOption"] == "UNFORMATTED_VALUE"
        assert request.url.params["dateTimeRenderOption"] == "SERIAL_NUMBER"
        assert request.headers["Authorization"] == "Bearer ya29.test"

    def test_token_provider_is_asked_before_each_request(self) -> None:
        recorder = Recorder(body={"values": []})
        tokens = iter(["ya29.old", "ya29.new"])
        client = httpx.Client(transport=httpx.MockTransport(recorder))
        with GoogleSheetsTransport(
            access_token=lambda: next(tokens), client=client
        ) as transport:
            transport.get_values("file123", "People")
            transport.get_values("file123", "People")

        assert [r.headers["Authorization"] for r in recorder.requests] == [
            "Bearer ya29.old",
            "Bearer ya29.new",
        ]

    def test_get_values_empty_range(self) -> None:
        with make_transport(Recorder(body={"range": "People!A1:C3"})) as transport:
            assert transport.get_values("file123", "People!A1:C3") == []

    def test_append_values(self) -> None:
        recorder = Recorder(body={"updates": {"updatedRows": 1}})
        with make_transport(recorder) as transport:
            transport.append_values(
                "file123", "People", [["3", "Marie", ""]], ValueInputOption.USER_ENTERED
            )

        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url).startswith(
            f"{API_BASE}/file123/values/People:append"
        )
        assert request.url.params["valueInputOption"] == "USER_ENTERED"
        assert json.loads(request.content) == {"values": [["3", "Marie", ""]]}

    def test_batch_update_values(self) -> None:
        recorder = Recorder(body={"totalUpdatedCells": 2})
        edits = [CellEdit("People!C2", "Belgium"), CellEdit("People!C3", "Belgium")]
        with make_transport(recorder) as transport:
            transport.batch_update_values("file123", ValueInputOption.RAW, edits)

        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert str(request.url) == f"{API_BASE}/file123/values:batchUpdate"
        assert json.loads(request.content) == {
            "valueInputOption": "RAW",
            "data": [
                {"range": "People!C2", "values": [["Belgium"]]},
                {"range": "People!C3", "values": [["Belgium"]]},
            ],
        }

    def test_get_sheet_metadata(self) -> None:
        recorder = Recorder(
            body={
                "sheets": [
                    {"properties": {"sheetId": 0, "title": "People"}},
                    {"properties": {"sheetId": 77, "title": "Archive"}},
                ]
            }
        )
        with make_transport(recorder) as transport:
            sheets = transport.get_sheet_metadata("file123")

        assert sheets == (SheetInfo(0, "People"), SheetInfo(77, "Archive"))
        assert recorder.requests[0].url.params["fields"] == "sheets.properties"

    def test_delete_rows(self) -> None:
        recorder = Recorder(body={"replies": [{}]})
        with make_transport(recorder) as transport:
            transport.delete_rows("file123", 77, 1, 2)

        request = recorder.requests[0]
        assert str(request.url) == f"{API_BASE}/file123:batchUpdate"
        assert json.loads(request.content) == {
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": 77,
                            "dimension": "ROWS",
                            "startIndex": 1,
                            "endIndex": 2,
                        }
                    }
                }
            ]
        }


class TestTransportErrors:
    """Tests for mapping HTTP failures to transport errors."""

    @pytest.mark.parametrize(
        ("status_code", "error"),
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
        ],
    )
    def test_status_errors(self, status_code: int, error: type[Exception]) -> None:
        with (
            make_transport(Recorder(status_code=status_code)) as transport,
            pytest.raises(error),
        ):
            transport.get_values("file123", "People")

    def test_api_error_keeps_status(self) -> None:
        recorder = Recorder(
            status_code=400, body={"error": {"message": "Unable to parse range"}}
        )
        with make_transport(recorder) as transport, pytest.raises(APIError) as exc_info:
            transport.get_values("file123", "People!A1:")
        assert exc_info.value.status_code == 400
        assert "Unable to parse range" in str(exc_info.value)

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with make_transport(handler) as transport, pytest.raises(TransportError):
            transport.get_sheet_metadata("file123")
