"""Shared test fixtures for sheetcrud."""

from __future__ import annotations

from pathlib import Path

import pytest

from sheetcrud.client import SheetsCRUD
from sheetcrud.transport import LocalFileTransport

GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture
def golden_dir() -> Path:
    return GOLDEN_DIR


@pytest.fixture
def local_transport(golden_dir: Path) -> LocalFileTransport:
    """Create a transport that reads from golden files and records writes."""
    return LocalFileTransport(golden_dir)


@pytest.fixture
def crud(local_transport: LocalFileTransport) -> SheetsCRUD:
    """Create a SheetsCRUD over the 'people' golden spreadsheet."""
    return SheetsCRUD("people", local_transport)
