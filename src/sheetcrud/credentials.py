"""Credentials for Google Sheets API access.

The credential material is a service account key, given either as the JSON
text, an already decoded dict, or a path to the key file. It is exchanged
for a short-lived OAuth2 access token with google-auth.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import UTC
from pathlib import Path
from typing import Any, Final

from google.auth.transport.requests import Request
from google.oauth2 import service_account

logger = logging.getLogger(__name__)

SCOPES: Final[tuple[str, ...]] = ("https://www.googleapis.com/auth/spreadsheets",)


@dataclass
class Token:
    """Access token obtained from a service account.

    Attributes:
        access_token: The OAuth2 access token for API calls.
        service_account_email: Email of the service account.
        expires_at: Unix timestamp when the token expires.
    """

    access_token: str
    service_account_email: str
    expires_at: float

    def is_valid(self, buffer_seconds: int = 60) -> bool:
        """Check if token is still valid with a safety buffer."""
        return time.time() < self.expires_at - buffer_seconds

    def expires_in_seconds(self) -> int:
        """Return seconds until token expires."""
        return max(0, int(self.expires_at - time.time()))


def load_service_account_info(material: str | Path | dict[str, Any]) -> dict[str, Any]:
    """Decode service account material into the key dict google-auth expects.

    Args:
        material: JSON text, a path to a JSON key file, or a decoded dict.

    Raises:
        FileNotFoundError: If a path is given and the file does not exist.
        ValueError: If the material is not a JSON object.
    """
    if isinstance(material, dict):
        return material

    if isinstance(material, Path) or not material.lstrip().startswith("{"):
        path = Path(material)
        if not path.exists():
            raise FileNotFoundError(f"Service account file not found: {path}")
        text = path.read_text()
    else:
        text = material

    try:
        info = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid service account JSON: {e}") from e
    if not isinstance(info, dict):
        raise ValueError("Service account JSON must be an object")
    return info


def get_token(material: str | Path | dict[str, Any]) -> Token:
    """Exchange service account material for an access token."""
    info = load_service_account_info(material)
    credentials = service_account.Credentials.from_service_account_info(
        info, scopes=list(SCOPES)
    )
    credentials.refresh(Request())

    return Token(
        access_token=credentials.token,
        service_account_email=credentials.service_account_email,
        expires_at=(
            credentials.expiry.replace(tzinfo=UTC).timestamp()
            if credentials.expiry
            else 0
        ),
    )


class CredentialsManager:
    """Keeps a valid access token for one service account.

    The token is cached and exchanged again once it is within the validity
    buffer of its expiry, so a long-lived client keeps working past the
    lifetime of a single token.

    Example:
        manager = CredentialsManager("/path/to/sa.json")
        token = manager.get_token()
    """

    def __init__(self, service_account: str | Path | dict[str, Any]) -> None:
        self._service_account = service_account
        self._token: Token | None = None

    def get_token(self, force_refresh: bool = False) -> Token:
        """Return a valid token, exchanging the key again if needed."""
        if not force_refresh and self._token is not None and self._token.is_valid():
            return self._token

        token = get_token(self._service_account)
        logger.debug(
            "Obtained access token for %s, expires in %ds",
            token.service_account_email,
            token.expires_in_seconds(),
        )
        self._token = token
        return token

    def access_token(self) -> str:
        """Return the bearer string of a valid token."""
        return self.get_token().access_token
