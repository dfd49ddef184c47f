"""Configuration for sheetcrud.

Render and input options mirror the Google Sheets API enumerations and are
passed through to the transport untouched. Settings can be loaded from
environment variables prefixed with ``SHEETCRUD_`` or from a ``.env`` file.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT = 60


class ValueRenderOption(Enum):
    """How cell values are rendered when reading."""

    FORMATTED_VALUE = "FORMATTED_VALUE"
    UNFORMATTED_VALUE = "UNFORMATTED_VALUE"
    FORMULA = "FORMULA"


class DateTimeRenderOption(Enum):
    """How dates and times are rendered when reading unformatted values."""

    FORMATTED_STRING = "FORMATTED_STRING"
    SERIAL_NUMBER = "SERIAL_NUMBER"


class ValueInputOption(Enum):
    """How written values are interpreted by the sheet."""

    RAW = "RAW"
    USER_ENTERED = "USER_ENTERED"


class Settings(BaseSettings):
    """Connection settings loaded from environment variables.

    Environment variables:
    - SHEETCRUD_FILE_ID: ID of the spreadsheet (found in its URL)
    - SHEETCRUD_SERVICE_ACCOUNT_JSON: service account key as a JSON string
    - SHEETCRUD_SERVICE_ACCOUNT_PATH: path to a service account key file
    - SHEETCRUD_VALUE_RENDER_OPTION, SHEETCRUD_DATE_TIME_RENDER_OPTION
    - SHEETCRUD_TIMEOUT: HTTP timeout in seconds
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETCRUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    file_id: str = ""
    service_account_json: str = ""
    service_account_path: str = ""

    value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE
    date_time_render_option: DateTimeRenderOption = (
        DateTimeRenderOption.FORMATTED_STRING
    )

    timeout: int = DEFAULT_TIMEOUT

    @model_validator(mode="after")
    def validate_credentials(self) -> Settings:
        """Only one source of service account credentials may be set."""
        if self.service_account_json and self.service_account_path:
            raise ValueError(
                "Set either SHEETCRUD_SERVICE_ACCOUNT_JSON or "
                "SHEETCRUD_SERVICE_ACCOUNT_PATH, not both"
            )
        return self

    @property
    def credentials_source(self) -> str:
        """The configured service account material, JSON or path."""
        return self.service_account_json or self.service_account_path


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.
    """
    return Settings()
