"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TypeVar

from app.domain.price_archive import ColumnLayout, HeaderDetection, InsertFailurePolicy
from db.config import load_env_files

_EnumT = TypeVar("_EnumT", bound=Enum)

DEFAULT_TABLE_FILE_NAMES: tuple[str, ...] = ("data.csv", "test_data.csv")
DEFAULT_MAX_UPLOAD_BYTES = 10 << 20


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_choice_env(name: str, enum_type: type[_EnumT], default: _EnumT) -> _EnumT:
    """
    Read an enumerated value. Unknown values raise instead of falling back,
    since they select deployment-wide behaviour.
    """

    raw = _get_str_env(name, default.value).lower()
    try:
        return enum_type(raw)
    except ValueError as exc:
        allowed = sorted(member.value for member in enum_type)
        raise RuntimeError(
            f"{name} '{raw}' is not valid. Allowed values: {allowed}."
        ) from exc


def _get_names_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Read a comma-separated list of names, preserving order.
    """

    raw = _get_str_env(name, "")
    if not raw:
        return default
    names = tuple(part.strip() for part in raw.split(",") if part.strip())
    return names or default


@dataclass(frozen=True)
class PriceIngestionSettings:
    """
    Runtime settings for archive ingestion.

    ``column_layout=HEURISTIC`` is a compatibility mode only; it guesses the
    layout per record and can silently misread ambiguous rows.
    """

    column_layout: ColumnLayout = ColumnLayout.ID_FIRST
    header_detection: HeaderDetection = HeaderDetection.FIRST_FIELD
    accept_slash_dates: bool = False
    insert_failure_policy: InsertFailurePolicy = InsertFailurePolicy.SKIP
    table_file_names: tuple[str, ...] = DEFAULT_TABLE_FILE_NAMES
    log_skipped_rows: bool = True
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES


@dataclass(frozen=True)
class PriceExportSettings:
    """
    Runtime settings for archive export.
    """

    column_layout: ColumnLayout = ColumnLayout.ID_FIRST
    archive_entry_name: str = "data.csv"
    download_file_name: str = "data.zip"


@dataclass(frozen=True)
class ServerSettings:
    """
    Process-level HTTP and start-up settings.
    """

    host: str = "0.0.0.0"
    port: int = 8080
    db_connect_retries: int = 10
    db_connect_retry_delay_seconds: float = 1.0
    auto_create_tables: bool = False


@lru_cache(maxsize=1)
def get_price_ingestion_settings() -> PriceIngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return PriceIngestionSettings(
        column_layout=_get_choice_env("PRICES_COLUMN_LAYOUT", ColumnLayout, ColumnLayout.ID_FIRST),
        header_detection=_get_choice_env(
            "PRICES_HEADER_DETECTION", HeaderDetection, HeaderDetection.FIRST_FIELD
        ),
        accept_slash_dates=_get_bool_env("PRICES_ACCEPT_SLASH_DATES", False),
        insert_failure_policy=_get_choice_env(
            "PRICES_INSERT_FAILURE_POLICY", InsertFailurePolicy, InsertFailurePolicy.SKIP
        ),
        table_file_names=_get_names_env("PRICES_TABLE_FILE_NAMES", DEFAULT_TABLE_FILE_NAMES),
        log_skipped_rows=_get_bool_env("PRICES_LOG_SKIPPED_ROWS", True),
        max_upload_bytes=max(1, _get_int_env("PRICES_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
    )


@lru_cache(maxsize=1)
def get_price_export_settings() -> PriceExportSettings:
    """
    Return cached export settings. The layout is shared with ingestion.
    """

    return PriceExportSettings(
        column_layout=get_price_ingestion_settings().column_layout,
        archive_entry_name=_get_str_env("PRICES_EXPORT_ENTRY_NAME", "data.csv"),
        download_file_name=_get_str_env("PRICES_EXPORT_FILE_NAME", "data.zip"),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """
    Return cached server settings from environment variables.
    """

    return ServerSettings(
        host=_get_str_env("API_HOST", "0.0.0.0"),
        port=_get_int_env("PORT", 8080),
        db_connect_retries=max(1, _get_int_env("DB_CONNECT_RETRIES", 10)),
        db_connect_retry_delay_seconds=max(0.0, _get_float_env("DB_CONNECT_RETRY_DELAY_SECONDS", 1.0)),
        auto_create_tables=_get_bool_env("DB_AUTO_CREATE_TABLES", False),
    )
