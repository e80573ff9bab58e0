"""
Shared environment-driven database configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from sqlalchemy.engine import URL

DATE_COLUMN_TYPES: frozenset[str] = frozenset({"date", "timestamp"})

_POSTGRES_DEFAULTS: dict[str, str] = {
    "POSTGRES_HOST": "localhost",
    "POSTGRES_PORT": "5432",
    "POSTGRES_USER": "validator",
    "POSTGRES_PASSWORD": "val1dat0r",
    "POSTGRES_DB": "project-sem-1",
}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _postgres_setting(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    return value or _POSTGRES_DEFAULTS[name]


def build_postgres_url_from_parts() -> str:
    """
    Assemble a URL from the POSTGRES_* variables, falling back to defaults.
    """

    port_raw = _postgres_setting("POSTGRES_PORT")
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise RuntimeError(f"POSTGRES_PORT must be an integer, got {port_raw!r}.") from exc

    url = URL.create(
        "postgresql+psycopg",
        username=_postgres_setting("POSTGRES_USER"),
        password=_postgres_setting("POSTGRES_PASSWORD"),
        host=_postgres_setting("POSTGRES_HOST"),
        port=port,
        database=_postgres_setting("POSTGRES_DB"),
    )
    return url.render_as_string(hide_password=False)


def resolve_database_url() -> str:
    """
    Resolve database URL using environment variables and optional .env files.

    Priority:
    1) DATABASE_URL
    2) POSTGRES_HOST / POSTGRES_PORT / POSTGRES_USER / POSTGRES_PASSWORD / POSTGRES_DB
    """

    load_env_files()

    direct_url = (os.getenv("DATABASE_URL") or "").strip()
    if direct_url:
        return normalize_postgres_url(direct_url)

    return build_postgres_url_from_parts()


@dataclass(frozen=True)
class PriceTableSettings:
    """
    Deployment-time shape of the prices table.

    Exactly one variant is active per deployment; ingest and export
    both read it from here.
    """

    date_column_type: str = "timestamp"
    store_product_id: bool = False

    @property
    def stores_timestamps(self) -> bool:
        return self.date_column_type == "timestamp"


@lru_cache(maxsize=1)
def get_price_table_settings() -> PriceTableSettings:
    """
    Return cached prices table settings from environment variables.

    Raises RuntimeError when PRICES_DATE_COLUMN_TYPE holds an unknown value.
    """

    load_env_files()
    date_column_type = (os.getenv("PRICES_DATE_COLUMN_TYPE") or "timestamp").strip().lower()
    if date_column_type not in DATE_COLUMN_TYPES:
        raise RuntimeError(
            f"PRICES_DATE_COLUMN_TYPE '{date_column_type}' is not valid. "
            f"Allowed values: {sorted(DATE_COLUMN_TYPES)}."
        )
    store_product_id = (os.getenv("PRICES_STORE_PRODUCT_ID") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }
    return PriceTableSettings(
        date_column_type=date_column_type,
        store_product_id=store_product_id,
    )
