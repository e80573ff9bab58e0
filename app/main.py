from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.schemas.price_ingestion import HealthResponse


def _validate_env() -> None:
    """
    Validate all deployment-wide settings at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle.
    """

    from app.config import get_price_export_settings, get_price_ingestion_settings
    from db.config import get_price_table_settings, load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    try:
        database_url = resolve_database_url()
        if not database_url.startswith("postgresql"):
            errors.append("DATABASE_URL must point at PostgreSQL.")
    except RuntimeError as exc:
        errors.append(str(exc))

    for loader in (get_price_ingestion_settings, get_price_export_settings, get_price_table_settings):
        try:
            loader()
        except RuntimeError as exc:
            errors.append(str(exc))

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Wait for the database to answer SELECT 1. Raises RuntimeError if it never does."""
    from app.config import get_server_settings
    from db.session import get_engine, wait_for_connection

    settings = get_server_settings()
    wait_for_connection(
        get_engine(),
        attempts=settings.db_connect_retries,
        delay_seconds=settings.db_connect_retry_delay_seconds,
    )


def _check_schema() -> None:
    """
    Make sure every ORM table exists before serving traffic.

    Missing tables abort startup unless DB_AUTO_CREATE_TABLES is enabled,
    in which case they are created.
    """
    from app.config import get_server_settings
    from db.session import create_tables, get_engine, missing_tables

    engine = get_engine()
    missing = missing_tables(engine)
    if not missing:
        return

    log = logging.getLogger(__name__)
    if get_server_settings().auto_create_tables:
        log.warning("Creating missing table(s): %s", ", ".join(sorted(missing)))
        create_tables(engine)
        return

    log.critical(
        "Schema mismatch: %d table(s) defined in ORM metadata are absent from "
        "the database: %s. Run 'alembic upgrade head' and restart.",
        len(missing),
        ", ".join(sorted(missing)),
    )
    raise RuntimeError(
        f"Schema mismatch: {len(missing)} table(s) missing from the database "
        f"({', '.join(sorted(missing))}). Run migrations and restart."
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Price Archive API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import prices_router

    application.include_router(prices_router)

    @application.get("/health")
    def healthcheck() -> HealthResponse:
        from sqlalchemy import text
        from sqlalchemy.exc import SQLAlchemyError

        from db.session import get_engine

        try:
            with get_engine().connect() as conn:
                conn.execute(text("SELECT 1"))
            database_ok = True
        except SQLAlchemyError:
            logging.getLogger(__name__).warning("Health check could not reach the database")
            database_ok = False
        return HealthResponse(status="ok" if database_ok else "degraded", database=database_ok)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from app.config import get_server_settings

    server = get_server_settings()
    uvicorn.run(app, host=server.host, port=server.port)
