"""
app/api/routers/prices_router.py

Price archive HTTP endpoints.

POST /api/v0/prices
    Body: ZIP archive (raw body or multipart ``file`` field) holding data.csv.
    Returns {"total_items", "total_categories", "total_price"}.

GET /api/v0/prices
    Returns every stored row as data.csv inside data.zip.

All pipeline logic lives in the services; the router only handles HTTP
plumbing (payload extraction, content-type, error mapping).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import get_archive_payload, get_price_store
from app.config import get_price_export_settings
from app.domain.errors import (
    ArchiveFormatError,
    ArchiveWriteError,
    EmptyInputError,
    PriceStoreError,
    TableFileNotFoundError,
)
from app.repositories.price_repository import PriceStore
from app.schemas.price_ingestion import PriceIngestionSummaryResponse
from app.services.price_export_service import PriceExportService, get_price_export_service
from app.services.price_ingestion_service import (
    PriceIngestionService,
    get_price_ingestion_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v0", tags=["prices"])


@router.post("/prices", response_model=PriceIngestionSummaryResponse)
def upload_prices(
    payload: bytes = Depends(get_archive_payload),
    store: PriceStore = Depends(get_price_store),
    ingestion_service: PriceIngestionService = Depends(get_price_ingestion_service),
) -> PriceIngestionSummaryResponse:
    """
    Ingest one ZIP archive of prices and return the summary of accepted rows.
    """

    try:
        summary = ingestion_service.ingest_archive(payload, store)
    except (ArchiveFormatError, TableFileNotFoundError, EmptyInputError) as exc:
        logger.info("Price upload rejected reason=%s: %s", type(exc).__name__, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except PriceStoreError as exc:
        logger.error("Price upload failed on database: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error.",
        ) from exc

    return PriceIngestionSummaryResponse.from_summary(summary)


@router.get(
    "/prices",
    response_class=Response,
    responses={200: {"content": {"application/zip": {}}}},
)
def download_prices(
    store: PriceStore = Depends(get_price_store),
    export_service: PriceExportService = Depends(get_price_export_service),
) -> Response:
    """
    Export every stored price as a ZIP archive download.
    """

    try:
        archive = export_service.export_archive(store)
    except PriceStoreError as exc:
        logger.error("Price export failed on database: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database error.",
        ) from exc
    except ArchiveWriteError as exc:
        logger.exception("Price export failed while building archive")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build export archive.",
        ) from exc

    filename = get_price_export_settings().download_file_name
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
