"""
app/services package marker.
"""

from app.services.price_export_service import PriceExportService, get_price_export_service
from app.services.price_ingestion_service import (
    PriceIngestionService,
    build_price_ingestion_service,
    get_price_ingestion_service,
)

__all__ = [
    "PriceExportService",
    "PriceIngestionService",
    "build_price_ingestion_service",
    "get_price_export_service",
    "get_price_ingestion_service",
]
